"""Quote retrieval with bounded retries and exponential backoff.

`QuoteFetcher.fetch` never raises for transport, HTTP or payload problems: every
attempt is classified and, once the retry budget is spent, the caller receives
a `QuoteFailure` describing the final attempt. The fetcher keeps no per-call
state on the instance, so one fetcher can serve concurrent callers as long as
the injected session tolerates it (the default, the `requests` module, does).

The per-attempt timeout is handed to `requests` in seconds, so it bounds the
connect and each socket read rather than the whole attempt. A server that
trickles its body can hold one attempt past `timeout_ms`, so the worst-case
elapsed time `timeout*(retries+1) + backoff*(2**(retries+1)-1)` assumes each
response arrives within a single read timeout.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Optional

import requests
from loguru import logger

from microcap.core.exceptions import QuoteParseError
from microcap.core.models import (
    FailureKind,
    FetchOutcome,
    Quote,
    QuoteFailure,
    QuoteSuccess,
)
from microcap.providers.yahoo_provider import parse_quote_payload, quote_params
from microcap.settings import DEFAULT_QUOTE_URL, Settings
from microcap.utils.http import (
    body_snippet,
    compute_backoff_delay,
    ensure_ua,
    is_success,
    log_http_event,
)

DEFAULT_TIMEOUT_MS = 5_000


class QuoteFetcher:
    """
    Resolve a symbol to a Quote, from a simulated source or a remote endpoint.

    Args:
        retries (int): Retries after the first attempt; at most retries+1 requests.
        backoff_ms (float): Base delay; the wait after attempt n is backoff_ms * 2**n.
        timeout_ms (float): Connect and per-read timeout for each attempt.
        simulate (bool): Serve `Quote(simulated_price, simulated_volume)` offline.
        session: Object exposing `request(method=..., url=..., ...)`;
            defaults to `requests`.
        sleep: Wait primitive taking seconds; defaults to `time.sleep`.
    """

    def __init__(
        self,
        *,
        retries: int = 3,
        backoff_ms: float = 500,
        timeout_ms: float = DEFAULT_TIMEOUT_MS,
        url: str = DEFAULT_QUOTE_URL,
        user_agent: str = "microcap-trader",
        simulate: bool = False,
        simulated_price: float = 1.0,
        simulated_volume: float = 100_000,
        session: Any = None,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        if retries < 0:
            raise ValueError("retries must be >= 0")
        self.retries = int(retries)
        self.backoff_ms = float(backoff_ms)
        self.timeout_ms = float(timeout_ms)
        self.url = url
        self.user_agent = user_agent
        self.simulate = simulate
        self.simulated_price = float(simulated_price)
        self.simulated_volume = float(simulated_volume)
        self._client = session or requests
        self._sleep = sleep or time.sleep

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        session: Any = None,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> "QuoteFetcher":
        md = settings.market_data
        return cls(
            retries=settings.risk.api_retries,
            backoff_ms=settings.risk.api_backoff_ms,
            timeout_ms=md.timeout_ms,
            url=md.quote_url,
            user_agent=md.user_agent,
            simulate=md.simulate,
            simulated_price=md.simulated_price,
            simulated_volume=md.simulated_volume,
            session=session,
            sleep=sleep,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def fetch(self, symbol: str) -> FetchOutcome:
        symbol = (symbol or "").strip().upper()
        if self.simulate:
            quote = Quote(price=self.simulated_price, volume=self.simulated_volume)
            logger.debug(
                "simulated quote symbol={} price={} volume={}",
                symbol,
                quote.price,
                quote.volume,
            )
            return QuoteSuccess(quote=quote, attempts=0)

        attempt = 0
        while True:
            outcome = self._attempt(symbol, attempt)
            if isinstance(outcome, QuoteSuccess):
                return outcome
            if attempt >= self.retries:
                failure = outcome
                break
            delay = compute_backoff_delay(attempt, self.backoff_ms)
            logger.warning(
                "quote {} failed ({}); retry {}/{} in {:.3f}s: {}",
                symbol,
                outcome.kind.value,
                attempt + 1,
                self.retries,
                delay,
                outcome.message,
            )
            self._sleep(delay)
            attempt += 1

        logger.bind(symbol=symbol, kind=failure.kind.value).error(
            "quote {} failed after {} attempt(s): {}",
            symbol,
            failure.attempts,
            failure.message,
        )
        return failure

    # ------------------------------------------------------------------
    # Single attempt
    # ------------------------------------------------------------------

    def _attempt(self, symbol: str, attempt: int) -> FetchOutcome:
        start_time = time.perf_counter()
        attempts = attempt + 1
        try:
            resp = self._client.request(
                method="GET",
                url=self.url,
                params=quote_params(symbol),
                headers=ensure_ua(None, self.user_agent),
                timeout=self.timeout_ms / 1000.0,
            )
        except requests.RequestException as exc:
            log_http_event(
                level="WARNING",
                method="GET",
                url=self.url,
                status=599,
                attempt=attempt,
                retries=self.retries,
                start_time=start_time,
                note=f"error={exc}",
            )
            return QuoteFailure(
                kind=FailureKind.NETWORK,
                message=body_snippet(f"{type(exc).__name__}: {exc}"),
                attempts=attempts,
            )

        status = resp.status_code
        if not is_success(status):
            log_http_event(
                level="WARNING",
                method="GET",
                url=self.url,
                status=status,
                attempt=attempt,
                retries=self.retries,
                start_time=start_time,
                note="non-2xx",
            )
            snippet = body_snippet(getattr(resp, "text", "")) or "No response body"
            return QuoteFailure(
                kind=FailureKind.HTTP_STATUS,
                message=f"HTTP {status} when fetching quote: {snippet}",
                attempts=attempts,
                status=status,
            )

        try:
            quote = parse_quote_payload(resp.json())
        except (ValueError, QuoteParseError) as exc:
            log_http_event(
                level="WARNING",
                method="GET",
                url=self.url,
                status=status,
                attempt=attempt,
                retries=self.retries,
                start_time=start_time,
                note="parse-error",
            )
            return QuoteFailure(
                kind=FailureKind.PARSE,
                message=body_snippet(f"Failed to parse quote response: {exc}"),
                attempts=attempts,
                status=status,
            )

        log_http_event(
            level="INFO",
            method="GET",
            url=self.url,
            status=status,
            attempt=attempt,
            retries=self.retries,
            start_time=start_time,
            note="ok",
        )
        return QuoteSuccess(quote=quote, attempts=attempts)


def fetch_quote(symbol: str, settings: Settings, **kwargs: Any) -> FetchOutcome:
    """One-shot convenience wrapper around `QuoteFetcher.from_settings(...).fetch`."""
    return QuoteFetcher.from_settings(settings, **kwargs).fetch(symbol)


__all__ = ["QuoteFetcher", "fetch_quote", "DEFAULT_TIMEOUT_MS"]
