from __future__ import annotations

import time
from typing import Any, Dict, Optional

from loguru import logger

BODY_SNIPPET_LIMIT = 120

# ------------------------------------------------------------------------------
# Header helpers
# ------------------------------------------------------------------------------


def ensure_ua(headers: Optional[Dict[str, str]], user_agent: str) -> Dict[str, str]:
    merged = {"User-Agent": user_agent, "Accept": "application/json"}
    if headers:
        merged.update(headers)
    return merged


# ------------------------------------------------------------------------------
# Backoff / diagnostics
# ------------------------------------------------------------------------------


def compute_backoff_delay(attempt: int, backoff_ms: float) -> float:
    """Seconds to wait after failed attempt `attempt` (0-based): base * 2**attempt."""
    return max(0.0, backoff_ms) * (2**attempt) / 1000.0


def body_snippet(text: Any, limit: int = BODY_SNIPPET_LIMIT) -> str:
    if text is None:
        return ""
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")
    return str(text).strip()[:limit]


def is_success(status: int) -> bool:
    return 200 <= status < 300


def log_http_event(
    *,
    level: str,
    method: str,
    url: str,
    status: int,
    attempt: int,
    retries: int,
    start_time: float,
    note: str = "",
) -> None:
    latency_ms = round((time.perf_counter() - start_time) * 1000.0, 1)
    logger.log(
        level,
        "[http] method={} url={} status={} latency_ms={:.1f} attempt={}/{} {}",
        method.upper(),
        url,
        status,
        latency_ms,
        attempt + 1,
        retries + 1,
        note,
    )


__all__ = [
    "BODY_SNIPPET_LIMIT",
    "ensure_ua",
    "compute_backoff_delay",
    "body_snippet",
    "is_success",
    "log_http_event",
]
