from __future__ import annotations

import math
from typing import Any, Dict, Optional

from microcap.core.exceptions import QuoteParseError
from microcap.core.models import Quote

_PRICE_FIELD = "regularMarketPrice"
_VOLUME_FIELD = "regularMarketVolume"


def quote_params(symbol: str) -> Dict[str, str]:
    return {"symbols": symbol.strip().upper()}


def _safe_float(node: Dict[str, Any], key: str) -> Optional[float]:
    val = node.get(key)
    if val is None or isinstance(val, bool):
        return None
    # Yahoo sometimes wraps numbers as {"raw": 1.23, "fmt": "1.23"}
    if isinstance(val, dict):
        val = val.get("raw")
    try:
        num = float(val)
    except (TypeError, ValueError):
        return None
    if math.isnan(num) or math.isinf(num):
        return None
    return num


def parse_quote_payload(payload: Any) -> Quote:
    """Turn a v7 `quoteResponse` body into a Quote.

    Raises:
        QuoteParseError: when no result is present or price/volume are unusable.
    """
    if not isinstance(payload, dict):
        raise QuoteParseError("No quote data returned")
    response = payload.get("quoteResponse") or {}
    results = response.get("result") if isinstance(response, dict) else None
    if not isinstance(results, list) or not results or not isinstance(results[0], dict):
        raise QuoteParseError("No quote data returned")

    node = results[0]
    price = _safe_float(node, _PRICE_FIELD)
    if price is None or price <= 0:
        raise QuoteParseError(f"Invalid {_PRICE_FIELD}: {node.get(_PRICE_FIELD)!r}")
    volume = _safe_float(node, _VOLUME_FIELD)
    if volume is None or volume < 0:
        raise QuoteParseError(f"Invalid {_VOLUME_FIELD}: {node.get(_VOLUME_FIELD)!r}")
    return Quote(price=price, volume=volume)


__all__ = ["quote_params", "parse_quote_payload"]
