"""
Provider façade.

Concrete quote sources live in their own modules; call sites import the
parsing helpers from here without caring about the specific backend.

Example:
    from microcap.providers import parse_quote_payload, quote_params
"""

from __future__ import annotations

from .yahoo_provider import parse_quote_payload, quote_params

__all__ = ["parse_quote_payload", "quote_params"]
