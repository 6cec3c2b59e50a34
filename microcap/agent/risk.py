"""Risk management primitives: stop levels, exits and concentration checks."""

from __future__ import annotations

import math

from loguru import logger


def hard_stop(entry: float, hard_stop_pct: float) -> float:
    return entry * (1.0 - hard_stop_pct)


def trailing_stop(entry: float, atr: float, trailing_mult: float) -> float:
    return entry - trailing_mult * atr


def compute_stop(
    entry: float, atr: float, hard_stop_pct: float, trailing_mult: float
) -> float:
    """
    Computes the stop level for a newly entered position.

    The hard stop is a fixed percentage below entry; the trailing stop sits
    `trailing_mult` ATRs below entry. The higher of the two is returned, since
    a higher stop exits sooner.

    Args:
        entry (float): Entry price.
        atr (float): Average true range in price units.
        hard_stop_pct (float): Hard stop fraction (e.g. 0.12).
        trailing_mult (float): ATR multiple for the trailing stop.

    Returns:
        float: Stop level (price).
    """
    return max(hard_stop(entry, hard_stop_pct), trailing_stop(entry, atr, trailing_mult))


def should_exit(
    last_price: float, stop_price: float, holding_days: float, time_stop_days: float
) -> bool:
    """True when price is at/through the stop or the holding period is used up."""
    if last_price <= stop_price:
        return True
    if holding_days >= time_stop_days:
        return True
    return False


def position_weight(notional: float, equity: float) -> float:
    return notional / equity if equity > 0 else math.inf


def exceeds_concentration(
    notional: float, equity: float, max_position_weight: float, symbol: str = ""
) -> bool:
    """
    Flags a proposed position whose weight in the portfolio is above
    `max_position_weight`. Advisory only: sizing is not changed.

    Non-positive equity makes every position overweight.
    """
    weight = position_weight(notional, equity)
    if weight > max_position_weight:
        logger.warning(
            "position weight above max symbol={} notional={:.2f} equity={:.2f} "
            "weight={:.2%} max_position_weight={:.2%}",
            symbol,
            notional,
            equity,
            weight,
            max_position_weight,
        )
        return True
    return False


__all__ = [
    "hard_stop",
    "trailing_stop",
    "compute_stop",
    "should_exit",
    "position_weight",
    "exceeds_concentration",
]
