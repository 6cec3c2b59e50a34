"""Position sizing logic: share counts from a risk budget and from liquidity."""

from __future__ import annotations

import math

from loguru import logger

MIN_VOL = 1e-8


def risk_budget(equity: float, target_risk_bps: float) -> float:
    """Dollar risk allowed for one position: equity * bps / 10_000."""
    return equity * (target_risk_bps / 10_000.0)


def risk_scaled_shares(
    price: float, daily_vol: float, equity: float, target_risk_bps: float
) -> int:
    """
    Sizes a position so its expected daily PnL swing stays within the risk budget.

    Assumes price changes follow a random walk with standard deviation
    `daily_vol`; an unknown or zero volatility is clamped to a tiny positive
    value rather than dividing by zero.

    Args:
        price (float): Latest trade price.
        daily_vol (float): Daily volatility as a decimal (0.02 for 2%).
        equity (float): Total portfolio value in USD.
        target_risk_bps (float): Target risk contribution in basis points.

    Returns:
        int: Non-negative share count.
    """
    if not price > 0:
        logger.warning("Invalid price (<=0) for risk sizing.")
        return 0
    vol = daily_vol if daily_vol > 0 else MIN_VOL
    budget = risk_budget(equity, target_risk_bps)
    if not budget > 0:
        logger.debug("Non-positive risk budget equity={} bps={}", equity, target_risk_bps)
        return 0
    return max(0, math.floor(budget / (price * vol)))


def max_shares_by_liquidity(adv_usd: float, price: float, max_pct_adv: float) -> int:
    """
    Caps the order at a fraction of average daily dollar volume.

    Args:
        adv_usd (float): Average daily traded volume in USD.
        price (float): Latest trade price.
        max_pct_adv (float): Max fraction of ADV to consume (0.05 for 5%).

    Returns:
        int: Share cap, 0 when ADV or price is non-positive.
    """
    if not (adv_usd > 0 and price > 0):
        return 0
    usd_cap = adv_usd * max_pct_adv
    return max(0, math.floor(usd_cap / price))


__all__ = ["MIN_VOL", "risk_budget", "risk_scaled_shares", "max_shares_by_liquidity"]
