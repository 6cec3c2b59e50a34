"""
Order proposal: turns a decision + quote + equity into a bounded order.

Each gate either short-circuits with a `Rejection` or hands over to the next
one. Rejections are ordinary return values; callers skip the symbol.
"""

from __future__ import annotations

import math

from loguru import logger

from microcap.agent.risk import compute_stop, exceeds_concentration
from microcap.agent.sizing import max_shares_by_liquidity, risk_scaled_shares
from microcap.agent.volatility import DEFAULT_ESTIMATOR, VolatilityEstimator
from microcap.core.models import (
    Decision,
    OrderProposal,
    ProposalResult,
    Quote,
    Rejection,
    RejectionReason,
)
from microcap.settings import RiskConfig

PRICE_DECIMALS = 4


def limit_price(price: float, slippage_bps: float) -> float:
    """Pads the last price by `slippage_bps` to improve fill odds."""
    return price * (1.0 + slippage_bps / 10_000.0)


def _reject(reason: RejectionReason, detail: str, symbol: str) -> Rejection:
    logger.info("order rejected symbol={} reason={} {}", symbol, reason.value, detail)
    return Rejection(reason=reason, detail=detail)


def propose_order(
    decision: Decision,
    quote: Quote,
    equity: float,
    config: RiskConfig,
    estimator: VolatilityEstimator = DEFAULT_ESTIMATOR,
) -> ProposalResult:
    """
    Proposes a single order for `decision`, or explains why not.

    Args:
        decision (Decision): Validated decision; supplies symbol and side.
        quote (Quote): Fresh quote for the decision's symbol.
        equity (float): Total portfolio value used for risk sizing.
        config (RiskConfig): Sizing and stop tunables.
        estimator (VolatilityEstimator): Source of daily vol and ATR.

    Returns:
        OrderProposal | Rejection: never a zero-quantity order.
    """
    symbol = decision.symbol
    price = quote.price
    adv_usd = quote.adv_usd or 0.0
    if not math.isfinite(adv_usd):
        adv_usd = 0.0

    if not math.isfinite(price) or price <= 0:
        return _reject(RejectionReason.INVALID_PRICE, f"price={price}", symbol)

    if adv_usd < config.min_adv_usd:
        return _reject(
            RejectionReason.INSUFFICIENT_LIQUIDITY,
            f"adv_usd={adv_usd:.2f} < min_adv_usd={config.min_adv_usd}",
            symbol,
        )

    shares_risk = risk_scaled_shares(
        price, estimator.daily_vol(quote), equity, config.target_risk_bps
    )
    shares_liq = max_shares_by_liquidity(adv_usd, price, config.max_pct_adv)
    quantity = min(shares_risk, shares_liq)
    if quantity <= 0:
        return _reject(
            RejectionReason.ZERO_SHARES,
            f"shares_risk={shares_risk} shares_liquidity={shares_liq}",
            symbol,
        )

    stop = compute_stop(
        price, estimator.atr(quote), config.hard_stop_pct, config.trailing_atr_mult
    )
    limit = limit_price(price, config.slippage_bps)

    exceeds_concentration(
        quantity * price, equity, config.max_position_weight, symbol=symbol
    )

    proposal = OrderProposal(
        symbol=symbol,
        side=decision.action,
        quantity=int(quantity),
        limit_price=round(limit, PRICE_DECIMALS),
        stop_price=round(stop, PRICE_DECIMALS),
    )
    logger.info(
        "order proposed symbol={} side={} qty={} limit={} stop={} (risk={} liq={})",
        proposal.symbol,
        proposal.side,
        proposal.quantity,
        proposal.limit_price,
        proposal.stop_price,
        shares_risk,
        shares_liq,
    )
    return proposal


__all__ = ["PRICE_DECIMALS", "limit_price", "propose_order"]
