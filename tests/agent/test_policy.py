from __future__ import annotations

import math

import pytest

from microcap.agent.policy import propose_order
from microcap.agent.volatility import FixedFractionEstimator
from microcap.core.models import (
    Decision,
    OrderProposal,
    Quote,
    Rejection,
    RejectionReason,
)


def _decision(action: str = "BUY", symbol: str = "ABC") -> Decision:
    return Decision(action=action, symbol=symbol, confidence=0.75)


def test_scenario_risk_cap_binds(risk_config):
    quote = Quote(price=10.0, volume=50_000)
    assert quote.adv_usd == pytest.approx(500_000)

    result = propose_order(_decision(), quote, 10_000, risk_config)

    assert isinstance(result, OrderProposal)
    assert result.symbol == "ABC"
    assert result.side == "BUY"
    assert result.quantity == 75
    # 10 * (1 + 40bp)
    assert result.limit_price == pytest.approx(10.04)
    # max(hard=8.8, trailing=10 - 3 * 0.2)
    assert result.stop_price == pytest.approx(9.4)


def test_liquidity_cap_binds_when_equity_is_large(risk_config):
    quote = Quote(price=10.0, volume=50_000)
    result = propose_order(_decision(), quote, 10_000_000, risk_config)
    assert isinstance(result, OrderProposal)
    assert result.quantity == 2_500


def test_insufficient_liquidity_rejected(risk_config):
    quote = Quote(price=10.0, volume=5_000)
    assert quote.adv_usd == pytest.approx(50_000)

    result = propose_order(_decision(), quote, 10_000, risk_config)

    assert isinstance(result, Rejection)
    assert result.reason is RejectionReason.INSUFFICIENT_LIQUIDITY
    assert result.reason.value == "insufficient liquidity"


def test_explicit_adv_overrides_price_times_volume(risk_config):
    quote = Quote(price=10.0, volume=50_000, adv_usd=90_000)
    result = propose_order(_decision(), quote, 10_000, risk_config)
    assert isinstance(result, Rejection)
    assert result.reason is RejectionReason.INSUFFICIENT_LIQUIDITY


@pytest.mark.parametrize("price", [0.0, -1.0, math.nan])
def test_invalid_price_short_circuits(risk_config, price):
    quote = Quote(price=price, volume=1_000_000, adv_usd=1_000_000)
    result = propose_order(_decision(), quote, 10_000, risk_config)
    assert isinstance(result, Rejection)
    assert result.reason is RejectionReason.INVALID_PRICE


def test_sub_dollar_price_is_sized_normally(risk_config):
    # min_price is screened by the caller, not by the proposer
    quote = Quote(price=0.25, volume=2_000_000)
    result = propose_order(_decision(), quote, 10_000, risk_config)
    assert isinstance(result, OrderProposal)
    # risk: 15 / (0.25 * 0.02) = 3000; liquidity: 500_000 * 0.05 / 0.25 = 100_000
    assert result.quantity == 3000
    assert result.stop_price == pytest.approx(0.235)


@pytest.mark.parametrize("equity", [0.0, -10_000.0])
def test_non_positive_equity_yields_zero_share_rejection(risk_config, equity):
    quote = Quote(price=10.0, volume=50_000)
    result = propose_order(_decision(), quote, equity, risk_config)
    assert isinstance(result, Rejection)
    assert result.reason is RejectionReason.ZERO_SHARES


def test_expensive_stock_rounds_down_to_zero(risk_config):
    # budget 15 / (2000 * 0.02) = 0.375 shares
    quote = Quote(price=2_000.0, volume=1_000)
    result = propose_order(_decision(), quote, 10_000, risk_config)
    assert isinstance(result, Rejection)
    assert result.reason.value == "zero shares after constraints"


def test_side_follows_decision_action(risk_config):
    quote = Quote(price=10.0, volume=50_000)
    result = propose_order(_decision(action="SELL"), quote, 10_000, risk_config)
    assert isinstance(result, OrderProposal)
    assert result.side == "SELL"


def test_pluggable_estimator(risk_config):
    quote = Quote(price=10.0, volume=50_000)
    estimator = FixedFractionEstimator(vol=0.05, atr_pct=0.01)
    result = propose_order(_decision(), quote, 10_000, risk_config, estimator=estimator)
    assert isinstance(result, OrderProposal)
    # 15 / (10 * 0.05) = 30
    assert result.quantity == 30
    # trailing = 10 - 3 * 0.1 = 9.7 beats hard stop 8.8
    assert result.stop_price == pytest.approx(9.7)


def test_prices_rounded_to_four_decimals(risk_config):
    quote = Quote(price=1.23456, volume=1_000_000)
    result = propose_order(_decision(), quote, 10_000, risk_config)
    assert isinstance(result, OrderProposal)
    # 1.23949824 and max(1.0864128, 1.1604864)
    assert result.limit_price == pytest.approx(1.2395, abs=1e-12)
    assert result.stop_price == pytest.approx(1.1605, abs=1e-12)


@pytest.mark.parametrize(
    "price, volume, equity",
    [(10.0, 50_000, 10_000), (2.5, 400_000, 50_000), (0.8, 5_000_000, 250_000)],
)
def test_quantity_never_exceeds_either_cap(risk_config, price, volume, equity):
    quote = Quote(price=price, volume=volume)
    result = propose_order(_decision(), quote, equity, risk_config)
    assert isinstance(result, OrderProposal)
    liq_cap = math.floor(quote.adv_usd * risk_config.max_pct_adv / price)
    risk_cap = math.floor(
        equity * risk_config.target_risk_bps / 10_000 / (price * 0.02)
    )
    assert 0 < result.quantity <= liq_cap
    assert result.quantity <= risk_cap
