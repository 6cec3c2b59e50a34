from __future__ import annotations

import dataclasses

import pytest

from microcap.core.exceptions import DataValidationError, DecisionValidationError
from microcap.core.models import (
    Decision,
    FailureKind,
    OrderProposal,
    Quote,
    QuoteFailure,
    Rejection,
    RejectionReason,
    validate_decision,
)


def test_validate_decision_accepts_valid_payload():
    decision = validate_decision(
        {"action": "BUY", "symbol": "ABC1", "confidence": 0.75, "thesis": "stub"}
    )
    assert isinstance(decision, Decision)
    assert decision.symbol == "ABC1"
    assert decision.confidence == 0.75


@pytest.mark.parametrize(
    "payload, field",
    [
        ({"action": "buy", "symbol": "ABC", "confidence": 0.5}, "action"),
        ({"action": "SHORT", "symbol": "ABC", "confidence": 0.5}, "action"),
        ({"action": "BUY", "symbol": "abc", "confidence": 0.5}, "symbol"),
        ({"action": "BUY", "symbol": "", "confidence": 0.5}, "symbol"),
        ({"action": "BUY", "symbol": "AB-C", "confidence": 0.5}, "symbol"),
        ({"action": "BUY", "symbol": 123, "confidence": 0.5}, "symbol"),
        ({"action": "BUY", "symbol": "ABC", "confidence": 1.5}, "confidence"),
        ({"action": "BUY", "symbol": "ABC", "confidence": -0.1}, "confidence"),
        ({"action": "BUY", "symbol": "ABC", "confidence": "high"}, "confidence"),
    ],
)
def test_validate_decision_rejects_invalid_fields(payload, field):
    with pytest.raises(DecisionValidationError, match=field):
        validate_decision(payload)


def test_validate_decision_requires_mapping():
    with pytest.raises(DataValidationError, match="object"):
        validate_decision(["BUY", "ABC"])


def test_quote_derives_adv_unless_supplied():
    assert Quote(price=4.0, volume=250).adv_usd == 1_000.0
    assert Quote(price=4.0, volume=250, adv_usd=7.0).adv_usd == 7.0


def test_results_are_immutable():
    quote = Quote(price=1.0, volume=1.0)
    order = OrderProposal(
        symbol="ABC", side="BUY", quantity=1, limit_price=1.0, stop_price=0.9
    )
    with pytest.raises(dataclasses.FrozenInstanceError):
        quote.price = 2.0  # type: ignore[misc]
    with pytest.raises(dataclasses.FrozenInstanceError):
        order.quantity = 0  # type: ignore[misc]


def test_to_dict_shapes():
    rejection = Rejection(reason=RejectionReason.ZERO_SHARES, detail="shares_risk=0")
    assert rejection.to_dict() == {
        "reason": "zero shares after constraints",
        "detail": "shares_risk=0",
    }
    failure = QuoteFailure(kind=FailureKind.PARSE, message="bad", attempts=2, status=200)
    assert failure.to_dict() == {
        "kind": "parse",
        "message": "bad",
        "attempts": 2,
        "status": 200,
    }
