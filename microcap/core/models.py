from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Literal, Mapping, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from microcap.core.exceptions import DecisionValidationError

Action = Literal["BUY", "SELL", "HOLD"]


class Decision(BaseModel):
    """
    A high-level trade decision produced by an upstream strategy or model.

    Attributes:
        action (str): One of BUY, SELL or HOLD.
        symbol (str): Uppercase alphanumeric ticker.
        confidence (float): Conviction in [0, 1].
        thesis (Optional[str]): Free-text rationale, carried through to the journal.
    """

    action: Action
    symbol: str = Field(min_length=1, pattern=r"^[A-Z0-9]+$")
    confidence: float = Field(ge=0.0, le=1.0)
    thesis: Optional[str] = None

    model_config = {"frozen": True, "extra": "ignore"}


def validate_decision(payload: Any) -> Decision:
    """Validate a raw decision payload without coercing invalid values.

    Raises:
        DecisionValidationError: naming the first offending field.
    """
    if isinstance(payload, Decision):
        return payload
    if not isinstance(payload, Mapping):
        raise DecisionValidationError("Decision must be an object")
    try:
        return Decision.model_validate(dict(payload))
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or "decision"
        raise DecisionValidationError(f"Invalid {field}: {first.get('msg')}") from exc


@dataclass(frozen=True, slots=True)
class Quote:
    """Point-in-time price/volume snapshot for one symbol."""

    price: float
    volume: float
    adv_usd: Optional[float] = None

    def __post_init__(self) -> None:
        if self.adv_usd is None:
            object.__setattr__(self, "adv_usd", self.price * self.volume)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class OrderProposal:
    symbol: str
    side: Action
    quantity: int
    limit_price: float
    stop_price: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class RejectionReason(str, Enum):
    INVALID_PRICE = "invalid price"
    INSUFFICIENT_LIQUIDITY = "insufficient liquidity"
    PRICE_BELOW_MINIMUM = "price below minimum"
    ZERO_SHARES = "zero shares after constraints"


@dataclass(frozen=True, slots=True)
class Rejection:
    """Terminal, non-retryable business outcome of the proposer."""

    reason: RejectionReason
    detail: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"reason": self.reason.value, "detail": self.detail}


ProposalResult = Union[OrderProposal, Rejection]


class FailureKind(str, Enum):
    NETWORK = "network"
    HTTP_STATUS = "http_status"
    PARSE = "parse"


@dataclass(frozen=True, slots=True)
class QuoteSuccess:
    quote: Quote
    attempts: int = 1

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class QuoteFailure:
    """Terminal fetch failure after retries were exhausted.

    `message` holds the diagnostic captured at the final attempt; `status` is
    the last HTTP status when a response was received at all.
    """

    kind: FailureKind
    message: str
    attempts: int
    status: Optional[int] = None

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "attempts": self.attempts,
            "status": self.status,
        }


FetchOutcome = Union[QuoteSuccess, QuoteFailure]


__all__ = [
    "Action",
    "Decision",
    "validate_decision",
    "Quote",
    "OrderProposal",
    "RejectionReason",
    "Rejection",
    "ProposalResult",
    "FailureKind",
    "QuoteSuccess",
    "QuoteFailure",
    "FetchOutcome",
]
