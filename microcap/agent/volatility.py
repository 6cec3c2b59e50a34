"""Volatility estimators feeding risk sizing and trailing stops.

Without a price history the engine approximates both daily volatility and
ATR as a fixed fraction of the last price. Callers with real history can pass
any object implementing `VolatilityEstimator` to the proposer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from microcap.core.models import Quote

DEFAULT_DAILY_VOL = 0.02
DEFAULT_ATR_PCT = 0.02


class VolatilityEstimator(Protocol):
    def daily_vol(self, quote: Quote) -> float:
        """Daily return volatility as a decimal (0.02 == 2%)."""
        ...

    def atr(self, quote: Quote) -> float:
        """Average true range in price units."""
        ...


@dataclass(frozen=True, slots=True)
class FixedFractionEstimator:
    """Constant volatility, ATR as a constant fraction of price."""

    vol: float = DEFAULT_DAILY_VOL
    atr_pct: float = DEFAULT_ATR_PCT

    def daily_vol(self, quote: Quote) -> float:
        return self.vol

    def atr(self, quote: Quote) -> float:
        return quote.price * self.atr_pct


DEFAULT_ESTIMATOR = FixedFractionEstimator()

__all__ = [
    "VolatilityEstimator",
    "FixedFractionEstimator",
    "DEFAULT_ESTIMATOR",
    "DEFAULT_DAILY_VOL",
    "DEFAULT_ATR_PCT",
]
