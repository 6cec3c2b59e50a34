"""Centralized engine settings powered by Pydantic.

Environment matrix:

| Section     | Environment Variable      | Default                     | Purpose                                        |
|-------------|---------------------------|-----------------------------|------------------------------------------------|
| Risk        | `MAX_POSITION_WEIGHT`     | `0.10`                      | Max position notional as a fraction of equity  |
| Risk        | `TARGET_RISK_BPS`         | `15`                        | Daily risk budget in basis points of equity    |
| Risk        | `HARD_STOP_PCT`           | `0.12`                      | Hard stop distance below entry                 |
| Risk        | `TRAILING_ATR_MULT`       | `3.0`                       | Trailing stop distance in ATR units            |
| Risk        | `MIN_ADV_USD`             | `100000`                    | Minimum average daily dollar volume            |
| Risk        | `MAX_PCT_ADV`             | `0.05`                      | Max fraction of ADV a single order may consume |
| Risk        | `SLIPPAGE_BPS`            | `40`                        | Limit price padding in basis points            |
| Risk        | `TIME_STOP_DAYS`          | `5`                         | Max holding period before a forced exit        |
| Risk        | `MIN_PRICE`               | `0.50`                      | Skip symbols priced below this                 |
| Risk        | `API_RETRIES`             | `3`                         | Quote request retries after the first attempt  |
| Risk        | `API_BACKOFF_MS`          | `500`                       | Base backoff, doubled on every retry           |
| Market data | `SIMULATE_MARKET_DATA`    | `false`                     | Serve synthetic quotes, no network             |
| Market data | `SIMULATED_PRICE`         | `1.00`                      | Synthetic quote price                          |
| Market data | `SIMULATED_VOLUME`        | `100000`                    | Synthetic quote volume                         |
| Market data | `QUOTE_TIMEOUT_MS`        | `5000`                      | Per-attempt request timeout                    |
| Market data | `QUOTE_URL`               | Yahoo Finance v7 quote      | Quote endpoint                                 |
| Market data | `HTTP_USER_AGENT`         | `microcap-trader/<version>` | Outbound User-Agent                            |
| App         | `EQUITY`                  | `10000`                     | Portfolio equity used for sizing               |
| App         | `ORDER_LOG_PATH`          | `orders.log`                | Newline-delimited JSON order journal           |
| App         | `LOG_LEVEL`               | `INFO`                      | Loguru sink level                              |

The settings objects source environment variables when instantiated and are
frozen; treat them as read-only snapshots and pass them explicitly to the
components that need them.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from microcap import __version__
from microcap.core.exceptions import ConfigError

DEFAULT_QUOTE_URL = "https://query1.finance.yahoo.com/v7/finance/quote"


class _SettingsBase(BaseSettings):
    """Common configuration for BaseSettings subclasses."""

    model_config = SettingsConfigDict(
        env_prefix="",
        populate_by_name=True,
        extra="ignore",
        case_sensitive=True,
        frozen=True,
    )


class RiskConfig(_SettingsBase):
    """Sizing, stop and retry tunables consumed by the proposer and fetcher."""

    max_position_weight: float = Field(
        default=0.10, gt=0.0, le=1.0, alias="MAX_POSITION_WEIGHT"
    )
    target_risk_bps: float = Field(default=15.0, ge=0.0, alias="TARGET_RISK_BPS")
    hard_stop_pct: float = Field(default=0.12, ge=0.0, le=1.0, alias="HARD_STOP_PCT")
    trailing_atr_mult: float = Field(default=3.0, ge=0.0, alias="TRAILING_ATR_MULT")
    min_adv_usd: int = Field(default=100_000, ge=0, alias="MIN_ADV_USD")
    max_pct_adv: float = Field(default=0.05, ge=0.0, le=1.0, alias="MAX_PCT_ADV")
    slippage_bps: int = Field(default=40, ge=0, alias="SLIPPAGE_BPS")
    time_stop_days: int = Field(default=5, ge=0, alias="TIME_STOP_DAYS")
    min_price: float = Field(default=0.50, ge=0.0, alias="MIN_PRICE")
    api_retries: int = Field(default=3, ge=0, alias="API_RETRIES")
    api_backoff_ms: int = Field(default=500, ge=0, alias="API_BACKOFF_MS")


class MarketDataSettings(_SettingsBase):
    """Quote source selection and transport knobs."""

    simulate: bool = Field(default=False, alias="SIMULATE_MARKET_DATA")
    simulated_price: float = Field(default=1.00, gt=0.0, alias="SIMULATED_PRICE")
    simulated_volume: int = Field(default=100_000, ge=0, alias="SIMULATED_VOLUME")
    timeout_ms: int = Field(default=5_000, gt=0, alias="QUOTE_TIMEOUT_MS")
    quote_url: str = Field(default=DEFAULT_QUOTE_URL, alias="QUOTE_URL")
    user_agent: str = Field(
        default=f"microcap-trader/{__version__}", alias="HTTP_USER_AGENT"
    )


class AppSettings(_SettingsBase):
    """Process-level knobs for the CLI wrapper."""

    equity: float = Field(default=10_000.0, alias="EQUITY")
    order_log_path: Path = Field(default=Path("orders.log"), alias="ORDER_LOG_PATH")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")


class Settings(BaseModel):
    """Aggregate accessor for domain-specific settings."""

    risk: RiskConfig = Field(default_factory=RiskConfig)
    market_data: MarketDataSettings = Field(default_factory=MarketDataSettings)
    app: AppSettings = Field(default_factory=AppSettings)

    model_config = {
        "frozen": True,
        "arbitrary_types_allowed": True,
    }


def get_settings() -> Settings:
    """Instantiate settings from the current environment."""
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigError(f"invalid configuration: {exc}") from exc


def reload_settings() -> Settings:
    """Alias for get_settings to maintain a consistent API."""
    return get_settings()


def get_risk_config() -> RiskConfig:
    return get_settings().risk


__all__ = [
    "Settings",
    "RiskConfig",
    "MarketDataSettings",
    "AppSettings",
    "DEFAULT_QUOTE_URL",
    "get_settings",
    "reload_settings",
    "get_risk_config",
]
