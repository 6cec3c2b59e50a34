from __future__ import annotations

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

from microcap.logging_utils import setup_test_logging
from microcap.settings import RiskConfig

os.environ.setdefault("ENV", "test")


@pytest.fixture(scope="session", autouse=True)
def load_env():
    load_dotenv(override=True)


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    setup_test_logging(Path("microcap-logs/"))
    yield


@pytest.fixture
def risk_config() -> RiskConfig:
    return RiskConfig(
        max_position_weight=0.10,
        target_risk_bps=15,
        hard_stop_pct=0.12,
        trailing_atr_mult=3.0,
        min_adv_usd=100_000,
        max_pct_adv=0.05,
        slippage_bps=40,
        time_stop_days=5,
        min_price=0.50,
        api_retries=3,
        api_backoff_ms=500,
    )

