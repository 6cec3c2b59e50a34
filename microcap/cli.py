#!/usr/bin/env python3
"""Propose one order from a decision: validate -> fetch quote -> size -> journal."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Dict, List, Optional, TextIO

from loguru import logger

from microcap.agent.policy import propose_order
from microcap.core.exceptions import ConfigError, DecisionValidationError
from microcap.core.models import (
    OrderProposal,
    ProposalResult,
    Quote,
    QuoteFailure,
    Rejection,
    RejectionReason,
    validate_decision,
)
from microcap.journal import log_order
from microcap.logging_utils import logging_context, setup_logging
from microcap.services.market_data import QuoteFetcher
from microcap.settings import RiskConfig, Settings, get_settings

EXIT_OK = 0
EXIT_REJECTED = 1
EXIT_INVALID = 2


def _emit(payload: Dict[str, Any], out: TextIO) -> None:
    out.write(json.dumps(payload, indent=2, default=str) + "\n")


def _screen_min_price(quote: Quote, config: RiskConfig) -> Optional[Rejection]:
    """Skip sub-minimum quotes before sizing; non-positive prices go to the proposer."""
    if 0 < quote.price < config.min_price:
        logger.info(
            "quote below min_price price={} min_price={}", quote.price, config.min_price
        )
        return Rejection(
            reason=RejectionReason.PRICE_BELOW_MINIMUM,
            detail=f"price={quote.price} < min_price={config.min_price}",
        )
    return None


def run(
    payload: Dict[str, Any],
    settings: Settings,
    *,
    equity: Optional[float] = None,
    fetcher: Optional[QuoteFetcher] = None,
    out: TextIO = sys.stdout,
) -> int:
    """Run one decision through the pipeline and return the process exit code."""
    try:
        decision = validate_decision(payload)
    except DecisionValidationError as exc:
        logger.error("Decision invalid: {}", exc)
        _emit({"status": "invalid", "error": str(exc)}, out)
        return EXIT_INVALID

    equity = settings.app.equity if equity is None else equity
    journal_path = settings.app.order_log_path
    decision_dict = decision.model_dump(mode="json")

    with logging_context(symbol=decision.symbol):
        if decision.action == "HOLD":
            logger.info("HOLD decision for {}; nothing to propose", decision.symbol)
            _emit({"status": "hold", "decision": decision_dict}, out)
            return EXIT_OK

        fetcher = fetcher or QuoteFetcher.from_settings(settings)
        outcome = fetcher.fetch(decision.symbol)
        if isinstance(outcome, QuoteFailure):
            log_order(
                {"decision": decision_dict, "error": outcome.to_dict()}, journal_path
            )
            _emit(
                {
                    "status": "fetch_failed",
                    "symbol": decision.symbol,
                    "error": outcome.to_dict(),
                },
                out,
            )
            return EXIT_REJECTED

        quote = outcome.quote
        result: Optional[ProposalResult] = _screen_min_price(quote, settings.risk)
        if result is None:
            result = propose_order(decision, quote, equity, settings.risk)
        if isinstance(result, OrderProposal):
            log_order(
                {
                    "decision": decision_dict,
                    "quote": quote.to_dict(),
                    "order": result.to_dict(),
                },
                journal_path,
            )
            _emit({"status": "proposed", "order": result.to_dict()}, out)
            return EXIT_OK

        log_order(
            {
                "decision": decision_dict,
                "quote": quote.to_dict(),
                "error": result.to_dict(),
            },
            journal_path,
        )
        _emit(
            {"status": "rejected", "symbol": decision.symbol, "error": result.to_dict()},
            out,
        )
        return EXIT_REJECTED


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="microcap-propose",
        description="Propose a liquidity- and risk-bounded order for one decision",
    )
    ap.add_argument("--action", default="BUY", help="BUY, SELL or HOLD")
    ap.add_argument("--symbol", default="ABC")
    ap.add_argument("--confidence", type=float, default=0.75)
    ap.add_argument("--thesis", default="Stub decision for demonstration purposes.")
    ap.add_argument("--equity", type=float, default=None, help="Override EQUITY")
    ap.add_argument(
        "--simulate", action="store_true", help="Use simulated market data (no network)"
    )
    ap.add_argument("--debug", action="store_true")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings()
    except ConfigError as exc:
        setup_logging(force=True)
        logger.error("{}", exc)
        return EXIT_INVALID

    setup_logging(force=True, level="DEBUG" if args.debug else settings.app.log_level)

    fetcher = QuoteFetcher.from_settings(settings)
    if args.simulate:
        fetcher.simulate = True

    payload = {
        "action": args.action,
        "symbol": args.symbol,
        "confidence": args.confidence,
        "thesis": args.thesis,
    }
    return run(payload, settings, equity=args.equity, fetcher=fetcher)


if __name__ == "__main__":
    sys.exit(main())
