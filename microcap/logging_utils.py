"""Loguru configuration helpers for consistent structured logging."""

from __future__ import annotations

import logging
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from os import PathLike
from pathlib import Path
from typing import Any, Dict, Optional, Union

from loguru import logger

from microcap import __version__

PathLikeArg = Union[str, PathLike]

_LOG_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | "
    "sym={extra[symbol]} | env={extra[environment]} | "
    "ver={extra[service_version]} | {message}"
)

_ctx_symbol: ContextVar[str] = ContextVar("log_symbol", default="-")
_ctx_environment: ContextVar[str] = ContextVar("log_environment", default="local")
_ctx_service_version: ContextVar[str] = ContextVar(
    "log_service_version", default=__version__
)

_CONTEXT_VARS: Dict[str, ContextVar[str]] = {
    "symbol": _ctx_symbol,
    "environment": _ctx_environment,
    "service_version": _ctx_service_version,
}


def _inject_context(record: Dict[str, Any]) -> Dict[str, Any]:
    extra = record["extra"]
    for key, ctx in _CONTEXT_VARS.items():
        extra.setdefault(key, ctx.get())
    return record


def _std_logging_sink(message) -> None:
    record = message.record
    exc = record["exception"]
    exc_info = None
    if exc:
        exc_info = (exc.type, exc.value, exc.traceback)

    log_record = logging.LogRecord(
        name=record["name"],
        level=record["level"].no,
        pathname=record["file"].path,
        lineno=record["line"],
        msg=record["message"],
        args=(),
        exc_info=exc_info,
        func=record["function"],
    )
    for k, v in record["extra"].items():
        setattr(log_record, k, v)

    logging.getLogger(record["name"]).handle(log_record)


def setup_logging(*, force: bool = False, level: str | None = None) -> None:
    """Configure Loguru sinks, bridge to stdlib, and attach contextual metadata."""
    if not force and getattr(setup_logging, "_configured", False):
        return

    logger.remove()

    log_level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    environment = os.getenv("ENV", "local")

    logger.configure(
        extra={
            "service_version": __version__,
            "environment": environment,
            "symbol": "-",
        },
        patcher=_inject_context,
    )
    _ctx_environment.set(environment)

    # stderr keeps stdout free for the CLI's JSON output
    logger.add(
        sys.stderr,
        level=log_level,
        format=_LOG_FORMAT,
        enqueue=False,
        backtrace=False,
        diagnose=False,
    )
    logger.add(
        _std_logging_sink,
        level=log_level,
        enqueue=False,
        backtrace=False,
        diagnose=False,
    )

    std_level = getattr(logging, log_level, logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(std_level)
    setup_logging._configured = True  # type: ignore[attr-defined]


def setup_test_logging(
    arg: Optional[PathLikeArg] = None,
    *,
    level: Optional[str] = None,
    filename: str = "pytest.log",
) -> None:
    """
    Lightweight logging setup for tests.

    `arg` may be a log level name or a path. A directory path receives
    `<dir>/<filename>`; any other path is used as the log file itself.
    """
    inferred_level: Optional[str] = None
    target: Optional[Path] = None
    if arg is not None:
        if hasattr(arg, "__fspath__"):
            target = Path(arg)  # type: ignore[arg-type]
        elif isinstance(arg, str) and ("/" in arg or arg.endswith(".log")):
            target = Path(arg)
        elif isinstance(arg, str):
            inferred_level = arg

    effective_level = (
        level or inferred_level or os.getenv("PYTEST_LOGLEVEL") or "INFO"
    ).upper()
    setup_logging(force=True, level=effective_level)

    if target is None:
        return

    if target.suffix != ".log":
        target.mkdir(parents=True, exist_ok=True)
        target = target / filename
    target.parent.mkdir(parents=True, exist_ok=True)

    logger.add(
        str(target),
        level=effective_level,
        format=_LOG_FORMAT,
        enqueue=False,
        backtrace=False,
        diagnose=False,
    )


@contextmanager
def logging_context(**values: str):
    """Context manager to set structured logging fields (e.g., symbol)."""
    tokens = []
    for key, value in values.items():
        ctx = _CONTEXT_VARS.get(key)
        if ctx is not None:
            tokens.append((ctx, ctx.set(value or "-")))
    try:
        with logger.contextualize(**values):
            yield
    finally:
        for ctx, token in reversed(tokens):
            ctx.reset(token)


__all__ = ["setup_logging", "setup_test_logging", "logging_context"]
