"""Append-only order journal.

Each call appends one newline-delimited JSON record holding a UTC timestamp
plus whatever the caller passes (decision, quote, order or error). Journal
failures are reported through the logger and never interrupt the caller.
"""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Union

from loguru import logger


def _default(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    model_dump = getattr(value, "model_dump", None)
    if callable(model_dump):
        return model_dump(mode="json")
    if isinstance(value, Path):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def build_record(entry: Dict[str, Any]) -> Dict[str, Any]:
    return {"ts": datetime.now(timezone.utc).isoformat(), **entry}


def log_order(entry: Dict[str, Any], path: Union[str, Path]) -> bool:
    """Append `entry` to the journal at `path`. Returns True if the line was written."""
    target = Path(path)
    try:
        line = json.dumps(build_record(entry), default=_default)
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("a", encoding="utf-8") as handle:
            handle.write(line + "\n")
    except (OSError, TypeError, ValueError) as exc:
        logger.warning("Failed to write order log {}: {}", target, exc)
        return False
    return True


__all__ = ["build_record", "log_order"]
