"""
Structured logging helpers for pipeline milestones.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields: Any,
) -> None:
    """
    Emit one structured log line as compact JSON. Fields set to None are
    omitted.
    """

    payload = {
        "event": event,
        "ts": datetime.now(timezone.utc).isoformat(),
        **{key: value for key, value in fields.items() if value is not None},
    }
    logger.log(level, json.dumps(payload, default=str, sort_keys=True, ensure_ascii=False))
