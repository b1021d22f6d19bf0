"""
Structured logging helpers for data loading workflows.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields: Any,
) -> None:
    """
    Emit one structured log line as compact JSON.

    Non-JSON values (paths, dates) are rendered with ``str``.
    """

    if not logger.isEnabledFor(level):
        return
    payload = {"event": event, **fields}
    logger.log(level, json.dumps(payload, default=str, sort_keys=True))


def elapsed_ms(started: float) -> int:
    """
    Milliseconds since *started*, a ``time.perf_counter()`` reading.
    """

    return int((time.perf_counter() - started) * 1000)
