"""
Lightweight telemetry helpers for the note-generation pipeline.

These wrappers do not send metrics externally; they provide structured
logging and in-memory counters so tests can assert instrumentation.
"""

from __future__ import annotations

import contextlib
import logging
import time
from collections.abc import Iterator
from typing import Any

logger = logging.getLogger("briefly.telemetry")

_COUNTERS: dict[str, int] = {}


def log_event(event_name: str, **fields: Any) -> None:
    """
    Structured log event. Callers must not pass raw note content.

    Side Effects:
        - Writes to logger (info level)
    """
    logger.info("event=%s %s", event_name, fields)


def counter(name: str, increment: int = 1) -> int:
    """
    Increment an in-memory counter and emit a debug log.

    Side Effects:
        - Modifies _COUNTERS dict (in-memory state)
        - Writes to logger (debug level)
    """
    value = _COUNTERS.get(name, 0) + increment
    _COUNTERS[name] = value
    logger.debug("counter=%s value=%s", name, value)
    return value


def get_counter(name: str) -> int:
    return _COUNTERS.get(name, 0)


@contextlib.contextmanager
def time_block(metric_name: str) -> Iterator[dict[str, float]]:
    """
    Context manager for timing code blocks.

    Yields a dict whose ``elapsed_ms`` key is filled in when the block exits,
    so callers can reuse the measurement.

    Side Effects:
        - Writes to logger (debug level) with timing
    """
    timing: dict[str, float] = {"elapsed_ms": 0.0}
    start = time.perf_counter()
    try:
        yield timing
    finally:
        elapsed = time.perf_counter() - start
        timing["elapsed_ms"] = elapsed * 1000
        logger.debug("timing=%s seconds=%.6f", metric_name, elapsed)


def reset_counters() -> None:
    """
    Clear all counters (useful for tests).

    Side Effects:
        - Clears _COUNTERS dict (in-memory state)
    """
    _COUNTERS.clear()
