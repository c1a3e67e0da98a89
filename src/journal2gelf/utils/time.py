"""Time utilities for journal2gelf."""

from __future__ import annotations

import time

__all__ = ["unix_now", "micros_to_seconds"]


def unix_now() -> float:
    """Return the current wall-clock time as fractional seconds since the epoch."""

    return time.time()


def micros_to_seconds(value: int) -> float:
    return value / 1_000_000
