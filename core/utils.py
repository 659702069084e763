"""Utility functions for the application."""

import time
from datetime import UTC, date, datetime


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def utc_today() -> date:
    """Current UTC calendar date."""
    return utc_now().date()


def get_current_timestamp() -> str:
    """Get current timestamp in ISO8601 format."""
    return utc_now().isoformat()


def to_epoch_millis(moment: datetime) -> int:
    """Convert an aware datetime to epoch milliseconds."""
    return int(moment.timestamp() * 1000)


def from_epoch_millis(millis: int) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime."""
    return datetime.fromtimestamp(millis / 1000, tz=UTC)


class Stopwatch:
    """Measures elapsed wall time in milliseconds."""

    def __init__(self) -> None:
        self._start = time.monotonic()

    def elapsed_ms(self) -> int:
        return int((time.monotonic() - self._start) * 1000)
