"""Persisted task cooldowns."""

from collections.abc import Callable
from datetime import datetime, timedelta

from core.log import get_logger
from core.storage.kv import KeyValueStore
from core.utils import from_epoch_millis, to_epoch_millis, utc_now

from .task import NO_COOLDOWN, Task

logger = get_logger(__name__)


class TaskCooldowns:
    """Tracks last successful completion per task key.

    Each task defines its own cooldown period. Completion timestamps are
    stored as epoch milliseconds so they persist across restarts. Only the
    scheduler records completions, and only for successful runs, so a failed
    task may be resubmitted right away.
    """

    def __init__(
        self,
        store: KeyValueStore,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize cooldown tracking.

        Args:
            store: Key-value store holding one timestamp per task key
            clock: Returns the current aware datetime; injectable for tests
        """
        self.store = store
        self.clock = clock

    def is_on_cooldown(self, task: Task) -> bool:
        """Check whether the task may not run yet.

        Args:
            task: Task to check

        Returns:
            True if the last successful run is more recent than the period
        """
        if task.cooldown_period == NO_COOLDOWN:
            return False

        last_completed = self.last_completed(task.key)
        if last_completed is None:
            return False

        return self.clock() - last_completed < task.cooldown_period

    def remaining_cooldown(self, task: Task) -> timedelta:
        """Time left before the task may run again; zero if it may run now."""
        if task.cooldown_period == NO_COOLDOWN:
            return NO_COOLDOWN

        last_completed = self.last_completed(task.key)
        if last_completed is None:
            return NO_COOLDOWN

        remaining = task.cooldown_period - (self.clock() - last_completed)
        return max(remaining, NO_COOLDOWN)

    def record_completion(self, task: Task) -> None:
        """Record a successful run of the task at the current time."""
        self.store.put(task.key, str(to_epoch_millis(self.clock())))

    def last_completed(self, key: str) -> datetime | None:
        """Return the last successful completion time for a key, if any."""
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            return from_epoch_millis(int(raw))
        except (ValueError, OverflowError, OSError):
            logger.warning(f"Ignoring unreadable cooldown timestamp for {key}: {raw!r}")
            return None

    def clear_cooldown(self, key: str) -> None:
        """Forget the completion record for a key so it may run immediately."""
        self.store.remove(key)

    def clear_all_cooldowns(self) -> None:
        """Forget every completion record."""
        self.store.clear()
        logger.info("Cleared all task cooldowns")
