"""Background task contract."""

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Any

NO_COOLDOWN = timedelta(0)


class Task(ABC):
    """A named unit of background work with a cooldown policy.

    The key identifies the logical work (for example a task kind plus a
    station id), so two task objects describing the same work collide in the
    scheduler even though they are different instances. Tasks are built fresh
    for every submission and are owned by the scheduler while they run.

    ``call()`` runs on a worker thread. It signals failure by raising and must
    never touch cooldowns or the scheduler's running set; the scheduler
    updates those from the outcome.
    """

    def __init__(self, key: str, cooldown_period: timedelta = NO_COOLDOWN) -> None:
        """Initialize the task.

        Args:
            key: Stable identity used for deduplication and cooldown lookup
            cooldown_period: Minimum time after a successful run before the
                same key may run again. Zero disables throttling.
        """
        if not key:
            raise ValueError("Task key must not be empty")
        if cooldown_period < NO_COOLDOWN:
            raise ValueError("cooldown_period must not be negative")
        self._key = key
        self._cooldown_period = cooldown_period

    @property
    def key(self) -> str:
        return self._key

    @property
    def cooldown_period(self) -> timedelta:
        return self._cooldown_period

    @abstractmethod
    def call(self) -> Any:
        """Execute the work and return an optional result."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key={self._key!r})"


def task_key(kind: str, suffix: str | None = None) -> str:
    """Build a task key from a kind and an optional entity suffix."""
    if suffix is None:
        return kind
    return f"{kind}:{suffix}"
