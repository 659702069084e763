"""Task lifecycle events delivered to scheduler listeners."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from .task import Task


@dataclass(frozen=True)
class TaskStarted:
    """The task was admitted and dispatched to the worker pool."""

    task: Task

    @property
    def key(self) -> str:
        return self.task.key


@dataclass(frozen=True)
class TaskCompleted:
    """The task body returned normally."""

    task: Task
    result: Any = None
    elapsed_ms: int = 0

    @property
    def key(self) -> str:
        return self.task.key


@dataclass(frozen=True)
class TaskFailed:
    """The task body raised."""

    task: Task
    error: BaseException = field(default_factory=Exception)
    elapsed_ms: int = 0

    @property
    def key(self) -> str:
        return self.task.key


TaskEvent: TypeAlias = TaskStarted | TaskCompleted | TaskFailed

# Listeners are invoked on the scheduler's main context, in registration order
TaskListener: TypeAlias = Callable[[TaskEvent], None]
