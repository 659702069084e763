"""Background task scheduling."""

from .context import InlineContext, LoopContext, MainContext
from .cooldowns import TaskCooldowns
from .events import TaskCompleted, TaskEvent, TaskFailed, TaskListener, TaskStarted
from .scheduler import TaskScheduler
from .task import NO_COOLDOWN, Task, task_key

__all__ = [
    "NO_COOLDOWN",
    "InlineContext",
    "LoopContext",
    "MainContext",
    "Task",
    "TaskCompleted",
    "TaskCooldowns",
    "TaskEvent",
    "TaskFailed",
    "TaskListener",
    "TaskScheduler",
    "TaskStarted",
    "task_key",
]
