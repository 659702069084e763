"""Deduplicating, cooldown-aware task scheduler."""

import logging
from concurrent.futures import CancelledError, Executor, Future
from functools import partial

from core.log import get_logger
from core.utils import Stopwatch

from .context import MainContext
from .cooldowns import TaskCooldowns
from .events import TaskCompleted, TaskEvent, TaskFailed, TaskListener, TaskStarted
from .task import Task

logger = get_logger(__name__)


class TaskScheduler:
    """Runs tasks on a worker pool, at most one per key.

    A submission is ignored when a task with the same key is still running,
    or when the key is on cooldown after a recent success. Ignoring is not an
    error and produces no events.

    All public methods must be called on the main context. The running set
    and the listener list are not locked; worker threads only reach them by
    posting callbacks through ``main_context``.
    """

    def __init__(
        self,
        executor: Executor,
        main_context: MainContext,
        cooldowns: TaskCooldowns,
        log: logging.Logger | None = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            executor: Worker pool that runs task bodies
            main_context: Context that completion callbacks are posted to
            cooldowns: Cooldown tracking consulted at submission time
            log: Logger for lifecycle notices (defaults to the module logger)
        """
        self.executor = executor
        self.main_context = main_context
        self._cooldowns = cooldowns
        self._log = log or logger
        self._running: dict[str, Task] = {}
        self._listeners: list[TaskListener] = []
        self._shutdown = False

    @property
    def cooldowns(self) -> TaskCooldowns:
        return self._cooldowns

    @property
    def is_shutdown(self) -> bool:
        return self._shutdown

    def submit(self, task: Task) -> bool:
        """Submit a task for execution.

        Args:
            task: Task to run

        Returns:
            True if the task was admitted, False if it was ignored
        """
        key = task.key

        if key in self._running:
            self._log.debug(f"Ignoring {key}: already running")
            return False

        if self._cooldowns.is_on_cooldown(task):
            remaining = self._cooldowns.remaining_cooldown(task)
            self._log.debug(
                f"Ignoring {key}: on cooldown for another "
                f"{int(remaining.total_seconds())}s"
            )
            return False

        if self._shutdown:
            self._log.warning(f"Ignoring {key}: scheduler is shut down")
            return False

        self._running[key] = task
        self._log.debug(f"Submitted {key}")
        self._notify(TaskStarted(task))

        stopwatch = Stopwatch()
        try:
            future = self.executor.submit(task.call)
        except RuntimeError as e:
            # Executor refused the work, e.g. it was shut down underneath us
            self._running.pop(key, None)
            self._log.error(f"Could not dispatch {key}: {e}")
            self._notify(TaskFailed(task, e, stopwatch.elapsed_ms()))
            return True

        future.add_done_callback(partial(self._post_completion, task, stopwatch))
        return True

    def is_running(self, task: Task | str) -> bool:
        """Check whether a task with the same key is currently running."""
        key = task if isinstance(task, str) else task.key
        return key in self._running

    def get_running_tasks(self) -> list[Task]:
        """Return a snapshot of the running tasks."""
        return list(self._running.values())

    def add_listener(self, listener: TaskListener) -> None:
        """Register a listener for task events."""
        self._listeners.append(listener)

    def remove_listener(self, listener: TaskListener) -> None:
        """Unregister a listener; unknown listeners are ignored."""
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def shutdown(self, wait: bool = False) -> None:
        """Stop accepting new work.

        Tasks already running are not interrupted. Their completions are
        still posted to the main context if it keeps running.

        Args:
            wait: Block until running task bodies have returned
        """
        if self._shutdown:
            return
        self._shutdown = True
        self._log.info(
            f"Shutting down scheduler with {len(self._running)} running task(s)"
        )
        self.executor.shutdown(wait=wait)

    def _post_completion(
        self, task: Task, stopwatch: Stopwatch, future: Future
    ) -> None:
        # Runs on the worker thread (or inline if the future already finished)
        self.main_context.post(partial(self._complete, task, stopwatch, future))

    def _complete(self, task: Task, stopwatch: Stopwatch, future: Future) -> None:
        key = task.key
        elapsed_ms = stopwatch.elapsed_ms()
        self._running.pop(key, None)

        if future.cancelled():
            error: BaseException | None = CancelledError(f"{key} was cancelled")
        else:
            error = future.exception()

        if error is not None:
            self._log.error(f"Task {key} failed ({elapsed_ms}ms): {error!r}")
            self._notify(TaskFailed(task, error, elapsed_ms))
            return

        self._cooldowns.record_completion(task)
        self._log.info(f"Task {key} completed ({elapsed_ms}ms)")
        self._notify(TaskCompleted(task, future.result(), elapsed_ms))

    def _notify(self, event: TaskEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                self._log.error(
                    f"Error in task listener for {type(event).__name__} "
                    f"{event.key}: {e}"
                )
