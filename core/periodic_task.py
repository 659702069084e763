"""Periodic trigger running on the event loop."""

import asyncio
from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable

from pydantic import BaseModel

from core.log import get_logger
from core.utils import utc_now

logger = get_logger(__name__)


class PeriodicStatus(Enum):
    """Status of the periodic trigger."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"
    ERROR = "error"


class PeriodicStats(BaseModel):
    """Statistics for periodic executions."""

    executions: int = 0
    errors: int = 0
    consecutive_errors: int = 0
    last_execution_time: datetime | None = None
    last_error_time: datetime | None = None
    start_time: datetime | None = None


class PeriodicManagerStatus(BaseModel):
    """Status information for a periodic task manager."""

    status: str
    periodic_running: bool
    stats: PeriodicStats
    config: dict[str, Any]


class PeriodicTask(ABC):
    """Abstract base class for work triggered on an interval."""

    @abstractmethod
    async def execute(self) -> None:
        """Run one iteration."""
        pass

    async def on_start(self) -> None:
        """Called when the manager starts."""
        pass

    async def on_stop(self) -> None:
        """Called when the manager stops."""
        pass

    async def on_error(self, error: Exception) -> None:
        """Called when an iteration raises.

        Args:
            error: The exception that occurred
        """
        logger.error(f"Error in periodic task: {error}")


class PeriodicTaskManager:
    """Runs a PeriodicTask every ``interval_seconds``.

    A failing iteration is logged and counted; the loop then waits for the
    next interval as usual. There is no retry or backoff.
    """

    def __init__(
        self,
        task: PeriodicTask,
        interval_seconds: float = 60,
        run_immediately: bool = True,
        on_status_change: Callable[[PeriodicStatus], Awaitable[None]] | None = None,
        on_error: Callable[[Exception], Awaitable[None]] | None = None,
    ):
        """Initialize the periodic task manager.

        Args:
            task: The periodic task to execute
            interval_seconds: Interval between executions in seconds
            run_immediately: Execute once as soon as the loop starts
            on_status_change: Callback when status changes
            on_error: Callback when an iteration fails
        """
        self.task = task
        self.interval_seconds = interval_seconds
        self.run_immediately = run_immediately
        self.on_status_change = on_status_change
        self.on_error = on_error

        self.status = PeriodicStatus.IDLE
        self._background_task: asyncio.Task[None] | None = None
        self._stop_event = asyncio.Event()

        self.stats = PeriodicStats()

        logger.info(
            f"PeriodicTaskManager initialized with {interval_seconds}s interval"
        )

    async def __aenter__(self) -> "PeriodicTaskManager":
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        await self.stop()

    async def start(self) -> None:
        """Prepare the task; the loop itself starts with ``start_periodic``."""
        if self.status not in (PeriodicStatus.IDLE, PeriodicStatus.STOPPED):
            logger.warning(f"Periodic manager already in {self.status.value} state")
            return

        try:
            await self.task.on_start()
        except Exception as e:
            await self._set_status(PeriodicStatus.ERROR)
            logger.error(f"Failed to start periodic manager: {e}")
            await self._handle_error(e)
            raise

        self._stop_event.clear()
        await self._set_status(PeriodicStatus.IDLE)
        self.stats.start_time = utc_now()
        logger.info("Periodic manager started")

    async def stop(self) -> None:
        """Stop the loop and run task cleanup."""
        logger.info("Stopping periodic manager...")
        self._stop_event.set()

        if self._background_task and not self._background_task.done():
            self._background_task.cancel()
            try:
                await self._background_task
            except asyncio.CancelledError:
                pass

        try:
            await self.task.on_stop()
        except Exception as e:
            logger.error(f"Error during periodic task cleanup: {e}")

        await self._set_status(PeriodicStatus.STOPPED)
        logger.info("Periodic manager stopped")

    async def start_periodic(self) -> None:
        """Start the periodic execution loop."""
        if self.status == PeriodicStatus.RUNNING:
            logger.warning("Periodic loop already running")
            return

        if self._background_task and not self._background_task.done():
            logger.warning("Background task already exists")
            return

        self._stop_event.clear()
        await self._set_status(PeriodicStatus.RUNNING)
        self._background_task = asyncio.create_task(self._periodic_loop())
        logger.info("Periodic execution loop started")

    async def stop_periodic(self) -> None:
        """Pause the periodic execution loop."""
        if self.status != PeriodicStatus.RUNNING:
            logger.warning("Periodic loop not running")
            return

        await self._set_status(PeriodicStatus.PAUSED)
        self._stop_event.set()

        if self._background_task:
            try:
                await self._background_task
            except asyncio.CancelledError:
                pass

        logger.info("Periodic execution loop stopped")

    async def execute_once(self) -> None:
        """Execute the task once manually; errors propagate to the caller."""
        logger.info("Executing periodic task manually")
        try:
            await self._run_iteration()
        except Exception as e:
            await self._handle_error(e)
            raise

    def get_status(self) -> PeriodicManagerStatus:
        """Get current status and statistics."""
        return PeriodicManagerStatus(
            status=self.status.value,
            periodic_running=(
                self._background_task is not None and not self._background_task.done()
            ),
            stats=self.stats,
            config={
                "interval_seconds": self.interval_seconds,
                "run_immediately": self.run_immediately,
            },
        )

    async def _run_iteration(self) -> None:
        try:
            await self.task.execute()
        except Exception:
            self.stats.errors += 1
            self.stats.consecutive_errors += 1
            self.stats.last_error_time = utc_now()
            raise
        self.stats.executions += 1
        self.stats.consecutive_errors = 0
        self.stats.last_execution_time = utc_now()

    async def _periodic_loop(self) -> None:
        logger.info("Periodic loop started")

        if not self.run_immediately and await self._wait_interval():
            logger.info("Periodic loop stopped")
            return

        while not self._stop_event.is_set():
            try:
                await self._run_iteration()
            except asyncio.CancelledError:
                logger.info("Periodic loop cancelled")
                break
            except Exception as e:
                logger.error(f"Error in periodic loop: {e}")
                await self._handle_error(e)

            if await self._wait_interval():
                break

        logger.info("Periodic loop stopped")

    async def _wait_interval(self) -> bool:
        """Sleep until the next iteration; True if stop was requested."""
        try:
            await asyncio.wait_for(
                self._stop_event.wait(), timeout=self.interval_seconds
            )
            return True
        except asyncio.TimeoutError:
            return False

    async def _set_status(self, status: PeriodicStatus) -> None:
        old_status = self.status
        self.status = status

        if old_status != status:
            logger.debug(f"Status changed: {old_status.value} -> {status.value}")
            if self.on_status_change:
                try:
                    await self.on_status_change(status)
                except Exception as e:
                    logger.error(f"Error in status change callback: {e}")

    async def _handle_error(self, error: Exception) -> None:
        try:
            await self.task.on_error(error)
        except Exception as e:
            logger.error(f"Error in task error handler: {e}")

        if self.on_error:
            try:
                await self.on_error(error)
            except Exception as e:
                logger.error(f"Error in external error callback: {e}")
