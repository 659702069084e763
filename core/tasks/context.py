"""Single-threaded execution contexts for scheduler bookkeeping.

Worker threads never touch scheduler state directly. They hand completion
callbacks to a ``MainContext``, which runs them in FIFO order on the one
logical thread that owns the scheduler.
"""

import asyncio
from collections.abc import Callable
from typing import Protocol


class MainContext(Protocol):
    """Posts callbacks onto the context that owns the scheduler."""

    def post(self, callback: Callable[[], None]) -> None:
        """Schedule ``callback`` to run on the main context (FIFO)."""
        ...


class LoopContext:
    """Uses an asyncio event loop as the main context."""

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self.loop = loop

    @classmethod
    def current(cls) -> "LoopContext":
        """Bind to the event loop running in the calling coroutine."""
        return cls(asyncio.get_running_loop())

    def post(self, callback: Callable[[], None]) -> None:
        # Safe from any thread; callbacks run in the order they were posted
        self.loop.call_soon_threadsafe(callback)


class InlineContext:
    """Runs callbacks immediately on the posting thread.

    Only valid when every caller already runs on one thread, e.g. with a
    synchronous executor in tests or scripts.
    """

    def post(self, callback: Callable[[], None]) -> None:
        callback()
