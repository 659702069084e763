"""Global pytest configuration and fixtures."""

from collections.abc import Generator
from concurrent.futures import Executor, Future
from datetime import UTC, datetime, timedelta
from logging import Logger
from pathlib import Path
from typing import Any, Callable

import pytest
from sqlalchemy.engine import Engine

from core import setup_test_logging
from core.database.engine import create_database_engine, create_database_tables
from core.http import ConditionalFetcher, ValidatorStore
from core.storage import MemoryKeyValueStore
from core.tasks import TaskCooldowns
from core.types import Environment


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Setup test logging for all tests."""
    setup_test_logging()


@pytest.fixture(scope="function")
def logger() -> Logger:
    """Provide a logger instance for tests."""
    from core import get_logger

    return get_logger("test")


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2025, 6, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


class SyncExecutor(Executor):
    """Runs submitted callables immediately on the calling thread."""

    def __init__(self) -> None:
        self.is_shut_down = False

    def submit(  # type: ignore[override]
        self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any
    ) -> Future:
        if self.is_shut_down:
            raise RuntimeError("cannot schedule new futures after shutdown")
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future

    def shutdown(self, wait: bool = True, *, cancel_futures: bool = False) -> None:
        self.is_shut_down = True


@pytest.fixture
def clock() -> FakeClock:
    """Provide a controllable clock."""
    return FakeClock()


@pytest.fixture
def cooldowns(clock: FakeClock) -> TaskCooldowns:
    """Provide cooldown tracking over an in-memory store."""
    return TaskCooldowns(MemoryKeyValueStore(), clock=clock)


@pytest.fixture
def sync_executor() -> SyncExecutor:
    """Provide an executor running tasks inline."""
    return SyncExecutor()


@pytest.fixture
def mock_db_engine(tmp_path: Path) -> Generator[Engine, None, None]:
    """Create a file-backed SQLite engine with all tables."""
    engine = create_database_engine(
        Environment.TESTING, db_path=tmp_path / "swellsync.test.db"
    )
    create_database_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def fetcher() -> Generator[ConditionalFetcher, None, None]:
    """Provide a conditional fetcher with in-memory validators."""
    with ConditionalFetcher(ValidatorStore(MemoryKeyValueStore())) as fetcher:
        yield fetcher
