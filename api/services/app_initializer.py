"""Application service initializer for managing startup and shutdown."""

import asyncio
from concurrent.futures import ThreadPoolExecutor

from fastapi import FastAPI
from sqlalchemy.engine import Engine

from core.config import Settings
from core.constants import (
    COOLDOWN_NAMESPACE,
    HTTP_CACHE_NAMESPACE,
    PREFERENCES_NAMESPACE,
    WORKER_THREAD_PREFIX,
)
from core.database.engine import create_database_engine, create_database_tables
from core.http import ConditionalFetcher, ValidatorStore
from core.log import get_logger
from core.periodic_task import PeriodicTaskManager
from core.storage import SqlKeyValueStore
from core.tasks import LoopContext, TaskCooldowns, TaskScheduler
from feeds import (
    FeedEndpoints,
    FeedSinks,
    PeriodicRefresh,
    StationPreferences,
    SyncManager,
)

logger = get_logger(__name__)


class AppServiceInitializer:
    """Manages initialization and lifecycle of the sync services.

    Must be used from inside the running event loop: the loop becomes the
    scheduler's main context.
    """

    def __init__(self, settings: Settings):
        """Initialize with application settings."""
        self.settings = settings
        self.engine: Engine | None = None
        self.executor: ThreadPoolExecutor | None = None
        self.fetcher: ConditionalFetcher | None = None
        self.scheduler: TaskScheduler | None = None
        self.sync_manager: SyncManager | None = None
        self.preferences: StationPreferences | None = None
        self.periodic_manager: PeriodicTaskManager | None = None

    async def initialize_all_services(
        self,
        app: FastAPI,
        engine: Engine | None = None,
        endpoints: FeedEndpoints | None = None,
    ) -> None:
        """Initialize all services and configure app.state."""
        logger.info("Initializing all application services...")

        await self.initialize_database(engine)
        await self.initialize_sync_services(endpoints)
        self._setup_app_state(app)

        logger.info("All application services initialized successfully")

    async def initialize_database(self, engine: Engine | None = None) -> None:
        """Initialize database engine and create tables."""
        logger.info("Initializing database...")

        if engine:
            self.engine = engine
        else:
            self.engine = create_database_engine(
                self.settings.environment, db_path=self.settings.db_path
            )

        create_database_tables(self.engine)

        logger.info("Database initialized successfully")

    async def initialize_sync_services(
        self, endpoints: FeedEndpoints | None = None
    ) -> None:
        """Wire the scheduler, fetcher and sync manager together."""
        if not self.engine:
            raise RuntimeError("Database must be initialized before sync services")

        cooldowns = TaskCooldowns(SqlKeyValueStore(self.engine, COOLDOWN_NAMESPACE))
        self.fetcher = ConditionalFetcher(
            ValidatorStore(SqlKeyValueStore(self.engine, HTTP_CACHE_NAMESPACE)),
            connect_timeout=self.settings.http_connect_timeout,
            read_timeout=self.settings.http_read_timeout,
            user_agent=self.settings.http_user_agent,
        )
        self.executor = ThreadPoolExecutor(
            max_workers=self.settings.sync_max_workers,
            thread_name_prefix=WORKER_THREAD_PREFIX,
        )
        self.scheduler = TaskScheduler(self.executor, LoopContext.current(), cooldowns)
        self.sync_manager = SyncManager(
            self.scheduler,
            self.fetcher,
            endpoints or FeedEndpoints.from_settings(self.settings),
            FeedSinks.from_engine(self.engine),
        )
        self.preferences = StationPreferences(
            SqlKeyValueStore(self.engine, PREFERENCES_NAMESPACE)
        )

        if self.settings.periodic_refresh_enabled:
            self.periodic_manager = PeriodicTaskManager(
                PeriodicRefresh(self.sync_manager, self.preferences),
                interval_seconds=self.settings.refresh_interval_seconds,
            )
        else:
            logger.warning("Periodic refresh is disabled")
            self.periodic_manager = None

        logger.info(
            f"Sync services ready with {self.settings.sync_max_workers} worker(s)"
        )

    async def start_all_services(self) -> None:
        """Start all background services."""
        if self.periodic_manager:
            await self.periodic_manager.start()
            await self.periodic_manager.start_periodic()
            logger.info(
                f"Periodic refresh every {self.settings.refresh_interval_seconds}s"
            )

    async def stop_all_services(self) -> None:
        """Stop accepting work and wait for running fetches to finish."""
        logger.info("Stopping all background services...")

        if self.periodic_manager:
            await self.periodic_manager.stop()

        if self.scheduler:
            self.scheduler.shutdown(wait=False)

        if self.executor:
            # Blocking wait off the loop; completions still post back to it
            await asyncio.to_thread(self.executor.shutdown, wait=True)

        if self.fetcher:
            self.fetcher.close()

        logger.info("All background services stopped successfully")

    def _setup_app_state(self, app: FastAPI) -> None:
        """Configure app.state with initialized services."""
        app.state.engine = self.engine
        app.state.scheduler = self.scheduler
        app.state.sync_manager = self.sync_manager
        app.state.preferences = self.preferences
        app.state.periodic_manager = self.periodic_manager
