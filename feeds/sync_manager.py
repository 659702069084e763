"""Fan-out of refresh requests into fetch tasks."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date

from sqlalchemy.engine import Engine

from core.http import ConditionalFetcher
from core.log import get_logger
from core.periodic_task import PeriodicTask
from core.tasks import Task, TaskScheduler
from core.utils import utc_today

from .endpoints import FeedEndpoints
from .preferences import StationPreferences
from .sinks import CatalogSink, FeedRecordRepository, StationDataSink
from .tasks import (
    BuoySpecWaveTask,
    BuoyStationsTask,
    BuoyStdMetTask,
    CurrentPredictionsTask,
    CurrentStationsTask,
    TaskKind,
    TidePredictionsTask,
    TideStationsTask,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class FeedSinks:
    """Where each dataset is stored."""

    buoy_stations: CatalogSink
    tide_stations: CatalogSink
    current_stations: CatalogSink
    buoy_std_met: StationDataSink
    buoy_spec_wave: StationDataSink
    tide_predictions: StationDataSink
    current_predictions: StationDataSink

    @classmethod
    def from_engine(cls, engine: Engine) -> "FeedSinks":
        """One ``FeedRecordRepository`` per dataset, named after its task kind."""
        return cls(
            **{
                kind.value: FeedRecordRepository(engine, kind.value)
                for kind in TaskKind
            }
        )


class SyncManager:
    """Translates user and app intents into scheduler submissions.

    Holds no state of its own: deduplication and throttling happen in the
    scheduler, so calling a refresh method twice in a row is harmless. Must
    be called on the scheduler's main context.
    """

    def __init__(
        self,
        scheduler: TaskScheduler,
        fetcher: ConditionalFetcher,
        endpoints: FeedEndpoints,
        sinks: FeedSinks,
        today: Callable[[], date] = utc_today,
    ):
        """Initialize the sync manager.

        Args:
            scheduler: Scheduler receiving the tasks
            fetcher: Conditional fetcher shared by all tasks
            endpoints: Remote data source URLs
            sinks: Storage for every dataset
            today: Current UTC date, used for prediction windows
        """
        self.scheduler = scheduler
        self.fetcher = fetcher
        self.endpoints = endpoints
        self.sinks = sinks
        self.today = today

    def refresh_all_catalogs(self) -> int:
        """Refresh the buoy, tide and current station catalogs.

        Returns:
            Number of admitted submissions
        """
        return self._submit_all(
            [
                BuoyStationsTask(self.fetcher, self.endpoints, self.sinks.buoy_stations),
                TideStationsTask(self.fetcher, self.endpoints, self.sinks.tide_stations),
                CurrentStationsTask(
                    self.fetcher, self.endpoints, self.sinks.current_stations
                ),
            ]
        )

    def refresh_tide_catalog(self) -> int:
        """Refresh the tide station catalog only."""
        return self._submit_all(
            [TideStationsTask(self.fetcher, self.endpoints, self.sinks.tide_stations)]
        )

    def refresh_preferred_buoys(self, station_ids: Iterable[str]) -> int:
        """Refresh std met and spectral wave data of each buoy station."""
        tasks: list[Task] = []
        for station_id in station_ids:
            tasks.append(
                BuoyStdMetTask(
                    self.fetcher, self.endpoints, self.sinks.buoy_std_met, station_id
                )
            )
            tasks.append(
                BuoySpecWaveTask(
                    self.fetcher, self.endpoints, self.sinks.buoy_spec_wave, station_id
                )
            )
        return self._submit_all(tasks)

    def refresh_preferred_tides(self, station_ids: Iterable[str]) -> int:
        """Refresh tide predictions of each tide station."""
        return self._submit_all(
            [
                TidePredictionsTask(
                    self.fetcher,
                    self.endpoints,
                    self.sinks.tide_predictions,
                    station_id,
                    today=self.today,
                )
                for station_id in station_ids
            ]
        )

    def refresh_preferred_currents(self, station_ids: Iterable[str]) -> int:
        """Refresh current predictions of each current station."""
        return self._submit_all(
            [
                CurrentPredictionsTask(
                    self.fetcher,
                    self.endpoints,
                    self.sinks.current_predictions,
                    station_id,
                    today=self.today,
                )
                for station_id in station_ids
            ]
        )

    def refresh_preferred_stations(self, preferences: StationPreferences) -> int:
        """Refresh data for every preferred station of every kind."""
        return (
            self.refresh_preferred_buoys(preferences.buoy_station_ids)
            + self.refresh_preferred_tides(preferences.tide_station_ids)
            + self.refresh_preferred_currents(preferences.current_station_ids)
        )

    def refresh_all(self, preferences: StationPreferences) -> int:
        """Refresh catalogs and preferred stations, e.g. at startup."""
        return self.refresh_all_catalogs() + self.refresh_preferred_stations(
            preferences
        )

    def _submit_all(self, tasks: list[Task]) -> int:
        admitted = sum(1 for task in tasks if self.scheduler.submit(task))
        logger.debug(f"Submitted {len(tasks)} task(s), {admitted} admitted")
        return admitted


class PeriodicRefresh(PeriodicTask):
    """Triggers a full refresh on every interval.

    Runs on the event loop, which is the scheduler's main context.
    """

    def __init__(self, sync_manager: SyncManager, preferences: StationPreferences):
        self.sync_manager = sync_manager
        self.preferences = preferences

    async def execute(self) -> None:
        admitted = self.sync_manager.refresh_all(self.preferences)
        logger.info(f"Periodic refresh admitted {admitted} task(s)")
