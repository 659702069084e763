"""Fetch tasks for the marine data feeds.

Catalog tasks are keyed by their kind alone; per-station tasks by
``"{kind}:{station_id}"``. The same key is used as the HTTP cache key, so a
station's validator lives next to its cooldown.
"""

from abc import abstractmethod
from collections.abc import Callable
from datetime import date, timedelta
from enum import Enum
from typing import Any, ClassVar

from core.http import ConditionalFetcher, FetchError, FetchResult
from core.log import get_logger
from core.tasks import Task, task_key
from core.types import JsonRecord
from core.utils import Stopwatch, utc_today

from .decoders import (
    decode_buoy_spec_wave,
    decode_buoy_stations,
    decode_buoy_std_met,
    decode_current_predictions,
    decode_current_stations,
    decode_realtime_directory,
    decode_tide_predictions,
    decode_tide_stations,
)
from .endpoints import (
    FeedEndpoints,
    current_predictions_params,
    current_stations_params,
    tide_predictions_params,
    tide_stations_params,
)
from .sinks import CatalogSink, StationDataSink

logger = get_logger(__name__)


class TaskKind(str, Enum):
    """The closed set of fetch task variants."""

    BUOY_STATIONS = "buoy_stations"
    TIDE_STATIONS = "tide_stations"
    CURRENT_STATIONS = "current_stations"
    BUOY_STD_MET = "buoy_std_met"
    BUOY_SPEC_WAVE = "buoy_spec_wave"
    TIDE_PREDICTIONS = "tide_predictions"
    CURRENT_PREDICTIONS = "current_predictions"


COOLDOWNS: dict[TaskKind, timedelta] = {
    TaskKind.BUOY_STATIONS: timedelta(days=1),
    TaskKind.TIDE_STATIONS: timedelta(days=1),
    TaskKind.CURRENT_STATIONS: timedelta(days=1),
    TaskKind.BUOY_STD_MET: timedelta(minutes=5),
    TaskKind.BUOY_SPEC_WAVE: timedelta(minutes=5),
    TaskKind.TIDE_PREDICTIONS: timedelta(days=1),
    TaskKind.CURRENT_PREDICTIONS: timedelta(hours=12),
}


class FetchTask(Task):
    """Base class for tasks that fetch one feed and store it."""

    kind: ClassVar[TaskKind]
    # Whether requests carry stored validators
    conditional: ClassVar[bool] = True

    def __init__(
        self,
        fetcher: ConditionalFetcher,
        endpoints: FeedEndpoints,
        station_id: str | None = None,
    ):
        super().__init__(
            task_key(self.kind.value, station_id), COOLDOWNS[self.kind]
        )
        self.fetcher = fetcher
        self.endpoints = endpoints
        self.station_id = station_id

    def _describe(self) -> str:
        name = self.kind.value.replace("_", " ")
        if self.station_id is None:
            return name
        return f"{name} for station {self.station_id}"


class CatalogTask(FetchTask):
    """Fetches a station catalog and replaces it wholesale."""

    def __init__(
        self, fetcher: ConditionalFetcher, endpoints: FeedEndpoints, sink: CatalogSink
    ):
        super().__init__(fetcher, endpoints)
        self.sink = sink

    @abstractmethod
    def _fetch(self) -> FetchResult[list[JsonRecord]]:
        pass

    def _select(self, records: list[JsonRecord]) -> list[JsonRecord]:
        return records

    def call(self) -> Any:
        stopwatch = Stopwatch()
        result = self._fetch()
        if not result.present or result.body is None:
            logger.info(f"{self._describe()} not modified ({stopwatch.elapsed_ms()}ms)")
            return None

        records = self._select(result.body)
        logger.info(
            f"Fetched {len(result.body)} {self._describe()}, retained {len(records)} "
            f"({stopwatch.elapsed_ms()}ms)"
        )

        stopwatch = Stopwatch()
        self.sink.replace_all(records)
        logger.info(
            f"Replaced {len(records)} {self._describe()} ({stopwatch.elapsed_ms()}ms)"
        )
        self.fetcher.remember(self.key, result.validator)
        return {record["id"] for record in records}


class BuoyStationsTask(CatalogTask):
    """NDBC active stations, limited to stations publishing both realtime
    std met and spectral wave files."""

    kind = TaskKind.BUOY_STATIONS

    def _fetch(self) -> FetchResult[list[JsonRecord]]:
        return self.fetcher.fetch(
            self.endpoints.buoy_active_stations_url,
            decode_buoy_stations,
            cache_key=self.key,
        )

    def _select(self, records: list[JsonRecord]) -> list[JsonRecord]:
        listing = self.fetcher.fetch(
            self.endpoints.buoy_realtime_directory_url, decode_realtime_directory
        )
        if not listing.present or listing.body is None:
            raise FetchError(
                f"No directory listing from {self.endpoints.buoy_realtime_directory_url}"
            )
        available = listing.body
        return [record for record in records if record["id"] in available]


class TideStationsTask(CatalogTask):
    kind = TaskKind.TIDE_STATIONS

    def _fetch(self) -> FetchResult[list[JsonRecord]]:
        return self.fetcher.fetch(
            self.endpoints.coops_stations_url,
            decode_tide_stations,
            cache_key=self.key,
            params=tide_stations_params(),
        )


class CurrentStationsTask(CatalogTask):
    kind = TaskKind.CURRENT_STATIONS

    def _fetch(self) -> FetchResult[list[JsonRecord]]:
        return self.fetcher.fetch(
            self.endpoints.coops_stations_url,
            decode_current_stations,
            cache_key=self.key,
            params=current_stations_params(),
        )


class StationDataTask(FetchTask):
    """Fetches the time series of one station and replaces it."""

    def __init__(
        self,
        fetcher: ConditionalFetcher,
        endpoints: FeedEndpoints,
        sink: StationDataSink,
        station_id: str,
    ):
        if not station_id:
            raise ValueError("station_id must not be empty")
        super().__init__(fetcher, endpoints, station_id)
        self.sink = sink
        self._station = station_id

    @property
    def station(self) -> str:
        return self._station

    @abstractmethod
    def _fetch(self) -> FetchResult[list[JsonRecord]]:
        pass

    def call(self) -> Any:
        stopwatch = Stopwatch()
        result = self._fetch()
        if not result.present or result.body is None:
            logger.info(f"{self._describe()} not modified ({stopwatch.elapsed_ms()}ms)")
            return None

        logger.info(
            f"Fetched {len(result.body)} {self._describe()} "
            f"({stopwatch.elapsed_ms()}ms)"
        )

        stopwatch = Stopwatch()
        self.sink.replace_all_for_station(self.station, result.body)
        logger.info(f"Replaced {self._describe()} ({stopwatch.elapsed_ms()}ms)")
        if self.conditional:
            self.fetcher.remember(self.key, result.validator)
        return None


class BuoyStdMetTask(StationDataTask):
    kind = TaskKind.BUOY_STD_MET

    def _fetch(self) -> FetchResult[list[JsonRecord]]:
        return self.fetcher.fetch(
            self.endpoints.buoy_std_met_url(self.station),
            decode_buoy_std_met,
            cache_key=self.key,
        )


class BuoySpecWaveTask(StationDataTask):
    kind = TaskKind.BUOY_SPEC_WAVE

    def _fetch(self) -> FetchResult[list[JsonRecord]]:
        return self.fetcher.fetch(
            self.endpoints.buoy_spec_wave_url(self.station),
            decode_buoy_spec_wave,
            cache_key=self.key,
        )


class PredictionTask(StationDataTask):
    """Predictions are requested without validators; the date window in the
    query moves every day."""

    conditional = False

    def __init__(
        self,
        fetcher: ConditionalFetcher,
        endpoints: FeedEndpoints,
        sink: StationDataSink,
        station_id: str,
        today: Callable[[], date] = utc_today,
    ):
        super().__init__(fetcher, endpoints, sink, station_id)
        self.today = today


class TidePredictionsTask(PredictionTask):
    kind = TaskKind.TIDE_PREDICTIONS

    def _fetch(self) -> FetchResult[list[JsonRecord]]:
        return self.fetcher.fetch(
            self.endpoints.coops_predictions_url,
            decode_tide_predictions,
            params=tide_predictions_params(self.station, self.today()),
        )


class CurrentPredictionsTask(PredictionTask):
    kind = TaskKind.CURRENT_PREDICTIONS

    def _fetch(self) -> FetchResult[list[JsonRecord]]:
        return self.fetcher.fetch(
            self.endpoints.coops_predictions_url,
            decode_current_predictions,
            params=current_predictions_params(self.station, self.today()),
        )
