"""NOAA marine data feeds: buoys, tides and currents."""

from .decoders import DecodeError
from .endpoints import FeedEndpoints
from .preferences import StationPreferences
from .sinks import CatalogSink, FeedRecordRepository, StationDataSink
from .sync_manager import FeedSinks, PeriodicRefresh, SyncManager
from .tasks import COOLDOWNS, TaskKind

__all__ = [
    "COOLDOWNS",
    "CatalogSink",
    "DecodeError",
    "FeedEndpoints",
    "FeedRecordRepository",
    "FeedSinks",
    "PeriodicRefresh",
    "StationDataSink",
    "StationPreferences",
    "SyncManager",
    "TaskKind",
]
