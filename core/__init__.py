"""Core functionality for swellsync: scheduling, fetching and storage."""

from .config import Settings, load_settings
from .log import (
    get_logger,
    setup_logging,
    setup_production_logging,
    setup_test_logging,
)
from .types import Environment, StationKind

__all__ = [
    "Environment",
    "Settings",
    "StationKind",
    "get_logger",
    "load_settings",
    "setup_logging",
    "setup_production_logging",
    "setup_test_logging",
]
