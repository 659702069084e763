"""Common type definitions for swellsync."""

from enum import Enum
from typing import Any, TypeAlias

# A decoded feed record (one station, one observation, one prediction, ...)
JsonRecord: TypeAlias = dict[str, Any]


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class StationKind(str, Enum):
    """Kinds of stations a user can mark as preferred."""

    BUOY = "buoy"
    TIDE = "tide"
    CURRENT = "current"
