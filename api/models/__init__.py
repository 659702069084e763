"""API request and response models."""

from .preferences import PreferencesResponse, PreferenceUpdateResponse
from .sync import (
    CooldownResponse,
    HealthResponse,
    RefreshResponse,
    RunningTasksResponse,
)

__all__ = [
    "CooldownResponse",
    "HealthResponse",
    "PreferenceUpdateResponse",
    "PreferencesResponse",
    "RefreshResponse",
    "RunningTasksResponse",
]
