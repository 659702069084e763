"""Sync API response models."""

from datetime import datetime

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str
    timestamp: str
    running_tasks: int = Field(default=0, description="Tasks currently running")


class RefreshResponse(BaseModel):
    """Result of a refresh trigger."""

    admitted: int = Field(
        description="Tasks started; duplicates and tasks on cooldown are skipped"
    )


class RunningTasksResponse(BaseModel):
    """Keys of the tasks currently running."""

    tasks: list[str]
    count: int


class CooldownResponse(BaseModel):
    """Cooldown state of one task key."""

    key: str
    last_completed: datetime | None = Field(
        default=None, description="Last successful completion (UTC)"
    )
