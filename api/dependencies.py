"""FastAPI dependencies exposing the sync services from app state."""

from fastapi import Request
from sqlalchemy.engine import Engine

from core.config import Settings
from core.log import get_logger
from core.tasks import TaskScheduler
from feeds import StationPreferences, SyncManager

logger = get_logger(__name__)


def get_settings(request: Request) -> Settings:
    """Get settings from app state."""
    settings: Settings = request.app.state.settings
    return settings


def get_engine(request: Request) -> Engine:
    """Get database engine from app state."""
    engine: Engine = request.app.state.engine
    return engine


def get_scheduler(request: Request) -> TaskScheduler:
    """Get task scheduler from app state."""
    scheduler: TaskScheduler = request.app.state.scheduler
    return scheduler


def get_sync_manager(request: Request) -> SyncManager:
    """Get sync manager from app state."""
    sync_manager: SyncManager = request.app.state.sync_manager
    return sync_manager


def get_preferences(request: Request) -> StationPreferences:
    """Get preferred station store from app state."""
    preferences: StationPreferences = request.app.state.preferences
    return preferences
