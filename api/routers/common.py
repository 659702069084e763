"""Common API endpoints router."""

from fastapi import APIRouter, Depends

from api.dependencies import get_scheduler, get_settings
from api.models import HealthResponse
from core.config import Settings
from core.log import get_logger
from core.tasks import TaskScheduler
from core.utils import get_current_timestamp

logger = get_logger(__name__)

router = APIRouter(tags=["common"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: Settings = Depends(get_settings),
    scheduler: TaskScheduler = Depends(get_scheduler),
) -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="shutting_down" if scheduler.is_shutdown else "healthy",
        version=settings.api_version,
        timestamp=get_current_timestamp(),
        running_tasks=len(scheduler.get_running_tasks()),
    )
