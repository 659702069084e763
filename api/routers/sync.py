"""API router for triggering and inspecting background sync.

Handlers must stay ``async``: they have to run on the event loop, which is
the scheduler's main context.
"""

from fastapi import APIRouter, Depends, Response, status

from api.dependencies import get_preferences, get_scheduler, get_sync_manager
from api.models import CooldownResponse, RefreshResponse, RunningTasksResponse
from api.utils.error_handler import handle_api_operation
from core.log import get_logger
from core.tasks import TaskScheduler
from feeds import StationPreferences, SyncManager

logger = get_logger(__name__)

router = APIRouter(prefix="/v1/sync", tags=["sync"])


@router.get("/tasks", response_model=RunningTasksResponse)
async def get_running_tasks(
    scheduler: TaskScheduler = Depends(get_scheduler),
) -> RunningTasksResponse:
    """List the keys of running tasks."""
    keys = sorted(task.key for task in scheduler.get_running_tasks())
    return RunningTasksResponse(tasks=keys, count=len(keys))


@router.post("/catalogs", response_model=RefreshResponse)
async def refresh_catalogs(
    sync_manager: SyncManager = Depends(get_sync_manager),
) -> RefreshResponse:
    """Refresh the buoy, tide and current station catalogs."""
    admitted = handle_api_operation(
        sync_manager.refresh_all_catalogs, "Failed to refresh catalogs"
    )
    logger.info(f"Catalog refresh admitted {admitted} task(s)")
    return RefreshResponse(admitted=admitted)


@router.post("/catalogs/tide", response_model=RefreshResponse)
async def refresh_tide_catalog(
    sync_manager: SyncManager = Depends(get_sync_manager),
) -> RefreshResponse:
    """Refresh the tide station catalog."""
    admitted = handle_api_operation(
        sync_manager.refresh_tide_catalog, "Failed to refresh tide catalog"
    )
    return RefreshResponse(admitted=admitted)


@router.post("/stations", response_model=RefreshResponse)
async def refresh_preferred_stations(
    sync_manager: SyncManager = Depends(get_sync_manager),
    preferences: StationPreferences = Depends(get_preferences),
) -> RefreshResponse:
    """Refresh data of every preferred station."""
    admitted = handle_api_operation(
        lambda: sync_manager.refresh_preferred_stations(preferences),
        "Failed to refresh preferred stations",
    )
    logger.info(f"Preferred station refresh admitted {admitted} task(s)")
    return RefreshResponse(admitted=admitted)


@router.get("/cooldowns/{key}", response_model=CooldownResponse)
async def get_cooldown(
    key: str,
    scheduler: TaskScheduler = Depends(get_scheduler),
) -> CooldownResponse:
    """Get the last successful completion of a task key."""
    last_completed = handle_api_operation(
        lambda: scheduler.cooldowns.last_completed(key), "Failed to read cooldown"
    )
    return CooldownResponse(key=key, last_completed=last_completed)


@router.delete("/cooldowns/{key}", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cooldown(
    key: str,
    scheduler: TaskScheduler = Depends(get_scheduler),
) -> Response:
    """Let a task key run again immediately."""
    handle_api_operation(
        lambda: scheduler.cooldowns.clear_cooldown(key), "Failed to clear cooldown"
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/cooldowns", status_code=status.HTTP_204_NO_CONTENT)
async def clear_all_cooldowns(
    scheduler: TaskScheduler = Depends(get_scheduler),
) -> Response:
    """Let every task run again immediately."""
    handle_api_operation(
        scheduler.cooldowns.clear_all_cooldowns, "Failed to clear cooldowns"
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
