"""API router for preferred stations."""

from fastapi import APIRouter, Depends

from api.dependencies import get_preferences, get_sync_manager
from api.models import PreferencesResponse, PreferenceUpdateResponse
from api.utils.error_handler import handle_api_operation
from core.log import get_logger
from core.types import StationKind
from feeds import StationPreferences, SyncManager

logger = get_logger(__name__)

router = APIRouter(prefix="/v1/preferences", tags=["preferences"])


def _refresh_station(
    sync_manager: SyncManager, kind: StationKind, station_id: str
) -> int:
    if kind == StationKind.BUOY:
        return sync_manager.refresh_preferred_buoys([station_id])
    if kind == StationKind.TIDE:
        return sync_manager.refresh_preferred_tides([station_id])
    return sync_manager.refresh_preferred_currents([station_id])


@router.get("", response_model=PreferencesResponse)
async def get_preferences_list(
    preferences: StationPreferences = Depends(get_preferences),
) -> PreferencesResponse:
    """Get preferred station ids of every kind."""
    return PreferencesResponse(
        **handle_api_operation(preferences.as_dict, "Failed to read preferences")
    )


@router.put("/{kind}/{station_id}", response_model=PreferenceUpdateResponse)
async def add_preferred_station(
    kind: StationKind,
    station_id: str,
    preferences: StationPreferences = Depends(get_preferences),
    sync_manager: SyncManager = Depends(get_sync_manager),
) -> PreferenceUpdateResponse:
    """Add a preferred station and start fetching its data."""
    changed = handle_api_operation(
        lambda: preferences.add(kind, station_id), "Failed to update preferences"
    )
    admitted = _refresh_station(sync_manager, kind, station_id)
    logger.info(f"Added preferred {kind.value} station {station_id}")
    return PreferenceUpdateResponse(
        kind=kind, station_id=station_id, changed=changed, admitted=admitted
    )


@router.delete("/{kind}/{station_id}", response_model=PreferenceUpdateResponse)
async def remove_preferred_station(
    kind: StationKind,
    station_id: str,
    preferences: StationPreferences = Depends(get_preferences),
) -> PreferenceUpdateResponse:
    """Remove a preferred station."""
    changed = handle_api_operation(
        lambda: preferences.remove(kind, station_id), "Failed to update preferences"
    )
    return PreferenceUpdateResponse(kind=kind, station_id=station_id, changed=changed)
