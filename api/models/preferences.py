"""Preferred station API models."""

from pydantic import BaseModel, Field

from core.types import StationKind


class PreferencesResponse(BaseModel):
    """Preferred station ids per station kind."""

    buoy: list[str] = Field(default_factory=list)
    tide: list[str] = Field(default_factory=list)
    current: list[str] = Field(default_factory=list)


class PreferenceUpdateResponse(BaseModel):
    """Result of adding or removing a preferred station."""

    kind: StationKind
    station_id: str
    changed: bool = Field(description="False if the set already had this state")
    admitted: int = Field(default=0, description="Refresh tasks started")
