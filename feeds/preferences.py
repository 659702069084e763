"""User's preferred stations."""

import json

from core.log import get_logger
from core.storage.kv import KeyValueStore
from core.types import StationKind

logger = get_logger(__name__)


class StationPreferences:
    """Sets of preferred station ids per station kind.

    Stored as a sorted JSON list under the kind's name, so the order of
    ``get`` results is stable.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    def get(self, kind: StationKind) -> set[str]:
        """Return the preferred station ids of one kind."""
        raw = self.store.get(kind.value)
        if raw is None:
            return set()
        try:
            ids = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Ignoring unreadable {kind.value} preferences: {raw!r}")
            return set()
        return {str(station_id) for station_id in ids}

    def replace(self, kind: StationKind, station_ids: set[str]) -> None:
        """Overwrite the preferred station ids of one kind."""
        if station_ids:
            self.store.put(kind.value, json.dumps(sorted(station_ids)))
        else:
            self.store.remove(kind.value)

    def add(self, kind: StationKind, station_id: str) -> bool:
        """Add a station; returns False if it was already preferred."""
        ids = self.get(kind)
        if station_id in ids:
            return False
        ids.add(station_id)
        self.replace(kind, ids)
        return True

    def remove(self, kind: StationKind, station_id: str) -> bool:
        """Remove a station; returns False if it was not preferred."""
        ids = self.get(kind)
        if station_id not in ids:
            return False
        ids.discard(station_id)
        self.replace(kind, ids)
        return True

    @property
    def buoy_station_ids(self) -> set[str]:
        return self.get(StationKind.BUOY)

    @property
    def tide_station_ids(self) -> set[str]:
        return self.get(StationKind.TIDE)

    @property
    def current_station_ids(self) -> set[str]:
        return self.get(StationKind.CURRENT)

    def as_dict(self) -> dict[str, list[str]]:
        return {kind.value: sorted(self.get(kind)) for kind in StationKind}
