"""Tests for preferred station storage."""

import pytest

from core.storage import MemoryKeyValueStore
from core.types import StationKind
from feeds import StationPreferences


@pytest.fixture
def preferences() -> StationPreferences:
    return StationPreferences(MemoryKeyValueStore())


def test_empty_by_default(preferences):
    assert preferences.buoy_station_ids == set()
    assert preferences.as_dict() == {"buoy": [], "tide": [], "current": []}


def test_add_and_remove(preferences):
    assert preferences.add(StationKind.BUOY, "46026") is True
    assert preferences.add(StationKind.BUOY, "46026") is False
    assert preferences.add(StationKind.BUOY, "46042") is True

    assert preferences.buoy_station_ids == {"46026", "46042"}
    assert preferences.tide_station_ids == set()

    assert preferences.remove(StationKind.BUOY, "46026") is True
    assert preferences.remove(StationKind.BUOY, "46026") is False
    assert preferences.buoy_station_ids == {"46042"}


def test_kinds_are_independent(preferences):
    preferences.add(StationKind.TIDE, "9414290")
    preferences.add(StationKind.CURRENT, "SFB1201")

    assert preferences.tide_station_ids == {"9414290"}
    assert preferences.current_station_ids == {"SFB1201"}
    assert preferences.as_dict() == {
        "buoy": [],
        "tide": ["9414290"],
        "current": ["SFB1201"],
    }


def test_stored_sorted(preferences):
    preferences.replace(StationKind.BUOY, {"b", "a", "c"})

    assert preferences.store.get("buoy") == '["a", "b", "c"]'


def test_empty_set_removes_entry(preferences):
    preferences.replace(StationKind.BUOY, {"a"})
    preferences.replace(StationKind.BUOY, set())

    assert preferences.store.get("buoy") is None


def test_unreadable_value_is_ignored(preferences):
    preferences.store.put("tide", "{broken")

    assert preferences.tide_station_ids == set()
    assert preferences.add(StationKind.TIDE, "9414290") is True
    assert preferences.tide_station_ids == {"9414290"}


def test_persisted_in_database(mock_db_engine):
    from core.storage import SqlKeyValueStore

    first = StationPreferences(SqlKeyValueStore(mock_db_engine, "preferences"))
    first.add(StationKind.BUOY, "46026")

    second = StationPreferences(SqlKeyValueStore(mock_db_engine, "preferences"))
    assert second.buoy_station_ids == {"46026"}
