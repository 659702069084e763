"""Tests for the feed record repository."""

import threading

import pytest

from feeds import FeedRecordRepository


@pytest.fixture
def catalog(mock_db_engine) -> FeedRecordRepository:
    return FeedRecordRepository(mock_db_engine, "buoy_stations")


@pytest.fixture
def observations(mock_db_engine) -> FeedRecordRepository:
    return FeedRecordRepository(mock_db_engine, "buoy_std_met")


class TestCatalogReplace:
    def test_replace_all(self, catalog):
        catalog.replace_all([{"id": "b", "name": "B"}, {"id": "a", "name": "A"}])

        assert catalog.query_all() == [
            {"id": "a", "name": "A"},
            {"id": "b", "name": "B"},
        ]

    def test_replace_drops_previous_rows(self, catalog):
        catalog.replace_all([{"id": "a"}, {"id": "b"}])
        catalog.replace_all([{"id": "c"}])

        assert catalog.query_all() == [{"id": "c"}]

    def test_replace_with_empty_list(self, catalog):
        catalog.replace_all([{"id": "a"}])
        catalog.replace_all([])

        assert catalog.query_all() == []

    def test_query_by_ids(self, catalog):
        catalog.replace_all([{"id": "a"}, {"id": "b"}, {"id": "c"}])

        assert catalog.query_by_ids(["c", "a", "zzz"]) == [{"id": "a"}, {"id": "c"}]
        assert catalog.query_by_ids([]) == []

    def test_datasets_are_isolated(self, mock_db_engine, catalog):
        tides = FeedRecordRepository(mock_db_engine, "tide_stations")
        catalog.replace_all([{"id": "46026"}])
        tides.replace_all([{"id": "9414290"}])

        catalog.replace_all([])

        assert tides.query_all() == [{"id": "9414290"}]

    def test_custom_id_field(self, mock_db_engine):
        repository = FeedRecordRepository(mock_db_engine, "custom", id_field="code")
        repository.replace_all([{"code": "X1", "value": 1}])

        assert repository.query_by_station("X1") == [{"code": "X1", "value": 1}]


class TestStationReplace:
    def test_replace_for_station_keeps_order(self, observations):
        records = [{"epoch_seconds": 3}, {"epoch_seconds": 1}, {"epoch_seconds": 2}]

        observations.replace_all_for_station("46026", records)

        assert observations.query_by_station("46026") == records

    def test_other_stations_untouched(self, observations):
        observations.replace_all_for_station("46026", [{"epoch_seconds": 1}])
        observations.replace_all_for_station("46042", [{"epoch_seconds": 2}])

        observations.replace_all_for_station("46026", [{"epoch_seconds": 9}])

        assert observations.query_by_station("46026") == [{"epoch_seconds": 9}]
        assert observations.query_by_station("46042") == [{"epoch_seconds": 2}]
        assert observations.query_by_ids(["46026", "46042"]) == [
            {"epoch_seconds": 9},
            {"epoch_seconds": 2},
        ]

    def test_unknown_station(self, observations):
        assert observations.query_by_station("nope") == []

    def test_replace_from_worker_threads(self, observations):
        """Concurrent replaces of different stations all land."""
        errors = []

        def worker(station_id: str) -> None:
            try:
                observations.replace_all_for_station(
                    station_id, [{"station": station_id, "n": n} for n in range(20)]
                )
            except Exception as e:
                errors.append(e)

        threads = [
            threading.Thread(target=worker, args=(f"st{i}",)) for i in range(8)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        for i in range(8):
            assert len(observations.query_by_station(f"st{i}")) == 20
