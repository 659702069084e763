"""Tests for the preferences router."""

from feeds import FeedRecordRepository


def test_empty_preferences(client):
    response = client.get("/v1/preferences")

    assert response.status_code == 200
    assert response.json() == {"buoy": [], "tide": [], "current": []}


def test_add_buoy_fetches_observations(client, wait_idle):
    response = client.put("/v1/preferences/buoy/46026")

    assert response.status_code == 200
    assert response.json() == {
        "kind": "buoy",
        "station_id": "46026",
        "changed": True,
        "admitted": 2,
    }

    wait_idle()
    engine = client.app.state.engine
    [observation] = FeedRecordRepository(engine, "buoy_std_met").query_by_station(
        "46026"
    )
    assert observation["wave_height"] == 2.1
    [spectral] = FeedRecordRepository(engine, "buoy_spec_wave").query_by_station(
        "46026"
    )
    assert spectral["swell_direction"] == "WNW"
    assert client.get("/v1/preferences").json()["buoy"] == ["46026"]


def test_add_twice(client, wait_idle):
    client.put("/v1/preferences/buoy/46026")
    wait_idle()

    response = client.put("/v1/preferences/buoy/46026")

    assert response.json()["changed"] is False
    assert response.json()["admitted"] == 0


def test_add_tide_and_current(client, wait_idle):
    tide = client.put("/v1/preferences/tide/9414290").json()
    current = client.put("/v1/preferences/current/SFB1201").json()

    assert tide["admitted"] == 1
    assert current["admitted"] == 1

    wait_idle()
    engine = client.app.state.engine
    assert len(
        FeedRecordRepository(engine, "tide_predictions").query_by_station("9414290")
    ) == 1
    assert len(
        FeedRecordRepository(engine, "current_predictions").query_by_station(
            "SFB1201"
        )
    ) == 1
    assert client.get("/v1/preferences").json() == {
        "buoy": [],
        "tide": ["9414290"],
        "current": ["SFB1201"],
    }


def test_remove(client, wait_idle):
    client.put("/v1/preferences/current/SFB1201")
    wait_idle()

    first = client.delete("/v1/preferences/current/SFB1201")
    second = client.delete("/v1/preferences/current/SFB1201")

    assert first.json()["changed"] is True
    assert first.json()["admitted"] == 0
    assert second.json()["changed"] is False
    assert client.get("/v1/preferences").json()["current"] == []


def test_unknown_kind(client):
    response = client.put("/v1/preferences/satellite/1")

    assert response.status_code == 422
