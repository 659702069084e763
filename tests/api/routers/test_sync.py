"""Tests for the sync router."""

from feeds import FeedRecordRepository


def test_no_running_tasks(client):
    response = client.get("/v1/sync/tasks")

    assert response.status_code == 200
    assert response.json() == {"tasks": [], "count": 0}


def test_refresh_catalogs(client, wait_idle):
    """All three catalogs are fetched and stored."""
    response = client.post("/v1/sync/catalogs")

    assert response.status_code == 200
    assert response.json() == {"admitted": 3}

    wait_idle()
    engine = client.app.state.engine
    buoys = FeedRecordRepository(engine, "buoy_stations").query_all()
    tides = FeedRecordRepository(engine, "tide_stations").query_all()
    currents = FeedRecordRepository(engine, "current_stations").query_all()
    assert [station["id"] for station in buoys] == ["46026"]
    assert [station["id"] for station in tides] == ["9414290"]
    assert [station["id"] for station in currents] == ["SFB1201"]


def test_catalogs_on_cooldown(client, wait_idle):
    """A second refresh right after success admits nothing."""
    client.post("/v1/sync/catalogs")
    wait_idle()

    assert client.post("/v1/sync/catalogs").json() == {"admitted": 0}
    assert client.post("/v1/sync/catalogs/tide").json() == {"admitted": 0}


def test_cooldown_inspection_and_reset(client, wait_idle):
    client.post("/v1/sync/catalogs/tide")
    wait_idle()

    response = client.get("/v1/sync/cooldowns/tide_stations")
    assert response.status_code == 200
    assert response.json()["key"] == "tide_stations"
    assert response.json()["last_completed"] is not None

    response = client.delete("/v1/sync/cooldowns/tide_stations")
    assert response.status_code == 204

    assert client.get("/v1/sync/cooldowns/tide_stations").json()[
        "last_completed"
    ] is None
    assert client.post("/v1/sync/catalogs/tide").json() == {"admitted": 1}
    wait_idle()


def test_clear_all_cooldowns(client, wait_idle):
    client.post("/v1/sync/catalogs")
    wait_idle()

    assert client.delete("/v1/sync/cooldowns").status_code == 204

    assert client.post("/v1/sync/catalogs").json() == {"admitted": 3}
    wait_idle()


def test_unknown_cooldown(client):
    response = client.get("/v1/sync/cooldowns/never_ran")

    assert response.json() == {"key": "never_ran", "last_completed": None}


def test_refresh_preferred_stations(client, wait_idle):
    assert client.post("/v1/sync/stations").json() == {"admitted": 0}

    client.put("/v1/preferences/tide/9414290")
    wait_idle()
    client.delete("/v1/sync/cooldowns")

    assert client.post("/v1/sync/stations").json() == {"admitted": 1}
    wait_idle()
