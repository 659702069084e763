"""Fixtures for API tests: the app wired to a local mock of NOAA."""

import json
import time
from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from pytest_httpserver import HTTPServer
from werkzeug.wrappers import Request, Response

from api.app import create_app

LAST_MODIFIED = "Sun, 01 Jun 2025 11:55:00 GMT"

ACTIVE_STATIONS_XML = b"""<stations>
  <station id="46026" lat="37.755" lon="-122.839" name="SF" type="buoy" met="y"/>
  <station id="46042" lat="36.785" lon="-122.396" name="Monterey" type="buoy"/>
</stations>"""

REALTIME_LISTING = b"""<html><body>
<a href="46026.txt">46026.txt</a><a href="46026.spec">46026.spec</a>
</body></html>"""

STD_MET_TXT = (
    b"2025 06 01 12 00 300 8.0 10.0 2.1 11 7.4 290 1015.2 13.1 12.8 11.0 MM MM MM\n"
)
SPEC_WAVE_TXT = b"2025 06 01 12 00 2.1 1.8 11.4 0.9 5.0 WNW NW AVERAGE 7.4 290\n"

TIDE_STATIONS = {
    "stations": [{"id": "9414290", "name": "San Francisco", "lat": 37.8, "lng": -122.4}]
}
CURRENT_STATIONS = {
    "stations": [{"id": "SFB1201", "name": "Golden Gate", "lat": 37.8, "lng": -122.4}]
}


def _stations_handler(request: Request) -> Response:
    payload = (
        TIDE_STATIONS
        if request.args.get("type") == "tidepredictions"
        else CURRENT_STATIONS
    )
    return Response(json.dumps(payload), content_type="application/json")


def _predictions_handler(request: Request) -> Response:
    if request.args.get("product") == "predictions":
        payload: dict = {
            "predictions": [{"t": "2025-06-01 03:12", "v": "1.6", "type": "H"}]
        }
    else:
        payload = {
            "current_predictions": {
                "cp": [
                    {
                        "Time": "2025-06-01 01:06",
                        "Type": "flood",
                        "Velocity_Major": 145.2,
                        "meanFloodDir": 68,
                        "meanEbbDir": 245,
                    }
                ]
            }
        }
    return Response(json.dumps(payload), content_type="application/json")


@pytest.fixture
def noaa_server(httpserver: HTTPServer) -> HTTPServer:
    """Serve every feed the sync manager can request."""
    httpserver.expect_request("/activestations.xml").respond_with_data(
        ACTIVE_STATIONS_XML, headers={"Last-Modified": LAST_MODIFIED}
    )
    httpserver.expect_request("/data/realtime2/").respond_with_data(REALTIME_LISTING)
    httpserver.expect_request("/data/realtime2/46026.txt").respond_with_data(
        STD_MET_TXT, headers={"Last-Modified": LAST_MODIFIED}
    )
    httpserver.expect_request("/data/realtime2/46026.spec").respond_with_data(
        SPEC_WAVE_TXT, headers={"Last-Modified": LAST_MODIFIED}
    )
    httpserver.expect_request("/mdapi/stations.json").respond_with_handler(
        _stations_handler
    )
    httpserver.expect_request("/datagetter").respond_with_handler(
        _predictions_handler
    )
    return httpserver


@pytest.fixture
def client(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, noaa_server: HTTPServer
) -> Generator[TestClient, None, None]:
    """Test client with started services, pointed at the mock server."""
    base = noaa_server.url_for("/").rstrip("/")
    monkeypatch.setenv("SWELLSYNC_ENV", "testing")
    monkeypatch.setenv("SWELLSYNC_DB_PATH", str(tmp_path / "api.test.db"))
    monkeypatch.setenv("SWELLSYNC_NDBC_BASE_URL", base)
    monkeypatch.setenv("SWELLSYNC_COOPS_MDAPI_BASE_URL", f"{base}/mdapi")
    monkeypatch.setenv("SWELLSYNC_COOPS_DATA_BASE_URL", f"{base}/datagetter")
    monkeypatch.setenv("SWELLSYNC_MAX_WORKERS", "2")

    with TestClient(create_app()) as test_client:
        yield test_client


def wait_until_idle(client: TestClient, timeout: float = 5.0) -> None:
    """Poll until no sync task is running."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if client.get("/v1/sync/tasks").json()["count"] == 0:
            return
        time.sleep(0.02)
    raise AssertionError("Sync tasks did not finish in time")


@pytest.fixture
def wait_idle(client: TestClient):
    """Wait for the client's background tasks to finish."""
    return lambda: wait_until_idle(client)
