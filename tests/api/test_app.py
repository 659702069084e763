"""Tests for FastAPI application."""


def test_docs_endpoint(client):
    """Test that docs endpoint is accessible."""
    response = client.get("/docs")
    assert response.status_code == 200
    assert "swagger-ui" in response.text


def test_openapi_schema(client):
    """Test that OpenAPI schema is accessible."""
    response = client.get("/openapi.json")
    assert response.status_code == 200

    schema = response.json()
    assert schema["info"]["title"] == "swellsync API"
    assert schema["info"]["version"] == "1.0.0"
    assert "/v1/sync/catalogs" in schema["paths"]
    assert "/v1/preferences/{kind}/{station_id}" in schema["paths"]


def test_cors_headers(client):
    """Test CORS headers are set."""
    response = client.get("/health", headers={"Origin": "http://localhost:3000"})
    assert response.status_code == 200
    assert "access-control-allow-origin" in response.headers


def test_services_on_app_state(client):
    """Lifespan wires the sync services into app state."""
    state = client.app.state

    assert state.settings.is_testing is True
    assert state.scheduler.is_shutdown is False
    assert state.sync_manager.scheduler is state.scheduler
    assert state.periodic_manager is None


def test_scheduler_shut_down_on_exit(monkeypatch, tmp_path):
    """Leaving the lifespan stops accepting work."""
    from fastapi.testclient import TestClient

    from api.app import create_app

    monkeypatch.setenv("SWELLSYNC_ENV", "testing")
    monkeypatch.setenv("SWELLSYNC_DB_PATH", str(tmp_path / "exit.db"))

    with TestClient(create_app()) as client:
        scheduler = client.app.state.scheduler

    assert scheduler.is_shutdown is True
