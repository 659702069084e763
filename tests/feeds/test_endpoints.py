"""Tests for feed endpoint construction."""

from datetime import date

from core.config import Settings
from feeds.endpoints import (
    FeedEndpoints,
    current_predictions_params,
    current_stations_params,
    prediction_window,
    tide_predictions_params,
    tide_stations_params,
)


def test_default_urls():
    endpoints = FeedEndpoints()

    assert (
        endpoints.buoy_active_stations_url
        == "https://www.ndbc.noaa.gov/activestations.xml"
    )
    assert (
        endpoints.buoy_realtime_directory_url
        == "https://www.ndbc.noaa.gov/data/realtime2/"
    )
    assert (
        endpoints.buoy_std_met_url("46026")
        == "https://www.ndbc.noaa.gov/data/realtime2/46026.txt"
    )
    assert (
        endpoints.buoy_spec_wave_url("46026")
        == "https://www.ndbc.noaa.gov/data/realtime2/46026.spec"
    )
    assert endpoints.coops_stations_url.endswith("/mdapi/prod/webapi/stations.json")
    assert endpoints.coops_predictions_url.endswith("/api/prod/datagetter")


def test_from_settings_strips_trailing_slash():
    settings = Settings(
        ndbc_base_url="http://localhost:9000/",
        coops_mdapi_base_url="http://localhost:9000/mdapi/",
        coops_data_base_url="http://localhost:9000/data/",
    )

    endpoints = FeedEndpoints.from_settings(settings)

    assert endpoints.buoy_active_stations_url == "http://localhost:9000/activestations.xml"
    assert endpoints.coops_stations_url == "http://localhost:9000/mdapi/stations.json"
    assert endpoints.coops_predictions_url == "http://localhost:9000/data"


def test_station_list_params():
    assert tide_stations_params() == {"type": "tidepredictions"}
    assert current_stations_params() == {
        "type": "currentpredictions",
        "units": "metric",
    }


def test_prediction_window_crosses_month_boundaries():
    assert prediction_window(date(2025, 6, 1)) == ("20250525", "20250701")
    assert prediction_window(date(2024, 12, 28)) == ("20241221", "20250127")


def test_tide_prediction_params():
    params = tide_predictions_params("9414290", date(2025, 6, 1))

    assert params == {
        "station": "9414290",
        "product": "predictions",
        "datum": "MLLW",
        "interval": "hilo",
        "units": "metric",
        "time_zone": "gmt",
        "format": "json",
        "begin_date": "20250525",
        "end_date": "20250701",
        "application": "swellsync",
    }


def test_current_prediction_params():
    params = current_predictions_params("SFB1201", date(2025, 6, 1))

    assert params["station"] == "SFB1201"
    assert params["product"] == "currents_predictions"
    assert params["interval"] == "MAX_SLACK"
    assert params["units"] == "metric"
    assert params["begin_date"] == "20250525"
    assert params["end_date"] == "20250701"
    assert "datum" not in params
