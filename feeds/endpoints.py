"""Remote data source URLs."""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Final

from core.config import Settings

APPLICATION_NAME: Final[str] = "swellsync"

# Predictions cover a week of history and a month ahead
PREDICTION_DAYS_BACK: Final[int] = 7
PREDICTION_DAYS_AHEAD: Final[int] = 30
PREDICTION_DATE_FORMAT: Final[str] = "%Y%m%d"


@dataclass(frozen=True)
class FeedEndpoints:
    """Base URLs of the NOAA NDBC and CO-OPS services."""

    ndbc_base_url: str = "https://www.ndbc.noaa.gov"
    coops_mdapi_base_url: str = "https://api.tidesandcurrents.noaa.gov/mdapi/prod/webapi"
    coops_data_base_url: str = (
        "https://api.tidesandcurrents.noaa.gov/api/prod/datagetter"
    )

    @classmethod
    def from_settings(cls, settings: Settings) -> "FeedEndpoints":
        return cls(
            ndbc_base_url=settings.ndbc_base_url.rstrip("/"),
            coops_mdapi_base_url=settings.coops_mdapi_base_url.rstrip("/"),
            coops_data_base_url=settings.coops_data_base_url.rstrip("/"),
        )

    # NDBC

    @property
    def buoy_active_stations_url(self) -> str:
        return f"{self.ndbc_base_url}/activestations.xml"

    @property
    def buoy_realtime_directory_url(self) -> str:
        return f"{self.ndbc_base_url}/data/realtime2/"

    def buoy_std_met_url(self, station_id: str) -> str:
        return f"{self.ndbc_base_url}/data/realtime2/{station_id}.txt"

    def buoy_spec_wave_url(self, station_id: str) -> str:
        return f"{self.ndbc_base_url}/data/realtime2/{station_id}.spec"

    # CO-OPS

    @property
    def coops_stations_url(self) -> str:
        return f"{self.coops_mdapi_base_url}/stations.json"

    @property
    def coops_predictions_url(self) -> str:
        return self.coops_data_base_url


def tide_stations_params() -> dict[str, str]:
    return {"type": "tidepredictions"}


def current_stations_params() -> dict[str, str]:
    return {"type": "currentpredictions", "units": "metric"}


def prediction_window(today: date) -> tuple[str, str]:
    """Return the (begin_date, end_date) window around ``today``."""
    begin = today - timedelta(days=PREDICTION_DAYS_BACK)
    end = today + timedelta(days=PREDICTION_DAYS_AHEAD)
    return begin.strftime(PREDICTION_DATE_FORMAT), end.strftime(PREDICTION_DATE_FORMAT)


def tide_predictions_params(station_id: str, today: date) -> dict[str, str]:
    """High/low tide predictions in metres relative to MLLW, GMT."""
    begin_date, end_date = prediction_window(today)
    return {
        "station": station_id,
        "product": "predictions",
        "datum": "MLLW",
        "interval": "hilo",
        "units": "metric",
        "time_zone": "gmt",
        "format": "json",
        "begin_date": begin_date,
        "end_date": end_date,
        "application": APPLICATION_NAME,
    }


def current_predictions_params(station_id: str, today: date) -> dict[str, str]:
    """Flood, ebb and slack current predictions in cm/s, GMT."""
    begin_date, end_date = prediction_window(today)
    return {
        "station": station_id,
        "product": "currents_predictions",
        "interval": "MAX_SLACK",
        "units": "metric",
        "time_zone": "gmt",
        "format": "json",
        "begin_date": begin_date,
        "end_date": end_date,
        "application": APPLICATION_NAME,
    }
