"""Decoders turning raw NOAA payloads into records.

Every decoder takes the raw response body and returns plain dictionaries
(or, for the directory listing, a set of station ids). Malformed payloads
raise ``DecodeError``.
"""

import json
import re
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, Final
from xml.etree import ElementTree

from core.log import get_logger
from core.types import JsonRecord

logger = get_logger(__name__)

NDBC_MISSING_VALUE: Final[str] = "MM"
STD_MET_COLUMNS: Final[int] = 19
SPEC_WAVE_COLUMNS: Final[int] = 15
COOPS_TIMESTAMP_FORMAT: Final[str] = "%Y-%m-%d %H:%M"

HREF_PATTERN = re.compile(r'href="([^"]+)"')
STD_MET_EXTENSION: Final[str] = ".txt"
SPEC_WAVE_EXTENSION: Final[str] = ".spec"


class DecodeError(Exception):
    """Raised when a payload does not have the expected shape."""

    pass


# NDBC active stations


def decode_buoy_stations(body: bytes) -> list[JsonRecord]:
    """Decode the NDBC ``activestations.xml`` catalog."""
    try:
        root = ElementTree.fromstring(body)
    except ElementTree.ParseError as e:
        raise DecodeError(f"Failed to parse stations XML: {e}") from e

    return [_buoy_station(element) for element in root.iter("station")]


def _buoy_station(element: ElementTree.Element) -> JsonRecord:
    station_id = element.get("id")
    if not station_id:
        raise DecodeError("Station element without id")
    return {
        "id": station_id,
        "latitude": _required_float(element.get("lat"), "lat"),
        "longitude": _required_float(element.get("lon"), "lon"),
        "elevation": _optional_float(element.get("elev")),
        "name": element.get("name"),
        "owner": element.get("owner"),
        "program": element.get("pgm"),
        "type": element.get("type"),
        "has_met": _yes_no(element.get("met")),
        "has_currents": _yes_no(element.get("currents")),
        "has_water_quality": _yes_no(element.get("waterquality")),
        "has_dart": _yes_no(element.get("dart")),
    }


def decode_realtime_directory(body: bytes) -> set[str]:
    """Return station ids listing both std met and spectral wave files."""
    std_met: set[str] = set()
    spec_wave: set[str] = set()
    for href in HREF_PATTERN.findall(body.decode("utf-8", errors="replace")):
        if href.endswith(STD_MET_EXTENSION):
            std_met.add(href[: -len(STD_MET_EXTENSION)])
        elif href.endswith(SPEC_WAVE_EXTENSION):
            spec_wave.add(href[: -len(SPEC_WAVE_EXTENSION)])
    return std_met & spec_wave


# NDBC realtime2 tables


class _Columns:
    """Sequential reader over one whitespace-split NDBC row."""

    def __init__(self, parts: list[str]):
        self.parts = parts
        self.index = 0

    def _next(self) -> str:
        value = self.parts[self.index]
        self.index += 1
        return value

    def next_int(self) -> int:
        return int(self._next())

    def next_optional_int(self) -> int | None:
        value = self._next()
        return None if value == NDBC_MISSING_VALUE else int(value)

    def next_optional_float(self) -> float | None:
        value = self._next()
        return None if value == NDBC_MISSING_VALUE else float(value)

    def next_optional_str(self) -> str | None:
        value = self._next()
        return None if value == NDBC_MISSING_VALUE else value

    def observed_at(self) -> int:
        year, month, day, hour, minute = (self.next_int() for _ in range(5))
        moment = datetime(year, month, day, hour, minute, tzinfo=UTC)
        return int(moment.timestamp())


def _decode_ndbc_table(
    body: bytes, columns: int, row: Callable[[_Columns], JsonRecord]
) -> list[JsonRecord]:
    records = []
    for line_number, line in enumerate(
        body.decode("utf-8", errors="replace").splitlines(), start=1
    ):
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        parts = line.split()
        if len(parts) < columns:
            raise DecodeError(
                f"Line {line_number}: expected {columns} columns but found {len(parts)}"
            )
        try:
            records.append(row(_Columns(parts)))
        except ValueError as e:
            raise DecodeError(f"Line {line_number}: {e}") from e
    return records


def _std_met_row(columns: _Columns) -> JsonRecord:
    return {
        "epoch_seconds": columns.observed_at(),
        "wind_direction": columns.next_optional_int(),
        "wind_speed": columns.next_optional_float(),
        "gust_speed": columns.next_optional_float(),
        "wave_height": columns.next_optional_float(),
        "dominant_wave_period": columns.next_optional_float(),
        "average_wave_period": columns.next_optional_float(),
        "mean_wave_direction": columns.next_optional_int(),
        "pressure": columns.next_optional_float(),
        "air_temperature": columns.next_optional_float(),
        "water_temperature": columns.next_optional_float(),
        "dew_point": columns.next_optional_float(),
        "visibility": columns.next_optional_float(),
        "pressure_tendency": columns.next_optional_float(),
        "tide": columns.next_optional_float(),
    }


def _spec_wave_row(columns: _Columns) -> JsonRecord:
    return {
        "epoch_seconds": columns.observed_at(),
        "wave_height": columns.next_optional_float(),
        "swell_height": columns.next_optional_float(),
        "swell_period": columns.next_optional_float(),
        "wind_wave_height": columns.next_optional_float(),
        "wind_wave_period": columns.next_optional_float(),
        "swell_direction": columns.next_optional_str(),
        "wind_wave_direction": columns.next_optional_str(),
        "steepness": columns.next_optional_str(),
        "average_wave_period": columns.next_optional_float(),
        "mean_wave_direction": columns.next_optional_int(),
    }


def decode_buoy_std_met(body: bytes) -> list[JsonRecord]:
    """Decode a realtime2 standard meteorological (``.txt``) file."""
    return _decode_ndbc_table(body, STD_MET_COLUMNS, _std_met_row)


def decode_buoy_spec_wave(body: bytes) -> list[JsonRecord]:
    """Decode a realtime2 spectral wave summary (``.spec``) file."""
    return _decode_ndbc_table(body, SPEC_WAVE_COLUMNS, _spec_wave_row)


# CO-OPS


def _load_json(body: bytes) -> Any:
    try:
        return json.loads(body)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Invalid JSON: {e}") from e


def _json_list(payload: Any, *path: str) -> list[dict[str, Any]]:
    node = payload
    for name in path:
        if not isinstance(node, dict) or name not in node:
            # CO-OPS reports bad requests as {"error": {"message": ...}}
            message = payload.get("error") if isinstance(payload, dict) else None
            raise DecodeError(f"Missing '{name}' in response: {message or 'no data'}")
        node = node[name]
    if not isinstance(node, list):
        raise DecodeError(f"Expected a list at '{'.'.join(path)}'")
    return node


def decode_tide_stations(body: bytes) -> list[JsonRecord]:
    """Decode the MDAPI tide prediction station list."""
    stations = []
    for item in _json_list(_load_json(body), "stations"):
        try:
            stations.append(
                {
                    "id": str(item["id"]),
                    "name": item.get("name") or "",
                    "state": item.get("state") or "",
                    "latitude": float(item["lat"]),
                    "longitude": float(item["lng"]),
                    "type": item.get("type") or "",
                    "reference_id": item.get("reference_id") or "",
                    "time_meridian": item.get("timemeridian"),
                    "timezone_correction": item.get("timezonecorr") or 0,
                    "tide_type": item.get("tideType") or "",
                    "timezone": item.get("timezone"),
                    "observes_dst": item.get("observedst"),
                }
            )
        except (KeyError, TypeError, ValueError) as e:
            raise DecodeError(f"Invalid tide station entry: {e}") from e
    return stations


def decode_current_stations(body: bytes) -> list[JsonRecord]:
    """Decode the MDAPI current prediction station list."""
    stations = []
    for item in _json_list(_load_json(body), "stations"):
        try:
            stations.append(
                {
                    "id": str(item["id"]),
                    "name": item.get("name") or "",
                    "latitude": float(item["lat"]),
                    "longitude": float(item["lng"]),
                    "type": item.get("type") or "",
                    "current_bin": item.get("currbin"),
                    "depth": item.get("depth"),
                    "depth_type": item.get("depthType") or "",
                    "timezone_offset": item.get("timezone_offset") or "",
                }
            )
        except (KeyError, TypeError, ValueError) as e:
            raise DecodeError(f"Invalid current station entry: {e}") from e
    return stations


def _coops_epoch_seconds(timestamp: str) -> int:
    moment = datetime.strptime(timestamp, COOPS_TIMESTAMP_FORMAT).replace(tzinfo=UTC)
    return int(moment.timestamp())


def decode_tide_predictions(body: bytes) -> list[JsonRecord]:
    """Decode high/low tide predictions."""
    predictions = []
    for item in _json_list(_load_json(body), "predictions"):
        try:
            predictions.append(
                {
                    "timestamp": item["t"],
                    "epoch_seconds": _coops_epoch_seconds(item["t"]),
                    "value": float(item["v"]),
                    "type": item["type"],
                }
            )
        except (KeyError, TypeError, ValueError) as e:
            raise DecodeError(f"Invalid tide prediction entry: {e}") from e
    return predictions


def decode_current_predictions(body: bytes) -> list[JsonRecord]:
    """Decode max flood, max ebb and slack current predictions."""
    predictions = []
    for item in _json_list(_load_json(body), "current_predictions", "cp"):
        try:
            predictions.append(
                {
                    "timestamp": item["Time"],
                    "epoch_seconds": _coops_epoch_seconds(item["Time"]),
                    "type": item["Type"],
                    "velocity_major": float(item["Velocity_Major"]),
                    "mean_flood_direction": float(item["meanFloodDir"]),
                    "mean_ebb_direction": float(item["meanEbbDir"]),
                    "bin": item.get("Bin"),
                    "depth": _optional_float(item.get("Depth")),
                }
            )
        except (KeyError, TypeError, ValueError) as e:
            raise DecodeError(f"Invalid current prediction entry: {e}") from e
    return predictions


def _required_float(value: str | None, name: str) -> float:
    if not value:
        raise DecodeError(f"Missing required attribute: {name}")
    try:
        return float(value)
    except ValueError as e:
        raise DecodeError(f"Invalid value for {name}: {value}") from e


def _optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _yes_no(value: str | None) -> bool:
    return (value or "").lower() == "y"
