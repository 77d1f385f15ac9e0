"""
geolocation/extractor.py

Heuristic coordinate extraction from heterogeneous table rows.

Each logical field has an ordered list of candidate column names. For every
row the first candidate holding a usable value wins; this is a priority
lookup, not a best match.
"""

from __future__ import annotations

import math
import re
from typing import Final, Iterable, Mapping, Sequence

from catalog.types import Row
from geolocation.types import GPSPoint

LATITUDE_FIELDS: Final[tuple[str, ...]] = (
    "latitude",
    "lat",
    "gps_lat",
    "gps_latitude",
    "y_coord",
    "y",
)

LONGITUDE_FIELDS: Final[tuple[str, ...]] = (
    "longitude",
    "lng",
    "lon",
    "gps_lng",
    "gps_lon",
    "gps_longitude",
    "x_coord",
    "x",
)

TIMESTAMP_FIELDS: Final[tuple[str, ...]] = (
    "timestamp",
    "time",
    "datetime",
    "date",
    "created_at",
    "gps_time",
)

LATITUDE_RANGE: Final[tuple[float, float]] = (-90.0, 90.0)
LONGITUDE_RANGE: Final[tuple[float, float]] = (-180.0, 180.0)

# Plain decimal or exponent notation; no digit separators, hex or nan/inf.
_NUMBER_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?",
    re.ASCII,
)


def _parse_number(value: str | None) -> float | None:
    if value is None:
        return None
    raw_value = str(value).strip()
    if not _NUMBER_PATTERN.fullmatch(raw_value):
        return None
    number = float(raw_value)
    if not math.isfinite(number):
        return None
    return number


def first_numeric(row: Mapping[str, str], candidates: Sequence[str]) -> float | None:
    """
    Return the value of the first candidate column that parses as a number.
    """

    for name in candidates:
        number = _parse_number(row.get(name))
        if number is not None:
            return number
    return None


def first_text(row: Mapping[str, str], candidates: Sequence[str]) -> str | None:
    """
    Return the first non-blank candidate value, unmodified.
    """

    for name in candidates:
        value = row.get(name)
        if value is not None and str(value).strip():
            return value
    return None


def in_range(latitude: float, longitude: float) -> bool:
    lat_min, lat_max = LATITUDE_RANGE
    lng_min, lng_max = LONGITUDE_RANGE
    return lat_min <= latitude <= lat_max and lng_min <= longitude <= lng_max


class GPSExtractor:
    """
    Converts table rows into GPS points.

    Rows without both coordinates, or with coordinates out of range, are
    skipped silently. No I/O; input rows are never mutated.
    """

    def __init__(
        self,
        *,
        latitude_fields: Sequence[str] = LATITUDE_FIELDS,
        longitude_fields: Sequence[str] = LONGITUDE_FIELDS,
        timestamp_fields: Sequence[str] = TIMESTAMP_FIELDS,
    ) -> None:
        self._latitude_fields = tuple(latitude_fields)
        self._longitude_fields = tuple(longitude_fields)
        self._timestamp_fields = tuple(timestamp_fields)

    def extract(
        self,
        rows: Iterable[Row],
        session: str,
        camera: str,
        anomaly_type: str,
    ) -> list[GPSPoint]:
        points: list[GPSPoint] = []
        for index, row in enumerate(rows):
            latitude = first_numeric(row, self._latitude_fields)
            longitude = first_numeric(row, self._longitude_fields)
            if latitude is None or longitude is None:
                continue
            if not in_range(latitude, longitude):
                continue

            points.append(
                GPSPoint(
                    latitude=latitude,
                    longitude=longitude,
                    timestamp=first_text(row, self._timestamp_fields),
                    session=session,
                    camera=camera,
                    anomaly_type=anomaly_type,
                    record_index=index,
                    original_record=dict(row),
                )
            )
        return points
