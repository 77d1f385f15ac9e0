"""
geolocation/types.py

GPS value objects shared by the extractor and the aggregator.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from catalog.types import Row

SOURCE_GPS_LOG = "gps_log.csv"
SOURCE_METADATA = "metadata.csv"


@dataclass(frozen=True)
class GPSPoint:
    """
    One in-range coordinate pair with its provenance.

    ``record_index`` is the position of the originating row in its source
    table. ``source`` is only set once points from several sources are merged.
    """

    latitude: float
    longitude: float
    timestamp: str | None
    session: str
    camera: str
    anomaly_type: str
    record_index: int
    original_record: Row = field(default_factory=dict, compare=False)
    source: str | None = None

    def with_source(self, source: str) -> "GPSPoint":
        return replace(self, source=source)


@dataclass(frozen=True)
class HeatmapBucket:
    """
    Aggregation cell keyed by rounded coordinates.
    """

    latitude: float
    longitude: float
    count: int
    sessions: frozenset[str]
    cameras: frozenset[str]
    anomaly_types: frozenset[str]


@dataclass(frozen=True)
class SourceSummary:
    """
    Per-source outcome of a GPS merge.
    """

    source: str
    count: int
    error: str | None = None


@dataclass(frozen=True)
class MergedGPS:
    """
    Merged, best-effort chronologically sorted points plus per-source counts.
    """

    points: list[GPSPoint]
    sources: list[SourceSummary]
