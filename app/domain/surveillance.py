"""
app/domain/surveillance.py

Domain models returned by the surveillance catalog service.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from catalog.types import CatalogEntry, Row


@dataclass(frozen=True)
class EntryTable:
    """
    One catalog entry together with its loaded rows.
    """

    entry: CatalogEntry
    rows: list[Row]
    image_count: int = 0

    @property
    def count(self) -> int:
        return len(self.rows)

    @property
    def last_record(self) -> Row | None:
        return self.rows[-1] if self.rows else None


@dataclass(frozen=True)
class TableStatus:
    """
    Availability summary of one distinguished table.
    """

    available: bool
    record_count: int = 0
    last_record: Row | None = None
    error: str | None = None


@dataclass(frozen=True)
class AnomalyStatus:
    """
    Dashboard summary of one metadata table.
    """

    session: str
    record_count: int
    image_count: int
    last_detection: Row | None = None


@dataclass(frozen=True)
class DashboardSummary:
    """
    Dashboard snapshot across every table under the data root.

    ``anomalies`` is keyed session -> camera -> anomaly type.
    """

    generated_at: datetime
    gps: TableStatus
    system_metrics: TableStatus
    anomalies: dict[str, dict[str, dict[str, AnomalyStatus]]]
    total_metadata_files: int


@dataclass(frozen=True)
class SearchFilters:
    """
    Normalised search parameters.
    """

    session: str | None = None
    camera: str | None = None
    anomaly_type: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    limit: int = 100


@dataclass(frozen=True)
class SearchResult:
    """
    Search outcome: matching entries with their date-filtered rows.
    """

    filters: SearchFilters
    results: list[EntryTable] = field(default_factory=list)

    @property
    def total_records(self) -> int:
        return sum(result.count for result in self.results)


@dataclass(frozen=True)
class Discovery:
    """
    Unique sessions, cameras and anomaly types found by a scan.

    ``structure`` is keyed session -> camera -> sorted anomaly types.
    """

    sessions: list[str]
    cameras: list[str]
    anomaly_types: list[str]
    structure: dict[str, dict[str, list[str]]]


@dataclass(frozen=True)
class DirectoryItem:
    """
    One child of a listed directory.
    """

    name: str
    type: str
    size: int
    modified: datetime


@dataclass(frozen=True)
class DirectoryListing:
    """
    Listing of a directory, or the stat of a single file.
    """

    path: str
    type: str
    items: list[DirectoryItem] = field(default_factory=list)
    size: int | None = None
    modified: datetime | None = None
