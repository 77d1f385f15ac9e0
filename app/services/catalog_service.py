"""
app/services/catalog_service.py

Service layer over the surveillance data tree.

Every call scans and reads from disk; nothing is cached between requests.
Operations over a single requested table let NotFound / ParseError
propagate. Operations over many tables catch failures per entry, log them,
and leave the entry out of the result.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Callable, Sequence, TypeVar

from app.config import DataSettings, get_data_settings
from app.domain.surveillance import (
    AnomalyStatus,
    DashboardSummary,
    DirectoryItem,
    DirectoryListing,
    Discovery,
    EntryTable,
    SearchFilters,
    SearchResult,
    TableStatus,
)
from app.logging_utils import log_event
from catalog.errors import CatalogError, PathOutsideRootError, TableNotFoundError
from catalog.images import ImageDirectoryLister
from catalog.reader import TableReader
from catalog.scanner import DirectoryScanner, collation_key
from catalog.timestamps import parse_timestamp
from catalog.types import CatalogEntry, ImageFile, Row

logger = logging.getLogger(__name__)

_T = TypeVar("_T")
_R = TypeVar("_R")

# Columns consulted, in order, when filtering rows by date.
SEARCH_DATE_FIELDS: tuple[str, ...] = ("timestamp", "date", "created_at")


def _unique_sorted(values: Sequence[str]) -> list[str]:
    return sorted(set(values), key=collation_key)


class SurveillanceCatalogService:
    """
    Coordinates scanning, table reads and image listings for route handlers.
    """

    def __init__(
        self,
        *,
        settings: DataSettings,
        reader: TableReader | None = None,
        scanner: DirectoryScanner | None = None,
        image_lister: ImageDirectoryLister | None = None,
    ) -> None:
        self._settings = settings
        self._root = Path(settings.root)
        self._reader = reader or TableReader()
        self._scanner = scanner or DirectoryScanner(
            self._root,
            metadata_filename=settings.metadata_filename,
        )
        self._image_lister = image_lister or ImageDirectoryLister()

    @property
    def root(self) -> Path:
        return self._root

    @property
    def settings(self) -> DataSettings:
        return self._settings

    # ------------------------------------------------------------------
    # Single-resource operations
    # ------------------------------------------------------------------

    def scan(self) -> list[CatalogEntry]:
        return self._scanner.scan()

    def resolve_path(self, relative_path: str) -> Path:
        """
        Resolve *relative_path* under the data root.

        Raises PathOutsideRootError when the path escapes the root.
        """

        root = self._root.resolve()
        candidate = (root / relative_path.lstrip("/")).resolve()
        if candidate != root and root not in candidate.parents:
            raise PathOutsideRootError(f"Path not found: {relative_path}")
        return candidate

    def read_table(self, relative_path: str) -> list[Row]:
        return self._reader.read(self.resolve_path(relative_path))

    def read_gps_log(self) -> list[Row]:
        return self.read_table(self._settings.gps_log_path)

    def read_system_metrics(self) -> list[Row]:
        return self.read_table(self._settings.system_metrics_path)

    def metadata_relative_path(self, session: str, camera: str, anomaly_type: str) -> str:
        return f"{session}/{camera}/{anomaly_type}/{self._settings.metadata_filename}"

    def read_metadata(self, session: str, camera: str, anomaly_type: str) -> list[Row]:
        return self.read_table(self.metadata_relative_path(session, camera, anomaly_type))

    def list_images(self, session: str, camera: str, anomaly_type: str) -> list[ImageFile]:
        try:
            directory = self.resolve_path(f"{session}/{camera}/{anomaly_type}/{self._settings.images_dirname}")
        except PathOutsideRootError:
            return []
        return self._image_lister.list(directory)

    def images_dir_for(self, entry: CatalogEntry) -> Path:
        return entry.absolute_path.parent / self._settings.images_dirname

    def resolve_data_file(self, relative_path: str) -> Path:
        """
        Return the absolute path of an existing file for raw passthrough.
        """

        path = self.resolve_path(relative_path)
        if not path.is_file():
            raise TableNotFoundError(f"File not found: {relative_path}")
        return path

    def list_directory(self, relative_path: str = "") -> DirectoryListing:
        """
        List a directory (directories first, then by name) or stat a file.

        Raises TableNotFoundError when nothing exists at *relative_path*.
        """

        path = self.resolve_path(relative_path)
        try:
            stat = path.stat()
        except OSError as exc:
            raise TableNotFoundError(f"Path not found: {relative_path}") from exc

        if not path.is_dir():
            return DirectoryListing(
                path=relative_path,
                type="file",
                size=stat.st_size,
                modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
            )

        items: list[DirectoryItem] = []
        try:
            children = list(path.iterdir())
        except OSError as exc:
            raise TableNotFoundError(f"Path not found: {relative_path}") from exc

        for child in children:
            try:
                child_stat = child.stat()
            except OSError as exc:
                logger.error("Error reading %s: %s", child.name, exc)
                continue
            items.append(
                DirectoryItem(
                    name=child.name,
                    type="directory" if child.is_dir() else "file",
                    size=child_stat.st_size,
                    modified=datetime.fromtimestamp(child_stat.st_mtime, tz=timezone.utc),
                )
            )

        items.sort(key=lambda item: (item.type != "directory", item.name))
        return DirectoryListing(path=relative_path, type="directory", items=items)

    # ------------------------------------------------------------------
    # Aggregate operations
    # ------------------------------------------------------------------

    def table_status(self, relative_path: str) -> TableStatus:
        """
        Summarise a distinguished table without raising.
        """

        try:
            rows = self.read_table(relative_path)
        except CatalogError as exc:
            return TableStatus(available=False, error=str(exc))
        return TableStatus(
            available=True,
            record_count=len(rows),
            last_record=rows[-1] if rows else None,
        )

    def load_entries(
        self,
        entries: Sequence[CatalogEntry],
        *,
        with_images: bool = False,
    ) -> list[EntryTable]:
        """
        Read the table of every entry, skipping entries that fail.

        Results keep the order of *entries* regardless of completion order.
        """

        def load(entry: CatalogEntry) -> EntryTable | None:
            try:
                rows = self._reader.read(entry.absolute_path)
            except CatalogError as exc:
                log_event(
                    logger,
                    logging.ERROR,
                    "catalog_entry_read_failed",
                    path=entry.absolute_path,
                    error=str(exc),
                )
                return None
            image_count = self._image_lister.count(self.images_dir_for(entry)) if with_images else 0
            return EntryTable(entry=entry, rows=rows, image_count=image_count)

        loaded = self._map(load, entries)
        return [table for table in loaded if table is not None]

    def camera_anomalies(self, camera: str) -> list[EntryTable]:
        entries = [entry for entry in self.scan() if entry.camera == camera]
        return self.load_entries(entries)

    def anomalies_by_type(self, anomaly_type: str) -> list[EntryTable]:
        entries = [entry for entry in self.scan() if entry.anomaly_type == anomaly_type]
        return self.load_entries(entries)

    def discover(self) -> Discovery:
        entries = self.scan()
        structure: dict[str, dict[str, list[str]]] = {}
        for entry in entries:
            cameras = structure.setdefault(entry.session, {})
            cameras.setdefault(entry.camera, []).append(entry.anomaly_type)

        return Discovery(
            sessions=_unique_sorted([entry.session for entry in entries]),
            cameras=_unique_sorted([entry.camera for entry in entries]),
            anomaly_types=_unique_sorted([entry.anomaly_type for entry in entries]),
            structure=structure,
        )

    def dashboard(self) -> DashboardSummary:
        entries = self.scan()
        anomalies: dict[str, dict[str, dict[str, AnomalyStatus]]] = {}
        for table in self.load_entries(entries, with_images=True):
            entry = table.entry
            anomalies.setdefault(entry.session, {}).setdefault(entry.camera, {})[entry.anomaly_type] = AnomalyStatus(
                session=entry.session,
                record_count=table.count,
                image_count=table.image_count,
                last_detection=table.last_record,
            )

        return DashboardSummary(
            generated_at=datetime.now(tz=timezone.utc),
            gps=self.table_status(self._settings.gps_log_path),
            system_metrics=self.table_status(self._settings.system_metrics_path),
            anomalies=anomalies,
            total_metadata_files=len(entries),
        )

    def search(self, filters: SearchFilters) -> SearchResult:
        """
        Filter entries by provenance, then rows by date.

        Only the first ``limit`` matching entries are read. Rows without a
        date value, or whose date cannot be parsed, are kept.

        Raises ValueError for an unparseable ``start_date`` / ``end_date``.
        """

        start = self._parse_bound(filters.start_date, "start_date")
        end = self._parse_bound(filters.end_date, "end_date")

        entries = [
            entry
            for entry in self.scan()
            if (filters.session is None or entry.session == filters.session)
            and (filters.camera is None or entry.camera == filters.camera)
            and (filters.anomaly_type is None or entry.anomaly_type == filters.anomaly_type)
        ]
        tables = self.load_entries(entries[: max(1, filters.limit)])

        if start is not None or end is not None:
            tables = [
                EntryTable(
                    entry=table.entry,
                    rows=[row for row in table.rows if self._row_in_window(row, start, end)],
                    image_count=table.image_count,
                )
                for table in tables
            ]

        return SearchResult(filters=filters, results=tables)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _map(self, func: Callable[[_T], _R], items: Sequence[_T]) -> list[_R]:
        if self._settings.read_workers <= 1 or len(items) <= 1:
            return [func(item) for item in items]
        with ThreadPoolExecutor(max_workers=self._settings.read_workers) as executor:
            return list(executor.map(func, items))

    @staticmethod
    def _parse_bound(value: str | None, name: str) -> datetime | None:
        if value is None or not value.strip():
            return None
        parsed = parse_timestamp(value)
        if parsed is None:
            raise ValueError(f"{name} is not a recognised date: {value!r}")
        return parsed

    @staticmethod
    def _row_in_window(row: Row, start: datetime | None, end: datetime | None) -> bool:
        raw_value = next((row[name] for name in SEARCH_DATE_FIELDS if row.get(name)), None)
        if raw_value is None:
            return True
        recorded_at = parse_timestamp(raw_value)
        if recorded_at is None:
            return True
        if start is not None and recorded_at < start:
            return False
        if end is not None and recorded_at > end:
            return False
        return True


@lru_cache(maxsize=1)
def get_catalog_service() -> SurveillanceCatalogService:
    """
    Build and cache the catalog service from environment settings.
    """

    return SurveillanceCatalogService(settings=get_data_settings())
