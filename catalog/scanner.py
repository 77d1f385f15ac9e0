"""
catalog/scanner.py

Recursive discovery of metadata tables under the data root.

The directory layout is an external convention::

    <root>/<session>/<camera>/<anomaly_type>/metadata.csv

Shallower layouts are accepted and padded with defaults; segments deeper
than the third are ignored when deriving the triple.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from app.logging_utils import log_event
from catalog.types import DEFAULT_ANOMALY_TYPE, UNKNOWN, CatalogEntry

logger = logging.getLogger(__name__)

METADATA_FILENAME = "metadata.csv"


def derive_triple(segments: list[str]) -> tuple[str, str, str]:
    """
    Map the directory segments between root and a table to
    ``(session, camera, anomaly_type)``.
    """

    if len(segments) >= 3:
        return segments[0], segments[1], segments[2]
    if len(segments) == 2:
        return segments[0], segments[1], DEFAULT_ANOMALY_TYPE
    session = segments[0] if segments and segments[0] else UNKNOWN
    return session, UNKNOWN, DEFAULT_ANOMALY_TYPE


def collation_key(value: str) -> tuple[str, str]:
    """
    Case-insensitive ordering key; among names that differ only in case,
    lowercase sorts first (``apple < Apple < Banana``).
    """

    return value.casefold(), value.swapcase()


def _entry_key(entry: CatalogEntry) -> tuple[tuple[str, str], ...]:
    return (
        collation_key(entry.session),
        collation_key(entry.camera),
        collation_key(entry.anomaly_type),
    )


class DirectoryScanner:
    """
    Walks the data root and builds a sorted catalog of metadata tables.

    Unreadable directories are logged and skipped so one bad subtree never
    fails the whole scan. Nothing is cached between calls.
    """

    def __init__(self, root: str | Path, *, metadata_filename: str = METADATA_FILENAME) -> None:
        self._root = Path(root)
        self._metadata_filename = metadata_filename

    @property
    def root(self) -> Path:
        return self._root

    def scan(self) -> list[CatalogEntry]:
        """
        Return one entry per metadata table, ordered by
        session, camera, then anomaly type.
        """

        entries: list[CatalogEntry] = []
        skipped: list[str] = []
        if not self._root.is_dir():
            log_event(logger, logging.WARNING, "catalog_root_missing", root=self._root)
            return entries

        self._scan_directory(self._root, [], entries, skipped, visited=set())
        entries.sort(key=_entry_key)

        log_event(
            logger,
            logging.INFO,
            "catalog_scan_complete",
            root=self._root,
            tables=len(entries),
            skipped_directories=len(skipped),
        )
        return entries

    def _scan_directory(
        self,
        directory: Path,
        segments: list[str],
        entries: list[CatalogEntry],
        skipped: list[str],
        visited: set[Path],
    ) -> None:
        try:
            real_path = directory.resolve()
            if real_path in visited:
                return
            visited.add(real_path)
            with os.scandir(directory) as iterator:
                children = sorted(iterator, key=lambda child: child.name)
        except OSError as exc:
            skipped.append(str(directory))
            log_event(
                logger,
                logging.WARNING,
                "catalog_directory_skipped",
                directory=directory,
                error=str(exc),
            )
            return

        for child in children:
            try:
                is_dir = child.is_dir()
                is_file = not is_dir and child.is_file()
            except OSError as exc:
                log_event(
                    logger,
                    logging.WARNING,
                    "catalog_entry_skipped",
                    path=child.path,
                    error=str(exc),
                )
                continue

            if is_dir:
                self._scan_directory(Path(child.path), [*segments, child.name], entries, skipped, visited)
            elif is_file and child.name == self._metadata_filename:
                entries.append(self._build_entry(Path(child.path), segments))

    def _build_entry(self, path: Path, segments: list[str]) -> CatalogEntry:
        session, camera, anomaly_type = derive_triple(segments)
        logger.debug("Found %s: %s/%s/%s", self._metadata_filename, session, camera, anomaly_type)
        return CatalogEntry(
            absolute_path=path,
            relative_path="/".join([*segments, path.name]),
            session=session,
            camera=camera,
            anomaly_type=anomaly_type,
            depth=len(segments),
        )
