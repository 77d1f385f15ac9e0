"""
catalog/reader.py

CSV table reader for metadata, GPS log and system metric tables.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from catalog.errors import TableNotFoundError, TableParseError
from catalog.types import Row

logger = logging.getLogger(__name__)


class TableReader:
    """
    Reads one CSV file into a list of rows keyed by the header line.

    Values are returned exactly as stored; type coercion is left to the
    consumers. Rows shorter than the header omit the missing columns and
    surplus values are kept under positional ``_<index>`` keys. Every call
    reads from disk.
    """

    def __init__(self, *, encoding: str = "utf-8-sig") -> None:
        self._encoding = encoding

    def read(self, path: str | Path) -> list[Row]:
        """
        Read *path* and return its rows in file order.

        Raises:
            TableNotFoundError: The file does not exist.
            TableParseError:    The stream failed while being read.
        """

        table_path = Path(path)
        if not table_path.is_file():
            raise TableNotFoundError(f"File not found: {table_path}")

        try:
            with table_path.open("r", encoding=self._encoding, newline="") as handle:
                reader = csv.DictReader(handle)
                rows = [self._normalize_row(raw_row, reader.fieldnames or []) for raw_row in reader]
        except FileNotFoundError as exc:
            raise TableNotFoundError(f"File not found: {table_path}") from exc
        except (OSError, UnicodeDecodeError, csv.Error) as exc:
            raise TableParseError(f"Failed to read {table_path}: {exc}") from exc

        logger.debug("Read %d rows from %s", len(rows), table_path)
        return rows

    @staticmethod
    def _normalize_row(raw_row: dict, headers: list[str]) -> Row:
        row: Row = {
            key: value
            for key, value in raw_row.items()
            if key is not None and value is not None
        }
        extras = raw_row.get(None) or []
        for offset, value in enumerate(extras):
            row[f"_{len(headers) + offset}"] = value
        return row
