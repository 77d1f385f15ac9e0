"""
tests/test_table_reader.py

TableReader: header-keyed rows, NotFound before open, ParseError on a
broken stream, and tolerance for ragged rows.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from catalog.errors import CatalogError, TableNotFoundError, TableParseError
from catalog.reader import TableReader
from tests.conftest import write_csv


@pytest.fixture()
def reader() -> TableReader:
    return TableReader()


def test_rows_are_keyed_by_header_in_file_order(reader: TableReader, tmp_path: Path) -> None:
    path = write_csv(tmp_path / "metadata.csv", ["id,label", "1,person", "2,vehicle"])

    rows = reader.read(path)

    assert rows == [{"id": "1", "label": "person"}, {"id": "2", "label": "vehicle"}]


def test_values_are_not_coerced(reader: TableReader, tmp_path: Path) -> None:
    path = write_csv(tmp_path / "metadata.csv", ["lat,flag", "10.50,true"])

    row = reader.read(path)[0]

    assert row["lat"] == "10.50"
    assert row["flag"] == "true"


def test_missing_file_raises_not_found(reader: TableReader, tmp_path: Path) -> None:
    with pytest.raises(TableNotFoundError):
        reader.read(tmp_path / "absent.csv")


def test_directory_is_not_a_table(reader: TableReader, tmp_path: Path) -> None:
    with pytest.raises(TableNotFoundError):
        reader.read(tmp_path)


def test_invalid_encoding_raises_parse_error(reader: TableReader, tmp_path: Path) -> None:
    path = tmp_path / "metadata.csv"
    path.write_bytes(b"id,label\n1,\xff\xfe\xfa\n")

    with pytest.raises(TableParseError):
        reader.read(path)


def test_errors_share_catalog_base(reader: TableReader, tmp_path: Path) -> None:
    with pytest.raises(CatalogError):
        reader.read(tmp_path / "absent.csv")


def test_short_rows_omit_missing_columns(reader: TableReader, tmp_path: Path) -> None:
    path = write_csv(tmp_path / "metadata.csv", ["a,b,c", "1,2"])

    assert reader.read(path) == [{"a": "1", "b": "2"}]


def test_long_rows_keep_surplus_values_under_positional_keys(reader: TableReader, tmp_path: Path) -> None:
    path = write_csv(tmp_path / "metadata.csv", ["a,b", "1,2,3,4"])

    assert reader.read(path) == [{"a": "1", "b": "2", "_2": "3", "_3": "4"}]


def test_byte_order_mark_is_stripped(reader: TableReader, tmp_path: Path) -> None:
    path = tmp_path / "metadata.csv"
    path.write_bytes("\ufefflatitude,longitude\n1,2\n".encode("utf-8"))

    assert reader.read(path) == [{"latitude": "1", "longitude": "2"}]


def test_header_only_file_has_no_rows(reader: TableReader, tmp_path: Path) -> None:
    path = write_csv(tmp_path / "metadata.csv", ["latitude,longitude"])

    assert reader.read(path) == []


def test_every_call_reads_from_disk(reader: TableReader, tmp_path: Path) -> None:
    path = write_csv(tmp_path / "metadata.csv", ["id", "1"])
    assert len(reader.read(path)) == 1

    write_csv(path, ["id", "1", "2"])

    assert len(reader.read(path)) == 2
