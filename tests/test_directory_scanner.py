"""
tests/test_directory_scanner.py

DirectoryScanner: path-to-triple derivation, ordering, and tolerance of
unreadable subtrees.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from catalog import scanner as scanner_module
from catalog.scanner import DirectoryScanner, collation_key, derive_triple
from tests.conftest import write_csv


def _touch_table(root: Path, *segments: str) -> None:
    write_csv(root.joinpath(*segments, "metadata.csv"), ["id", "1"])


# ---------------------------------------------------------------------------
# derive_triple
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "segments, expected",
    [
        (["s", "c", "a"], ("s", "c", "a")),
        (["s", "c", "a", "deeper", "still"], ("s", "c", "a")),
        (["s", "c"], ("s", "c", "general")),
        (["s"], ("s", "unknown", "general")),
        ([], ("unknown", "unknown", "general")),
    ],
)
def test_derive_triple(segments: list[str], expected: tuple[str, str, str]) -> None:
    assert derive_triple(segments) == expected


# ---------------------------------------------------------------------------
# scan
# ---------------------------------------------------------------------------


class TestScan:
    def test_three_segment_paths_yield_full_triple(self, tmp_path: Path) -> None:
        _touch_table(tmp_path, "F2", "cam1", "person")

        [entry] = DirectoryScanner(tmp_path).scan()

        assert entry.key == ("F2", "cam1", "person")
        assert entry.depth == 3
        assert entry.relative_path == "F2/cam1/person/metadata.csv"
        assert entry.absolute_path == tmp_path / "F2" / "cam1" / "person" / "metadata.csv"

    def test_two_segment_paths_default_to_general(self, tmp_path: Path) -> None:
        _touch_table(tmp_path, "F2", "4kcam")

        [entry] = DirectoryScanner(tmp_path).scan()

        assert entry.key == ("F2", "4kcam", "general")
        assert entry.depth == 2

    def test_shallow_tables_use_unknown_defaults(self, tmp_path: Path) -> None:
        _touch_table(tmp_path, "F2")
        _touch_table(tmp_path)

        keys = {entry.key for entry in DirectoryScanner(tmp_path).scan()}

        assert keys == {("F2", "unknown", "general"), ("unknown", "unknown", "general")}

    def test_deep_tables_keep_third_segment_only(self, tmp_path: Path) -> None:
        _touch_table(tmp_path, "s", "c", "a", "nested")

        [entry] = DirectoryScanner(tmp_path).scan()

        assert entry.key == ("s", "c", "a")
        assert entry.depth == 4

    def test_only_reserved_filename_is_recognised(self, tmp_path: Path) -> None:
        _touch_table(tmp_path, "s", "c", "a")
        write_csv(tmp_path / "s" / "c" / "a" / "metadata_old.csv", ["id", "1"])
        write_csv(tmp_path / "s" / "c" / "a" / "METADATA.CSV", ["id", "1"])
        (tmp_path / "s" / "c" / "a" / "frame.jpg").write_bytes(b"\xff\xd8")

        entries = DirectoryScanner(tmp_path).scan()

        assert [entry.relative_path for entry in entries] == ["s/c/a/metadata.csv"]

    def test_custom_reserved_filename(self, tmp_path: Path) -> None:
        write_csv(tmp_path / "s" / "c" / "detections.csv", ["id", "1"])

        entries = DirectoryScanner(tmp_path, metadata_filename="detections.csv").scan()

        assert [entry.key for entry in entries] == [("s", "c", "general")]

    def test_results_are_sorted_by_session_camera_anomaly_type(self, tmp_path: Path) -> None:
        for segments in [
            ("floMobility123_F1", "cam1", "vehicle"),
            ("F2", "cam1", "person"),
            ("F2", "4kcam", "smoke"),
            ("F2", "cam1", "animal"),
            ("floMobility123_F1", "argus0", "person"),
        ]:
            _touch_table(tmp_path, *segments)

        keys = [entry.key for entry in DirectoryScanner(tmp_path).scan()]

        assert keys == [
            ("F2", "4kcam", "smoke"),
            ("F2", "cam1", "animal"),
            ("F2", "cam1", "person"),
            ("floMobility123_F1", "argus0", "person"),
            ("floMobility123_F1", "cam1", "vehicle"),
        ]

    def test_ordering_ignores_case(self, tmp_path: Path) -> None:
        for segments in [
            ("cherry", "cam1", "a"),
            ("Banana", "cam1", "a"),
            ("apple", "cam2", "a"),
            ("apple", "Cam1", "Person"),
            ("apple", "Cam1", "animal"),
        ]:
            _touch_table(tmp_path, *segments)

        keys = [entry.key for entry in DirectoryScanner(tmp_path).scan()]

        assert keys == [
            ("apple", "Cam1", "animal"),
            ("apple", "Cam1", "Person"),
            ("apple", "cam2", "a"),
            ("Banana", "cam1", "a"),
            ("cherry", "cam1", "a"),
        ]

    def test_missing_root_yields_empty_catalog(self, tmp_path: Path) -> None:
        assert DirectoryScanner(tmp_path / "absent").scan() == []

    def test_one_entry_per_physical_file(self, data_root: Path) -> None:
        entries = DirectoryScanner(data_root).scan()

        assert len(entries) == 3
        assert len({entry.absolute_path for entry in entries}) == 3

    def test_unreadable_subtree_is_skipped(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _touch_table(tmp_path, "good", "cam", "a")
        _touch_table(tmp_path, "broken", "cam", "a")
        real_scandir = os.scandir

        def flaky_scandir(path):
            if Path(path).name == "broken":
                raise PermissionError(13, "Permission denied", str(path))
            return real_scandir(path)

        monkeypatch.setattr(scanner_module.os, "scandir", flaky_scandir)

        entries = DirectoryScanner(tmp_path).scan()

        assert [entry.key for entry in entries] == [("good", "cam", "a")]

    def test_scan_is_not_cached(self, tmp_path: Path) -> None:
        scanner = DirectoryScanner(tmp_path)
        _touch_table(tmp_path, "s", "c", "a")
        assert len(scanner.scan()) == 1

        _touch_table(tmp_path, "s", "c", "b")

        assert len(scanner.scan()) == 2


def test_collation_key_puts_lowercase_first_among_case_variants() -> None:
    names = ["Banana", "apple", "APPLE", "Apple", "banana"]

    assert sorted(names, key=collation_key) == ["apple", "Apple", "APPLE", "banana", "Banana"]
