"""
tests/test_gps_service.py

GPSService: metadata points, the merged track and heatmap buckets.
"""

from __future__ import annotations

from pathlib import Path

from app.config import DataSettings
from app.services.catalog_service import SurveillanceCatalogService
from app.services.gps_service import GPS_LOG_CAMERA, GPSService
from geolocation.types import SOURCE_GPS_LOG, SOURCE_METADATA


def _service(root: Path, **overrides) -> GPSService:
    settings = DataSettings(root=root, **overrides)
    return GPSService(catalog=SurveillanceCatalogService(settings=settings))


def test_log_points_skip_out_of_range_rows(gps_service: GPSService) -> None:
    points = gps_service.log_points()

    assert [(p.latitude, p.longitude) for p in points] == [(10.0, 20.0), (10.5, 20.5), (11.0, 21.0)]
    assert {(p.session, p.camera, p.anomaly_type) for p in points} == {("F2", GPS_LOG_CAMERA, "general")}
    assert [p.record_index for p in points] == [0, 1, 2]
    assert points[2].timestamp is None


def test_metadata_points_in_catalog_order(gps_service: GPSService) -> None:
    points = gps_service.metadata_points()

    assert [(p.camera, p.latitude, p.longitude) for p in points] == [
        ("4kcam", 12.0, 22.0),
        ("cam1", 10.00001, 20.00001),
        ("argus0", 45.0, 90.0),
    ]
    assert points[0].timestamp == "2024-01-03"
    assert points[2].timestamp == "2023-12-31"


def test_metadata_points_filtered(gps_service: GPSService) -> None:
    points = gps_service.metadata_points(session="F2", anomaly_type="person")

    assert [(p.camera, p.record_index) for p in points] == [("cam1", 0)]


def test_metadata_points_skip_unreadable_tables(gps_service: GPSService, data_root: Path) -> None:
    broken = data_root / "F2" / "cam9" / "smoke" / "metadata.csv"
    broken.parent.mkdir(parents=True)
    broken.write_bytes(b"lat,lng\n\xff,1\n")

    assert len(gps_service.metadata_points()) == 3


def test_combined_reports_per_source_counts(gps_service: GPSService) -> None:
    merged = gps_service.combined()

    assert len(merged.points) == 6
    assert [(s.source, s.count, s.error) for s in merged.sources] == [
        (SOURCE_GPS_LOG, 3, None),
        (SOURCE_METADATA, 3, None),
    ]
    assert sum(p.source == SOURCE_GPS_LOG for p in merged.points) == 3
    assert sum(p.source == SOURCE_METADATA for p in merged.points) == 3


def test_combined_with_missing_log_still_returns_metadata(data_root: Path) -> None:
    service = _service(data_root, gps_log_path="F9/gps_log.csv")

    merged = service.combined()

    log_summary, metadata_summary = merged.sources
    assert log_summary.count == 0
    assert log_summary.error
    assert metadata_summary.count == 3
    assert {p.source for p in merged.points} == {SOURCE_METADATA}


def test_combined_on_empty_root(tmp_path: Path) -> None:
    merged = _service(tmp_path).combined()

    assert merged.points == []
    assert merged.sources[0].error
    assert merged.sources[1].count == 0


def test_heatmap_buckets_log_and_metadata_together(gps_service: GPSService) -> None:
    buckets, total_points = gps_service.heatmap(precision=2)

    assert total_points == 6
    assert len(buckets) == 5
    shared = next(b for b in buckets if (b.latitude, b.longitude) == (10.0, 20.0))
    assert shared.count == 2
    assert shared.cameras == frozenset({GPS_LOG_CAMERA, "cam1"})


def test_heatmap_high_precision_separates_nearby_points(gps_service: GPSService) -> None:
    buckets, total_points = gps_service.heatmap(precision=5)

    assert total_points == 6
    assert len(buckets) == 6


def test_heatmap_filters(gps_service: GPSService) -> None:
    buckets, total_points = gps_service.heatmap(precision=2, session="floMobility123_F1")

    assert total_points == 1
    assert [(b.latitude, b.longitude) for b in buckets] == [(45.0, 90.0)]


def test_combined_skips_unreadable_metadata_tables_without_source_error(
    gps_service: GPSService, data_root: Path
) -> None:
    broken = data_root / "F2" / "cam9" / "smoke" / "metadata.csv"
    broken.parent.mkdir(parents=True)
    broken.write_bytes(b"lat,lng\n\xff,1\n")

    merged = gps_service.combined()

    metadata_summary = merged.sources[1]
    assert metadata_summary.count == 3
    assert metadata_summary.error is None
    assert len(merged.points) == 6
