"""
Shared fixtures: a small surveillance data tree on disk.

Layout::

    F2/gps_log.csv
    F2/cam1/person/metadata.csv
    F2/cam1/person/images/{a.jpg,b.PNG,notes.txt}
    F2/4kcam/metadata.csv                        (two-segment layout)
    floMobility123_F1/system_metrics.csv
    floMobility123_F1/argus0/vehicle/metadata.csv
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import pytest

os.environ.setdefault("SURVEILLANCE_DATA_PATH", tempfile.mkdtemp(prefix="surveillance-data-"))

from app.config import DataSettings  # noqa: E402
from app.services.catalog_service import SurveillanceCatalogService  # noqa: E402
from app.services.gps_service import GPSService  # noqa: E402


def write_csv(path: Path, lines: list[str]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def build_data_tree(root: Path) -> Path:
    write_csv(
        root / "F2" / "gps_log.csv",
        [
            "timestamp,latitude,longitude,speed",
            "2024-01-01 10:00:00,10.0,20.0,3.1",
            "2024-01-01 10:02:00,10.5,20.5,2.8",
            ",11.0,21.0,0.0",
            "2024-01-01 10:03:00,200,20,0.0",
        ],
    )
    write_csv(
        root / "F2" / "cam1" / "person" / "metadata.csv",
        [
            "timestamp,lat,lng,label",
            "2024-01-01 10:01:00,10.00001,20.00001,person",
            "2024-01-02 09:00:00,bad,20.0,person",
        ],
    )
    images = root / "F2" / "cam1" / "person" / "images"
    images.mkdir(parents=True, exist_ok=True)
    (images / "b.PNG").write_bytes(b"\x89PNG")
    (images / "a.jpg").write_bytes(b"\xff\xd8\xff")
    (images / "notes.txt").write_text("not an image", encoding="utf-8")
    write_csv(
        root / "F2" / "4kcam" / "metadata.csv",
        [
            "date,gps_lat,gps_lng,label",
            "2024-01-03,12.0,22.0,crowd",
        ],
    )
    write_csv(
        root / "floMobility123_F1" / "system_metrics.csv",
        [
            "timestamp,cpu,memory",
            "2024-01-01 10:00:00,41.5,62.0",
            "2024-01-01 10:01:00,43.0,63.5",
        ],
    )
    write_csv(
        root / "floMobility123_F1" / "argus0" / "vehicle" / "metadata.csv",
        [
            "created_at,y,x,label",
            "2023-12-31,45.0,90.0,truck",
        ],
    )
    return root


@pytest.fixture()
def data_root(tmp_path: Path) -> Path:
    return build_data_tree(tmp_path / "data")


@pytest.fixture()
def data_settings(data_root: Path) -> DataSettings:
    return DataSettings(root=data_root, read_workers=2)


@pytest.fixture()
def catalog_service(data_settings: DataSettings) -> SurveillanceCatalogService:
    return SurveillanceCatalogService(settings=data_settings)


@pytest.fixture()
def gps_service(catalog_service: SurveillanceCatalogService) -> GPSService:
    return GPSService(catalog=catalog_service)
