"""
catalog/types.py

Value objects produced by the catalog scanner and listers.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

Row = dict[str, str]

DEFAULT_ANOMALY_TYPE = "general"
UNKNOWN = "unknown"


@dataclass(frozen=True)
class CatalogEntry:
    """
    One metadata table found under the data root.
    """

    absolute_path: Path
    relative_path: str
    session: str
    camera: str
    anomaly_type: str
    depth: int

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.session, self.camera, self.anomaly_type)


@dataclass(frozen=True)
class ImageFile:
    """
    One image file inside an image directory.
    """

    name: str
    size: int
    modified_time: datetime
