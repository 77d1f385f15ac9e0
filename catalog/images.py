"""
catalog/images.py

Image file listing for per-detection image directories.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path

from catalog.types import ImageFile

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS: frozenset[str] = frozenset({".jpg", ".jpeg", ".png", ".bmp", ".gif", ".webp"})


def is_image_name(name: str) -> bool:
    return Path(name).suffix.lower() in IMAGE_EXTENSIONS


class ImageDirectoryLister:
    """
    Lists image files in one directory, sorted by name.

    A missing or unreadable directory yields an empty list.
    """

    def list(self, directory: str | Path) -> list[ImageFile]:
        images: list[ImageFile] = []
        try:
            with os.scandir(directory) as iterator:
                for child in iterator:
                    if not is_image_name(child.name):
                        continue
                    try:
                        if not child.is_file():
                            continue
                        stat = child.stat()
                    except OSError as exc:
                        logger.debug("Skipping image %s: %s", child.path, exc)
                        continue
                    images.append(
                        ImageFile(
                            name=child.name,
                            size=stat.st_size,
                            modified_time=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                        )
                    )
        except OSError as exc:
            logger.debug("Image directory unavailable %s: %s", directory, exc)
            return []

        images.sort(key=lambda image: image.name)
        return images

    def count(self, directory: str | Path) -> int:
        return len(self.list(directory))
