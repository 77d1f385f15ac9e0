"""
app/services/gps_service.py

GPS views over the data tree: points extracted from metadata tables, the
GPS log merged with those points, and heatmap buckets.

An unreadable GPS log contributes zero points and its error is reported in
the per-source summary. Unreadable metadata tables are skipped one by one.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import PurePosixPath

from app.services.catalog_service import SurveillanceCatalogService, get_catalog_service
from catalog.errors import CatalogError
from catalog.types import DEFAULT_ANOMALY_TYPE, UNKNOWN, Row
from geolocation.aggregator import DEFAULT_PRECISION, GPSAggregator
from geolocation.extractor import GPSExtractor
from geolocation.types import SOURCE_GPS_LOG, SOURCE_METADATA, GPSPoint, HeatmapBucket, MergedGPS, SourceSummary

logger = logging.getLogger(__name__)

GPS_LOG_CAMERA = "gps_log"


class GPSService:
    """
    Builds GPS point views for route handlers.
    """

    def __init__(
        self,
        *,
        catalog: SurveillanceCatalogService,
        extractor: GPSExtractor | None = None,
        aggregator: GPSAggregator | None = None,
    ) -> None:
        self._catalog = catalog
        self._extractor = extractor or GPSExtractor()
        self._aggregator = aggregator or GPSAggregator()

    @property
    def gps_log_path(self) -> str:
        return self._catalog.settings.gps_log_path

    def gps_log(self) -> list[Row]:
        return self._catalog.read_gps_log()

    def log_points(self) -> list[GPSPoint]:
        """
        Extract points from the GPS log. Read failures propagate.

        Log points belong to the session named by the log's first path
        segment, under the pseudo-camera ``gps_log``.
        """

        rows = self._catalog.read_gps_log()
        parts = PurePosixPath(self.gps_log_path).parts
        session = parts[0] if len(parts) > 1 else UNKNOWN
        return self._extractor.extract(rows, session, GPS_LOG_CAMERA, DEFAULT_ANOMALY_TYPE)

    def metadata_points(
        self,
        *,
        session: str | None = None,
        camera: str | None = None,
        anomaly_type: str | None = None,
    ) -> list[GPSPoint]:
        """
        Extract points from every readable metadata table, in catalog order.
        """

        entries = [
            entry
            for entry in self._catalog.scan()
            if (session is None or entry.session == session)
            and (camera is None or entry.camera == camera)
            and (anomaly_type is None or entry.anomaly_type == anomaly_type)
        ]
        points: list[GPSPoint] = []
        for table in self._catalog.load_entries(entries):
            entry = table.entry
            points.extend(
                self._extractor.extract(table.rows, entry.session, entry.camera, entry.anomaly_type)
            )
        return points

    def combined(self) -> MergedGPS:
        log_points: list[GPSPoint] = []
        log_error: str | None = None
        try:
            log_points = self.log_points()
        except CatalogError as exc:
            log_error = str(exc)
            logger.warning("GPS log unavailable: %s", exc)

        # Unreadable metadata tables are skipped per entry inside metadata_points.
        metadata_points = self.metadata_points()

        merged = self._aggregator.merge_sources(log_points, metadata_points)
        return MergedGPS(
            points=merged,
            sources=[
                SourceSummary(source=SOURCE_GPS_LOG, count=len(log_points), error=log_error),
                SourceSummary(source=SOURCE_METADATA, count=len(metadata_points)),
            ],
        )

    def heatmap(
        self,
        *,
        precision: int = DEFAULT_PRECISION,
        session: str | None = None,
        camera: str | None = None,
        anomaly_type: str | None = None,
    ) -> tuple[list[HeatmapBucket], int]:
        """
        Return heatmap buckets of the combined points and the number of
        points that went into them.
        """

        buckets = self._aggregator.bucket_for_heatmap(
            self.combined().points,
            precision,
            session=session,
            camera=camera,
            anomaly_type=anomaly_type,
        )
        return buckets, sum(bucket.count for bucket in buckets)


@lru_cache(maxsize=1)
def get_gps_service() -> GPSService:
    """
    Build and cache the GPS service.
    """

    return GPSService(catalog=get_catalog_service())
