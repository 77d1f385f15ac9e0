"""
app/api/routers/gps_router.py

GPS log, extracted GPS points, combined track and heatmap endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import catalog_http_error, normalize_filter
from app.config import APISettings, get_api_settings
from app.schemas.gps import (
    CombinedGPSResponse,
    GPSPointResponse,
    GPSPointsResponse,
    HeatmapBucketResponse,
    HeatmapResponse,
    SourceSummaryResponse,
)
from app.schemas.surveillance import TableResponse
from app.services.gps_service import GPSService, get_gps_service
from catalog.errors import CatalogError
from geolocation.types import GPSPoint, HeatmapBucket

router = APIRouter(prefix="/api", tags=["gps"])


def _point_response(point: GPSPoint) -> GPSPointResponse:
    return GPSPointResponse(
        latitude=point.latitude,
        longitude=point.longitude,
        timestamp=point.timestamp,
        session=point.session,
        camera=point.camera,
        anomaly_type=point.anomaly_type,
        record_index=point.record_index,
        source=point.source,
        original_record=point.original_record,
    )


def _bucket_response(bucket: HeatmapBucket) -> HeatmapBucketResponse:
    return HeatmapBucketResponse(
        latitude=bucket.latitude,
        longitude=bucket.longitude,
        count=bucket.count,
        sessions=sorted(bucket.sessions),
        cameras=sorted(bucket.cameras),
        anomaly_types=sorted(bucket.anomaly_types),
    )


@router.get("/gps-data", response_model=TableResponse)
def gps_data(
    gps: GPSService = Depends(get_gps_service),
) -> TableResponse:
    """
    Return the raw rows of the GPS log.
    """

    try:
        rows = gps.gps_log()
    except CatalogError as exc:
        raise catalog_http_error(exc, "Failed to read GPS data") from exc

    return TableResponse(
        count=len(rows),
        data=rows,
        metadata={"source": gps.gps_log_path, "type": "GPS tracking data"},
    )


@router.get("/gps/points", response_model=GPSPointsResponse)
def gps_points(
    session: str | None = Query(default=None),
    camera: str | None = Query(default=None),
    anomaly_type: str | None = Query(default=None, alias="anomalyType"),
    gps: GPSService = Depends(get_gps_service),
) -> GPSPointsResponse:
    """
    Return GPS points found in metadata tables, in catalog then row order.
    """

    points = gps.metadata_points(
        session=normalize_filter(session),
        camera=normalize_filter(camera),
        anomaly_type=normalize_filter(anomaly_type),
    )
    return GPSPointsResponse(
        count=len(points),
        data=[_point_response(point) for point in points],
    )


@router.get("/gps/combined", response_model=CombinedGPSResponse)
def gps_combined(
    gps: GPSService = Depends(get_gps_service),
) -> CombinedGPSResponse:
    """
    Merge GPS log points with metadata points, sorted by timestamp where
    both compared points have one.
    """

    merged = gps.combined()
    return CombinedGPSResponse(
        count=len(merged.points),
        sources=[
            SourceSummaryResponse(source=summary.source, count=summary.count, error=summary.error)
            for summary in merged.sources
        ],
        data=[_point_response(point) for point in merged.points],
    )


@router.get("/gps/heatmap", response_model=HeatmapResponse)
def gps_heatmap(
    precision: int | None = Query(default=None, ge=0, le=8, description="Decimal digits kept per coordinate"),
    session: str | None = Query(default=None),
    camera: str | None = Query(default=None),
    anomaly_type: str | None = Query(default=None, alias="anomalyType"),
    api_settings: APISettings = Depends(get_api_settings),
    gps: GPSService = Depends(get_gps_service),
) -> HeatmapResponse:
    """
    Bucket combined GPS points by rounded coordinates.
    """

    digits = api_settings.heatmap_default_precision if precision is None else precision
    buckets, total_points = gps.heatmap(
        precision=digits,
        session=normalize_filter(session),
        camera=normalize_filter(camera),
        anomaly_type=normalize_filter(anomaly_type),
    )
    return HeatmapResponse(
        precision=digits,
        total_points=total_points,
        bucket_count=len(buckets),
        buckets=[_bucket_response(bucket) for bucket in buckets],
    )
