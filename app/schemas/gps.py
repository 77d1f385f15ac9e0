"""
app/schemas/gps.py

Response schemas for GPS point, combined and heatmap endpoints.
"""

from __future__ import annotations

from pydantic import Field

from app.schemas.surveillance import CamelModel


class GPSPointResponse(CamelModel):
    """
    One extracted GPS point. ``source`` is only set in merged views.
    """

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    timestamp: str | None = None
    session: str
    camera: str
    anomaly_type: str
    record_index: int = Field(..., ge=0)
    source: str | None = None
    original_record: dict[str, str]


class GPSPointsResponse(CamelModel):
    success: bool = True
    count: int = Field(..., ge=0)
    data: list[GPSPointResponse]


class SourceSummaryResponse(CamelModel):
    source: str
    count: int = Field(..., ge=0)
    error: str | None = None


class CombinedGPSResponse(CamelModel):
    success: bool = True
    count: int = Field(..., ge=0)
    sources: list[SourceSummaryResponse]
    data: list[GPSPointResponse]


class HeatmapBucketResponse(CamelModel):
    latitude: float
    longitude: float
    count: int = Field(..., ge=1)
    sessions: list[str]
    cameras: list[str]
    anomaly_types: list[str]


class HeatmapResponse(CamelModel):
    success: bool = True
    precision: int = Field(..., ge=0)
    total_points: int = Field(..., ge=0)
    bucket_count: int = Field(..., ge=0)
    buckets: list[HeatmapBucketResponse]
