"""
app/schemas/surveillance.py

Response schemas for catalog, dashboard and search endpoints.

Fields are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base model serialising field names as camelCase.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TableResponse(CamelModel):
    """
    Rows of one table with their origin.
    """

    success: bool = True
    count: int = Field(..., ge=0)
    data: list[dict[str, str]]
    metadata: dict[str, str]


class CatalogFileResponse(CamelModel):
    session: str
    camera: str
    anomaly_type: str
    path: str
    depth: int = Field(..., ge=0)


class CatalogScanResponse(CamelModel):
    success: bool = True
    count: int = Field(..., ge=0)
    files: list[CatalogFileResponse]


class ImageFileResponse(CamelModel):
    name: str
    size: int = Field(..., ge=0)
    modified_time: datetime
    url: str


class ImageListResponse(CamelModel):
    success: bool = True
    session: str
    camera: str
    anomaly_type: str
    count: int = Field(..., ge=0)
    images: list[ImageFileResponse]


class DiscoveryResponse(CamelModel):
    success: bool = True
    sessions: list[str]
    cameras: list[str]
    anomaly_types: list[str]
    structure: dict[str, dict[str, list[str]]]


class CameraAnomalyResponse(CamelModel):
    session: str
    anomaly_type: str
    count: int = Field(..., ge=0)
    data: list[dict[str, str]]


class CameraAnomaliesResponse(CamelModel):
    success: bool = True
    camera: str
    anomaly_count: int = Field(..., ge=0)
    anomalies: list[CameraAnomalyResponse]


class AnomalyCameraResponse(CamelModel):
    session: str
    camera: str
    count: int = Field(..., ge=0)
    data: list[dict[str, str]]


class AnomaliesByTypeResponse(CamelModel):
    success: bool = True
    anomaly_type: str
    camera_count: int = Field(..., ge=0)
    total_detections: int = Field(..., ge=0)
    cameras: list[AnomalyCameraResponse]


class TableStatusResponse(CamelModel):
    available: bool
    record_count: int = Field(default=0, ge=0)
    last_record: dict[str, str] | None = None
    error: str | None = None


class AnomalyStatusResponse(CamelModel):
    session: str
    record_count: int = Field(..., ge=0)
    image_count: int = Field(..., ge=0)
    last_detection: dict[str, str] | None = None


class DashboardSummaryResponse(CamelModel):
    gps: TableStatusResponse
    system_metrics: TableStatusResponse
    anomalies: dict[str, dict[str, dict[str, AnomalyStatusResponse]]]
    total_metadata_files: int = Field(..., ge=0)


class DashboardResponse(CamelModel):
    success: bool = True
    timestamp: datetime
    summary: DashboardSummaryResponse


class SearchFiltersResponse(CamelModel):
    session: str | None = None
    camera: str | None = None
    anomaly_type: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    limit: int = Field(..., ge=1)


class SearchResultResponse(CamelModel):
    session: str
    camera: str
    anomaly_type: str
    count: int = Field(..., ge=0)
    data: list[dict[str, str]]


class SearchResponse(CamelModel):
    success: bool = True
    filters: SearchFiltersResponse
    result_count: int = Field(..., ge=0)
    total_records: int = Field(..., ge=0)
    results: list[SearchResultResponse]


class DirectoryItemResponse(CamelModel):
    name: str
    type: str
    size: int = Field(..., ge=0)
    modified: datetime


class DirectoryListingResponse(CamelModel):
    path: str
    type: str
    files: list[DirectoryItemResponse] | None = None
    size: int | None = None
    modified: datetime | None = None
