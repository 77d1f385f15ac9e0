"""
app/schemas package marker.
"""

from app.schemas.gps import (
    CombinedGPSResponse,
    GPSPointResponse,
    GPSPointsResponse,
    HeatmapBucketResponse,
    HeatmapResponse,
    SourceSummaryResponse,
)
from app.schemas.surveillance import (
    AnomaliesByTypeResponse,
    CameraAnomaliesResponse,
    CatalogScanResponse,
    DashboardResponse,
    DirectoryListingResponse,
    DiscoveryResponse,
    ImageListResponse,
    SearchResponse,
    TableResponse,
)

__all__ = [
    "AnomaliesByTypeResponse",
    "CameraAnomaliesResponse",
    "CatalogScanResponse",
    "CombinedGPSResponse",
    "DashboardResponse",
    "DirectoryListingResponse",
    "DiscoveryResponse",
    "GPSPointResponse",
    "GPSPointsResponse",
    "HeatmapBucketResponse",
    "HeatmapResponse",
    "ImageListResponse",
    "SearchResponse",
    "SourceSummaryResponse",
    "TableResponse",
]
