"""
app/services package marker.
"""

from app.services.catalog_service import (
    SurveillanceCatalogService,
    get_catalog_service,
)
from app.services.gps_service import (
    GPSService,
    get_gps_service,
)

__all__ = [
    "GPSService",
    "get_gps_service",
    "SurveillanceCatalogService",
    "get_catalog_service",
]
