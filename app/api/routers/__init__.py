"""
app/api/routers package marker.
"""

from app.api.routers.catalog_router import router as catalog_router
from app.api.routers.dashboard_router import router as dashboard_router
from app.api.routers.files_router import router as files_router
from app.api.routers.gps_router import router as gps_router

__all__ = [
    "catalog_router",
    "dashboard_router",
    "files_router",
    "gps_router",
]
