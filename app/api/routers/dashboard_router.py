"""
app/api/routers/dashboard_router.py

Dashboard summary endpoint.

Each section is computed independently: an unreadable GPS log or metrics
table is reported as unavailable inside the payload, and unreadable
metadata tables are left out of the anomaly summary.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.domain.surveillance import TableStatus
from app.schemas.surveillance import (
    AnomalyStatusResponse,
    DashboardResponse,
    DashboardSummaryResponse,
    TableStatusResponse,
)
from app.services.catalog_service import SurveillanceCatalogService, get_catalog_service

router = APIRouter(prefix="/api", tags=["dashboard"])


def _status_response(table_status: TableStatus) -> TableStatusResponse:
    return TableStatusResponse(
        available=table_status.available,
        record_count=table_status.record_count,
        last_record=table_status.last_record,
        error=table_status.error,
    )


@router.get("/dashboard", response_model=DashboardResponse)
def dashboard(
    catalog: SurveillanceCatalogService = Depends(get_catalog_service),
) -> DashboardResponse:
    """
    Summarise the GPS log, system metrics and every metadata table.
    """

    summary = catalog.dashboard()
    anomalies = {
        session: {
            camera: {
                anomaly_type: AnomalyStatusResponse(
                    session=anomaly.session,
                    record_count=anomaly.record_count,
                    image_count=anomaly.image_count,
                    last_detection=anomaly.last_detection,
                )
                for anomaly_type, anomaly in anomaly_types.items()
            }
            for camera, anomaly_types in cameras.items()
        }
        for session, cameras in summary.anomalies.items()
    }
    return DashboardResponse(
        timestamp=summary.generated_at,
        summary=DashboardSummaryResponse(
            gps=_status_response(summary.gps),
            system_metrics=_status_response(summary.system_metrics),
            anomalies=anomalies,
            total_metadata_files=summary.total_metadata_files,
        ),
    )
