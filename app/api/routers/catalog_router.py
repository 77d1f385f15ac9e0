"""
app/api/routers/catalog_router.py

Catalog discovery, metadata table, image listing and search endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.dependencies import catalog_http_error, normalize_filter
from app.config import APISettings, get_api_settings
from app.domain.surveillance import SearchFilters
from app.schemas.surveillance import (
    AnomaliesByTypeResponse,
    AnomalyCameraResponse,
    CameraAnomaliesResponse,
    CameraAnomalyResponse,
    CatalogFileResponse,
    CatalogScanResponse,
    DiscoveryResponse,
    ImageFileResponse,
    ImageListResponse,
    SearchFiltersResponse,
    SearchResponse,
    SearchResultResponse,
    TableResponse,
)
from app.services.catalog_service import SurveillanceCatalogService, get_catalog_service
from catalog.errors import CatalogError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["catalog"])


@router.get("/system-metrics", response_model=TableResponse)
def system_metrics(
    catalog: SurveillanceCatalogService = Depends(get_catalog_service),
) -> TableResponse:
    """
    Return every row of the system metrics table.
    """

    try:
        rows = catalog.read_system_metrics()
    except CatalogError as exc:
        raise catalog_http_error(exc, "Failed to read system metrics") from exc

    return TableResponse(
        count=len(rows),
        data=rows,
        metadata={
            "source": catalog.settings.system_metrics_path,
            "type": "System performance metrics",
        },
    )


@router.get("/metadata/scan", response_model=CatalogScanResponse)
def scan_metadata(
    catalog: SurveillanceCatalogService = Depends(get_catalog_service),
) -> CatalogScanResponse:
    """
    List every metadata table under the data root.
    """

    entries = catalog.scan()
    return CatalogScanResponse(
        count=len(entries),
        files=[
            CatalogFileResponse(
                session=entry.session,
                camera=entry.camera,
                anomaly_type=entry.anomaly_type,
                path=entry.relative_path,
                depth=entry.depth,
            )
            for entry in entries
        ],
    )


@router.get("/metadata/{session}/{camera}/{anomaly_type}", response_model=TableResponse)
def get_metadata(
    session: str,
    camera: str,
    anomaly_type: str,
    catalog: SurveillanceCatalogService = Depends(get_catalog_service),
) -> TableResponse:
    """
    Return the rows of one metadata table.

    Raises HTTP 404 when the table does not exist and HTTP 500 when it
    cannot be parsed.
    """

    try:
        rows = catalog.read_metadata(session, camera, anomaly_type)
    except CatalogError as exc:
        raise catalog_http_error(
            exc,
            f"Metadata not found for {session}/{camera}/{anomaly_type}",
        ) from exc

    return TableResponse(
        count=len(rows),
        data=rows,
        metadata={
            "session": session,
            "camera": camera,
            "anomalyType": anomaly_type,
            "source": catalog.metadata_relative_path(session, camera, anomaly_type),
        },
    )


@router.get("/metadata/{session}/{camera}/{anomaly_type}/images", response_model=ImageListResponse)
def list_images(
    session: str,
    camera: str,
    anomaly_type: str,
    catalog: SurveillanceCatalogService = Depends(get_catalog_service),
) -> ImageListResponse:
    """
    List the images of one detection directory. A missing directory is an
    empty list.
    """

    images = catalog.list_images(session, camera, anomaly_type)
    images_dirname = catalog.settings.images_dirname
    return ImageListResponse(
        session=session,
        camera=camera,
        anomaly_type=anomaly_type,
        count=len(images),
        images=[
            ImageFileResponse(
                name=image.name,
                size=image.size,
                modified_time=image.modified_time,
                url=f"/data/{session}/{camera}/{anomaly_type}/{images_dirname}/{image.name}",
            )
            for image in images
        ],
    )


@router.get("/discovery", response_model=DiscoveryResponse)
def discovery(
    catalog: SurveillanceCatalogService = Depends(get_catalog_service),
) -> DiscoveryResponse:
    found = catalog.discover()
    return DiscoveryResponse(
        sessions=found.sessions,
        cameras=found.cameras,
        anomaly_types=found.anomaly_types,
        structure=found.structure,
    )


@router.get("/camera/{camera}/anomalies", response_model=CameraAnomaliesResponse)
def camera_anomalies(
    camera: str,
    catalog: SurveillanceCatalogService = Depends(get_catalog_service),
) -> CameraAnomaliesResponse:
    """
    Return every anomaly table of one camera across sessions.
    """

    tables = catalog.camera_anomalies(camera)
    return CameraAnomaliesResponse(
        camera=camera,
        anomaly_count=len(tables),
        anomalies=[
            CameraAnomalyResponse(
                session=table.entry.session,
                anomaly_type=table.entry.anomaly_type,
                count=table.count,
                data=table.rows,
            )
            for table in tables
        ],
    )


@router.get("/anomalies/{anomaly_type}", response_model=AnomaliesByTypeResponse)
def anomalies_by_type(
    anomaly_type: str,
    catalog: SurveillanceCatalogService = Depends(get_catalog_service),
) -> AnomaliesByTypeResponse:
    """
    Return every table of one anomaly type across sessions and cameras.
    """

    tables = catalog.anomalies_by_type(anomaly_type)
    return AnomaliesByTypeResponse(
        anomaly_type=anomaly_type,
        camera_count=len(tables),
        total_detections=sum(table.count for table in tables),
        cameras=[
            AnomalyCameraResponse(
                session=table.entry.session,
                camera=table.entry.camera,
                count=table.count,
                data=table.rows,
            )
            for table in tables
        ],
    )


@router.get("/search", response_model=SearchResponse)
def search(
    session: str | None = Query(default=None, description="Exact session match"),
    camera: str | None = Query(default=None, description="Exact camera match"),
    anomaly_type: str | None = Query(default=None, alias="anomalyType", description="Exact anomaly type match"),
    start_date: str | None = Query(default=None, alias="startDate", description="Earliest row date"),
    end_date: str | None = Query(default=None, alias="endDate", description="Latest row date"),
    limit: int | None = Query(default=None, ge=1, description="Maximum number of tables"),
    api_settings: APISettings = Depends(get_api_settings),
    catalog: SurveillanceCatalogService = Depends(get_catalog_service),
) -> SearchResponse:
    """
    Search metadata tables by provenance and row date.

    Raises HTTP 400 when a date bound cannot be parsed.
    """

    filters = SearchFilters(
        session=normalize_filter(session),
        camera=normalize_filter(camera),
        anomaly_type=normalize_filter(anomaly_type),
        start_date=normalize_filter(start_date),
        end_date=normalize_filter(end_date),
        limit=limit or api_settings.search_default_limit,
    )
    try:
        result = catalog.search(filters)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    logger.info(
        "Search session=%r camera=%r anomaly_type=%r results=%d",
        filters.session,
        filters.camera,
        filters.anomaly_type,
        len(result.results),
    )
    return SearchResponse(
        filters=SearchFiltersResponse(
            session=filters.session,
            camera=filters.camera,
            anomaly_type=filters.anomaly_type,
            start_date=filters.start_date,
            end_date=filters.end_date,
            limit=filters.limit,
        ),
        result_count=len(result.results),
        total_records=result.total_records,
        results=[
            SearchResultResponse(
                session=table.entry.session,
                camera=table.entry.camera,
                anomaly_type=table.entry.anomaly_type,
                count=table.count,
                data=table.rows,
            )
            for table in result.results
        ],
    )
