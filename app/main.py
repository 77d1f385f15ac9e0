from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator, Awaitable, Callable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_api_settings, get_data_settings, load_env_files
from app.logging_utils import log_event
from app.services.catalog_service import SurveillanceCatalogService, get_catalog_service

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"

_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
}

_ENDPOINTS = {
    "health": "GET /health - Health check",
    "gps": "GET /api/gps-data - Get GPS tracking data",
    "systemMetrics": "GET /api/system-metrics - Get system performance metrics",
    "metadataScan": "GET /api/metadata/scan - Scan for all metadata files",
    "specificMetadata": "GET /api/metadata/{session}/{camera}/{anomalyType} - Get specific metadata",
    "images": "GET /api/metadata/{session}/{camera}/{anomalyType}/images - List detection images",
    "discovery": "GET /api/discovery - Sessions, cameras and anomaly types",
    "cameraAnomalies": "GET /api/camera/{camera}/anomalies - Get all anomalies for a camera",
    "anomaliesByType": "GET /api/anomalies/{anomalyType} - Get anomalies by type",
    "dashboard": "GET /api/dashboard - Get complete dashboard summary",
    "search": "GET /api/search - Search with filters (session, camera, anomalyType, startDate, endDate, limit)",
    "gpsPoints": "GET /api/gps/points - GPS points extracted from metadata tables",
    "gpsCombined": "GET /api/gps/combined - GPS log and metadata points merged by time",
    "gpsHeatmap": "GET /api/gps/heatmap - GPS points bucketed by rounded coordinates",
    "staticFiles": "GET /data/... - Static file access",
    "directoryListing": "GET /list/... - Directory listing",
}


def _validate_env() -> None:
    """
    Validate required environment variables at startup.

    Raises RuntimeError listing every missing or invalid variable so the
    operator can fix all problems in one restart cycle.
    """

    load_env_files()

    errors: list[str] = []

    if not os.getenv("SURVEILLANCE_DATA_PATH", "").strip():
        errors.append(
            "SURVEILLANCE_DATA_PATH is not set. Point it at the surveillance data directory."
        )

    for name in ("DATA_READ_WORKERS", "SEARCH_DEFAULT_LIMIT", "HEATMAP_DEFAULT_PRECISION", "PORT"):
        raw = os.getenv(name)
        if raw is None:
            continue
        try:
            int(raw)
        except ValueError:
            errors.append(f"{name}='{raw}' is not an integer.")

    if errors:
        raise RuntimeError(
            "Startup validation failed, missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _log_catalog_structure(catalog: SurveillanceCatalogService) -> None:
    """
    Log what the data root contains. A missing root is a warning only.
    """

    if not catalog.root.is_dir():
        logger.warning(
            "Data directory not found: %s. Expected <session>/<camera>/<anomaly_type>/metadata.csv",
            catalog.root,
        )
        return

    logger.info("Serving data from %s", catalog.root)
    found = catalog.discover()
    for session, cameras in found.structure.items():
        for camera, anomaly_types in cameras.items():
            logger.info(
                "Session %s camera %s: %d classes (%s)",
                session,
                camera,
                len(anomaly_types),
                ", ".join(anomaly_types),
            )
    log_event(
        logger,
        logging.INFO,
        "catalog_startup_summary",
        sessions=len(found.sessions),
        cameras=found.cameras,
        anomaly_types=found.anomaly_types,
    )

    for relative_path in (catalog.settings.gps_log_path, catalog.settings.system_metrics_path):
        if (catalog.root / relative_path).is_file():
            logger.info("Found %s", relative_path)
        else:
            logger.warning("Missing %s", relative_path)


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Log the data tree layout on boot."""
    provider = application.dependency_overrides.get(get_catalog_service, get_catalog_service)
    _log_catalog_structure(provider())
    yield
    logger.info("Shutting down surveillance data server")


async def _security_headers(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    response = await call_next(request)
    for name, value in _SECURITY_HEADERS.items():
        response.headers[name] = value
    return response


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Server error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()
    api_settings = get_api_settings()

    application = FastAPI(
        title="Surveillance Data API",
        version=API_VERSION,
        lifespan=_lifespan,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=list(api_settings.cors_allow_origins),
        allow_credentials=False,
        allow_methods=["GET", "HEAD", "OPTIONS", "POST"],
        allow_headers=["Content-Type", "Authorization", "Accept", "Cache-Control", "Range"],
    )
    application.middleware("http")(_security_headers)
    application.add_exception_handler(Exception, _unhandled_error)

    from app.api.routers import (
        catalog_router,
        dashboard_router,
        files_router,
        gps_router,
    )

    application.include_router(catalog_router)
    application.include_router(dashboard_router)
    application.include_router(gps_router)
    application.include_router(files_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "OK", "message": "Surveillance server is running"}

    @application.get("/api")
    def api_documentation() -> dict:
        data_settings = get_data_settings()
        return {
            "title": "Surveillance Data API",
            "version": API_VERSION,
            "endpoints": _ENDPOINTS,
            "dataStructure": {
                "layout": "<session>/<camera>/<anomalyType>/metadata.csv & images/",
                "anomalyTypes": "Dynamic - scanned from directory structure",
                "mainDataFiles": [data_settings.gps_log_path, data_settings.system_metrics_path],
            },
        }

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=get_api_settings().port)
