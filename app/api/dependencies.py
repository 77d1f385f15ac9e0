"""
app/api/dependencies.py

Shared FastAPI helpers for request validation and error translation.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from catalog.errors import CatalogError, TableNotFoundError, TableParseError

logger = logging.getLogger(__name__)


def normalize_filter(value: str | None) -> str | None:
    """
    Treat a blank query parameter as absent.
    """

    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


def catalog_http_error(exc: CatalogError, message: str) -> HTTPException:
    """
    Translate a catalog failure on one requested resource into an HTTP error.

    NotFound maps to 404; parse and other read failures map to 500.
    """

    if isinstance(exc, TableNotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        if not isinstance(exc, TableParseError):
            logger.exception("Unexpected catalog failure: %s", exc)

    return HTTPException(
        status_code=status_code,
        detail={"success": False, "error": str(exc), "message": message},
    )
