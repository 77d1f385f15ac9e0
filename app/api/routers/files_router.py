"""
app/api/routers/files_router.py

Directory listing and raw file passthrough under the data root.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse

from app.api.dependencies import catalog_http_error
from app.schemas.surveillance import DirectoryItemResponse, DirectoryListingResponse
from app.services.catalog_service import SurveillanceCatalogService, get_catalog_service
from catalog.errors import CatalogError
from catalog.images import is_image_name

router = APIRouter(tags=["files"])

_MEDIA_TYPES = {
    ".csv": "text/csv; charset=utf-8",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
}


def _cache_headers(name: str) -> dict[str, str]:
    if is_image_name(name):
        return {"Cache-Control": "public, max-age=3600", "Accept-Ranges": "bytes"}
    return {"Cache-Control": "no-cache"}


@router.get("/list", response_model=DirectoryListingResponse)
@router.get("/list/{path:path}", response_model=DirectoryListingResponse)
def list_path(
    path: str = "",
    catalog: SurveillanceCatalogService = Depends(get_catalog_service),
) -> DirectoryListingResponse:
    """
    List a directory under the data root, or describe a single file.

    Raises HTTP 404 when the path does not exist.
    """

    try:
        listing = catalog.list_directory(path)
    except CatalogError as exc:
        raise catalog_http_error(exc, "Path not found") from exc

    if listing.type == "file":
        return DirectoryListingResponse(
            path=listing.path,
            type=listing.type,
            size=listing.size,
            modified=listing.modified,
        )
    return DirectoryListingResponse(
        path=listing.path,
        type=listing.type,
        files=[
            DirectoryItemResponse(name=item.name, type=item.type, size=item.size, modified=item.modified)
            for item in listing.items
        ],
    )


@router.api_route("/data/{path:path}", methods=["GET", "HEAD"], response_class=FileResponse)
def data_file(
    path: str,
    catalog: SurveillanceCatalogService = Depends(get_catalog_service),
) -> FileResponse:
    """
    Serve one file from the data root as-is. Dotfiles and directories are
    not served.
    """

    if any(part.startswith(".") for part in path.split("/") if part):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")

    try:
        file_path = catalog.resolve_data_file(path)
    except CatalogError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found") from exc

    return FileResponse(
        str(file_path),
        media_type=_MEDIA_TYPES.get(file_path.suffix.lower()),
        headers=_cache_headers(file_path.name),
    )
