"""Recipe import API endpoints."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from fastapi import (
    APIRouter,
    Body,
    Depends,
    File,
    Header,
    HTTPException,
    Request,
    UploadFile,
    status,
)
from fastapi.responses import JSONResponse

if TYPE_CHECKING:
    from recipe_importer.containers import AppContainer

router = APIRouter(prefix="/api", tags=["recipes"])

_logger = logging.getLogger(__name__)


def _get_api_token(request: Request) -> str | None:
    container: AppContainer = request.app.state.container
    return container.settings.api_token


async def require_api_token(
    x_api_token: str | None = Header(default=None),
    api_token: str | None = Depends(_get_api_token),
) -> None:
    """Ensure requests include the shared API token when one is configured."""
    if api_token and x_api_token != api_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid API token.",
        )


@router.post(
    "/scan-recipe", dependencies=[Depends(require_api_token)], response_model=None
)
async def scan_recipe(
    request: Request, image: UploadFile = File(...)
) -> dict[str, object] | JSONResponse:
    """Extract a reviewable recipe from an uploaded photo."""
    container: AppContainer = request.app.state.container
    if image.content_type and not image.content_type.startswith("image/"):
        return error_response(
            status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, "Upload must be an image."
        )
    max_bytes = container.settings.max_upload_bytes
    image_bytes = await image.read(max_bytes + 1)
    if not image_bytes:
        return error_response(status.HTTP_400_BAD_REQUEST, "No image uploaded.")
    if len(image_bytes) > max_bytes:
        return error_response(
            status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, "Image is too large."
        )

    try:
        record = await container.scan_service.extract(image_bytes, image.content_type)
    except Exception as exc:
        _logger.exception(
            "Recipe extraction failed", extra={"upload_filename": image.filename}
        )
        return error_response(
            status.HTTP_502_BAD_GATEWAY,
            format_error(container, exc, "Failed to read a recipe from that image."),
        )
    return {
        "success": True,
        "recipe": record.model_dump(by_alias=True, exclude={"collection_id"}),
    }


@router.post(
    "/create-recipe", dependencies=[Depends(require_api_token)], response_model=None
)
async def create_recipe(
    request: Request, payload: dict[str, object] = Body(...)
) -> dict[str, object] | JSONResponse:
    """Create a reviewed recipe and optionally file it into a collection."""
    container: AppContainer = request.app.state.container
    try:
        result = await asyncio.wait_for(
            container.import_orchestrator.import_recipe(payload),
            timeout=container.settings.import_timeout_seconds,
        )
    except TimeoutError:
        _logger.warning("Recipe import timed out")
        return error_response(
            status.HTTP_504_GATEWAY_TIMEOUT,
            "Timed out waiting for the list service. "
            "Check your recipes before retrying.",
        )

    message = "Recipe saved!"
    if result.collection_warning:
        message = (
            "Recipe saved, but it was not added to the selected collection. "
            "Please file it manually."
        )
    if result.visibility_warning:
        message = (
            "Recipe saved, but it may not show up in All Recipes. "
            "Do not import it again; add it there manually."
        )
    return {"success": True, "message": message, **result.to_payload()}


@router.get("/collections", dependencies=[Depends(require_api_token)])
async def list_collections(
    request: Request, refresh: bool = False
) -> dict[str, object]:
    """Return the collections a recipe can be filed into."""
    container: AppContainer = request.app.state.container
    collections = await container.collection_index.list_collections(
        force_refresh=refresh
    )
    return {
        "success": True,
        "count": len(collections),
        "collections": [
            {"id": collection.identifier, "name": collection.name}
            for collection in collections
        ],
    }


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build the error body the browser client expects."""
    return JSONResponse(
        status_code=status_code, content={"success": False, "error": message}
    )


def format_error(container: AppContainer, exc: Exception, fallback: str) -> str:
    """Return a user-facing error message with local debug info."""
    if container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback
