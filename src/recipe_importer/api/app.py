"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from recipe_importer.api.recipes import error_response
from recipe_importer.api.recipes import router as recipes_router
from recipe_importer.app_logging import configure_logging
from recipe_importer.containers import AppContainer
from recipe_importer.domain.errors import (
    AuthenticationError,
    NotFoundError,
    RecipeImportError,
    RemoteServiceError,
    ValidationError,
)

_ERROR_STATUS: list[tuple[type[RecipeImportError], int]] = [
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (AuthenticationError, status.HTTP_502_BAD_GATEWAY),
    (RemoteServiceError, status.HTTP_502_BAD_GATEWAY),
]


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(recipes_router)

    @app.exception_handler(RecipeImportError)
    async def import_error_handler(
        request: Request, exc: RecipeImportError
    ) -> JSONResponse:
        status_code = error_status(exc)
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.warning(
                "Recipe import request failed: %s",
                exc,
                extra={"path": request.url.path},
            )
        return error_response(status_code, str(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        response = error_response(exc.status_code, str(exc.detail))
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return error_response(
            status.HTTP_422_UNPROCESSABLE_ENTITY, describe_request_errors(exc)
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def error_status(exc: RecipeImportError) -> int:
    """Map an import error to an HTTP status code."""
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def describe_request_errors(exc: RequestValidationError) -> str:
    """Flatten FastAPI request validation errors into one message."""
    details = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        details.append(f"{location}: {error.get('msg', 'invalid')}")
    return "Invalid request: " + "; ".join(details)
