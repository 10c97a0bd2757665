"""Translation of service errors into HTTP responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cinedeck.services.tmdb_client import CatalogFetchError

logger = logging.getLogger(__name__)


def failure_message(request: Request) -> str:
    """User-facing message for the kind of resource that failed to load."""
    if "movie_id" in request.path_params:
        return "Failed to load movie details. Please try again."
    return "Failed to load movies. Please try again."


async def catalog_error_handler(request: Request, exc: CatalogFetchError) -> JSONResponse:
    """Report a failed catalog fetch as a retryable upstream error."""
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=502,
        content={
            "detail": failure_message(request),
            "retryable": True,
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CatalogFetchError, catalog_error_handler)
