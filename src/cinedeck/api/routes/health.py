"""Health check endpoint."""

from fastapi import APIRouter

from cinedeck.config import settings

router = APIRouter()


@router.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """
    Health check endpoint.

    Returns:
        Status message and whether a catalog API key is configured
    """
    return {
        "status": "ok",
        "catalog": "configured" if settings.tmdb_api_key else "missing-api-key",
    }
