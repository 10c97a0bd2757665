"""Shared service instances for FastAPI dependencies."""

from cinedeck.services.browser import MovieBrowser
from cinedeck.services.tmdb_client import TMDbClient

# Create the catalog client and the single browse session it feeds
tmdb_client = TMDbClient()
browser = MovieBrowser(tmdb_client)


def get_tmdb_client() -> TMDbClient:
    """
    Dependency for FastAPI to provide the catalog client.

    Usage:
        @app.get("/endpoint")
        async def endpoint(client: TMDbClient = Depends(get_tmdb_client)):
            # Use client here
    """
    return tmdb_client


def get_browser() -> MovieBrowser:
    """Dependency for FastAPI to provide the browse session."""
    return browser
