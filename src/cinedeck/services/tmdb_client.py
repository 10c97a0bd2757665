"""TMDb API client for fetching movie listings."""

import logging
from enum import Enum
from typing import Any

import httpx
from pydantic import ValidationError

from cinedeck.config import settings
from cinedeck.schemas.movie import COMMON_GENRES, Genre, MovieDetails, MoviePage

logger = logging.getLogger(__name__)

IMAGE_SIZES = ("w200", "w300", "w500", "w780", "original")


class Category(str, Enum):
    """Catalog listing a pool can be built from."""

    POPULAR = "popular"
    TOP_RATED = "top-rated"
    UPCOMING = "upcoming"
    SEARCH = "search"


class CatalogFetchError(Exception):
    """A catalog request failed (network error or non-success status)."""

    def __init__(self, endpoint: str, message: str, status_code: int | None = None) -> None:
        self.endpoint = endpoint
        self.status_code = status_code
        super().__init__(f"TMDb request to {endpoint} failed: {message}")


class TMDbClient:
    """Client for The Movie Database (TMDb) API."""

    LISTING_ENDPOINTS = {
        Category.POPULAR: "/movie/popular",
        Category.TOP_RATED: "/movie/top_rated",
        Category.UPCOMING: "/movie/upcoming",
    }

    def __init__(self, api_key: str | None = None, base_url: str | None = None) -> None:
        """
        Initialize TMDb client.

        Args:
            api_key: TMDb API key (uses settings if not provided)
            base_url: API root (uses settings if not provided)
        """
        self.api_key = api_key or settings.tmdb_api_key
        self.base_url = (base_url or settings.tmdb_base_url).rstrip("/")
        if not self.api_key:
            logger.warning("TMDb API key not configured")

    async def _fetch(self, endpoint: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        GET an endpoint and return the decoded JSON body.

        Raises:
            CatalogFetchError: missing API key, network error, non-2xx
                status or a body that is not JSON
        """
        if not self.api_key:
            raise CatalogFetchError(endpoint, "TMDb API key not configured")

        query: dict[str, Any] = {
            "api_key": self.api_key,
            "language": settings.tmdb_language,
        }
        if params:
            query.update(params)

        try:
            async with httpx.AsyncClient(timeout=settings.tmdb_timeout) as client:
                response = await client.get(f"{self.base_url}{endpoint}", params=query)
                response.raise_for_status()
                return response.json()

        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"TMDb returned {status} for {endpoint}")
            raise CatalogFetchError(endpoint, f"HTTP {status}", status_code=status) from e
        except httpx.HTTPError as e:
            logger.error(f"TMDb network error for {endpoint}: {e}")
            raise CatalogFetchError(endpoint, str(e) or type(e).__name__) from e
        except ValueError as e:
            logger.error(f"TMDb sent invalid JSON for {endpoint}: {e}")
            raise CatalogFetchError(endpoint, "invalid JSON body") from e

    async def _fetch_page(self, endpoint: str, page: int, **params: Any) -> MoviePage:
        if page < 1:
            raise ValueError(f"Page must be >= 1, got {page}")

        data = await self._fetch(endpoint, {**params, "page": page})
        try:
            return MoviePage.model_validate(data)
        except ValidationError as e:
            logger.error(f"Unexpected page shape from {endpoint}: {e}")
            raise CatalogFetchError(endpoint, "unexpected response shape") from e

    async def get_popular(self, page: int = 1) -> MoviePage:
        """Fetch one page of the popular listing."""
        return await self._fetch_page(self.LISTING_ENDPOINTS[Category.POPULAR], page)

    async def get_top_rated(self, page: int = 1) -> MoviePage:
        """Fetch one page of the top-rated listing."""
        return await self._fetch_page(self.LISTING_ENDPOINTS[Category.TOP_RATED], page)

    async def get_upcoming(self, page: int = 1) -> MoviePage:
        """Fetch one page of the upcoming listing."""
        return await self._fetch_page(self.LISTING_ENDPOINTS[Category.UPCOMING], page)

    async def search(self, query: str, page: int = 1) -> MoviePage:
        """
        Search movies by title.

        Args:
            query: Free-text query
            page: Page number (1-based)

        Returns:
            One page of matching movies
        """
        return await self._fetch_page("/search/movie", page, query=query)

    async def get_page(
        self,
        category: Category,
        page: int = 1,
        query: str | None = None,
    ) -> MoviePage:
        """
        Fetch one page of any category.

        Args:
            category: Listing to fetch
            page: Page number (1-based)
            query: Search text, required for Category.SEARCH

        Returns:
            One page of movies
        """
        if category == Category.SEARCH:
            if not query:
                raise ValueError("A query is required for search pages")
            return await self.search(query, page)
        return await self._fetch_page(self.LISTING_ENDPOINTS[category], page)

    async def get_movie_details(self, movie_id: int) -> MovieDetails:
        """
        Get the full record for one movie.

        Args:
            movie_id: TMDb movie ID

        Returns:
            Movie details
        """
        endpoint = f"/movie/{movie_id}"
        data = await self._fetch(endpoint)
        try:
            return MovieDetails.model_validate(data)
        except ValidationError as e:
            logger.error(f"Unexpected details shape for movie {movie_id}: {e}")
            raise CatalogFetchError(endpoint, "unexpected response shape") from e

    async def get_genres(self) -> list[Genre]:
        """
        Fetch the catalog's movie genres.

        Falls back to the bundled common genres if the catalog is
        unreachable, since the list only feeds the filter options.
        """
        try:
            data = await self._fetch("/genre/movie/list")
            return [Genre.model_validate(g) for g in data.get("genres", [])]
        except (CatalogFetchError, ValidationError) as e:
            logger.warning(f"Using bundled genre list: {e}")
            return list(COMMON_GENRES)

    def image_url(self, path: str | None, size: str = "w500") -> str:
        """
        Build a full image URL for a poster or backdrop path.

        Args:
            path: Catalog image path, e.g. "/abc.jpg"
            size: One of IMAGE_SIZES

        Returns:
            Image URL, or the placeholder image when path is empty
        """
        if size not in IMAGE_SIZES:
            raise ValueError(f"Unknown image size: {size}")
        if not path:
            return settings.placeholder_image
        return f"{settings.tmdb_image_base_url}/{size}{path}"
