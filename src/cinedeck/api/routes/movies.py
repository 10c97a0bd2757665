"""Movie browsing API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError

from cinedeck.dependencies import get_browser, get_tmdb_client
from cinedeck.schemas import (
    BrowseResponse,
    FilterCriteria,
    Genre,
    MovieDetails,
    SearchResponse,
    SortBy,
)
from cinedeck.services.browser import BrowseState, MovieBrowser
from cinedeck.services.tmdb_client import Category, TMDbClient

logger = logging.getLogger(__name__)
router = APIRouter()


def parse_genre_ids(raw: str) -> frozenset[int]:
    """
    Parse a comma-separated list of genre IDs.

    Args:
        raw: e.g. "28,12" (blank means no genre filter)

    Returns:
        Set of genre IDs

    Raises:
        HTTPException: 422 if any entry is not an integer
    """
    ids = set()
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        if not part.isdigit():
            raise HTTPException(status_code=422, detail=f"Invalid genre id: {part}")
        ids.add(int(part))
    return frozenset(ids)


def to_response(state: BrowseState) -> BrowseResponse:
    return BrowseResponse(
        category=state.category.value,
        query=state.query,
        criteria=state.criteria,
        total_in_pool=len(state.pool),
        relaxed=state.relaxed,
        has_more=state.has_more,
        results=state.movies,
    )


@router.get("/movies", response_model=BrowseResponse)
async def browse_movies(
    category: Category = Query(Category.POPULAR, description="Listing to browse"),
    q: str | None = Query(None, description="Search text when category is 'search'"),
    genres: str = Query("", description="Comma-separated genre IDs (any match)"),
    year: str = Query("", description="Exact release year"),
    min_rating: str = Query("", description="Minimum average rating (0-10)"),
    sort_by: SortBy = Query(SortBy.POPULARITY_DESC, description="Sort order"),
    refresh: bool = Query(False, description="Rebuild the pool even if loaded"),
    browser: MovieBrowser = Depends(get_browser),
) -> BrowseResponse:
    """
    Browse a category with filters applied.

    The pool is only rebuilt from the catalog when the category (or search
    text) changes, or when `refresh` is set. Otherwise the new filters are
    applied to the pool already loaded.
    """
    try:
        criteria = FilterCriteria(
            genres=parse_genre_ids(genres),
            year=year,
            min_rating=min_rating,
            sort_by=sort_by,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False)) from e

    state = browser.state
    query = q.strip() if q else None
    if category == Category.SEARCH and not query:
        raise HTTPException(status_code=422, detail="q is required when category is 'search'")

    needs_rebuild = (
        refresh
        or not state.loaded
        or state.category != category
        or (category == Category.SEARCH and state.query != query)
    )
    if needs_rebuild:
        logger.info(f"Rebuilding pool for category '{category.value}'")
        state = await browser.switch_category(category, query=query, criteria=criteria)
    elif criteria != state.criteria:
        state = browser.update_filters(criteria)

    return to_response(state)


@router.post("/movies/more", response_model=BrowseResponse)
async def load_more_movies(
    browser: MovieBrowser = Depends(get_browser),
) -> BrowseResponse:
    """Fetch the next catalog page of the active category into the pool."""
    if not browser.state.loaded:
        raise HTTPException(status_code=409, detail="No category loaded yet")

    state = await browser.load_more()
    return to_response(state)


@router.get("/movies/{movie_id}", response_model=MovieDetails)
async def get_movie(
    movie_id: int,
    client: TMDbClient = Depends(get_tmdb_client),
) -> MovieDetails:
    """Get the full catalog record for one movie."""
    return await client.get_movie_details(movie_id)


@router.get("/search", response_model=SearchResponse)
async def search_movies(
    q: str = Query(..., min_length=1, description="Title search string"),
    page: int = Query(1, ge=1, description="Results page"),
    client: TMDbClient = Depends(get_tmdb_client),
) -> SearchResponse:
    """
    Search the catalog by title.

    Returns one raw catalog page; records without posters are kept.
    """
    query = q.strip()
    if not query:
        raise HTTPException(status_code=422, detail="q must not be blank")

    result = await client.search(query, page)
    return SearchResponse(
        query=query,
        page=result.page,
        total_pages=result.total_pages,
        total_results=result.total_results,
        has_more=page < result.total_pages,
        results=result.results,
    )


@router.get("/genres", response_model=list[Genre])
async def list_genres(
    client: TMDbClient = Depends(get_tmdb_client),
) -> list[Genre]:
    """List the movie genres available for filtering."""
    return await client.get_genres()
