"""Pydantic schemas for browse and search responses."""

from pydantic import BaseModel

from cinedeck.schemas.filters import FilterCriteria
from cinedeck.schemas.movie import MovieSummary


class BrowseResponse(BaseModel):
    """Filtered view of the active category's pool."""

    category: str
    query: str | None = None
    criteria: FilterCriteria
    total_in_pool: int
    relaxed: bool = False
    has_more: bool = False
    results: list[MovieSummary]


class SearchResponse(BaseModel):
    """One page of raw catalog search results."""

    query: str
    page: int
    total_pages: int
    total_results: int
    has_more: bool
    results: list[MovieSummary]
