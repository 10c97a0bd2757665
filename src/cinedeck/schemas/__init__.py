"""Pydantic schemas for API requests and responses."""

from cinedeck.schemas.browse import BrowseResponse, SearchResponse
from cinedeck.schemas.filters import FilterCriteria, SortBy
from cinedeck.schemas.movie import (
    COMMON_GENRES,
    Genre,
    MovieDetails,
    MoviePage,
    MovieSummary,
)

__all__ = [
    "BrowseResponse",
    "SearchResponse",
    "FilterCriteria",
    "SortBy",
    "COMMON_GENRES",
    "Genre",
    "MovieDetails",
    "MoviePage",
    "MovieSummary",
]
