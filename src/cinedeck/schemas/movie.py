"""Pydantic schemas for catalog movie records."""

from pydantic import BaseModel, ConfigDict, Field


class Genre(BaseModel):
    """A catalog genre."""

    id: int
    name: str


class MovieSummary(BaseModel):
    """Movie record as returned by catalog listing endpoints."""

    model_config = ConfigDict(extra="ignore")

    id: int
    title: str
    overview: str = ""
    poster_path: str | None = None
    backdrop_path: str | None = None
    release_date: str | None = None
    popularity: float = 0.0
    vote_average: float = 0.0
    vote_count: int = 0
    genre_ids: list[int] = Field(default_factory=list)


class MoviePage(BaseModel):
    """One page of a paginated catalog listing."""

    model_config = ConfigDict(extra="ignore")

    page: int = Field(default=1, ge=1)
    results: list[MovieSummary] = Field(default_factory=list)
    total_pages: int = 0
    total_results: int = 0


class MovieDetails(MovieSummary):
    """Full movie record from the catalog detail endpoint."""

    runtime: int | None = None
    tagline: str | None = None
    genres: list[Genre] = Field(default_factory=list)
    status: str | None = None
    homepage: str | None = None
    imdb_id: str | None = None


# Used when the catalog genre list is unavailable
COMMON_GENRES: list[Genre] = [
    Genre(id=28, name="Action"),
    Genre(id=12, name="Adventure"),
    Genre(id=16, name="Animation"),
    Genre(id=35, name="Comedy"),
    Genre(id=80, name="Crime"),
    Genre(id=99, name="Documentary"),
    Genre(id=18, name="Drama"),
    Genre(id=10751, name="Family"),
    Genre(id=14, name="Fantasy"),
    Genre(id=36, name="History"),
    Genre(id=27, name="Horror"),
    Genre(id=10402, name="Music"),
    Genre(id=9648, name="Mystery"),
    Genre(id=10749, name="Romance"),
    Genre(id=878, name="Science Fiction"),
    Genre(id=10770, name="TV Movie"),
    Genre(id=53, name="Thriller"),
    Genre(id=10752, name="War"),
    Genre(id=37, name="Western"),
]
