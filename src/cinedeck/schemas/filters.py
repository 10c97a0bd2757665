"""Pydantic schemas for filter and sort selection."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SortBy(str, Enum):
    """Sort orders, using the catalog's wire values."""

    POPULARITY_DESC = "popularity.desc"
    RATING_DESC = "vote_average.desc"
    RELEASE_DATE_DESC = "release_date.desc"
    RELEASE_DATE_ASC = "release_date.asc"
    TITLE_ASC = "title.asc"
    TITLE_DESC = "title.desc"


class FilterCriteria(BaseModel):
    """User-chosen filter and sort configuration."""

    model_config = ConfigDict(frozen=True)

    genres: frozenset[int] = Field(default_factory=frozenset)
    year: int | None = None
    min_rating: float | None = Field(default=None, ge=0, le=10)
    sort_by: SortBy = SortBy.POPULARITY_DESC

    @field_validator("year", "min_rating", mode="before")
    @classmethod
    def blank_as_unset(cls, value: object) -> object:
        """Treat an empty form value as "no constraint"."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def is_active(self) -> bool:
        """Whether any criterion differs from the defaults."""
        return bool(
            self.genres
            or self.year is not None
            or self.min_rating is not None
            or self.sort_by != SortBy.POPULARITY_DESC
        )
