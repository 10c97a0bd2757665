"""Movie aggregation and filter pipeline.

Turns page batches from the catalog into a pool of unique, displayable
records, then filters and sorts that pool for display:

1. build_pool: concatenate, drop poster-less records, dedupe by id, shuffle
2. apply_filters: genre (any-of), exact year, minimum rating, sort
3. If too few records survive, fall back to the genre filter alone
"""

import logging
import random
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from cinedeck.schemas.filters import FilterCriteria, SortBy
from cinedeck.schemas.movie import MovieSummary
from cinedeck.utils.text import parse_release_date, release_sort_key, title_sort_key

logger = logging.getLogger(__name__)

# Three rows of four on the results grid
MIN_GRID_FILL = 12

ResultPool = tuple[MovieSummary, ...]


@dataclass(frozen=True)
class FilterResult:
    """Movies to display, and whether the relaxed fallback produced them."""

    movies: list[MovieSummary]
    relaxed: bool = False


def merge_unique(
    existing: Sequence[MovieSummary],
    incoming: Iterable[MovieSummary],
) -> list[MovieSummary]:
    """
    Append displayable records whose id is not yet present.

    Records without a poster path are dropped. Order is preserved and the
    first occurrence of an id wins.

    Args:
        existing: Records already accepted (assumed unique)
        incoming: Candidate records in arrival order

    Returns:
        New list with existing records followed by accepted new ones
    """
    merged = list(existing)
    seen = {movie.id for movie in merged}
    for movie in incoming:
        if not movie.poster_path or movie.id in seen:
            continue
        seen.add(movie.id)
        merged.append(movie)
    return merged


def build_pool(
    batches: Iterable[Iterable[MovieSummary]],
    rng: random.Random | None = None,
) -> ResultPool:
    """
    Merge page batches into one deduplicated, shuffled pool.

    Args:
        batches: Page batches in arrival order, each in source ranking order
        rng: Random source for the shuffle (module random if not provided)

    Returns:
        Pool with unique ids and a poster path on every record
    """
    concatenated = [movie for batch in batches for movie in batch]
    unique = merge_unique([], concatenated)

    # Shuffle so no single source dominates the front of the unfiltered view
    (rng or random).shuffle(unique)

    logger.info(
        f"Built pool of {len(unique)} movies from {len(concatenated)} records"
    )
    return tuple(unique)


def _matches_genres(movie: MovieSummary, genres: frozenset[int]) -> bool:
    return not genres.isdisjoint(movie.genre_ids)


def _matches_year(movie: MovieSummary, year: int) -> bool:
    released = parse_release_date(movie.release_date)
    return released is not None and released.year == year


def sort_movies(movies: Iterable[MovieSummary], sort_by: SortBy) -> list[MovieSummary]:
    """
    Return movies ordered by the given sort key.

    Sorting is stable, so records with equal keys keep their pool order.
    """
    if sort_by == SortBy.RATING_DESC:
        return sorted(movies, key=lambda m: m.vote_average, reverse=True)
    if sort_by == SortBy.RELEASE_DATE_DESC:
        return sorted(movies, key=lambda m: release_sort_key(m.release_date), reverse=True)
    if sort_by == SortBy.RELEASE_DATE_ASC:
        return sorted(movies, key=lambda m: release_sort_key(m.release_date))
    if sort_by == SortBy.TITLE_ASC:
        return sorted(movies, key=lambda m: title_sort_key(m.title))
    if sort_by == SortBy.TITLE_DESC:
        return sorted(movies, key=lambda m: title_sort_key(m.title), reverse=True)
    return sorted(movies, key=lambda m: m.popularity, reverse=True)


def filter_movies(pool: Sequence[MovieSummary], criteria: FilterCriteria) -> FilterResult:
    """
    Filter and sort a pool, reporting whether the relaxed fallback was used.

    Args:
        pool: Pool built by build_pool
        criteria: Active filter and sort selection

    Returns:
        FilterResult with the ordered movies to display
    """
    by_genre = list(pool)
    if criteria.genres:
        by_genre = [m for m in by_genre if _matches_genres(m, criteria.genres)]

    strict = by_genre
    if criteria.year is not None:
        strict = [m for m in strict if _matches_year(m, criteria.year)]
    if criteria.min_rating is not None:
        strict = [m for m in strict if m.vote_average >= criteria.min_rating]

    strict = sort_movies(strict, criteria.sort_by)

    if len(strict) < MIN_GRID_FILL and len(pool) >= MIN_GRID_FILL:
        # Too restrictive: keep the genre choice, ignore year and rating
        relaxed = sort_movies(by_genre, criteria.sort_by)
        if len(relaxed) > len(strict):
            logger.info(
                f"Relaxed filters: {len(strict)} strict matches, "
                f"{len(relaxed)} with genre filter only"
            )
            return FilterResult(movies=relaxed, relaxed=True)

    return FilterResult(movies=strict)


def apply_filters(pool: Sequence[MovieSummary], criteria: FilterCriteria) -> list[MovieSummary]:
    """
    Filter and sort a pool for display.

    Never mutates the pool and never raises: records with missing dates
    are excluded by the year filter and sort as the oldest possible date.

    Args:
        pool: Pool built by build_pool
        criteria: Active filter and sort selection

    Returns:
        Ordered movies to display (may be empty)
    """
    return filter_movies(pool, criteria).movies
