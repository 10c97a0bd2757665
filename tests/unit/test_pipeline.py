"""Unit tests for the aggregation and filter pipeline."""

import random

from cinedeck.schemas.filters import FilterCriteria, SortBy
from cinedeck.schemas.movie import MovieSummary
from cinedeck.services.pipeline import (
    MIN_GRID_FILL,
    apply_filters,
    build_pool,
    filter_movies,
    merge_unique,
    sort_movies,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def make_movie(
    id: int,
    title: str | None = None,
    poster_path: str | None = "/poster.jpg",
    release_date: str | None = "2020-06-01",
    popularity: float = 10.0,
    vote_average: float = 7.0,
    genre_ids: list[int] | None = None,
) -> MovieSummary:
    return MovieSummary(
        id=id,
        title=title or f"Movie {id}",
        poster_path=poster_path,
        release_date=release_date,
        popularity=popularity,
        vote_average=vote_average,
        genre_ids=genre_ids if genre_ids is not None else [18],
    )


def ids(movies) -> list[int]:
    return [m.id for m in movies]


def make_pool(n: int, **kwargs) -> tuple[MovieSummary, ...]:
    return tuple(make_movie(i, **kwargs) for i in range(1, n + 1))


# ---------------------------------------------------------------------------
# merge_unique / build_pool
# ---------------------------------------------------------------------------


class TestMergeUnique:
    def test_keeps_first_occurrence(self) -> None:
        first = make_movie(1, title="First")
        dupe = make_movie(1, title="Second")
        merged = merge_unique([], [first, dupe])
        assert len(merged) == 1
        assert merged[0].title == "First"

    def test_existing_records_win_over_incoming(self) -> None:
        existing = [make_movie(1, title="Old")]
        merged = merge_unique(existing, [make_movie(1, title="New"), make_movie(2)])
        assert ids(merged) == [1, 2]
        assert merged[0].title == "Old"

    def test_drops_records_without_poster(self) -> None:
        merged = merge_unique([], [make_movie(1, poster_path=None), make_movie(2, poster_path="")])
        assert merged == []

    def test_does_not_mutate_existing(self) -> None:
        existing = [make_movie(1)]
        merge_unique(existing, [make_movie(2)])
        assert ids(existing) == [1]


class TestBuildPool:
    def test_empty_input_yields_empty_pool(self) -> None:
        assert build_pool([]) == ()
        assert build_pool([[], []]) == ()

    def test_ids_are_unique(self) -> None:
        batches = [
            [make_movie(1), make_movie(2), make_movie(3)],
            [make_movie(2), make_movie(3), make_movie(4)],
            [make_movie(4), make_movie(1)],
        ]
        pool = build_pool(batches)
        assert len(ids(pool)) == len(set(ids(pool)))

    def test_every_record_has_a_poster(self) -> None:
        batches = [
            [make_movie(1), make_movie(2, poster_path=None)],
            [make_movie(3, poster_path=""), make_movie(4)],
        ]
        pool = build_pool(batches)
        assert all(m.poster_path for m in pool)
        assert sorted(ids(pool)) == [1, 4]

    def test_shuffle_is_a_permutation_of_deduplicated_input(self) -> None:
        batches = [
            [make_movie(i) for i in range(1, 21)],
            [make_movie(i) for i in range(15, 31)],
            [make_movie(99, poster_path=None)],
        ]
        pool = build_pool(batches, rng=random.Random(7))
        assert sorted(ids(pool)) == list(range(1, 31))

    def test_dedup_keeps_first_batch_record(self) -> None:
        batches = [
            [make_movie(1, title="From popular")],
            [make_movie(1, title="From top rated")],
        ]
        pool = build_pool(batches)
        assert pool[0].title == "From popular"

    def test_poster_less_duplicate_does_not_shadow_later_record(self) -> None:
        batches = [[make_movie(1, poster_path=None)], [make_movie(1, title="Has poster")]]
        pool = build_pool(batches)
        assert len(pool) == 1
        assert pool[0].title == "Has poster"

    def test_seeded_rng_is_reproducible(self) -> None:
        batches = [[make_movie(i) for i in range(1, 41)]]
        first = build_pool(batches, rng=random.Random(42))
        second = build_pool(batches, rng=random.Random(42))
        assert ids(first) == ids(second)

    def test_returns_immutable_pool(self) -> None:
        assert isinstance(build_pool([[make_movie(1)]]), tuple)


# ---------------------------------------------------------------------------
# sort_movies
# ---------------------------------------------------------------------------


class TestSortMovies:
    def test_popularity_desc(self) -> None:
        movies = [make_movie(1, popularity=5), make_movie(2, popularity=50), make_movie(3, popularity=20)]
        assert ids(sort_movies(movies, SortBy.POPULARITY_DESC)) == [2, 3, 1]

    def test_rating_desc_is_non_increasing(self) -> None:
        movies = [make_movie(i, vote_average=v) for i, v in enumerate([6.1, 8.4, 7.0, 8.4, 3.2], 1)]
        result = sort_movies(movies, SortBy.RATING_DESC)
        assert all(a.vote_average >= b.vote_average for a, b in zip(result, result[1:]))

    def test_equal_keys_keep_pool_order(self) -> None:
        movies = [make_movie(3, vote_average=8), make_movie(1, vote_average=8), make_movie(2, vote_average=8)]
        assert ids(sort_movies(movies, SortBy.RATING_DESC)) == [3, 1, 2]

    def test_release_date_desc_puts_missing_dates_last(self) -> None:
        movies = [
            make_movie(1, release_date=None),
            make_movie(2, release_date="2001-01-01"),
            make_movie(3, release_date="2024-05-05"),
            make_movie(4, release_date="not a date"),
        ]
        assert ids(sort_movies(movies, SortBy.RELEASE_DATE_DESC)) == [3, 2, 1, 4]

    def test_release_date_asc_puts_missing_dates_first(self) -> None:
        movies = [
            make_movie(1, release_date="2024-05-05"),
            make_movie(2, release_date=""),
            make_movie(3, release_date="2001-01-01"),
        ]
        assert ids(sort_movies(movies, SortBy.RELEASE_DATE_ASC)) == [2, 3, 1]

    def test_title_asc_uses_locale_aware_order(self) -> None:
        movies = [
            make_movie(1, title="Amélie"),
            make_movie(2, title="Apollo 13"),
            make_movie(3, title="amadeus"),
        ]
        result = sort_movies(movies, SortBy.TITLE_ASC)
        assert [m.title for m in result] == ["amadeus", "Amélie", "Apollo 13"]

    def test_title_desc_reverses_title_asc(self) -> None:
        movies = [
            make_movie(1, title="Amélie"),
            make_movie(2, title="Apollo 13"),
            make_movie(3, title="amadeus"),
        ]
        result = sort_movies(movies, SortBy.TITLE_DESC)
        assert [m.title for m in result] == ["Apollo 13", "Amélie", "amadeus"]


# ---------------------------------------------------------------------------
# apply_filters
# ---------------------------------------------------------------------------


class TestApplyFilters:
    def test_empty_pool_returns_empty(self) -> None:
        criteria = FilterCriteria(genres={28}, year=2020, min_rating=9, sort_by=SortBy.TITLE_ASC)
        assert apply_filters((), criteria) == []

    def test_no_criteria_returns_whole_pool_by_popularity(self) -> None:
        pool = (make_movie(1, popularity=1), make_movie(2, popularity=3), make_movie(3, popularity=2))
        assert ids(apply_filters(pool, FilterCriteria())) == [2, 3, 1]

    def test_genre_filter_matches_any_selected_genre(self) -> None:
        pool = (
            make_movie(1, genre_ids=[28]),
            make_movie(2, genre_ids=[35]),
            make_movie(3, genre_ids=[28, 35]),
            make_movie(4, genre_ids=[]),
        )
        result = apply_filters(pool, FilterCriteria(genres={28, 35}))
        assert sorted(ids(result)) == [1, 2, 3]

    def test_year_filter_is_exact_and_drops_undated(self) -> None:
        pool = (
            make_movie(1, release_date="2020-01-01"),
            make_movie(2, release_date="2021-01-01"),
            make_movie(3, release_date=None),
            make_movie(4, release_date="garbage"),
        )
        assert ids(apply_filters(pool, FilterCriteria(year=2020))) == [1]

    def test_rating_threshold_is_inclusive(self) -> None:
        pool = (make_movie(1, vote_average=7.0), make_movie(2, vote_average=6.9))
        assert ids(apply_filters(pool, FilterCriteria(min_rating=7))) == [1]

    def test_does_not_mutate_pool(self) -> None:
        pool = [make_movie(1, popularity=1), make_movie(2, popularity=2)]
        apply_filters(pool, FilterCriteria())
        assert ids(pool) == [1, 2]

    def test_additional_constraint_never_increases_count(self) -> None:
        pool = tuple(
            make_movie(
                i,
                genre_ids=[28] if i % 2 else [18],
                release_date=f"{2015 + i % 4}-01-01",
                vote_average=float(i % 10),
            )
            for i in range(1, 9)
        )
        base = FilterCriteria(genres={28})
        with_year = FilterCriteria(genres={28}, year=2016)
        with_both = FilterCriteria(genres={28}, year=2016, min_rating=5)
        assert len(apply_filters(pool, with_year)) <= len(apply_filters(pool, base))
        assert len(apply_filters(pool, with_both)) <= len(apply_filters(pool, with_year))


# ---------------------------------------------------------------------------
# Relaxation fallback
# ---------------------------------------------------------------------------


def relaxation_pool() -> tuple[MovieSummary, ...]:
    """20 movies: 15 action (3 from 2020 rated 8+), 5 drama."""
    action_strict = [
        make_movie(i, genre_ids=[28], release_date="2020-03-01", vote_average=8.5, popularity=i)
        for i in range(1, 4)
    ]
    action_other = [
        make_movie(i, genre_ids=[28], release_date="2012-03-01", vote_average=5.0, popularity=i)
        for i in range(4, 16)
    ]
    drama = [
        make_movie(i, genre_ids=[18], release_date="2020-03-01", vote_average=9.0, popularity=i)
        for i in range(16, 21)
    ]
    return tuple(action_strict + action_other + drama)


class TestRelaxation:
    def test_relaxes_to_genre_only_when_too_few_matches(self) -> None:
        pool = relaxation_pool()
        criteria = FilterCriteria(genres={28}, year=2020, min_rating=8)
        result = filter_movies(pool, criteria)
        assert result.relaxed is True
        assert len(result.movies) == 15
        assert ids(result.movies) == list(range(15, 0, -1))

    def test_relaxed_result_uses_requested_sort(self) -> None:
        pool = relaxation_pool()
        criteria = FilterCriteria(genres={28}, year=2020, min_rating=8, sort_by=SortBy.RATING_DESC)
        result = apply_filters(pool, criteria)
        assert len(result) == 15
        assert ids(result[:3]) == [1, 2, 3]
        assert all(a.vote_average >= b.vote_average for a, b in zip(result, result[1:]))

    def test_relaxed_result_sorted_by_title(self) -> None:
        pool = relaxation_pool()
        criteria = FilterCriteria(genres={28}, year=2020, min_rating=8, sort_by=SortBy.TITLE_DESC)
        result = apply_filters(pool, criteria)
        assert len(result) == 15
        assert result[0].title == "Movie 9"

    def test_no_relaxation_for_small_pool(self) -> None:
        pool = make_pool(MIN_GRID_FILL - 1, release_date="2012-01-01")
        result = filter_movies(pool, FilterCriteria(year=2020))
        assert result.relaxed is False
        assert result.movies == []

    def test_relaxes_when_pool_is_exactly_threshold(self) -> None:
        pool = make_pool(MIN_GRID_FILL, release_date="2012-01-01")
        result = filter_movies(pool, FilterCriteria(year=2020))
        assert result.relaxed is True
        assert len(result.movies) == MIN_GRID_FILL

    def test_no_relaxation_when_strict_result_fills_grid(self) -> None:
        pool = make_pool(20)
        result = filter_movies(pool, FilterCriteria(year=2020))
        assert result.relaxed is False
        assert len(result.movies) == 20

    def test_relaxed_not_used_unless_strictly_larger(self) -> None:
        pool = tuple(make_movie(i, genre_ids=[28] if i <= 5 else [18]) for i in range(1, 21))
        result = filter_movies(pool, FilterCriteria(genres={28}))
        assert result.relaxed is False
        assert len(result.movies) == 5

    def test_relaxation_keeps_genre_filter(self) -> None:
        pool = relaxation_pool()
        result = apply_filters(pool, FilterCriteria(genres={28}, min_rating=9.5))
        assert all(28 in m.genre_ids for m in result)
