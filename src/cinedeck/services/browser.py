"""Browse state container and pipeline orchestration."""

import logging
import random
from dataclasses import dataclass, field, replace

from cinedeck.schemas.filters import FilterCriteria
from cinedeck.schemas.movie import MovieSummary
from cinedeck.services.aggregator import fetch_batches, plan_for
from cinedeck.services.pipeline import ResultPool, build_pool, filter_movies, merge_unique
from cinedeck.services.tmdb_client import Category, TMDbClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BrowseState:
    """Everything the results view needs for the active category."""

    category: Category = Category.POPULAR
    query: str | None = None
    pool: ResultPool = ()
    criteria: FilterCriteria = field(default_factory=FilterCriteria)
    movies: list[MovieSummary] = field(default_factory=list)
    relaxed: bool = False
    page: int = 0
    has_more: bool = False
    loaded: bool = False


class MovieBrowser:
    """
    Owns the browse state and drives the pipeline.

    A category change always runs build_pool then apply_filters; a filter
    change reruns only the filters on the pool already loaded. When two
    category loads overlap, the one started last wins unless it fails.
    """

    def __init__(self, client: TMDbClient | None = None, rng: random.Random | None = None) -> None:
        """
        Initialize browser.

        Args:
            client: Catalog client (creates default if not provided)
            rng: Random source for pool shuffling
        """
        self.client = client or TMDbClient()
        self.rng = rng
        self.state = BrowseState()
        # Last started and last committed category loads
        self._generation = 0
        self._committed = 0

    async def switch_category(
        self,
        category: Category,
        query: str | None = None,
        criteria: FilterCriteria | None = None,
    ) -> BrowseState:
        """
        Build a fresh pool for a category and filter it.

        The previous state is kept if the fetch fails. A load that finishes
        after a later-started load has been committed is discarded.

        Args:
            category: Category to load
            query: Search text (Category.SEARCH only)
            criteria: Criteria to apply (keeps the current ones if not provided)

        Raises:
            CatalogFetchError: if any page request fails
        """
        self._generation += 1
        generation = self._generation

        plan = plan_for(category, query)
        result = await fetch_batches(self.client, plan)

        if generation < self._committed:
            logger.info(f"Discarding stale pool for '{category.value}'")
            return self.state

        if criteria is None:
            criteria = self.state.criteria
        pool = build_pool(result.batches, rng=self.rng)
        filtered = filter_movies(pool, criteria)
        self.state = replace(
            self.state,
            category=category,
            criteria=criteria,
            query=plan.query,
            pool=pool,
            movies=filtered.movies,
            relaxed=filtered.relaxed,
            page=plan.last_page,
            has_more=result.has_more,
            loaded=True,
        )
        self._committed = generation
        return self.state

    def update_filters(self, criteria: FilterCriteria) -> BrowseState:
        """Apply new criteria to the pool already loaded."""
        filtered = filter_movies(self.state.pool, criteria)
        self.state = replace(
            self.state,
            criteria=criteria,
            movies=filtered.movies,
            relaxed=filtered.relaxed,
        )
        return self.state

    def clear_filters(self) -> BrowseState:
        return self.update_filters(FilterCriteria())

    async def load_more(self) -> BrowseState:
        """
        Fetch the next page of the active category into the pool.

        New records are appended after the existing pool without
        reshuffling it, then the current filters are reapplied.

        Raises:
            CatalogFetchError: if the page request fails
        """
        if not self.state.has_more:
            return self.state

        snapshot = self.state
        next_page = snapshot.page + 1
        page = await self.client.get_page(
            snapshot.category, next_page, query=snapshot.query
        )

        # The pool was replaced or extended while the page was in flight
        if self.state.pool is not snapshot.pool or self.state.category != snapshot.category:
            logger.info(f"Discarding page {next_page} of '{snapshot.category.value}'")
            return self.state

        pool = tuple(merge_unique(self.state.pool, page.results))
        filtered = filter_movies(pool, self.state.criteria)
        self.state = replace(
            self.state,
            pool=pool,
            movies=filtered.movies,
            relaxed=filtered.relaxed,
            page=next_page,
            has_more=next_page < page.total_pages,
        )
        logger.info(f"Loaded page {next_page}; pool now {len(pool)} movies")
        return self.state
