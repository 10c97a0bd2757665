"""Concurrent fetching of the page batches that make up a pool."""

import asyncio
import logging
from dataclasses import dataclass, field

from cinedeck.schemas.movie import MoviePage, MovieSummary
from cinedeck.services.tmdb_client import Category, TMDbClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageRequest:
    """One page to fetch, truncated to `limit` records if set."""

    category: Category
    page: int
    limit: int | None = None


@dataclass(frozen=True)
class FetchPlan:
    """Ordered page requests for one category."""

    category: Category
    requests: tuple[PageRequest, ...]
    query: str | None = None

    @property
    def last_page(self) -> int:
        """Highest page fetched from the category's own listing."""
        pages = [r.page for r in self.requests if r.category == self.category]
        return max(pages, default=0)


@dataclass
class FetchResult:
    """Batches in plan order plus the raw pages they came from."""

    plan: FetchPlan
    batches: list[list[MovieSummary]] = field(default_factory=list)
    pages: list[MoviePage] = field(default_factory=list)

    @property
    def total_pages(self) -> int:
        """Total pages reported by the category's own listing."""
        totals = [
            page.total_pages
            for request, page in zip(self.plan.requests, self.pages)
            if request.category == self.plan.category
        ]
        return max(totals, default=0)

    @property
    def has_more(self) -> bool:
        return self.plan.last_page < self.total_pages


SEARCH_PAGES = 2


def plan_for(category: Category, query: str | None = None) -> FetchPlan:
    """
    Build the fetch plan for a category.

    The popular view mixes in top-rated and upcoming titles for variety;
    the other listings fetch their first three pages whole.

    Args:
        category: Category to build a pool for
        query: Search text (ignored unless category is Category.SEARCH)

    Returns:
        FetchPlan (empty for a blank search query)
    """
    if category != Category.SEARCH:
        query = None

    if category == Category.POPULAR:
        requests = (
            PageRequest(Category.POPULAR, 1, limit=15),
            PageRequest(Category.TOP_RATED, 1, limit=15),
            PageRequest(Category.UPCOMING, 1, limit=10),
            PageRequest(Category.POPULAR, 2, limit=10),
            PageRequest(Category.TOP_RATED, 2, limit=10),
        )
    elif category == Category.SEARCH:
        query = (query or "").strip()
        if not query:
            return FetchPlan(category=category, requests=(), query=None)
        requests = tuple(
            PageRequest(Category.SEARCH, page) for page in range(1, SEARCH_PAGES + 1)
        )
    else:
        requests = tuple(PageRequest(category, page) for page in (1, 2, 3))

    return FetchPlan(category=category, requests=requests, query=query)


async def fetch_batches(client: TMDbClient, plan: FetchPlan) -> FetchResult:
    """
    Fetch every page of a plan concurrently and wait for all of them.

    If any request fails the whole fetch fails: a partial pool would
    silently under-represent a source.

    Args:
        client: Catalog client
        plan: Pages to fetch

    Returns:
        FetchResult with one batch per request, in plan order

    Raises:
        CatalogFetchError: if any page request fails
    """
    if not plan.requests:
        return FetchResult(plan=plan)

    logger.info(
        f"Fetching {len(plan.requests)} pages for category '{plan.category.value}'"
    )
    pages = await asyncio.gather(
        *[client.get_page(r.category, r.page, query=plan.query) for r in plan.requests]
    )

    batches = [
        page.results[: r.limit] if r.limit is not None else list(page.results)
        for r, page in zip(plan.requests, pages)
    ]
    return FetchResult(plan=plan, batches=batches, pages=list(pages))
