"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cinedeck.api.errors import register_error_handlers
from cinedeck.api.routes import health, movies
from cinedeck.config import settings
from cinedeck.dependencies import browser
from cinedeck.services.tmdb_client import CatalogFetchError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: warm the default pool so the first request is served from memory
    try:
        state = await browser.switch_category(browser.state.category)
        logger.info(f"Startup pool loaded with {len(state.pool)} movies")
    except CatalogFetchError as e:
        logger.warning(f"Startup pool not loaded, will retry on first request: {e}")

    yield

    logger.info("Shutting down")


# Create FastAPI app
app = FastAPI(
    title="CineDeck API",
    description="Movie discovery with catalog aggregation and client-side filters",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Include routers
app.include_router(health.router)
app.include_router(movies.router, prefix="/api", tags=["movies"])


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    uvicorn.run("cinedeck.main:app", host=settings.api_host, port=settings.api_port)
