"""Shared test fixtures."""

import pytest
from fastapi import FastAPI

from cinedeck.api.errors import register_error_handlers
from cinedeck.api.routes import health, movies


@pytest.fixture
def test_app() -> FastAPI:
    """Minimal FastAPI app without the startup pool load, for API tests."""
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(health.router)
    app.include_router(movies.router, prefix="/api")
    return app
