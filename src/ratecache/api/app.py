"""FastAPI application factory for the rate cache HTTP surface."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI

from ratecache.api import routes


def create_app(lifespan: Any = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        lifespan: Optional async context manager for application lifespan events.
                  Used by main.py to inject startup/shutdown logic.

    Returns:
        Configured FastAPI application. Route handlers expect the
        RateCacheService on ``app.state.service``.
    """
    app = FastAPI(
        title="Rate Cache",
        lifespan=lifespan,
    )
    app.include_router(routes.router, prefix="/api")
    return app
