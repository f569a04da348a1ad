"""FastAPI dashboard application factory."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI

from coinboard.dashboard.routes import actions, api


def create_dashboard_app(lifespan: Any = None) -> FastAPI:
    """Create and configure the FastAPI dashboard application.

    Route handlers read their collaborators from app.state: snapshot_store,
    snapshot_service, query and view_settings. main.py wires them in before
    the server starts; tests set them directly.

    Args:
        lifespan: Optional async context manager for startup/shutdown.

    Returns:
        Configured FastAPI application with the JSON and action routes.
    """
    app = FastAPI(
        title="Coin Supply Screener",
        lifespan=lifespan,
    )

    app.state.snapshot_store = None
    app.state.snapshot_service = None
    app.state.query = None
    app.state.view_settings = None

    app.include_router(api.router, prefix="/api")
    app.include_router(actions.router, prefix="/actions")

    return app
