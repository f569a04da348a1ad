"""Entry point for the coin supply screener.

Wires the components together and serves the FastAPI dashboard with
uvicorn. The first snapshot is ingested inside the lifespan before the
server accepts requests; the refresh loop then re-ingests on
TICKER_REFRESH_INTERVAL.

Component wiring order (in _build_components):
1. AppSettings (configuration)
2. Logging setup
3. TickerClient (remote ticker API)
4. SnapshotStore (published snapshot owner)
5. SnapshotService (fetch -> derive -> publish)
6. QueryOrchestrator (main and related views)
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI

from coinboard.config import AppSettings
from coinboard.exceptions import InvalidRecord, TickerFetchError
from coinboard.logging import get_logger, setup_logging
from coinboard.market_data.snapshot_service import SnapshotService
from coinboard.market_data.ticker_client import TickerClient
from coinboard.query import QueryOrchestrator
from coinboard.snapshot import SnapshotStore


def _build_components(settings: AppSettings) -> dict[str, Any]:
    """Build all screener components from settings.

    Args:
        settings: Application-wide settings.

    Returns:
        Dict mapping component names to instances.
    """
    ticker_client = TickerClient(settings.ticker)
    snapshot_store = SnapshotStore()
    snapshot_service = SnapshotService(
        ticker_client=ticker_client,
        store=snapshot_store,
        refresh_interval=settings.ticker.refresh_interval,
        skip_invalid=settings.ticker.skip_invalid,
    )
    query = QueryOrchestrator(settings.view)

    return {
        "ticker_client": ticker_client,
        "snapshot_store": snapshot_store,
        "snapshot_service": snapshot_service,
        "query": query,
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage component lifecycle within the FastAPI application.

    On startup: stores components on app.state, ingests the first snapshot,
    starts the refresh loop. A failed first ingestion is logged and the API
    answers 503 until a refresh succeeds.

    On shutdown: stops the refresh loop and closes the HTTP client.
    """
    logger = get_logger("coinboard.main")
    settings = app.state.settings
    components = app.state.components

    app.state.snapshot_store = components["snapshot_store"]
    app.state.snapshot_service = components["snapshot_service"]
    app.state.query = components["query"]
    app.state.view_settings = settings.view

    try:
        await components["snapshot_service"].refresh(trigger="startup")
    except (TickerFetchError, InvalidRecord):
        logger.warning("initial_snapshot_unavailable")

    await components["snapshot_service"].start()

    logger.info("lifespan_started", limit=settings.ticker.limit)

    yield

    await components["snapshot_service"].stop()
    await components["ticker_client"].close()

    logger.info("coinboard_stopped")


async def run() -> None:
    """Run the screener dashboard."""
    # 1. Load settings
    settings = AppSettings()

    # 2. Setup logging
    setup_logging(settings.log_level)
    logger = get_logger("coinboard.main")

    # 3-6. Build all components
    components = _build_components(settings)

    from coinboard.dashboard.app import create_dashboard_app

    app = create_dashboard_app(lifespan=lifespan)
    app.state.settings = settings
    app.state.components = components

    logger.info(
        "starting_dashboard",
        host=settings.dashboard.host,
        port=settings.dashboard.port,
        ticker_url=settings.ticker.base_url,
    )

    config = uvicorn.Config(
        app,
        host=settings.dashboard.host,
        port=settings.dashboard.port,
        log_level="warning",  # Suppress uvicorn access logs
    )
    server = uvicorn.Server(config)
    await server.serve()


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
