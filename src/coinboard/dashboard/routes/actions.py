"""POST endpoints for dashboard-triggered actions."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from coinboard.exceptions import InvalidRecord, TickerFetchError

log = structlog.get_logger(__name__)

router = APIRouter()


@router.post("/refresh")
async def refresh_snapshot(request: Request) -> JSONResponse:
    """Re-ingest the ticker batch and return the updated status.

    A failed refresh keeps the previous snapshot and answers 502.
    """
    snapshot_service = request.app.state.snapshot_service

    try:
        snapshot = await snapshot_service.refresh()
        log.info("snapshot_refreshed_via_dashboard", version=snapshot.version)
    except (TickerFetchError, InvalidRecord) as e:
        log.error("dashboard_refresh_failed", error=str(e))
        return JSONResponse(
            content={"error": str(e), **snapshot_service.get_status()},
            status_code=502,
        )

    return JSONResponse(content=snapshot_service.get_status())
