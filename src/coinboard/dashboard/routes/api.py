"""JSON API endpoints for the coin table, related-coins drill-down and status."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from coinboard.exceptions import NotFound
from coinboard.models import SortMode

log = structlog.get_logger(__name__)

router = APIRouter()


def _no_snapshot() -> JSONResponse:
    return JSONResponse(
        content={"error": "Market data not loaded yet"}, status_code=503
    )


@router.get("/coins")
async def get_coins(
    request: Request,
    sort: SortMode | None = None,
    rank: int | None = Query(default=None, ge=0),
) -> JSONResponse:
    """Main table rows for the selected sort mode and rank cutoff.

    Query params:
        sort: Sort selector label, e.g. "Lowest Price". Defaults to
            VIEW_DEFAULT_SORT.
        rank: Keep coins with rank <= this value. Defaults to
            VIEW_DEFAULT_RANK.

    Returns:
        JSON object with the snapshot version and ordered coin rows.
    """
    snapshot = request.app.state.snapshot_store.current
    if snapshot is None:
        return _no_snapshot()

    view_settings = request.app.state.view_settings
    sort_mode = sort if sort is not None else view_settings.default_sort
    rank_cutoff = rank if rank is not None else view_settings.default_rank

    coins = request.app.state.query.build_main_view(snapshot, sort_mode, rank_cutoff)
    return JSONResponse(content={
        "version": snapshot.version,
        "sort": sort_mode.value,
        "rank": rank_cutoff,
        "count": len(coins),
        "coins": [c.to_dict() for c in coins],
    })


@router.get("/coins/{name}/related")
async def get_related_coins(request: Request, name: str) -> JSONResponse:
    """Selected coin plus coins of comparable total supply.

    Path params:
        name: Coin name as shown in the table (uppercased ticker id).
    """
    snapshot = request.app.state.snapshot_store.current
    if snapshot is None:
        return _no_snapshot()

    try:
        coin, related = request.app.state.query.build_related_view(snapshot, name)
    except NotFound as e:
        log.info("related_coin_not_found", name=name, version=snapshot.version)
        return JSONResponse(content={"error": str(e)}, status_code=404)

    return JSONResponse(content={
        "version": snapshot.version,
        "coin": coin.to_dict(),
        "related": [c.to_dict() for c in related],
    })


@router.get("/options")
async def get_options(request: Request) -> JSONResponse:
    """Selector options for the sort mode and rank cutoff controls."""
    view_settings = request.app.state.view_settings
    return JSONResponse(content={
        "sort_modes": [mode.value for mode in SortMode],
        "rank_cutoffs": list(view_settings.rank_cutoffs),
        "default_sort": view_settings.default_sort.value,
        "default_rank": view_settings.default_rank,
    })


@router.get("/status")
async def get_status(request: Request) -> JSONResponse:
    """Snapshot version, size and last refresh outcome."""
    snapshot_service = request.app.state.snapshot_service
    return JSONResponse(content=snapshot_service.get_status())
