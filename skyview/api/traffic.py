"""Traffic view and renderer event endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from skyview.models import (
    DispatchResponse,
    FilterOptions,
    FilterUpdateResponse,
    TrafficView,
    Viewport,
    VisibilityUpdate,
)
from skyview.services.engine import LiveFeedEngine

from .dependencies import get_engine

router = APIRouter(prefix="/api/v1", tags=["traffic"])

logger = logging.getLogger("skyview.api.traffic")


@router.get("/traffic", response_model=TrafficView, summary="Current traffic view")
async def get_traffic(engine: LiveFeedEngine = Depends(get_engine)) -> TrafficView:
    """Filtered and ranked flights from the latest published snapshot."""

    return engine.view()


@router.post("/viewport", response_model=DispatchResponse, summary="Report the map viewport")
async def update_viewport(
    viewport: Viewport, engine: LiveFeedEngine = Depends(get_engine)
) -> DispatchResponse:
    task = engine.poller.update_viewport(viewport)
    return DispatchResponse(dispatched=task is not None)


@router.post(
    "/visibility", response_model=DispatchResponse, summary="Report renderer visibility"
)
async def update_visibility(
    update: VisibilityUpdate, engine: LiveFeedEngine = Depends(get_engine)
) -> DispatchResponse:
    task = engine.poller.set_visible(update.visible)
    return DispatchResponse(dispatched=task is not None)


@router.put("/filters", response_model=FilterUpdateResponse, summary="Replace filters")
async def update_filters(
    filters: FilterOptions, engine: LiveFeedEngine = Depends(get_engine)
) -> FilterUpdateResponse:
    """Apply search, airport and hard filters; resolves the airport query."""

    await engine.update_filters(filters)
    airport = engine.activity.airport
    logger.info(
        "Filters updated: search=%r airport=%s",
        filters.search,
        airport.code if airport else None,
    )
    return FilterUpdateResponse(airport=airport)
