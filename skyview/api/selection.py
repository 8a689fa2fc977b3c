"""Selected-aircraft enrichment endpoints."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from skyview.models import EnrichmentRecord, SelectionRequest
from skyview.services.engine import LiveFeedEngine

from .dependencies import get_engine

router = APIRouter(prefix="/api/v1", tags=["selection"])

logger = logging.getLogger("skyview.api.selection")


@router.post("/selection", response_model=EnrichmentRecord, summary="Select and enrich an aircraft")
async def select_aircraft(
    request: SelectionRequest, engine: LiveFeedEngine = Depends(get_engine)
) -> EnrichmentRecord:
    flight = engine.find_flight(request.icao24)
    if flight is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Aircraft {request.icao24} is not in the current snapshot",
        )

    record = await engine.enrichment.select(flight)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Selection was superseded before enrichment finished",
        )
    return record


@router.get(
    "/selection", response_model=Optional[EnrichmentRecord], summary="Current enrichment"
)
async def get_selection(
    engine: LiveFeedEngine = Depends(get_engine),
) -> Optional[EnrichmentRecord]:
    return engine.enrichment.current


@router.delete(
    "/selection", status_code=status.HTTP_204_NO_CONTENT, summary="Clear the selection"
)
async def clear_selection(engine: LiveFeedEngine = Depends(get_engine)) -> None:
    engine.enrichment.clear()
    logger.info("Selection cleared")
