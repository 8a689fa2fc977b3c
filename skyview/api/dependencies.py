"""FastAPI dependencies shared by the routers."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from skyview.services.engine import LiveFeedEngine


def get_engine(request: Request) -> LiveFeedEngine:
    """Return the engine created during application startup."""

    engine: LiveFeedEngine | None = getattr(request.app.state, "engine", None)
    if engine is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Live feed engine is not running",
        )
    return engine
