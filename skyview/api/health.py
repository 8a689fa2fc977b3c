"""Health check endpoint."""

from fastapi import APIRouter
from skyview.config import settings

router = APIRouter()


@router.get("/healthz", summary="Health check")
def health_check() -> dict[str, str]:
    """Simple health check endpoint."""
    return {"status": "ok", "env": settings.skyview_env}
