"""API routers for the SkyView live feed."""

from fastapi import APIRouter

from .health import router as health_router
from .selection import router as selection_router
from .traffic import router as traffic_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(traffic_router)
api_router.include_router(selection_router)

__all__ = ["api_router"]
