from __future__ import annotations

import asyncio
import contextlib
import logging
import time

from fastapi import FastAPI, Request

from skyview.api import api_router
from skyview.config import settings
from skyview.services.engine import LiveFeedEngine

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger("skyview")


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the live feed engine and run the refresh timer."""

    app.state.engine = LiveFeedEngine.from_settings()
    logger.info("Live feed engine initialized")

    if settings.poller_enabled:
        app.state.poller_task = asyncio.create_task(app.state.engine.poller.run())
        logger.info("Poller started")
    else:
        logger.info("Poller disabled; fetches only follow viewport and visibility events")

    try:
        yield
    finally:
        task = getattr(app.state, "poller_task", None)
        if task:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task


app = FastAPI(title="SkyView Live Feed", lifespan=lifespan)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log basic request information for observability."""

    start_time = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start_time) * 1000
    logger.info(
        "HTTP %s %s -> %s (%.2f ms)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


app.include_router(api_router)


@app.get("/", summary="Root")
def read_root() -> dict[str, str]:
    """Basic root endpoint for quick verification."""

    return {"message": "SkyView live feed is running"}
