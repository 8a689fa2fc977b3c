"""Polling orchestrator: decides when to fetch and publishes fresh snapshots.

Every dispatched cycle captures a generation id. Results are only published
while that id is still current, so a slow cycle can never overwrite a newer
one. Nothing is cancelled; stale work simply has no effect.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
import logging
import time
from typing import Callable, Optional, Protocol

from skyview.config import settings
from skyview.domain.geo import GeoBounds, compute_viewport_bounds
from skyview.ingestors.opensky import OpenSkyError, OpenSkyRateLimitError
from skyview.models.flights import FlightMetadata, FlightRecord, SecondaryFeedResult
from skyview.models.traffic import FeedSnapshot, FeedStatus, Viewport
from skyview.services.pipeline import merge_flights

logger = logging.getLogger("skyview.poller")

PAUSED_ZOOM_REASON = "ZOOM IN TO VIEW TRAFFIC"
TOTAL_FAILURE_MESSAGE = "Unable to fetch flight data."

SnapshotListener = Callable[[FeedSnapshot], None]


class StateFeed(Protocol):
    async def get_states(self, bounds: GeoBounds | None = None) -> list[FlightRecord]: ...


class SecondaryFeed(Protocol):
    async def get_feed(self, bounds: GeoBounds) -> SecondaryFeedResult: ...


class PollingOrchestrator:
    """Funnel viewport, visibility and timer triggers into guarded fetch cycles."""

    def __init__(
        self,
        primary: StateFeed,
        secondary: SecondaryFeed,
        *,
        refresh_interval: float | None = None,
        min_fetch_interval: float | None = None,
        min_zoom: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.primary = primary
        self.secondary = secondary
        self.refresh_interval = (
            refresh_interval if refresh_interval is not None else settings.refresh_interval_seconds
        )
        self.min_fetch_interval = (
            min_fetch_interval
            if min_fetch_interval is not None
            else settings.min_fetch_interval_seconds
        )
        self.min_zoom = min_zoom if min_zoom is not None else settings.min_zoom
        self._clock = clock

        self._viewport: Optional[Viewport] = None
        self._visible = True
        self._generation = 0
        self._in_flight = False
        self._last_dispatch: Optional[float] = None
        self._snapshot = FeedSnapshot()
        self._status = FeedStatus()
        self._listeners: list[SnapshotListener] = []
        self._tasks: set[asyncio.Task] = set()

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def snapshot(self) -> FeedSnapshot:
        return self._snapshot

    @property
    def status(self) -> FeedStatus:
        return self._status

    @property
    def viewport(self) -> Optional[Viewport]:
        return self._viewport

    def add_listener(self, listener: SnapshotListener) -> None:
        self._listeners.append(listener)

    def update_viewport(self, viewport: Viewport) -> Optional[asyncio.Task]:
        self._viewport = viewport
        return self.try_dispatch("viewport")

    def set_visible(self, visible: bool) -> Optional[asyncio.Task]:
        resumed = visible and not self._visible
        self._visible = visible
        if resumed:
            return self.try_dispatch("visibility")
        return None

    def invalidate(self, reason: str) -> None:
        """Discard any in-flight cycle and let the next trigger dispatch at once."""

        self._generation += 1
        self._in_flight = False
        self._last_dispatch = None
        self._status = self._status.model_copy(update={"loading": False})
        logger.info("Feed invalidated (%s); generation now %s", reason, self._generation)

    def try_dispatch(self, reason: str) -> Optional[asyncio.Task]:
        """Start a fetch cycle if every gate allows it.

        Returns the scheduled cycle task, or ``None`` when the trigger was
        skipped. Must be called from within the running event loop.
        """

        if not self._visible:
            return None
        if self._viewport is None:
            logger.debug("No viewport yet; skipping %s trigger", reason)
            return None

        if self._viewport.zoom < self.min_zoom:
            self._status = self._status.model_copy(
                update={"paused_reason": PAUSED_ZOOM_REASON, "loading": False}
            )
            return None
        if self._status.paused_reason:
            self._status = self._status.model_copy(update={"paused_reason": None})

        now = self._clock()
        if (
            self._last_dispatch is not None
            and now - self._last_dispatch < self.min_fetch_interval
        ):
            logger.debug("Debounced %s trigger", reason)
            return None
        if self._in_flight:
            logger.debug("Cycle already in flight; skipping %s trigger", reason)
            return None

        self._generation += 1
        cycle_id = self._generation
        self._in_flight = True
        self._last_dispatch = now
        self._status = self._status.model_copy(update={"loading": True, "error": None})
        bounds = compute_viewport_bounds(self._viewport.raw_bounds())

        logger.info("Dispatching cycle %s (%s) for %s", cycle_id, reason, bounds)
        task = asyncio.create_task(self._run_cycle(cycle_id, bounds))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def refresh(self, reason: str = "manual") -> bool:
        """Dispatch and wait for the cycle; ``False`` when no cycle started."""

        task = self.try_dispatch(reason)
        if task is None:
            return False
        await task
        return True

    async def run(self) -> None:
        """Timer trigger; runs until cancelled."""

        logger.info("Poller started (interval=%ss)", self.refresh_interval)
        while True:
            self.try_dispatch("timer")
            await asyncio.sleep(self.refresh_interval)

    def _is_current(self, cycle_id: int) -> bool:
        return cycle_id == self._generation

    async def _run_cycle(self, cycle_id: int, bounds: GeoBounds) -> None:
        primary_task = asyncio.create_task(self._fetch_primary(bounds))
        secondary_task = asyncio.create_task(self._fetch_secondary(bounds))
        try:
            primary, rate_limited = await primary_task
            if self._is_current(cycle_id):
                self._status = self._status.model_copy(update={"rate_limited": rate_limited})
                if primary is not None:
                    self._publish(cycle_id, "primary", primary, self._snapshot.metadata)

            secondary = await secondary_task
            if not self._is_current(cycle_id):
                logger.info("Discarding stale cycle %s", cycle_id)
                return

            primary = primary or []
            if not secondary.ok and not primary:
                logger.warning("Cycle %s: no live positions from any source", cycle_id)
                self._status = self._status.model_copy(update={"error": TOTAL_FAILURE_MESSAGE})
                return

            merged = merge_flights(primary, secondary.flights)
            self._publish(cycle_id, "merged", merged, secondary.metadata)
        finally:
            if self._is_current(cycle_id):
                self._in_flight = False
                self._status = self._status.model_copy(update={"loading": False})

    async def _fetch_primary(
        self, bounds: GeoBounds
    ) -> tuple[Optional[list[FlightRecord]], bool]:
        try:
            return await self.primary.get_states(bounds), False
        except OpenSkyRateLimitError:
            logger.warning("Primary feed rate limited; waiting for the next tick")
            return None, True
        except OpenSkyError as exc:
            logger.warning("Primary feed unavailable: %s", exc)
            return None, False
        except Exception as exc:
            logger.warning("Primary feed failed unexpectedly: %s", exc)
            return None, False

    async def _fetch_secondary(self, bounds: GeoBounds) -> SecondaryFeedResult:
        try:
            return await self.secondary.get_feed(bounds)
        except Exception as exc:
            logger.warning("Secondary feed failed unexpectedly: %s", exc)
            return SecondaryFeedResult(ok=False)

    def _publish(
        self,
        cycle_id: int,
        stage: str,
        flights: list[FlightRecord],
        metadata: dict[str, FlightMetadata],
    ) -> None:
        snapshot = FeedSnapshot(
            generation=cycle_id,
            stage=stage,
            flights=flights,
            metadata=metadata,
            published_at=datetime.now(timezone.utc),
        )
        self._snapshot = snapshot
        logger.debug("Published %s snapshot for cycle %s (%s flights)", stage, cycle_id, len(flights))

        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Snapshot listener failed")


__all__ = [
    "PAUSED_ZOOM_REASON",
    "PollingOrchestrator",
    "TOTAL_FAILURE_MESSAGE",
]
