"""Facade wiring the poller, airport activity cache and enrichment together."""

from __future__ import annotations

import logging
from typing import Optional

from skyview.ingestors import ADSBDBClient, FR24FeedClient, OpenSkyClient
from skyview.models.flights import FlightRecord
from skyview.models.traffic import FilterOptions, TrafficView
from skyview.services.airport_activity import AirportActivityCache
from skyview.services.enrichment import EnrichmentOrchestrator
from skyview.services.pipeline import build_traffic_view
from skyview.services.poller import PollingOrchestrator

logger = logging.getLogger("skyview.engine")


class LiveFeedEngine:
    def __init__(
        self,
        poller: PollingOrchestrator,
        activity: AirportActivityCache,
        enrichment: EnrichmentOrchestrator,
        *,
        filters: FilterOptions | None = None,
    ) -> None:
        self.poller = poller
        self.activity = activity
        self.enrichment = enrichment
        self.filters = filters or FilterOptions()

    @classmethod
    def from_settings(cls) -> "LiveFeedEngine":
        opensky = OpenSkyClient.from_settings()
        fr24 = FR24FeedClient()
        return cls(
            poller=PollingOrchestrator(opensky, fr24),
            activity=AirportActivityCache(opensky),
            enrichment=EnrichmentOrchestrator(ADSBDBClient(), fr24, opensky),
        )

    async def update_filters(self, filters: FilterOptions) -> None:
        """Store new filters; a changed airport resets the feed and route lookup."""

        self.filters = filters
        changed = await self.activity.set_airport(filters.airport)
        if changed:
            airport = self.activity.airport
            logger.info("Airport filter now %s", airport.code if airport else None)
            self.poller.invalidate(
                f"airport changed to {airport.code}" if airport else "airport cleared"
            )

    def find_flight(self, icao24: str) -> Optional[FlightRecord]:
        icao24 = icao24.strip().lower()
        for flight in self.poller.snapshot.flights:
            if flight.icao24 == icao24:
                return flight
        return None

    def view(self) -> TrafficView:
        return build_traffic_view(
            self.poller.snapshot,
            self.filters,
            routes=self.activity.routes,
            airport=self.activity.airport,
            status=self.poller.status,
        )


__all__ = ["LiveFeedEngine"]
