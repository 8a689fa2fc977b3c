"""Route lookup built from one airport's recent departures and arrivals."""

from __future__ import annotations

import asyncio
import logging
import time
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Protocol

from skyview.config import settings
from skyview.domain.airports import resolve_airport
from skyview.models.airports import Airport
from skyview.models.flights import FlightLogEntry, RouteInfo

logger = logging.getLogger("skyview.airport_activity")

_EMPTY_ROUTES: Mapping[str, RouteInfo] = MappingProxyType({})


class FlightLogSource(Protocol):
    async def get_airport_flights(
        self, airport: str, kind: str, begin: int, end: int
    ) -> list[FlightLogEntry]: ...


def build_route_lookup(
    departures: list[FlightLogEntry],
    arrivals: list[FlightLogEntry],
    airport_code: str,
) -> dict[str, RouteInfo]:
    """Map icao24 to origin/destination for traffic at ``airport_code``.

    Departures are applied first. Arrivals only add aircraft that did not
    already appear as a departure.
    """

    routes: dict[str, RouteInfo] = {}
    for flight in departures:
        routes[flight.icao24] = RouteInfo(
            origin=flight.est_departure_airport or airport_code,
            destination=flight.est_arrival_airport,
        )
    for flight in arrivals:
        if flight.icao24 in routes:
            continue
        routes[flight.icao24] = RouteInfo(
            origin=flight.est_departure_airport,
            destination=flight.est_arrival_airport or airport_code,
        )
    return routes


class AirportActivityCache:
    """Holds the route lookup for the currently selected airport."""

    def __init__(
        self,
        client: FlightLogSource,
        *,
        window_hours: float | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.client = client
        self.window_hours = window_hours if window_hours is not None else settings.activity_window_hours
        self._clock = clock
        self._airport: Optional[Airport] = None
        self._routes: Mapping[str, RouteInfo] = _EMPTY_ROUTES
        self._build_generation = 0
        self._loading = False

    @property
    def airport(self) -> Optional[Airport]:
        return self._airport

    @property
    def routes(self) -> Mapping[str, RouteInfo]:
        return self._routes

    @property
    def is_loading(self) -> bool:
        return self._loading

    async def set_airport(self, query: str | None) -> bool:
        """Resolve ``query`` and rebuild the lookup if the airport changed.

        Returns ``True`` when the selected airport changed. A build that is
        superseded by a later call never replaces the lookup.
        """

        airport = resolve_airport(query)
        current_code = self._airport.code if self._airport else None
        new_code = airport.code if airport else None
        if new_code == current_code:
            return False

        self._build_generation += 1
        build_id = self._build_generation
        self._airport = airport
        self._routes = _EMPTY_ROUTES

        if airport is None:
            self._loading = False
            logger.info("Airport filter cleared")
            return True

        self._loading = True
        now = int(self._clock())
        window = int(self.window_hours * 3600)
        begin, end = now - window, now + window

        try:
            departures, arrivals = await asyncio.gather(
                self._safe_fetch(airport.code, "departure", begin, end),
                self._safe_fetch(airport.code, "arrival", begin, end),
            )
        finally:
            if build_id == self._build_generation:
                self._loading = False

        if build_id != self._build_generation:
            logger.debug("Discarding superseded activity build for %s", airport.code)
            return True

        self._routes = MappingProxyType(
            build_route_lookup(departures, arrivals, airport.code)
        )
        logger.info(
            "Airport activity for %s: %s departures, %s arrivals, %s routes",
            airport.code,
            len(departures),
            len(arrivals),
            len(self._routes),
        )
        return True

    async def _safe_fetch(
        self, airport_code: str, kind: str, begin: int, end: int
    ) -> list[FlightLogEntry]:
        try:
            return await self.client.get_airport_flights(airport_code, kind, begin, end)
        except Exception as exc:
            logger.warning("Airport %s lookup for %s failed: %s", kind, airport_code, exc)
            return []


__all__ = ["AirportActivityCache", "build_route_lookup"]
