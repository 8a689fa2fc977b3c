"""Enrichment for the selected aircraft through an ordered fallback chain.

Stages run in order. Each one may return a partial ``EnrichmentRecord``
that is folded into the running record with fill-gaps semantics, so data
from an earlier stage is never overwritten by a later one.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
import time
from typing import Any, Awaitable, Callable, Optional, Protocol, TypeVar

from pydantic import BaseModel

from skyview.config import settings
from skyview.domain.airports import find_airport
from skyview.ingestors.adsbdb import MISSING_CALLSIGN
from skyview.ingestors.fr24 import FeedEntry
from skyview.models.enrichment import (
    AircraftRegistry,
    AirportRef,
    EnrichmentRecord,
    EnrichmentSource,
    FlightRoute,
    RouteSummary,
)
from skyview.models.flights import FlightLogEntry, FlightRecord

logger = logging.getLogger("skyview.enrichment")

ModelT = TypeVar("ModelT", bound=BaseModel)


class RegistrySource(Protocol):
    async def get_aircraft(self, icao24: str) -> Optional[AircraftRegistry]: ...

    async def get_route(self, callsign: str | None) -> Optional[FlightRoute]: ...


class ProximitySource(Protocol):
    async def find_by_callsign(
        self, callsign: str, lat: float, lon: float, radius_nm: float | None = None
    ) -> Optional[FeedEntry]: ...


class FlightLogSource(Protocol):
    async def get_aircraft_flights(
        self, icao24: str, begin: int, end: int
    ) -> list[FlightLogEntry]: ...


@dataclass(frozen=True)
class EnrichmentStage:
    """One step of the fallback chain."""

    name: str
    should_run: Callable[[FlightRecord, EnrichmentRecord], bool]
    run: Callable[[FlightRecord, EnrichmentRecord], Awaitable[Optional[EnrichmentRecord]]]


def fill_gaps(base: Optional[ModelT], patch: Optional[ModelT]) -> Optional[ModelT]:
    """Copy ``patch`` values into fields that are empty on ``base``.

    ``source`` keeps naming the block's origin. When the model has a
    ``filled_from`` map, each filled field is recorded against the patch's
    ``source``.
    """

    if base is None:
        return patch
    if patch is None:
        return base

    fields = type(base).model_fields
    updates: dict[str, Any] = {}
    for name in fields:
        if name == "filled_from":
            continue
        value = getattr(patch, name)
        if getattr(base, name) is None and value is not None:
            updates[name] = value
    if not updates:
        return base

    patch_source = getattr(patch, "source", None)
    if "filled_from" in fields and patch_source is not None:
        filled = dict(base.filled_from)
        filled.update({name: patch_source for name in updates})
        updates["filled_from"] = filled
    return base.model_copy(update=updates)


def merge_enrichment(base: EnrichmentRecord, partial: Optional[EnrichmentRecord]) -> EnrichmentRecord:
    if partial is None:
        return base
    return base.model_copy(
        update={
            "callsign": base.callsign or partial.callsign,
            "aircraft": fill_gaps(base.aircraft, partial.aircraft),
            "route": fill_gaps(base.route, partial.route),
            "flight_log": base.flight_log or partial.flight_log,
        }
    )


def _usable_callsign(flight: FlightRecord) -> Optional[str]:
    callsign = (flight.callsign or "").strip().upper()
    if not callsign or callsign == MISSING_CALLSIGN:
        return None
    return callsign


def _airport_display(
    ref: Optional[AirportRef], fallback_code: Optional[str]
) -> tuple[Optional[str], Optional[str]]:
    code = (ref.code if ref else None) or fallback_code
    name = ref.name if ref else None
    if code and not name:
        directory = find_airport(code)
        if directory:
            name = directory.name
    return code, name


def route_summary(record: EnrichmentRecord) -> Optional[RouteSummary]:
    """Resolve display origin/destination: route, then flight log, then directory."""

    route = record.route
    log = record.flight_log
    origin_code, origin_name = _airport_display(
        route.origin if route else None, log.est_departure_airport if log else None
    )
    destination_code, destination_name = _airport_display(
        route.destination if route else None, log.est_arrival_airport if log else None
    )
    if not any([origin_code, origin_name, destination_code, destination_name]):
        return None
    return RouteSummary(
        origin_code=origin_code,
        origin_name=origin_name,
        destination_code=destination_code,
        destination_name=destination_name,
    )


class EnrichmentOrchestrator:
    """Owns the enrichment record for the currently selected aircraft."""

    def __init__(
        self,
        registry: RegistrySource,
        proximity: ProximitySource,
        flight_log: FlightLogSource,
        *,
        radius_nm: float | None = None,
        lookback_hours: float | None = None,
        lookahead_hours: float | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.registry = registry
        self.proximity = proximity
        self.flight_log = flight_log
        self.radius_nm = radius_nm if radius_nm is not None else settings.enrichment_radius_nm
        self.lookback_hours = (
            lookback_hours if lookback_hours is not None else settings.flight_log_lookback_hours
        )
        self.lookahead_hours = (
            lookahead_hours if lookahead_hours is not None else settings.flight_log_lookahead_hours
        )
        self._clock = clock
        self._selection_id = 0
        self._selected: Optional[str] = None
        self._current: Optional[EnrichmentRecord] = None
        self.stages: list[EnrichmentStage] = [
            EnrichmentStage("registry", lambda flight, record: True, self._registry_stage),
            EnrichmentStage("proximity", self._needs_proximity, self._proximity_stage),
            EnrichmentStage(
                "flight_log", lambda flight, record: record.route is None, self._flight_log_stage
            ),
        ]

    @property
    def current(self) -> Optional[EnrichmentRecord]:
        return self._current

    @property
    def selected(self) -> Optional[str]:
        return self._selected

    @property
    def selection_id(self) -> int:
        return self._selection_id

    def clear(self) -> None:
        self._selection_id += 1
        self._selected = None
        self._current = None

    async def select(self, flight: FlightRecord) -> Optional[EnrichmentRecord]:
        """Enrich ``flight`` and publish the result if it is still selected.

        Returns the built record, or ``None`` when a newer selection replaced
        this one before the chain finished.
        """

        self.clear()
        selection_id = self._selection_id
        self._selected = flight.icao24

        record = EnrichmentRecord(icao24=flight.icao24, callsign=flight.callsign)
        for stage in self.stages:
            if not stage.should_run(flight, record):
                continue
            try:
                partial = await stage.run(flight, record)
            except Exception as exc:
                logger.warning("Enrichment stage %s failed for %s: %s", stage.name, flight.icao24, exc)
                continue
            record = merge_enrichment(record, partial)
            if selection_id != self._selection_id:
                logger.debug("Selection of %s superseded; dropping enrichment", flight.icao24)
                return None

        record = record.model_copy(update={"summary": route_summary(record)})
        if selection_id != self._selection_id:
            return None
        self._current = record
        logger.info(
            "Enriched %s (aircraft=%s, route=%s, flight_log=%s)",
            flight.icao24,
            record.aircraft is not None,
            record.route is not None,
            record.flight_log is not None,
        )
        return record

    async def _guard(self, label: str, awaitable: Awaitable) -> Any:
        try:
            return await awaitable
        except Exception as exc:
            logger.warning("%s lookup failed: %s", label, exc)
            return None

    async def _registry_stage(
        self, flight: FlightRecord, record: EnrichmentRecord
    ) -> Optional[EnrichmentRecord]:
        callsign = _usable_callsign(flight)
        lookups = [self._guard("Registry aircraft", self.registry.get_aircraft(flight.icao24))]
        if callsign:
            lookups.append(self._guard("Registry route", self.registry.get_route(callsign)))

        results = await asyncio.gather(*lookups)
        aircraft = results[0]
        route = results[1] if len(results) > 1 else None
        return EnrichmentRecord(icao24=flight.icao24, aircraft=aircraft, route=route)

    def _needs_proximity(self, flight: FlightRecord, record: EnrichmentRecord) -> bool:
        incomplete = (
            record.route is None
            or record.aircraft is None
            or not record.aircraft.registration
        )
        return incomplete and flight.has_position and _usable_callsign(flight) is not None

    async def _proximity_stage(
        self, flight: FlightRecord, record: EnrichmentRecord
    ) -> Optional[EnrichmentRecord]:
        entry = await self.proximity.find_by_callsign(
            _usable_callsign(flight), flight.latitude, flight.longitude, self.radius_nm
        )
        if entry is None:
            return None

        aircraft = AircraftRegistry(
            icao_type=entry.aircraft_type,
            model=entry.aircraft_type,
            registration=entry.registration,
            source=EnrichmentSource.PROXIMITY_FEED,
        )
        route = None
        if entry.origin or entry.destination:
            route = FlightRoute(
                callsign=entry.callsign,
                origin=AirportRef(iata=entry.origin) if entry.origin else None,
                destination=AirportRef(iata=entry.destination) if entry.destination else None,
                source=EnrichmentSource.PROXIMITY_FEED,
            )
        return EnrichmentRecord(icao24=flight.icao24, aircraft=aircraft, route=route)

    async def _flight_log_stage(
        self, flight: FlightRecord, record: EnrichmentRecord
    ) -> Optional[EnrichmentRecord]:
        now = int(self._clock())
        begin = now - int(self.lookback_hours * 3600)
        end = now + int(self.lookahead_hours * 3600)
        entries = await self.flight_log.get_aircraft_flights(flight.icao24, begin, end)
        if not entries:
            return None

        latest = sorted(entries, key=lambda entry: entry.last_seen or 0, reverse=True)[0]
        return EnrichmentRecord(icao24=flight.icao24, flight_log=latest)


__all__ = [
    "EnrichmentOrchestrator",
    "EnrichmentStage",
    "fill_gaps",
    "merge_enrichment",
    "route_summary",
]
