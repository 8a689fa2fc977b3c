"""Merge, hard-filter and rank the flight set for display."""

from __future__ import annotations

from typing import Mapping, Optional

from skyview.config import settings
from skyview.domain.airlines import airline_name
from skyview.domain.search import normalize_search
from skyview.models.airports import Airport
from skyview.models.flights import FlightMetadata, FlightRecord, RouteInfo
from skyview.models.traffic import (
    FeedSnapshot,
    FeedStatus,
    FilterOptions,
    FlightView,
    TrafficView,
)


def merge_flights(
    primary: list[FlightRecord], secondary: list[FlightRecord]
) -> list[FlightRecord]:
    """Merge two feeds keyed by icao24; primary records replace secondary ones."""

    merged: dict[str, FlightRecord] = {}
    for flight in secondary:
        merged[flight.icao24] = flight
    for flight in primary:
        merged[flight.icao24] = flight
    return list(merged.values())


def lookup_metadata(
    flight: FlightRecord, metadata: Mapping[str, FlightMetadata]
) -> Optional[FlightMetadata]:
    meta = metadata.get(flight.icao24)
    if meta is None and flight.callsign:
        meta = metadata.get(flight.callsign.upper())
    return meta


def passes_hard_filter(flight: FlightRecord, filters: FilterOptions) -> bool:
    """Hard filters remove a flight from the view entirely."""

    if not filters.show_ground and (flight.on_ground or flight.is_ground_vehicle):
        return False

    altitude_ft = flight.altitude_ft or 0.0
    return filters.min_altitude_ft <= altitude_ft <= filters.max_altitude_ft


def build_search_text(flight: FlightRecord, meta: Optional[FlightMetadata]) -> str:
    parts = [flight.callsign or flight.icao24]
    if meta:
        parts.extend(
            [meta.registration, meta.aircraft_type, meta.origin, meta.destination]
        )
    return " ".join(part for part in parts if part).upper()


def is_match(
    flight: FlightRecord,
    search_terms: list[str],
    meta: Optional[FlightMetadata],
    routes: Mapping[str, RouteInfo] | None,
) -> bool:
    """Soft filter: ``True`` when the flight satisfies every active filter.

    ``routes`` is ``None`` when no airport filter is active.
    """

    if search_terms:
        text = build_search_text(flight, meta)
        if not any(term in text for term in search_terms):
            return False
    if routes is not None and flight.icao24 not in routes:
        return False
    return True


def build_traffic_view(
    snapshot: FeedSnapshot,
    filters: FilterOptions,
    *,
    routes: Mapping[str, RouteInfo] | None = None,
    airport: Airport | None = None,
    status: FeedStatus | None = None,
    display_cap: int | None = None,
) -> TrafficView:
    """Hard-filter, rank matches first and cap the published flight set."""

    cap = display_cap if display_cap is not None else settings.display_cap
    search_terms = normalize_search(filters.search)
    airport_routes = routes if airport is not None else None
    has_active_filter = bool(search_terms) or airport_routes is not None

    views: list[FlightView] = []
    for flight in snapshot.flights:
        if not passes_hard_filter(flight, filters):
            continue
        meta = lookup_metadata(flight, snapshot.metadata)
        matched = is_match(flight, search_terms, meta, airport_routes)
        views.append(
            FlightView(
                flight=flight,
                is_match=matched,
                dimmed=has_active_filter and not matched,
                metadata=meta,
                route=(routes or {}).get(flight.icao24),
                airline_name=airline_name(flight.callsign),
            )
        )

    # sorted() is stable, so each group keeps its feed order.
    views = sorted(views, key=lambda view: not view.is_match)

    return TrafficView(
        flights=views[:cap],
        total=len(snapshot.flights),
        high_traffic=len(snapshot.flights) > cap,
        has_active_filter=has_active_filter,
        status=status or FeedStatus(),
        airport=airport,
        generation=snapshot.generation,
    )


__all__ = [
    "build_search_text",
    "build_traffic_view",
    "is_match",
    "lookup_metadata",
    "merge_flights",
    "passes_hard_filter",
]
