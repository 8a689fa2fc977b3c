"""Pydantic models for the SkyView engine."""

from .airports import Airport
from .enrichment import (
    AircraftRegistry,
    AirportRef,
    EnrichmentRecord,
    EnrichmentSource,
    FlightRoute,
    RouteSummary,
)
from .flights import (
    EmitterCategory,
    FlightLogEntry,
    FlightMetadata,
    FlightRecord,
    PositionSource,
    RouteInfo,
    SecondaryFeedResult,
)
from .traffic import (
    DispatchResponse,
    FeedSnapshot,
    FeedStatus,
    FilterOptions,
    FilterUpdateResponse,
    FlightView,
    SelectionRequest,
    TrafficView,
    Viewport,
    VisibilityUpdate,
)

__all__ = [
    "AircraftRegistry",
    "Airport",
    "AirportRef",
    "DispatchResponse",
    "EmitterCategory",
    "EnrichmentRecord",
    "EnrichmentSource",
    "FeedSnapshot",
    "FeedStatus",
    "FilterOptions",
    "FilterUpdateResponse",
    "FlightLogEntry",
    "FlightMetadata",
    "FlightRecord",
    "FlightRoute",
    "FlightView",
    "PositionSource",
    "RouteInfo",
    "RouteSummary",
    "SecondaryFeedResult",
    "SelectionRequest",
    "TrafficView",
    "Viewport",
    "VisibilityUpdate",
]
