"""Renderer-facing models: filters, viewport, published snapshots and views."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from skyview.config import settings
from skyview.domain.geo import GeoBounds

from .airports import Airport
from .flights import FlightMetadata, FlightRecord, RouteInfo


class FilterOptions(BaseModel):
    """User-controlled search, route and hard filters."""

    search: str = Field(default="", description="Free-text callsign/registration search")
    airport: str = Field(default="", description="Airport query for route filtering")
    min_altitude_ft: float = Field(default_factory=lambda: settings.min_altitude_ft)
    max_altitude_ft: float = Field(default_factory=lambda: settings.max_altitude_ft)
    show_ground: bool = Field(default_factory=lambda: settings.show_ground)

    model_config = ConfigDict(frozen=True)


class Viewport(BaseModel):
    """Raw map viewport as reported by the renderer."""

    south: float
    north: float
    west: float
    east: float
    zoom: float = Field(..., description="Map zoom level")

    def raw_bounds(self) -> GeoBounds:
        return GeoBounds(south=self.south, north=self.north, west=self.west, east=self.east)


class FeedSnapshot(BaseModel):
    """One published flight set, replaced wholesale on every publish."""

    generation: int = Field(default=0, description="Cycle that produced this snapshot")
    stage: Optional[Literal["primary", "merged"]] = Field(default=None)
    flights: list[FlightRecord] = Field(default_factory=list)
    metadata: dict[str, FlightMetadata] = Field(default_factory=dict)
    published_at: Optional[datetime] = Field(default=None)

    model_config = ConfigDict(frozen=True)


class FeedStatus(BaseModel):
    """Loading, paused and error state shown alongside the flight set."""

    loading: bool = False
    paused_reason: Optional[str] = None
    error: Optional[str] = None
    rate_limited: bool = False

    model_config = ConfigDict(frozen=True)


class FlightView(BaseModel):
    """A flight as the renderer should draw it."""

    flight: FlightRecord
    is_match: bool = True
    dimmed: bool = False
    metadata: Optional[FlightMetadata] = None
    route: Optional[RouteInfo] = None
    airline_name: Optional[str] = None


class TrafficView(BaseModel):
    """Filtered, ranked and capped traffic plus status for one render."""

    flights: list[FlightView] = Field(default_factory=list)
    total: int = Field(default=0, description="Flights in the published snapshot")
    high_traffic: bool = Field(
        default=False, description="More flights were published than can be displayed"
    )
    has_active_filter: bool = False
    status: FeedStatus = Field(default_factory=FeedStatus)
    airport: Optional[Airport] = None
    generation: int = 0


class DispatchResponse(BaseModel):
    dispatched: bool = Field(..., description="Whether a fetch cycle was started")


class VisibilityUpdate(BaseModel):
    visible: bool


class FilterUpdateResponse(BaseModel):
    airport: Optional[Airport] = Field(default=None, description="Resolved airport filter")


class SelectionRequest(BaseModel):
    icao24: str = Field(..., min_length=1, description="Transponder address to enrich")


__all__ = [
    "DispatchResponse",
    "FeedSnapshot",
    "FeedStatus",
    "FilterOptions",
    "FilterUpdateResponse",
    "FlightView",
    "SelectionRequest",
    "TrafficView",
    "Viewport",
    "VisibilityUpdate",
]
