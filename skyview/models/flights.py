"""Models for live aircraft positions and per-aircraft metadata overlays."""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

METERS_TO_FEET = 3.28084
MPS_TO_KNOTS = 1.94384
MPS_TO_FPM = 196.850394


class PositionSource(IntEnum):
    """Origin of a reported position."""

    ADS_B = 0
    ASTERIX = 1
    MLAT = 2
    FLARM = 3

    @property
    def label(self) -> str:
        return _POSITION_SOURCE_LABELS[self]


_POSITION_SOURCE_LABELS = {
    PositionSource.ADS_B: "ADS-B",
    PositionSource.ASTERIX: "ASTERIX",
    PositionSource.MLAT: "MLAT",
    PositionSource.FLARM: "FLARM",
}


class EmitterCategory(IntEnum):
    """ADS-B emitter category as reported by OpenSky."""

    NO_INFO = 0
    NO_ADSB_INFO = 1
    LIGHT = 2
    SMALL = 3
    LARGE = 4
    HIGH_VORTEX_LARGE = 5
    HEAVY = 6
    HIGH_PERFORMANCE = 7
    ROTORCRAFT = 8
    GLIDER = 9
    LIGHTER_THAN_AIR = 10
    PARACHUTIST = 11
    ULTRALIGHT = 12
    RESERVED = 13
    UAV = 14
    SPACE = 15
    SURFACE_EMERGENCY = 16
    SURFACE_SERVICE = 17
    POINT_OBSTACLE = 18
    CLUSTER_OBSTACLE = 19

    @property
    def description(self) -> str:
        return _CATEGORY_DESCRIPTIONS[self]


_CATEGORY_DESCRIPTIONS = {
    EmitterCategory.NO_INFO: "No Info",
    EmitterCategory.NO_ADSB_INFO: "No Info",
    EmitterCategory.LIGHT: "Light",
    EmitterCategory.SMALL: "Small",
    EmitterCategory.LARGE: "Large",
    EmitterCategory.HIGH_VORTEX_LARGE: "High Vortex",
    EmitterCategory.HEAVY: "Heavy",
    EmitterCategory.HIGH_PERFORMANCE: "High Perf",
    EmitterCategory.ROTORCRAFT: "Rotorcraft",
    EmitterCategory.GLIDER: "Glider",
    EmitterCategory.LIGHTER_THAN_AIR: "Lighter-than-air",
    EmitterCategory.PARACHUTIST: "Parachutist",
    EmitterCategory.ULTRALIGHT: "Ultralight",
    EmitterCategory.RESERVED: "Reserved",
    EmitterCategory.UAV: "UAV",
    EmitterCategory.SPACE: "Space",
    EmitterCategory.SURFACE_EMERGENCY: "Surface Emergency",
    EmitterCategory.SURFACE_SERVICE: "Surface Service",
    EmitterCategory.POINT_OBSTACLE: "Point Obstacle",
    EmitterCategory.CLUSTER_OBSTACLE: "Cluster Obstacle",
}

GROUND_VEHICLE_CATEGORIES = frozenset(
    {
        EmitterCategory.SURFACE_EMERGENCY,
        EmitterCategory.SURFACE_SERVICE,
        EmitterCategory.POINT_OBSTACLE,
    }
)


def _strip_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class FlightRecord(BaseModel):
    """A single aircraft position normalized from any live feed."""

    icao24: str = Field(..., description="Lower-case 24-bit transponder address (hex)")
    callsign: Optional[str] = Field(default=None, description="Trimmed callsign")
    origin_country: Optional[str] = Field(default=None, description="Country of registration")
    time_position: Optional[int] = Field(
        default=None, description="Unix time of the last position update"
    )
    last_contact: Optional[int] = Field(
        default=None, description="Unix time of the last message received"
    )
    latitude: Optional[float] = Field(default=None, description="WGS84 latitude")
    longitude: Optional[float] = Field(default=None, description="WGS84 longitude")
    baro_altitude: Optional[float] = Field(
        default=None, description="Barometric altitude in meters"
    )
    geo_altitude: Optional[float] = Field(
        default=None, description="Geometric altitude in meters"
    )
    on_ground: bool = Field(default=False, description="Surface position report")
    velocity: Optional[float] = Field(default=None, description="Ground speed in m/s")
    true_track: Optional[float] = Field(
        default=None, description="Track angle in degrees clockwise from north"
    )
    vertical_rate: Optional[float] = Field(
        default=None, description="Vertical rate in m/s"
    )
    squawk: Optional[str] = Field(default=None, description="Transponder code")
    spi: bool = Field(default=False, description="Special purpose indicator")
    position_source: PositionSource = Field(default=PositionSource.ADS_B)
    category: EmitterCategory = Field(default=EmitterCategory.NO_INFO)
    sensors: tuple[int, ...] = Field(default=(), description="Receiving sensor ids")

    model_config = ConfigDict(frozen=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _pair_coordinates(cls, data: Any) -> Any:
        # A position is either complete or absent.
        if isinstance(data, dict):
            if (data.get("latitude") is None) != (data.get("longitude") is None):
                data = {**data, "latitude": None, "longitude": None}
        return data

    @field_validator("icao24", mode="before")
    @classmethod
    def _normalize_icao24(cls, value: Any) -> str:
        text = _strip_or_none(value)
        if not text:
            raise ValueError("icao24 is required")
        return text.lower()

    @field_validator("callsign", "squawk", "origin_country", mode="before")
    @classmethod
    def _clean_text(cls, value: Any) -> Optional[str]:
        return _strip_or_none(value)

    @field_validator("position_source", mode="before")
    @classmethod
    def _coerce_position_source(cls, value: Any) -> PositionSource:
        try:
            return PositionSource(int(value))
        except (TypeError, ValueError):
            return PositionSource.ADS_B

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value: Any) -> EmitterCategory:
        try:
            return EmitterCategory(int(value))
        except (TypeError, ValueError):
            return EmitterCategory.NO_INFO

    @property
    def has_position(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def best_altitude_m(self) -> Optional[float]:
        if self.baro_altitude is not None:
            return self.baro_altitude
        return self.geo_altitude

    @property
    def altitude_ft(self) -> Optional[float]:
        altitude = self.best_altitude_m
        return altitude * METERS_TO_FEET if altitude is not None else None

    @property
    def speed_kts(self) -> Optional[float]:
        return self.velocity * MPS_TO_KNOTS if self.velocity is not None else None

    @property
    def vertical_rate_fpm(self) -> Optional[float]:
        if self.vertical_rate is None:
            return None
        return self.vertical_rate * MPS_TO_FPM

    @property
    def is_ground_vehicle(self) -> bool:
        return self.category in GROUND_VEHICLE_CATEGORIES


class FlightMetadata(BaseModel):
    """Type, registration and route overlay reported by the secondary feed."""

    aircraft_type: Optional[str] = Field(default=None, description="ICAO type code, e.g. B738")
    registration: Optional[str] = Field(default=None, description="Tail number")
    origin: Optional[str] = Field(default=None, description="Origin airport code")
    destination: Optional[str] = Field(default=None, description="Destination airport code")

    model_config = ConfigDict(frozen=True)


class RouteInfo(BaseModel):
    """Origin/destination derived from an airport's departure and arrival boards."""

    origin: Optional[str] = Field(default=None, description="Origin airport code")
    destination: Optional[str] = Field(default=None, description="Destination airport code")

    model_config = ConfigDict(frozen=True)


class FlightLogEntry(BaseModel):
    """One row of OpenSky's flight log (departures, arrivals or per-aircraft)."""

    icao24: str = Field(..., description="Lower-case transponder address")
    callsign: Optional[str] = Field(default=None)
    first_seen: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("first_seen", "firstSeen")
    )
    last_seen: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("last_seen", "lastSeen")
    )
    est_departure_airport: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("est_departure_airport", "estDepartureAirport"),
    )
    est_arrival_airport: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("est_arrival_airport", "estArrivalAirport"),
    )

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("icao24", mode="before")
    @classmethod
    def _normalize_icao24(cls, value: Any) -> str:
        text = _strip_or_none(value)
        if not text:
            raise ValueError("icao24 is required")
        return text.lower()

    @field_validator("callsign", "est_departure_airport", "est_arrival_airport", mode="before")
    @classmethod
    def _clean_text(cls, value: Any) -> Optional[str]:
        return _strip_or_none(value)


class SecondaryFeedResult(BaseModel):
    """Output of one secondary feed query."""

    flights: list[FlightRecord] = Field(default_factory=list)
    metadata: dict[str, FlightMetadata] = Field(
        default_factory=dict,
        description="Overlay keyed by lower-case icao24 and upper-case callsign",
    )
    ok: bool = Field(default=True, description="False when the feed could not be read")


__all__ = [
    "EmitterCategory",
    "FlightLogEntry",
    "FlightMetadata",
    "FlightRecord",
    "GROUND_VEHICLE_CATEGORIES",
    "METERS_TO_FEET",
    "MPS_TO_FPM",
    "MPS_TO_KNOTS",
    "PositionSource",
    "RouteInfo",
    "SecondaryFeedResult",
]
