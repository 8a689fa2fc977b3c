"""Models for single-aircraft enrichment (registry, route and flight log)."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .flights import FlightLogEntry


class EnrichmentSource(str, Enum):
    """Provenance of an enrichment block."""

    REGISTRY = "adsbdb"
    PROXIMITY_FEED = "fr24"
    FLIGHT_LOG = "opensky"


class AirportRef(BaseModel):
    """Airport as reported inside a route lookup."""

    name: Optional[str] = Field(default=None)
    icao: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("icao", "icao_code")
    )
    iata: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("iata", "iata_code")
    )
    country: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("country", "country_name")
    )
    municipality: Optional[str] = Field(default=None)

    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def code(self) -> Optional[str]:
        return self.iata or self.icao


class AircraftRegistry(BaseModel):
    """Airframe details for one transponder address."""

    type: Optional[str] = Field(default=None, description="Airframe class, e.g. LandPlane")
    icao_type: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("icao_type", "icaotype"),
        description="ICAO type designator",
    )
    manufacturer: Optional[str] = Field(default=None)
    model: Optional[str] = Field(default=None)
    owner: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("owner", "registered_owner")
    )
    registration: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("registration", "registered")
    )
    url_photo: Optional[str] = Field(default=None)
    source: EnrichmentSource = Field(default=EnrichmentSource.REGISTRY)
    filled_from: dict[str, EnrichmentSource] = Field(
        default_factory=dict,
        description="Fields filled by a later source, mapped to that source",
    )

    model_config = ConfigDict(frozen=True, extra="ignore", protected_namespaces=())


class FlightRoute(BaseModel):
    """Scheduled or observed origin and destination for a callsign."""

    callsign: Optional[str] = Field(default=None)
    origin: Optional[AirportRef] = Field(default=None)
    destination: Optional[AirportRef] = Field(default=None)
    source: EnrichmentSource = Field(default=EnrichmentSource.REGISTRY)
    filled_from: dict[str, EnrichmentSource] = Field(
        default_factory=dict,
        description="Fields filled by a later source, mapped to that source",
    )

    model_config = ConfigDict(frozen=True, extra="ignore")


class RouteSummary(BaseModel):
    """Display-ready origin and destination resolved across enrichment blocks."""

    origin_code: Optional[str] = None
    origin_name: Optional[str] = None
    destination_code: Optional[str] = None
    destination_name: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class EnrichmentRecord(BaseModel):
    """Everything known about the selected aircraft beyond its live position."""

    icao24: str = Field(..., description="Transponder address of the selected aircraft")
    callsign: Optional[str] = Field(default=None)
    aircraft: Optional[AircraftRegistry] = Field(default=None)
    route: Optional[FlightRoute] = Field(default=None)
    flight_log: Optional[FlightLogEntry] = Field(
        default=None,
        description="Most recent OpenSky flight log row, kept apart from route",
    )
    summary: Optional[RouteSummary] = Field(default=None)

    model_config = ConfigDict(frozen=True)


__all__ = [
    "AircraftRegistry",
    "AirportRef",
    "EnrichmentRecord",
    "EnrichmentSource",
    "FlightRoute",
    "RouteSummary",
]
