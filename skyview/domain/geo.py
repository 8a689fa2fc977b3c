"""Bounding-box construction and normalization for upstream feed queries."""

from __future__ import annotations

from dataclasses import dataclass
import math

NAUTICAL_MILE_TO_KM = 1.852
KM_PER_LAT_DEGREE = 111.32
EARTH_RADIUS_KM = 6371.0

# Spans wider than this are queried worldwide instead of guessing a wraparound.
WORLDWIDE_SPAN_DEGREES = 170.0


@dataclass(frozen=True)
class GeoBounds:
    """Geographic bounding box in decimal degrees."""

    south: float
    north: float
    west: float
    east: float

    def to_opensky_params(self) -> dict[str, float]:
        return {
            "lamin": self.south,
            "lomin": self.west,
            "lamax": self.north,
            "lomax": self.east,
        }

    def to_fr24_param(self) -> str:
        """Format as the ``north,south,west,east`` string the FR24 feed expects."""

        return f"{self.north:.4f},{self.south:.4f},{self.west:.4f},{self.east:.4f}"


def normalize_longitude(lon: float) -> float:
    """Wrap a longitude into [-180, 180)."""

    return ((lon + 180) % 360 + 360) % 360 - 180


def compute_viewport_bounds(raw: GeoBounds) -> GeoBounds:
    """Turn raw viewport edges into a query-safe bounding box.

    Latitudes are clamped to [-90, 90]. A longitude span above 170 degrees is
    treated as worldwide. Otherwise both edges are wrapped into [-180, 180);
    if the wrapped west edge ends up east of the wrapped east edge the view
    crosses the antimeridian and the box is widened to the full longitude
    range. That widening is an intentional approximation: the box is never
    split at the dateline.
    """

    south = max(-90.0, min(raw.south, raw.north))
    north = min(90.0, max(raw.south, raw.north))

    if raw.east - raw.west > WORLDWIDE_SPAN_DEGREES:
        return GeoBounds(south=south, north=north, west=-180.0, east=180.0)

    west = normalize_longitude(raw.west)
    east = normalize_longitude(raw.east)
    if west > east:
        return GeoBounds(south=south, north=north, west=-180.0, east=180.0)

    return GeoBounds(
        south=south,
        north=north,
        west=max(-180.0, west),
        east=min(180.0, east),
    )


def compute_radius_bounds(lat: float, lon: float, radius_nm: float) -> GeoBounds:
    """Build a symmetric box around a point from a radius in nautical miles."""

    radius_km = radius_nm * NAUTICAL_MILE_TO_KM
    lat_delta = radius_km / KM_PER_LAT_DEGREE
    # Floor keeps the longitude delta finite near the poles.
    cos_lat = max(0.0001, math.cos(math.radians(lat)))
    lon_delta = radius_km / (KM_PER_LAT_DEGREE * cos_lat)

    return GeoBounds(
        south=lat - lat_delta,
        north=lat + lat_delta,
        west=lon - lon_delta,
        east=lon + lon_delta,
    )


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in kilometers."""

    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


__all__ = [
    "GeoBounds",
    "compute_radius_bounds",
    "compute_viewport_bounds",
    "haversine_km",
    "normalize_longitude",
]
