"""Pure lookup tables and geometry shared by the feed engine."""

from .airlines import AIRLINE_NAMES, AIRLINE_PREFIXES, airline_name
from .geo import GeoBounds, compute_radius_bounds, compute_viewport_bounds, haversine_km
from .search import normalize_search

__all__ = [
    "AIRLINE_NAMES",
    "AIRLINE_PREFIXES",
    "GeoBounds",
    "airline_name",
    "compute_radius_bounds",
    "compute_viewport_bounds",
    "haversine_km",
    "normalize_search",
]
