"""Service layer: polling, merging, airport activity and enrichment."""

from .airport_activity import AirportActivityCache, build_route_lookup
from .engine import LiveFeedEngine
from .enrichment import (
    EnrichmentOrchestrator,
    EnrichmentStage,
    fill_gaps,
    merge_enrichment,
    route_summary,
)
from .pipeline import (
    build_search_text,
    build_traffic_view,
    is_match,
    lookup_metadata,
    merge_flights,
    passes_hard_filter,
)
from .poller import PAUSED_ZOOM_REASON, TOTAL_FAILURE_MESSAGE, PollingOrchestrator

__all__ = [
    "AirportActivityCache",
    "EnrichmentOrchestrator",
    "EnrichmentStage",
    "LiveFeedEngine",
    "PAUSED_ZOOM_REASON",
    "PollingOrchestrator",
    "TOTAL_FAILURE_MESSAGE",
    "build_route_lookup",
    "build_search_text",
    "build_traffic_view",
    "fill_gaps",
    "is_match",
    "lookup_metadata",
    "merge_enrichment",
    "merge_flights",
    "passes_hard_filter",
    "route_summary",
]
