"""Upstream feed clients for SkyView."""

from .adsbdb import ADSBDBClient
from .fr24 import FeedEntry, FR24FeedClient, parse_feed_entry
from .opensky import (
    OpenSkyAuthError,
    OpenSkyClient,
    OpenSkyError,
    OpenSkyNotFoundError,
    OpenSkyRateLimitError,
    parse_state_vector,
)

__all__ = [
    "ADSBDBClient",
    "FR24FeedClient",
    "FeedEntry",
    "OpenSkyAuthError",
    "OpenSkyClient",
    "OpenSkyError",
    "OpenSkyNotFoundError",
    "OpenSkyRateLimitError",
    "parse_feed_entry",
    "parse_state_vector",
]
