"""Secondary live feed: FlightRadar24 zone feed reached through a CORS relay.

The relay wraps the upstream body as ``{"contents": "<json text>"}``. The
upstream body maps flight ids to positional tuples::

    0 hex id, 1 lat, 2 lon, 3 track, 4 altitude (ft), 5 speed (kt),
    6 squawk, 7 radar, 8 aircraft type, 9 registration, 10 timestamp,
    11 origin, 12 destination, 13 flight number, 14 on ground (0/1),
    15 vertical speed (fpm), 16 callsign

The feed is best-effort: every failure degrades to an empty result.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Optional

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from skyview.config import settings
from skyview.domain.geo import GeoBounds, compute_radius_bounds, haversine_km
from skyview.models.flights import (
    METERS_TO_FEET,
    MPS_TO_FPM,
    MPS_TO_KNOTS,
    FlightMetadata,
    FlightRecord,
    SecondaryFeedResult,
)

logger = logging.getLogger("skyview.ingestors.fr24")

FEED_TUPLE_MIN_LENGTH = 17
VIEWPORT_MAX_AGE_SECONDS = 1800
PROXIMITY_MAX_AGE_SECONDS = 900


def _text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    return value.strip() or None


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


class FeedEntry(BaseModel):
    """One aircraft from the FR24 feed with named fields."""

    flight_id: str
    icao24: str
    latitude: float
    longitude: float
    track: Optional[float] = None
    altitude_ft: Optional[float] = None
    speed_kts: Optional[float] = None
    squawk: Optional[str] = None
    radar: Optional[str] = None
    aircraft_type: Optional[str] = None
    registration: Optional[str] = None
    timestamp: Optional[int] = None
    origin: Optional[str] = None
    destination: Optional[str] = None
    flight_number: Optional[str] = None
    on_ground: bool = False
    vertical_speed_fpm: Optional[float] = None
    callsign: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    def to_flight_record(self, now: int | None = None) -> FlightRecord:
        """Express the entry in OpenSky units (meters, m/s)."""

        seen = self.timestamp or now or int(time.time())
        altitude_m = (
            self.altitude_ft / METERS_TO_FEET if self.altitude_ft is not None else None
        )
        return FlightRecord(
            icao24=self.icao24,
            callsign=self.callsign,
            time_position=seen,
            last_contact=seen,
            latitude=self.latitude,
            longitude=self.longitude,
            baro_altitude=altitude_m,
            geo_altitude=altitude_m,
            on_ground=self.on_ground,
            velocity=self.speed_kts / MPS_TO_KNOTS if self.speed_kts is not None else None,
            true_track=self.track,
            vertical_rate=(
                self.vertical_speed_fpm / MPS_TO_FPM
                if self.vertical_speed_fpm is not None
                else None
            ),
            squawk=self.squawk,
        )

    def to_metadata(self) -> FlightMetadata:
        return FlightMetadata(
            aircraft_type=self.aircraft_type,
            registration=self.registration,
            origin=self.origin,
            destination=self.destination,
        )


def parse_feed_entry(key: str, entry: Any) -> Optional[FeedEntry]:
    """Validate one positional feed tuple; ``None`` when it cannot be used."""

    if not isinstance(entry, list) or len(entry) < FEED_TUPLE_MIN_LENGTH:
        return None

    hex_id = _text(entry[0]) or _text(key)
    latitude = _number(entry[1])
    longitude = _number(entry[2])
    if not hex_id or latitude is None or longitude is None:
        return None

    timestamp = _number(entry[10])
    try:
        return FeedEntry(
            flight_id=str(key),
            icao24=hex_id.lower(),
            latitude=latitude,
            longitude=longitude,
            track=_number(entry[3]),
            altitude_ft=_number(entry[4]),
            speed_kts=_number(entry[5]),
            squawk=_text(entry[6]),
            radar=_text(entry[7]),
            aircraft_type=_text(entry[8]),
            registration=_text(entry[9]),
            timestamp=int(timestamp) if timestamp else None,
            origin=_text(entry[11]),
            destination=_text(entry[12]),
            flight_number=_text(entry[13]),
            on_ground=entry[14] == 1,
            vertical_speed_fpm=_number(entry[15]),
            callsign=_text(entry[16]),
        )
    except ValidationError as exc:
        logger.debug("Skipping malformed FR24 entry %s: %s", key, exc)
        return None


def build_feed_result(entries: list[FeedEntry], now: int | None = None) -> SecondaryFeedResult:
    """Build flight records plus the metadata overlay keyed by hex and callsign."""

    flights: list[FlightRecord] = []
    metadata: dict[str, FlightMetadata] = {}
    for entry in entries:
        meta = entry.to_metadata()
        metadata[entry.icao24] = meta
        if entry.callsign:
            metadata[entry.callsign.upper()] = meta
        flights.append(entry.to_flight_record(now))
    return SecondaryFeedResult(flights=flights, metadata=metadata, ok=True)


class FR24FeedClient:
    """Query the FR24 zone feed for a bounding box through a CORS relay."""

    def __init__(
        self,
        *,
        feed_url: str | None = None,
        relay_url: str | None = None,
        timeout: float | None = None,
        default_radius_nm: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.feed_url = feed_url or settings.fr24_feed_url
        self.relay_url = relay_url or settings.cors_relay_url
        self.timeout = timeout or settings.http_timeout
        self.default_radius_nm = default_radius_nm or settings.enrichment_radius_nm
        self.transport = transport

    def _target_url(self, bounds: GeoBounds, max_age: int) -> str:
        params = {
            "bounds": bounds.to_fr24_param(),
            "faa": "1",
            "satellite": "1",
            "mlat": "1",
            "flarm": "1",
            "adsb": "1",
            "gnd": "1",
            "air": "1",
            "vehicles": "1",
            "estimated": "1",
            "maxage": str(max_age),
            "gliders": "1",
            "stats": "1",
            "_": str(int(time.time() * 1000)),
        }
        return str(httpx.URL(self.feed_url, params=params))

    async def _fetch_entries(
        self, bounds: GeoBounds, max_age: int
    ) -> Optional[list[FeedEntry]]:
        """Return parsed entries, or ``None`` when the relay or payload failed."""

        relay_params = {"url": self._target_url(bounds, max_age), "disableCache": "true"}
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.get(self.relay_url, params=relay_params)
        except httpx.TimeoutException as exc:
            logger.warning("FR24 relay request timed out: %s", exc)
            return None
        except httpx.RequestError as exc:
            logger.warning("FR24 relay request failed: %s", exc)
            return None

        if response.status_code != 200:
            logger.warning("FR24 relay returned HTTP %s", response.status_code)
            return None

        try:
            wrapper = response.json()
        except ValueError as exc:
            logger.warning("FR24 relay returned malformed JSON: %s", exc)
            return None

        contents = wrapper.get("contents") if isinstance(wrapper, dict) else None
        if not contents or not isinstance(contents, str):
            logger.warning("FR24 relay returned no contents")
            return None

        try:
            raw = json.loads(contents)
        except ValueError as exc:
            logger.warning("FR24 feed contents are not JSON: %s", exc)
            return None
        if not isinstance(raw, dict):
            return None

        entries: list[FeedEntry] = []
        for key, value in raw.items():
            entry = parse_feed_entry(key, value)
            if entry:
                entries.append(entry)
        return entries

    async def get_feed(self, bounds: GeoBounds) -> SecondaryFeedResult:
        """Flights and metadata inside ``bounds``; never raises."""

        entries = await self._fetch_entries(bounds, VIEWPORT_MAX_AGE_SECONDS)
        if entries is None:
            return SecondaryFeedResult(ok=False)

        result = build_feed_result(entries)
        logger.info("Received %s aircraft from FR24 feed", len(result.flights))
        return result

    async def find_by_callsign(
        self,
        callsign: str,
        lat: float,
        lon: float,
        radius_nm: float | None = None,
    ) -> Optional[FeedEntry]:
        """Find the aircraft flying ``callsign`` near a position.

        Matching is exact on the upper-cased callsign. When several entries
        share the callsign the one nearest to ``(lat, lon)`` wins; equal
        distances keep payload order.
        """

        target = callsign.strip().upper()
        if not target:
            return None

        bounds = compute_radius_bounds(lat, lon, radius_nm or self.default_radius_nm)
        entries = await self._fetch_entries(bounds, PROXIMITY_MAX_AGE_SECONDS)
        if not entries:
            return None

        candidates = [
            entry
            for entry in entries
            if entry.callsign and entry.callsign.upper() == target
        ]
        if not candidates:
            logger.debug("No FR24 match for callsign %s", target)
            return None

        return min(
            candidates,
            key=lambda entry: haversine_km(lat, lon, entry.latitude, entry.longitude),
        )


__all__ = [
    "FR24FeedClient",
    "FeedEntry",
    "build_feed_result",
    "parse_feed_entry",
]
