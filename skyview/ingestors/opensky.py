"""Primary state feed backed by the OpenSky Network REST API.

State vectors arrive as positional arrays::

    0 icao24, 1 callsign, 2 origin_country, 3 time_position, 4 last_contact,
    5 longitude, 6 latitude, 7 baro_altitude, 8 on_ground, 9 velocity,
    10 true_track, 11 vertical_rate, 12 sensors, 13 geo_altitude, 14 squawk,
    15 spi, 16 position_source, 17 category (only with ``extended=1``)

Rows are parsed into ``FlightRecord`` here and nowhere else.
"""

from __future__ import annotations

import logging
from typing import Any, Literal, Optional

import httpx
from pydantic import ValidationError

from skyview.config import OpenSkyCredentials, get_opensky_credentials, settings
from skyview.domain.geo import GeoBounds
from skyview.models.flights import FlightLogEntry, FlightRecord

logger = logging.getLogger("skyview.ingestors.opensky")

STATE_VECTOR_MIN_LENGTH = 17

FlightLogKind = Literal["departure", "arrival"]


class OpenSkyError(RuntimeError):
    """OpenSky could not serve the request."""


class OpenSkyRateLimitError(OpenSkyError):
    """OpenSky answered 429; callers must not retry until the next poll."""


class OpenSkyAuthError(OpenSkyError):
    """OpenSky rejected the request as unauthorized (401)."""


class OpenSkyNotFoundError(OpenSkyError):
    """OpenSky answered 404, which flight-log endpoints use for "no flights"."""


def parse_state_vector(entry: Any) -> Optional[FlightRecord]:
    """Convert one positional state vector into a ``FlightRecord``.

    Returns ``None`` for rows that are too short or fail validation.
    """

    if not isinstance(entry, (list, tuple)) or len(entry) < STATE_VECTOR_MIN_LENGTH:
        return None
    if not isinstance(entry[0], str) or not entry[0].strip():
        return None

    sensors = entry[12] if isinstance(entry[12], (list, tuple)) else ()
    category = entry[17] if len(entry) > 17 else None

    try:
        return FlightRecord(
            icao24=entry[0],
            callsign=entry[1],
            origin_country=entry[2],
            time_position=entry[3],
            last_contact=entry[4],
            longitude=entry[5],
            latitude=entry[6],
            baro_altitude=entry[7],
            on_ground=bool(entry[8]),
            velocity=entry[9],
            true_track=entry[10],
            vertical_rate=entry[11],
            sensors=tuple(sensors),
            geo_altitude=entry[13],
            squawk=entry[14],
            spi=bool(entry[15]),
            position_source=entry[16],
            category=category,
        )
    except ValidationError as exc:
        logger.debug("Skipping malformed state vector %r: %s", entry[0], exc)
        return None


class OpenSkyClient:
    """Fetch live state vectors and flight logs from OpenSky."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        credentials: OpenSkyCredentials | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.opensky_base_url).rstrip("/")
        self.timeout = timeout or settings.http_timeout
        self.credentials = credentials
        self.transport = transport

    @classmethod
    def from_settings(cls) -> "OpenSkyClient":
        return cls(credentials=get_opensky_credentials())

    def _auth(self) -> httpx.BasicAuth | None:
        if not self.credentials:
            return None
        return httpx.BasicAuth(self.credentials.username, self.credentials.password)

    async def get_states(self, bounds: GeoBounds | None = None) -> list[FlightRecord]:
        """Fetch state vectors inside ``bounds``.

        Authenticated first when credentials exist. Any failure of the
        authenticated call except a 429 falls back once to an anonymous
        request; a 429 is raised immediately so the caller does not hammer
        the API from the same address.

        Raises:
            OpenSkyRateLimitError: on HTTP 429.
            OpenSkyError: on any other failure.
        """

        url = f"{self.base_url}/states/all"
        params: dict[str, Any] = {"extended": 1}
        if bounds:
            params.update(bounds.to_opensky_params())

        auth = self._auth()
        if auth is not None:
            try:
                return await self._fetch_states(url, params, auth)
            except OpenSkyRateLimitError:
                raise
            except OpenSkyAuthError:
                logger.warning("OpenSky rejected credentials; retrying anonymously")
            except OpenSkyError as exc:
                logger.warning("Authenticated OpenSky fetch failed (%s); retrying anonymously", exc)

        return await self._fetch_states(url, params, None)

    async def _fetch_states(
        self, url: str, params: dict[str, Any], auth: httpx.BasicAuth | None
    ) -> list[FlightRecord]:
        payload = await self._get_json(url, params, auth)

        raw_states = []
        if isinstance(payload, dict):
            raw_states = payload.get("states") or []

        flights: list[FlightRecord] = []
        for entry in raw_states:
            flight = parse_state_vector(entry)
            if flight:
                flights.append(flight)

        logger.info(
            "Received %s state vectors from OpenSky (%s)",
            len(flights),
            "authenticated" if auth else "anonymous",
        )
        return flights

    async def get_airport_flights(
        self, airport: str, kind: FlightLogKind, begin: int, end: int
    ) -> list[FlightLogEntry]:
        """Departures or arrivals for an airport in ``[begin, end]``; ``[]`` on failure."""

        return await self._get_flight_log(
            f"/flights/{kind}", {"airport": airport.upper(), "begin": begin, "end": end}
        )

    async def get_aircraft_flights(
        self, icao24: str, begin: int, end: int
    ) -> list[FlightLogEntry]:
        """Flight log rows for one aircraft in ``[begin, end]``; ``[]`` on failure."""

        return await self._get_flight_log(
            "/flights/aircraft", {"icao24": icao24.lower(), "begin": begin, "end": end}
        )

    async def _get_flight_log(
        self, path: str, params: dict[str, Any]
    ) -> list[FlightLogEntry]:
        try:
            payload = await self._get_json(f"{self.base_url}{path}", params, self._auth())
        except OpenSkyNotFoundError:
            logger.debug("No OpenSky flights for %s %s", path, params)
            return []
        except OpenSkyError as exc:
            logger.warning("OpenSky flight log %s unavailable: %s", path, exc)
            return []

        if not isinstance(payload, list):
            return []

        entries: list[FlightLogEntry] = []
        for row in payload:
            try:
                entries.append(FlightLogEntry.model_validate(row))
            except ValidationError:
                logger.debug("Skipping malformed flight log row: %s", row)
        return entries

    async def _get_json(
        self, url: str, params: dict[str, Any], auth: httpx.BasicAuth | None
    ) -> Any:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.get(url, params=params, auth=auth)
        except httpx.TimeoutException as exc:
            logger.warning("OpenSky request timed out: %s", exc)
            raise OpenSkyError("OpenSky request timed out") from exc
        except httpx.RequestError as exc:
            logger.warning("OpenSky request failed: %s", exc)
            raise OpenSkyError("OpenSky request failed") from exc

        if response.status_code == 429:
            logger.warning("OpenSky rate limit encountered on %s", url)
            raise OpenSkyRateLimitError("OpenSky rate limit exceeded")
        if response.status_code == 401:
            logger.error("OpenSky returned 401 for %s", url)
            raise OpenSkyAuthError("OpenSky rejected the request as unauthorized")
        if response.status_code == 404:
            raise OpenSkyNotFoundError(f"OpenSky returned 404 for {url}")

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "OpenSky returned HTTP %s: %s", exc.response.status_code, exc
            )
            raise OpenSkyError(f"OpenSky returned HTTP {exc.response.status_code}") from exc

        try:
            return response.json()
        except ValueError as exc:
            logger.warning("Failed to parse OpenSky JSON response: %s", exc)
            raise OpenSkyError("OpenSky returned malformed JSON") from exc


__all__ = [
    "OpenSkyAuthError",
    "OpenSkyClient",
    "OpenSkyError",
    "OpenSkyNotFoundError",
    "OpenSkyRateLimitError",
    "parse_state_vector",
]
