"""Aircraft registry and route lookups backed by ADSBDB."""

from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from skyview.config import settings
from skyview.models.enrichment import AircraftRegistry, EnrichmentSource, FlightRoute

logger = logging.getLogger("skyview.ingestors.adsbdb")

MISSING_CALLSIGN = "N/A"


class ADSBDBClient:
    """Look up airframe and route details for a single aircraft.

    Both lookups are best-effort and return ``None`` on any failure.
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.adsbdb_base_url).rstrip("/")
        self.timeout = timeout or settings.http_timeout
        self.transport = transport

    async def get_aircraft(self, icao24: str) -> Optional[AircraftRegistry]:
        icao24 = icao24.strip().lower()
        if not icao24:
            return None

        body = await self._get_response(f"/aircraft/{quote(icao24)}")
        aircraft = body.get("aircraft") if isinstance(body, dict) else None
        if not isinstance(aircraft, dict):
            return None

        try:
            return AircraftRegistry.model_validate(
                {**aircraft, "source": EnrichmentSource.REGISTRY}
            )
        except ValidationError as exc:
            logger.warning("Malformed ADSBDB aircraft payload for %s: %s", icao24, exc)
            return None

    async def get_route(self, callsign: str | None) -> Optional[FlightRoute]:
        """Route for a callsign; skipped for blank or ``N/A`` callsigns."""

        callsign = (callsign or "").strip().upper()
        if not callsign or callsign == MISSING_CALLSIGN:
            return None

        body = await self._get_response(f"/callsign/{quote(callsign)}")
        if not isinstance(body, dict):
            return None
        route = body.get("flightroute") or body.get("route")
        if not isinstance(route, dict):
            return None

        try:
            return FlightRoute.model_validate(
                {
                    "callsign": route.get("callsign") or callsign,
                    "origin": route.get("origin"),
                    "destination": route.get("destination"),
                    "source": EnrichmentSource.REGISTRY,
                }
            )
        except ValidationError as exc:
            logger.warning("Malformed ADSBDB route payload for %s: %s", callsign, exc)
            return None

    async def _get_response(self, path: str) -> Any:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.get(url)
        except httpx.TimeoutException as exc:
            logger.warning("ADSBDB request timed out: %s", exc)
            return None
        except httpx.RequestError as exc:
            logger.warning("ADSBDB request failed: %s", exc)
            return None

        if response.status_code == 404:
            logger.debug("ADSBDB has no record for %s", path)
            return None
        if response.status_code != 200:
            logger.warning("ADSBDB returned HTTP %s for %s", response.status_code, path)
            return None

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("Failed to parse ADSBDB JSON response: %s", exc)
            return None

        if not isinstance(payload, dict):
            return None
        return payload.get("response")


__all__ = ["ADSBDBClient", "MISSING_CALLSIGN"]
