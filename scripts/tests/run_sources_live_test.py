#!/usr/bin/env python
"""
Run this to exercise the live OpenSky, FR24 and ADSBDB clients against real upstreams.

Usage (from repo root):
    python scripts/tests/run_sources_live_test.py
"""

import asyncio

from skyview.domain.geo import GeoBounds, compute_viewport_bounds
from skyview.ingestors import ADSBDBClient, FR24FeedClient, OpenSkyClient


# Around Edmonton International (CYEG)
BOUNDS = GeoBounds(south=52.8, north=53.8, west=-114.4, east=-112.8)


async def main() -> None:
    bounds = compute_viewport_bounds(BOUNDS)
    print(f"=== Live source test for {bounds} ===\n")

    # --- Primary ---
    print("Requesting state vectors from OpenSky...")
    opensky = OpenSkyClient.from_settings()
    flights = await opensky.get_states(bounds)
    print(f"Received {len(flights)} state vectors. Showing a few:")
    for idx, f in enumerate(flights[:5], start=1):
        print(
            f"{idx}. icao24={f.icao24!r}, callsign={f.callsign!r}, "
            f"alt_ft={f.altitude_ft}, gs_kt={f.speed_kts}, on_ground={f.on_ground}"
        )

    # --- Secondary ---
    print("\nRequesting FR24 feed through the CORS relay...")
    feed = await FR24FeedClient().get_feed(bounds)
    print(f"ok={feed.ok}, flights={len(feed.flights)}, metadata keys={len(feed.metadata)}")

    # --- Registry / route ---
    if flights:
        sample = flights[0]
        print(f"\nLooking up {sample.icao24} / {sample.callsign} in ADSBDB...")
        adsbdb = ADSBDBClient()
        aircraft = await adsbdb.get_aircraft(sample.icao24)
        route = await adsbdb.get_route(sample.callsign)
        print("Aircraft:", aircraft.model_dump() if aircraft else None)
        print("Route:", route.model_dump() if route else None)


if __name__ == "__main__":
    asyncio.run(main())
