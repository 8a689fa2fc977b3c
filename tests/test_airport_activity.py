import asyncio

import pytest

from skyview.models.flights import FlightLogEntry, RouteInfo
from skyview.services.airport_activity import AirportActivityCache, build_route_lookup

NOW = 1_700_000_000


class FakeFlightLog:
    def __init__(self, departures=None, arrivals=None, fail_kind=None):
        self.departures = departures or []
        self.arrivals = arrivals or []
        self.fail_kind = fail_kind
        self.calls = []

    async def get_airport_flights(self, airport, kind, begin, end):
        self.calls.append((airport, kind, begin, end))
        if kind == self.fail_kind:
            raise RuntimeError(f"{kind} unavailable")
        return self.departures if kind == "departure" else self.arrivals


class GatedFlightLog(FakeFlightLog):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.release = asyncio.Event()

    async def get_airport_flights(self, airport, kind, begin, end):
        await self.release.wait()
        return await super().get_airport_flights(airport, kind, begin, end)


def _log(icao24, dep=None, arr=None):
    return FlightLogEntry(icao24=icao24, est_departure_airport=dep, est_arrival_airport=arr)


def test_departure_route_wins_over_arrival():
    routes = build_route_lookup(
        departures=[_log("abc123", dep=None, arr="CYYZ")],
        arrivals=[_log("abc123", dep="KLAX", arr=None), _log("def456", dep=None, arr=None)],
        airport_code="CYEG",
    )

    assert routes["abc123"] == RouteInfo(origin="CYEG", destination="CYYZ")
    assert routes["def456"] == RouteInfo(origin=None, destination="CYEG")


@pytest.mark.anyio
async def test_set_airport_builds_lookup_over_window():
    log = FakeFlightLog(
        departures=[_log("abc123", dep="CYEG", arr="CYVR")],
        arrivals=[_log("def456", dep="CYYC", arr="CYEG")],
    )
    cache = AirportActivityCache(log, window_hours=2, clock=lambda: NOW)

    changed = await cache.set_airport("edmonton")

    assert changed is True
    assert cache.airport.code == "CYEG"
    assert set(cache.routes) == {"abc123", "def456"}
    assert cache.is_loading is False
    assert {call[1] for call in log.calls} == {"departure", "arrival"}
    assert all(call[2:] == (NOW - 7200, NOW + 7200) for call in log.calls)


@pytest.mark.anyio
async def test_unchanged_airport_does_not_rebuild():
    log = FakeFlightLog(departures=[_log("abc123")])
    cache = AirportActivityCache(log, clock=lambda: NOW)

    await cache.set_airport("CYEG")
    changed = await cache.set_airport("yeg")

    assert changed is False
    assert len(log.calls) == 2


@pytest.mark.anyio
async def test_one_failing_window_still_builds():
    log = FakeFlightLog(arrivals=[_log("def456")], fail_kind="departure")
    cache = AirportActivityCache(log, clock=lambda: NOW)

    await cache.set_airport("CYEG")

    assert cache.routes["def456"].destination == "CYEG"


@pytest.mark.anyio
async def test_clearing_airport_empties_lookup():
    log = FakeFlightLog(departures=[_log("abc123")])
    cache = AirportActivityCache(log, clock=lambda: NOW)
    await cache.set_airport("CYEG")

    changed = await cache.set_airport("")

    assert changed is True
    assert cache.airport is None
    assert dict(cache.routes) == {}


@pytest.mark.anyio
async def test_superseded_build_never_publishes():
    slow = GatedFlightLog(departures=[_log("old111")])
    cache = AirportActivityCache(slow, clock=lambda: NOW)

    first = asyncio.create_task(cache.set_airport("CYEG"))
    await asyncio.sleep(0)
    assert cache.is_loading is True

    slow.departures = [_log("new222")]
    second = asyncio.create_task(cache.set_airport("CYYZ"))
    await asyncio.sleep(0)
    slow.release.set()
    await asyncio.gather(first, second)

    assert cache.airport.code == "CYYZ"
    assert set(cache.routes) == {"new222"}
    assert cache.is_loading is False
