import httpx
import pytest

from skyview.config import OpenSkyCredentials
from skyview.domain.geo import GeoBounds
from skyview.ingestors.opensky import (
    OpenSkyClient,
    OpenSkyError,
    OpenSkyRateLimitError,
    parse_state_vector,
)
from skyview.models.flights import EmitterCategory, PositionSource

BOUNDS = GeoBounds(south=50.0, north=55.0, west=-115.0, east=-110.0)


def _state(icao24="C0FFEE", callsign="ACA224  ", category=4):
    return [
        icao24,
        callsign,
        "Canada",
        1714765198,  # time_position
        1714765200,  # last_contact
        -113.5,  # longitude
        53.3,  # latitude
        3048.0,  # baro_altitude meters
        False,  # on_ground
        200.0,  # velocity m/s
        270.0,  # true_track
        -2.5,  # vertical_rate m/s
        None,  # sensors
        3100.0,  # geo_altitude
        "2000",  # squawk
        False,  # spi
        2,  # position_source
        category,
    ]


def test_parse_state_vector_names_fields():
    flight = parse_state_vector(_state())

    assert flight.icao24 == "c0ffee"
    assert flight.callsign == "ACA224"
    assert flight.latitude == 53.3
    assert flight.longitude == -113.5
    assert flight.position_source == PositionSource.MLAT
    assert flight.category == EmitterCategory.LARGE
    assert flight.altitude_ft == pytest.approx(10000.0, rel=1e-4)
    assert flight.speed_kts == pytest.approx(388.768, rel=1e-4)


def test_parse_state_vector_rejects_short_rows():
    assert parse_state_vector(["abc123", "X"]) is None
    assert parse_state_vector("not a row") is None


def test_parse_state_vector_without_category_defaults():
    row = _state()[:17]
    row[5] = None  # longitude missing -> no position

    flight = parse_state_vector(row)

    assert flight.category == EmitterCategory.NO_INFO
    assert flight.has_position is False
    assert flight.latitude is None


@pytest.mark.anyio
async def test_get_states_sends_bounds_and_parses():
    def handler(request: httpx.Request):
        assert request.url.path.endswith("/states/all")
        assert request.url.params["extended"] == "1"
        assert request.url.params["lamin"] == "50.0"
        assert request.url.params["lomax"] == "-110.0"
        return httpx.Response(200, json={"time": 1, "states": [_state(), ["bad"]]})

    client = OpenSkyClient(base_url="https://example.test/api", transport=httpx.MockTransport(handler))

    flights = await client.get_states(BOUNDS)

    assert [flight.icao24 for flight in flights] == ["c0ffee"]


@pytest.mark.anyio
async def test_get_states_handles_null_states():
    def handler(request: httpx.Request):
        return httpx.Response(200, json={"time": 1, "states": None})

    client = OpenSkyClient(base_url="https://example.test/api", transport=httpx.MockTransport(handler))

    assert await client.get_states(BOUNDS) == []


@pytest.mark.anyio
async def test_unauthorized_falls_back_to_anonymous_once():
    calls = []

    def handler(request: httpx.Request):
        authenticated = "authorization" in request.headers
        calls.append(authenticated)
        if authenticated:
            return httpx.Response(401, text="unauthorized")
        return httpx.Response(200, json={"states": [_state()]})

    client = OpenSkyClient(
        base_url="https://example.test/api",
        credentials=OpenSkyCredentials(username="user", password="secret"),
        transport=httpx.MockTransport(handler),
    )

    flights = await client.get_states(BOUNDS)

    assert calls == [True, False]
    assert len(flights) == 1


@pytest.mark.anyio
async def test_authenticated_server_error_falls_back_to_anonymous():
    calls = []

    def handler(request: httpx.Request):
        authenticated = "authorization" in request.headers
        calls.append(authenticated)
        if authenticated:
            return httpx.Response(503, text="unavailable")
        return httpx.Response(200, json={"states": [_state()]})

    client = OpenSkyClient(
        base_url="https://example.test/api",
        credentials=OpenSkyCredentials(username="user", password="secret"),
        transport=httpx.MockTransport(handler),
    )

    flights = await client.get_states(BOUNDS)

    assert calls == [True, False]
    assert [flight.icao24 for flight in flights] == ["c0ffee"]


@pytest.mark.anyio
async def test_authenticated_transport_error_falls_back_to_anonymous():
    calls = []

    def handler(request: httpx.Request):
        authenticated = "authorization" in request.headers
        calls.append(authenticated)
        if authenticated:
            raise httpx.ConnectTimeout("slow", request=request)
        return httpx.Response(200, json={"states": [_state()]})

    client = OpenSkyClient(
        base_url="https://example.test/api",
        credentials=OpenSkyCredentials(username="user", password="secret"),
        transport=httpx.MockTransport(handler),
    )

    flights = await client.get_states(BOUNDS)

    assert calls == [True, False]
    assert len(flights) == 1


@pytest.mark.anyio
async def test_rate_limit_raises_without_anonymous_retry():
    calls = []

    def handler(request: httpx.Request):
        calls.append(request)
        return httpx.Response(429, text="rate limited")

    client = OpenSkyClient(
        base_url="https://example.test/api",
        credentials=OpenSkyCredentials(username="user", password="secret"),
        transport=httpx.MockTransport(handler),
    )

    with pytest.raises(OpenSkyRateLimitError):
        await client.get_states(BOUNDS)

    assert len(calls) == 1


@pytest.mark.anyio
async def test_server_error_and_bad_json_raise_opensky_error():
    def server_error(request: httpx.Request):
        return httpx.Response(503, text="down")

    def bad_json(request: httpx.Request):
        return httpx.Response(200, text="<html>")

    for handler in (server_error, bad_json):
        client = OpenSkyClient(base_url="https://example.test/api", transport=httpx.MockTransport(handler))
        with pytest.raises(OpenSkyError):
            await client.get_states(BOUNDS)


@pytest.mark.anyio
async def test_transport_error_raises_opensky_error():
    def handler(request: httpx.Request):
        raise httpx.ConnectError("boom", request=request)

    client = OpenSkyClient(base_url="https://example.test/api", transport=httpx.MockTransport(handler))

    with pytest.raises(OpenSkyError):
        await client.get_states(BOUNDS)


@pytest.mark.anyio
async def test_airport_flights_parse_log_rows():
    def handler(request: httpx.Request):
        assert request.url.path.endswith("/flights/departure")
        assert request.url.params["airport"] == "CYEG"
        assert request.url.params["begin"] == "100"
        return httpx.Response(
            200,
            json=[
                {
                    "icao24": "C0FFEE",
                    "callsign": "ACA224 ",
                    "firstSeen": 100,
                    "lastSeen": 200,
                    "estDepartureAirport": "CYEG",
                    "estArrivalAirport": "CYYZ",
                },
                {"callsign": "missing icao"},
            ],
        )

    client = OpenSkyClient(base_url="https://example.test/api", transport=httpx.MockTransport(handler))

    entries = await client.get_airport_flights("cyeg", "departure", 100, 300)

    assert len(entries) == 1
    assert entries[0].icao24 == "c0ffee"
    assert entries[0].callsign == "ACA224"
    assert entries[0].est_arrival_airport == "CYYZ"
    assert entries[0].last_seen == 200


@pytest.mark.anyio
async def test_flight_log_failures_return_empty():
    def not_found(request: httpx.Request):
        return httpx.Response(404, text="no flights")

    def rate_limited(request: httpx.Request):
        return httpx.Response(429, text="slow down")

    for handler in (not_found, rate_limited):
        client = OpenSkyClient(base_url="https://example.test/api", transport=httpx.MockTransport(handler))
        assert await client.get_aircraft_flights("c0ffee", 0, 10) == []
