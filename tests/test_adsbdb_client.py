import httpx
import pytest

from skyview.ingestors.adsbdb import ADSBDBClient
from skyview.models.enrichment import EnrichmentSource


def _client(handler) -> ADSBDBClient:
    return ADSBDBClient(base_url="https://adsbdb.example.test/v0", transport=httpx.MockTransport(handler))


@pytest.mark.anyio
async def test_get_aircraft_parses_registry():
    def handler(request: httpx.Request):
        assert request.url.path == "/v0/aircraft/c0ffee"
        return httpx.Response(
            200,
            json={
                "response": {
                    "aircraft": {
                        "type": "737MAX 8",
                        "icao_type": "B38M",
                        "manufacturer": "Boeing",
                        "mode_s": "C0FFEE",
                        "registration": "C-GXYZ",
                        "registered_owner": "WestJet",
                        "url_photo": None,
                    }
                }
            },
        )

    aircraft = await _client(handler).get_aircraft("C0FFEE")

    assert aircraft.icao_type == "B38M"
    assert aircraft.manufacturer == "Boeing"
    assert aircraft.registration == "C-GXYZ"
    assert aircraft.owner == "WestJet"
    assert aircraft.source == EnrichmentSource.REGISTRY


@pytest.mark.anyio
async def test_get_route_accepts_flightroute_and_route():
    origin = {"icao_code": "CYEG", "iata_code": "YEG", "name": "Edmonton International"}
    destination = {"icao_code": "CYYZ", "iata_code": "YYZ", "name": "Toronto Pearson"}

    def flightroute(request: httpx.Request):
        assert request.url.path == "/v0/callsign/WJA123"
        return httpx.Response(
            200,
            json={"response": {"flightroute": {"callsign": "WJA123", "origin": origin, "destination": destination}}},
        )

    def route(request: httpx.Request):
        return httpx.Response(
            200, json={"response": {"route": {"origin": origin, "destination": destination}}}
        )

    for handler in (flightroute, route):
        result = await _client(handler).get_route("wja123 ")
        assert result.callsign == "WJA123"
        assert result.origin.icao == "CYEG"
        assert result.origin.code == "YEG"
        assert result.destination.name == "Toronto Pearson"


@pytest.mark.anyio
async def test_lookups_return_none_on_failures():
    def not_found(request: httpx.Request):
        return httpx.Response(404, json={"response": "unknown aircraft"})

    def server_error(request: httpx.Request):
        return httpx.Response(502, text="bad gateway")

    def bad_json(request: httpx.Request):
        return httpx.Response(200, text="not json")

    def transport_error(request: httpx.Request):
        raise httpx.ReadTimeout("slow", request=request)

    for handler in (not_found, server_error, bad_json, transport_error):
        client = _client(handler)
        assert await client.get_aircraft("c0ffee") is None
        assert await client.get_route("WJA123") is None


@pytest.mark.anyio
async def test_route_skipped_for_missing_callsign():
    calls = []

    def handler(request: httpx.Request):
        calls.append(request)
        return httpx.Response(200, json={})

    client = _client(handler)

    assert await client.get_route(None) is None
    assert await client.get_route("N/A") is None
    assert await client.get_route("  ") is None
    assert calls == []
