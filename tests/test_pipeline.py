from skyview.domain.airports import resolve_airport
from skyview.models.flights import EmitterCategory, FlightMetadata, FlightRecord, RouteInfo
from skyview.models.traffic import FeedSnapshot, FeedStatus, FilterOptions
from skyview.services.pipeline import (
    build_search_text,
    build_traffic_view,
    merge_flights,
    passes_hard_filter,
)

FILTERS = FilterOptions(min_altitude_ft=0, max_altitude_ft=60000, show_ground=False)


def _flight(icao24, callsign=None, altitude_m=3000.0, **kwargs):
    return FlightRecord(
        icao24=icao24,
        callsign=callsign,
        latitude=53.0,
        longitude=-113.0,
        baro_altitude=altitude_m,
        **kwargs,
    )


def test_primary_record_wins_merge():
    secondary = [_flight("abc123", callsign="SEC1", altitude_m=1000.0), _flight("def456")]
    primary = [_flight("abc123", callsign="PRI1", altitude_m=2000.0)]

    merged = {flight.icao24: flight for flight in merge_flights(primary, secondary)}

    assert merged["abc123"] == primary[0]
    assert set(merged) == {"abc123", "def456"}


def test_ground_filter_follows_show_ground():
    grounded = _flight("abc123", on_ground=True, altitude_m=None)
    vehicle = _flight("def456", category=EmitterCategory.SURFACE_SERVICE, altitude_m=None)

    assert passes_hard_filter(grounded, FILTERS) is False
    assert passes_hard_filter(vehicle, FILTERS) is False

    show = FILTERS.model_copy(update={"show_ground": True})
    assert passes_hard_filter(grounded, show) is True
    assert passes_hard_filter(vehicle, show) is True


def test_altitude_window_uses_geo_fallback():
    flight = FlightRecord(icao24="abc123", geo_altitude=3048.0)
    low_window = FILTERS.model_copy(update={"max_altitude_ft": 5000})

    assert passes_hard_filter(flight, FILTERS) is True
    assert passes_hard_filter(flight, low_window) is False


def test_search_text_includes_metadata():
    flight = _flight("abc123", callsign="wja123")
    meta = FlightMetadata(registration="C-GXYZ", aircraft_type="B38M", origin="YEG")

    assert build_search_text(flight, meta) == "WJA123 C-GXYZ B38M YEG"
    assert build_search_text(_flight("abc123"), None) == "ABC123"


def test_matches_rank_first_and_keep_order():
    flights = [
        _flight("a00001", callsign="WJA1"),
        _flight("a00002", callsign="ACA224"),
        _flight("a00003", callsign="DAL9"),
        _flight("a00004", callsign="ACA2241"),
    ]
    snapshot = FeedSnapshot(generation=3, flights=flights)

    view = build_traffic_view(snapshot, FILTERS.model_copy(update={"search": "AC 224"}))

    assert [item.flight.icao24 for item in view.flights] == ["a00002", "a00004", "a00001", "a00003"]
    assert [item.is_match for item in view.flights] == [True, True, False, False]
    assert view.flights[2].dimmed is True
    assert view.has_active_filter is True
    assert view.flights[0].airline_name == "AIR CANADA"
    assert view.generation == 3


def test_search_matches_metadata_by_callsign_key():
    flight = _flight("abc123", callsign="WJA123")
    snapshot = FeedSnapshot(
        flights=[flight], metadata={"WJA123": FlightMetadata(registration="C-GXYZ")}
    )

    view = build_traffic_view(snapshot, FILTERS.model_copy(update={"search": "gxyz"}))

    assert view.flights[0].is_match is True
    assert view.flights[0].metadata.registration == "C-GXYZ"


def test_airport_filter_requires_route_entry():
    flights = [_flight("abc123"), _flight("def456")]
    routes = {"def456": RouteInfo(origin="CYEG", destination="CYYZ")}

    view = build_traffic_view(
        FeedSnapshot(flights=flights),
        FILTERS,
        routes=routes,
        airport=resolve_airport("CYEG"),
    )

    assert [item.flight.icao24 for item in view.flights] == ["def456", "abc123"]
    assert view.flights[0].route.destination == "CYYZ"
    assert view.airport.code == "CYEG"


def test_no_filter_matches_everything():
    view = build_traffic_view(FeedSnapshot(flights=[_flight("abc123")]), FILTERS)

    assert view.flights[0].is_match is True
    assert view.flights[0].dimmed is False
    assert view.has_active_filter is False


def test_display_cap_truncates_after_ranking():
    flights = [_flight(f"{index:06x}", callsign=f"DAL{index}") for index in range(10)]
    flights.append(_flight("ffffff", callsign="ACA224"))
    status = FeedStatus(loading=True)

    view = build_traffic_view(
        FeedSnapshot(flights=flights),
        FILTERS.model_copy(update={"search": "ACA224"}),
        status=status,
        display_cap=5,
    )

    assert len(view.flights) == 5
    assert view.flights[0].flight.icao24 == "ffffff"
    assert view.total == 11
    assert view.high_traffic is True
    assert view.status.loading is True
