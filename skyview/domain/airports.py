"""Static airport directory and free-text airport resolution."""

from __future__ import annotations

from types import MappingProxyType

from skyview.models.airports import Airport

CUSTOM_AIRPORT_NAME = "Custom Airport"

AIRPORTS: tuple[Airport, ...] = (
    Airport(code="CYEG", iata="YEG", name="Edmonton International", lat=53.3097, lon=-113.5797, keywords=("edmonton", "yeg")),
    Airport(code="CYYZ", iata="YYZ", name="Toronto Pearson", lat=43.6777, lon=-79.6248, keywords=("toronto", "pearson", "yyz")),
    Airport(code="CYVR", iata="YVR", name="Vancouver International", lat=49.1947, lon=-123.1762, keywords=("vancouver", "yvr")),
    Airport(code="CYUL", iata="YUL", name="Montreal Trudeau", lat=45.4690, lon=-73.7447, keywords=("montreal", "yul")),
    Airport(code="CYYC", iata="YYC", name="Calgary International", lat=51.1215, lon=-114.0076, keywords=("calgary", "yyc")),
    Airport(code="EGLL", iata="LHR", name="London Heathrow", lat=51.4700, lon=-0.4543, keywords=("london", "heathrow", "lhr")),
    Airport(code="KJFK", iata="JFK", name="John F. Kennedy", lat=40.6413, lon=-73.7781, keywords=("new york", "jfk", "kennedy")),
    Airport(code="KLAX", iata="LAX", name="Los Angeles International", lat=33.9416, lon=-118.4085, keywords=("los angeles", "lax")),
    Airport(code="KORD", iata="ORD", name="O'Hare International", lat=41.9742, lon=-87.9073, keywords=("chicago", "ord", "ohare")),
    Airport(code="OMDB", iata="DXB", name="Dubai International", lat=25.2532, lon=55.3657, keywords=("dubai", "dxb")),
)

_BY_CODE = MappingProxyType({airport.code: airport for airport in AIRPORTS})


def find_airport(code: str | None) -> Airport | None:
    """Look up a directory airport by ICAO code."""

    if not code:
        return None
    return _BY_CODE.get(code.strip().upper())


def resolve_airport(query: str | None) -> Airport | None:
    """Resolve a free-text airport query.

    Matches case-insensitively on ICAO code, IATA code, or any directory
    keyword contained in the query; the first directory hit wins. Four
    character queries that match nothing are accepted as a custom ICAO code.
    """

    if not query or not query.strip():
        return None
    q = query.strip().lower()

    for airport in AIRPORTS:
        if (
            airport.code.lower() == q
            or airport.iata.lower() == q
            or any(keyword in q for keyword in airport.keywords)
        ):
            return airport

    if len(q) == 4:
        return Airport(code=q.upper(), name=CUSTOM_AIRPORT_NAME, is_custom=True)
    return None


__all__ = ["AIRPORTS", "CUSTOM_AIRPORT_NAME", "find_airport", "resolve_airport"]
