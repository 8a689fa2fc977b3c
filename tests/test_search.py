from skyview.domain.airlines import airline_name
from skyview.domain.search import clean_query, normalize_search


def test_iata_prefix_expands_to_icao_callsign():
    candidates = normalize_search("AC 224")

    assert candidates[0] == "AC224"
    assert "ACA224" in candidates


def test_icao_callsign_kept_as_is():
    candidates = normalize_search("UAL123")

    assert candidates[0] == "UAL123"
    assert "UAL123" in candidates


def test_airline_name_prefix_expands():
    assert "UAL5" in normalize_search("united 5")


def test_non_numeric_remainder_is_not_rewritten():
    assert normalize_search("ACME") == ["ACME"]


def test_candidates_are_unique():
    candidates = normalize_search("UPS123")

    assert candidates.count("UPS123") == 1


def test_empty_query_has_no_candidates():
    assert normalize_search("") == []
    assert normalize_search(" -- ") == []
    assert normalize_search(None) == []


def test_clean_query_strips_punctuation():
    assert clean_query("c-gxyz ") == "CGXYZ"


def test_airline_name_lookup():
    assert airline_name("ACA224") == "AIR CANADA"
    assert airline_name("wja12") == "WESTJET"
    assert airline_name("XX") is None
    assert airline_name(None) is None
