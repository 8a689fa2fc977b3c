"""Static airline code tables used for search expansion and display."""

from __future__ import annotations

from types import MappingProxyType

# IATA codes and common names mapped to the ICAO designator used in callsigns.
AIRLINE_PREFIXES = MappingProxyType(
    {
        "AC": "ACA", "AIRCANADA": "ACA", "ROUGE": "ROU",
        "UA": "UAL", "UNITED": "UAL",
        "AA": "AAL", "AMERICAN": "AAL",
        "DL": "DAL", "DELTA": "DAL",
        "WS": "WJA", "WESTJET": "WJA", "ENCORE": "WEN",
        "BA": "BAW", "BRITISH": "BAW", "SPEEDBIRD": "BAW",
        "LH": "DLH", "LUFTHANSA": "DLH",
        "AF": "AFR", "AIRFRANCE": "AFR",
        "KL": "KLM", "KLM": "KLM",
        "QF": "QFA", "QANTAS": "QFA",
        "NZ": "ANZ", "AIRNZ": "ANZ",
        "EK": "UAE", "EMIRATES": "UAE",
        "QR": "QTR", "QATAR": "QTR",
        "SQ": "SIA", "SINGAPORE": "SIA",
        "CX": "CPA", "CATHAY": "CPA",
        "JL": "JAL", "JAPAN": "JAL",
        "NH": "ANA", "ALLNIPPON": "ANA",
        "KE": "KAL", "KOREAN": "KAL",
        "WN": "SWA", "SOUTHWEST": "SWA",
        "B6": "JBU", "JETBLUE": "JBU",
        "AS": "ASA", "ALASKA": "ASA",
        "NK": "NKS", "SPIRIT": "NKS",
        "F9": "FFT", "FRONTIER": "FFT",
        "FX": "FDX", "FEDEX": "FDX",
        "UPS": "UPS",
    }
)

AIRLINE_NAMES = MappingProxyType(
    {
        "ACA": "AIR CANADA",
        "ROU": "AIR CANADA ROUGE",
        "WJA": "WESTJET",
        "WEN": "WESTJET ENCORE",
        "UAL": "UNITED",
        "AAL": "AMERICAN",
        "DAL": "DELTA",
        "BAW": "BRITISH AIRWAYS",
        "DLH": "LUFTHANSA",
        "AFR": "AIR FRANCE",
        "KLM": "KLM",
        "QFA": "QANTAS",
        "ANZ": "AIR NEW ZEALAND",
        "UAE": "EMIRATES",
        "QTR": "QATAR",
        "SIA": "SINGAPORE",
        "CPA": "CATHAY PACIFIC",
        "JAL": "JAPAN AIRLINES",
        "ANA": "ALL NIPPON",
        "KAL": "KOREAN AIR",
        "SWA": "SOUTHWEST",
        "JBU": "JETBLUE",
        "ASA": "ALASKA",
        "NKS": "SPIRIT",
        "FFT": "FRONTIER",
        "FDX": "FEDEX",
        "UPS": "UPS",
        "JZA": "JAZZ",
        "MAL": "MORNINGSTAR",
        "CNK": "SUNWEST",
        "CJT": "CARGOJET",
    }
)


def airline_name(callsign: str | None) -> str | None:
    """Return the operator display name for a callsign's ICAO prefix."""

    if not callsign or len(callsign.strip()) < 3:
        return None
    return AIRLINE_NAMES.get(callsign.strip()[:3].upper())


__all__ = ["AIRLINE_NAMES", "AIRLINE_PREFIXES", "airline_name"]
