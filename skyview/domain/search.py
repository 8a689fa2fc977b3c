"""Free-text search normalization into callsign candidates."""

from __future__ import annotations

import re

from .airlines import AIRLINE_PREFIXES

_NON_ALNUM_RE = re.compile(r"[^A-Z0-9]")


def clean_query(query: str | None) -> str:
    """Upper-case a query and drop everything except letters and digits."""

    if not query:
        return ""
    return _NON_ALNUM_RE.sub("", query.upper())


def normalize_search(query: str | None) -> list[str]:
    """Expand a search query into the callsign fragments it may refer to.

    The cleaned query is always the first candidate. For every airline prefix
    the cleaned query starts with, a rewrite to the ICAO designator is added
    when the rest of the query is empty or a flight number, so ``"AC 224"``
    also yields ``"ACA224"``. Callers OR the candidates as substrings.
    """

    cleaned = clean_query(query)
    if not cleaned:
        return []

    candidates = [cleaned]
    for prefix, icao_code in AIRLINE_PREFIXES.items():
        if not cleaned.startswith(prefix):
            continue
        remainder = cleaned[len(prefix):]
        if remainder == "" or remainder.isdigit():
            candidate = f"{icao_code}{remainder}"
            if candidate not in candidates:
                candidates.append(candidate)
    return candidates


__all__ = ["clean_query", "normalize_search"]
