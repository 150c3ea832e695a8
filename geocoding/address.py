"""
Purpose: Address label normalization.
What it does:
- Builds a "Street Number, City" label from structured geocoder fields.
- Reconciles a geocoded label with what the user typed so a house number
  in the query is never silently dropped from the final label.
- Small helpers for the region bias appended to searches and stripped
  again from trip summaries.

Rule: Pure string functions. No HTTP calls.
"""

from __future__ import annotations

import re
from typing import Dict, Iterable, Optional

# A standalone house number, optionally with one trailing letter ("12", "7b", "12B").
# Left edge: start or whitespace. Right edge: comma, whitespace or end.
HOUSE_NUMBER_PATTERN = re.compile(r"(?:^|\s)(\d+[a-zA-Z]?)(?=,|\s|$)")

# Alternative tag sources in preference order (first non-empty wins)
ROAD_KEYS = ("road", "pedestrian", "highway", "street")
LOCALITY_KEYS = ("city", "town", "village", "municipality")


def extract_house_number(user_query: str) -> Optional[str]:
    match = HOUSE_NUMBER_PATTERN.search(user_query or "")
    if not match:
        return None
    return match.group(1)


def enrich(geocoded_name: str, user_query: str) -> str:
    """
    Make sure the house number the user typed survives geocoding.

    Geocoders frequently answer a "Street 12" query with just "Street, City".
    If the query holds a number that the geocoded label lacks, the number is
    appended to the street part (before the first comma):

        enrich("Kauppatie, Lapua", "kauppatie 7b") -> "Kauppatie 7b, Lapua"

    Absence of a number in the query is a no-op, never an error.
    """
    number = extract_house_number(user_query)
    if not number:
        return geocoded_name

    if re.search(rf"\b{re.escape(number)}\b", geocoded_name):
        return geocoded_name

    primary, comma, rest = geocoded_name.partition(",")
    return f"{primary.strip()} {number}{comma}{rest}"


def _first_non_empty(address: Dict[str, str], keys: Iterable[str]) -> str:
    for key in keys:
        value = address.get(key)
        if value:
            return value
    return ""


def pick_road(address: Dict[str, str]) -> str:
    return _first_non_empty(address, ROAD_KEYS)


def pick_locality(address: Dict[str, str]) -> str:
    return _first_non_empty(address, LOCALITY_KEYS)


def format_from_structured_fields(road: str, house_number: str = "", locality: str = "") -> str:
    """
    "{road} {house_number}, {locality}", leaving out empty parts.
    Returns "" when there is no road; the caller then uses the provider's
    display label instead (see format_address_name).
    """
    if not road:
        return ""

    name = road
    if house_number:
        name += f" {house_number}"
    if locality:
        name += f", {locality}"
    return name.strip()


def format_address_name(display_name: str, address: Optional[Dict[str, str]] = None) -> str:
    """
    Consistent label for a geocoder hit.
    Structured fields win; otherwise the text before the first comma of the
    generic display label.
    """
    if isinstance(address, dict) and address:
        name = format_from_structured_fields(
            pick_road(address),
            address.get("house_number", "") or "",
            pick_locality(address),
        )
        if name:
            return name

    return (display_name or "").split(",")[0]


def apply_region_bias(query: str, region: str) -> str:
    """Append the default region to queries that name no locality (no comma)."""
    if not region or "," in query:
        return query
    return f"{query}, {region}"


def strip_region_suffix(name: str, region: str) -> str:
    """'Kauppatie 12, Lapua' -> 'Kauppatie 12' when region is 'Lapua'."""
    if not region:
        return name
    return re.sub(rf",\s*{re.escape(region)}$", "", name, flags=re.IGNORECASE)


def format_trip_summary(names: Iterable[str], region: str = "") -> str:
    """Plain text route for copying into trip reports: 'A -> B -> C'."""
    return " -> ".join(strip_region_suffix(name, region) for name in names)
