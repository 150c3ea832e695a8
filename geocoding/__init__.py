"""
Purpose: Package entry + stable exports.
What it does:

Marks geocoding as a Python package and re-exports the public API so other
modules can do:

from geocoding import NominatimClient, enrich

Should not contain business logic.
"""
from .address import (
    enrich,
    format_from_structured_fields,
    format_address_name,
    apply_region_bias,
    strip_region_suffix,
    format_trip_summary,
)
from .nominatim_client import NominatimClient, GeocodingError
from .policy import GeocodingPolicy, default_geocoding_policy, geocoding_policy_from_env

__all__ = [
    "enrich",
    "format_from_structured_fields",
    "format_address_name",
    "apply_region_bias",
    "strip_region_suffix",
    "format_trip_summary",
    "NominatimClient",
    "GeocodingError",
    "GeocodingPolicy",
    "default_geocoding_policy",
    "geocoding_policy_from_env",
]
