"""
Purpose: Central configuration for geocoding.
What it does:

Stores the Nominatim endpoint and the search defaults:

BASE_URL = https://nominatim.openstreetmap.org

COUNTRY_CODES = fi

SEARCH_LIMIT = 5

UNKNOWN_LOCATION_LABEL = "Tuntematon sijainti"

Environment overrides (.env is loaded by dotenv):
NOMINATIM_URL, NOMINATIM_COUNTRY_CODES, NOMINATIM_USER_AGENT, DEFAULT_REGION

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
import os

from dotenv import load_dotenv


@dataclass(frozen=True)
class GeocodingPolicy:
    """
    Central configuration for forward and reverse geocoding.
    """

    base_url: str = "https://nominatim.openstreetmap.org"

    # Restrict searches to the service region (comma separated ISO codes).
    country_codes: str = "fi"

    # How many candidates a search returns at most.
    search_limit: int = 5

    # Appended to searches without a comma to bias towards the home region.
    default_region_bias: str = "Lapua"

    # Returned by reverse lookups that failed for any reason.
    unknown_location_label: str = "Tuntematon sijainti"

    request_timeout_s: float = 5.0

    # Nominatim rejects requests without an identifying agent.
    user_agent: str = "route-planner/0.1"

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        if not self.base_url:
            raise ValueError("base_url must be set")

        if self.search_limit <= 0:
            raise ValueError("search_limit must be > 0")

        if self.request_timeout_s <= 0:
            raise ValueError("request_timeout_s must be > 0")

        if not self.user_agent:
            raise ValueError("user_agent must be set")


def default_geocoding_policy() -> GeocodingPolicy:
    """
    Convenience factory for the default policy.
    """
    p = GeocodingPolicy()
    p.validate()
    return p


def geocoding_policy_from_env(base: Optional[GeocodingPolicy] = None) -> GeocodingPolicy:
    load_dotenv()
    base = base or GeocodingPolicy()

    p = GeocodingPolicy(
        base_url=os.getenv("NOMINATIM_URL", base.base_url).rstrip("/"),
        country_codes=os.getenv("NOMINATIM_COUNTRY_CODES", base.country_codes),
        search_limit=base.search_limit,
        default_region_bias=os.getenv("DEFAULT_REGION", base.default_region_bias),
        unknown_location_label=base.unknown_location_label,
        request_timeout_s=base.request_timeout_s,
        user_agent=os.getenv("NOMINATIM_USER_AGENT", base.user_agent),
    )
    p.validate()
    return p
