#Purpose: The Nominatim "adapter/client".
#Sole responsibility: forward and reverse geocoding over HTTP.
#Encapsulates Nominatim-specific details:
#query parameters (countrycodes, addressdetails, limit)
#mandatory User-Agent header
#turning raw hits into AddressCandidate labels
#Failures never propagate: search -> [], reverse -> placeholder label.

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from routing.geo import Coordinate
from routing.models import AddressCandidate

from .address import format_address_name
from .policy import GeocodingPolicy, default_geocoding_policy

logger = logging.getLogger(__name__)


class GeocodingError(Exception):
    """Raised when Nominatim answers with a non-success status."""
    pass


class NominatimClient:
    """
    Nominatim Adapter / Client

    - search(query)      -> ordered candidates, [] when nothing matched
    - reverse(coordinate) -> best effort label, placeholder on any failure
    """
    def __init__(
        self,
        policy: Optional[GeocodingPolicy] = None,
        session: Optional[requests.Session] = None,
    ):
        self.policy = policy or default_geocoding_policy()
        self.policy.validate()
        self.base_url = self.policy.base_url.rstrip("/")
        self.session = session or requests.Session()

    def _get(self, endpoint: str, params: Dict[str, Any]) -> Any:
        response = self.session.get(
            f"{self.base_url}/{endpoint}",
            params=params,
            headers={"User-Agent": self.policy.user_agent},
            timeout=self.policy.request_timeout_s,
        )
        if not response.ok:
            raise GeocodingError(f"Nominatim /{endpoint} answered with status {response.status_code}")
        return response.json()

    def search(self, query: str) -> List[AddressCandidate]:
        """
        Free-text address search. The query is sent as given; callers add the
        region bias (see geocoding.address.apply_region_bias).
        """
        if not query or not query.strip():
            return []

        params = {
            "format": "json",
            "q": query,
            "countrycodes": self.policy.country_codes,
            "limit": self.policy.search_limit,
            # addressdetails=1 is what exposes house_number as its own field
            "addressdetails": 1,
        }

        try:
            hits = self._get("search", params)
            if not isinstance(hits, list):
                # e.g. {"error": "Unable to geocode"}
                logger.warning(f"No results found for '{query}' ({hits!r})")
                return []
            candidates = [
                AddressCandidate(
                    name=format_address_name(hit.get("display_name", ""), hit.get("address")),
                    coordinate=Coordinate(lat=float(hit["lat"]), lon=float(hit["lon"])),
                )
                for hit in hits
                if isinstance(hit, dict)
            ]
        except (requests.RequestException, GeocodingError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error(f"Search error for '{query}': {e}")
            return []

        if not candidates:
            logger.warning(f"No results found for '{query}'")
        return candidates

    def reverse(self, coordinate: Coordinate) -> str:
        params = {
            "format": "json",
            "lat": coordinate.lat,
            "lon": coordinate.lon,
            "addressdetails": 1,
        }

        try:
            data = self._get("reverse", params)
            if not isinstance(data, dict) or "error" in data:
                raise GeocodingError(f"No address at {coordinate.lat},{coordinate.lon}")
            name = format_address_name(data.get("display_name", ""), data.get("address"))
        except (requests.RequestException, GeocodingError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error(f"Reverse geocode error: {e}")
            return self.policy.unknown_location_label

        return name or self.policy.unknown_location_label
