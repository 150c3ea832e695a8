#Purpose: The OSRM "adapter/client" for one routing provider.
#Sole responsibility: talk to a single OSRM deployment via HTTP and return normalized outputs.
#Encapsulates OSRM-specific details:
#coordinate formatting (lon,lat)
#URL construction (/route, /table)
#timeouts and response validation
#parsing response JSON into the internal (lat first) shape
#It should not contain provider ordering, fallback or retry policy (see route_service.py).

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import requests

from .geo import Coordinate


class OSRMError(Exception):
    """Raised when an OSRM provider answers without a usable result."""
    pass


class OSRMClient:
    """
    OSRM Adapter / Client

    Sole responsibility:
    - Talk to one OSRM base url via HTTP
    - Convert internal Coordinate (lat, lon) → OSRM 'lon,lat'
    - Return normalized outputs (geometry back to lat first)

    """
    def __init__(
        self,
        base_url: str,
        profile: str = "driving",
        timeout: float = 5.0,
        session: Optional[requests.Session] = None,
    ):
        if not base_url:
            raise ValueError("OSRM base URL not set.")

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout #the time to wait for a response from OSRM before giving up
        self.profile = profile #the mode of transportation (driving, walking, cycling)
        self.session = session or requests.Session()

    #----------------
    # Internal helpers for coordinate formatting, URL construction, validation
    #----------------
    def format_coordinates(self, coords: Sequence[Coordinate]) -> str:
        """Convert list of Coordinate to OSRM format 'lon,lat;lon,lat;...'"""
        return ';'.join(coord.as_lonlat() for coord in coords)

    def _get(self, service: str, coords: Sequence[Coordinate], params: Dict[str, str]) -> Dict[str, Any]:
        url = f"{self.base_url}/{service}/v1/{self.profile}/{self.format_coordinates(coords)}"

        response = self.session.get(url, params=params, timeout=self.timeout)

        if not response.ok:
            raise OSRMError(f"OSRM {self.base_url} answered with status {response.status_code}")

        data = response.json() #may raise ValueError on a non-JSON body

        if not isinstance(data, dict) or data.get("code") != "Ok":
            message = data.get("message", "Unknown error") if isinstance(data, dict) else "Malformed response"
            raise OSRMError(f"OSRM error: {message}")

        return data

    #----------------
    # route service
    #----------------
    def compute_route(self, coordinates: Sequence[Coordinate]) -> Dict[str, Any]:
        """
        calls the OSRM /route endpoint with the full ordered coordinate list

        Returns:
            {
                "distance": float, # in meters
                "duration": float, # in seconds
                "geometry": List[Coordinate], # lat first
                "legs": List[float], # meters per leg, may be empty
            }
        """
        if len(coordinates) < 2:
            raise ValueError("At least two coordinates are required to compute a route.")

        data = self._get(
            "route",
            coordinates,
            params={
                "overview": "full", # full polyline for map display
                "geometries": "geojson",
            },
        )

        routes = data.get("routes") or []
        if not routes:
            raise OSRMError(f"OSRM {self.base_url} returned no routes")

        route = routes[0] #take the first route (OSRM may return alternatives)

        #geojson coordinates are [lon, lat]
        geometry = [Coordinate.from_lonlat(pair) for pair in route["geometry"]["coordinates"]]
        legs = [float(leg.get("distance", 0.0)) for leg in route.get("legs", [])]

        distance = float(route["distance"])
        duration = float(route["duration"])
        if distance < 0 or duration < 0:
            raise OSRMError(f"OSRM {self.base_url} returned a negative distance or duration")

        #Normalize output to internal format
        return {
            "distance": distance,
            "duration": duration,
            "geometry": geometry,
            "legs": legs,
        }

    #----------------
    # table service (batch routing)
    #----------------
    def compute_table(
        self,
        sources: List[Coordinate],
        destinations: List[Coordinate],
    ) -> Dict[str, List[List[Optional[float]]]]:
        """
        calls OSRM /table endpoint.
        used for the stop-to-stop matrix in scripts/plan_route.py

        returns :
        {
            "durations": [[seconds, ...], ...], # sources x destinations
            "distances": [[meters, ...], ...],
        }
        """
        if not sources or not destinations:
            return {"durations": [], "distances": []}

        # If sources == destinations (NxN matrix) do not duplicate them in the URL.
        if sources == destinations:
            coordinates = list(sources)
            params = {
                "annotations": "duration,distance",
            }
        else:
            coordinates = list(sources) + list(destinations)
            params = {
                "sources": ";".join(str(i) for i in range(len(sources))),
                "destinations": ";".join(
                    str(i) for i in range(len(sources), len(sources) + len(destinations))
                ),
                "annotations": "duration,distance",
            }

        data = self._get("table", coordinates, params=params)

        return {
            "durations": data.get("durations", []),
            "distances": data.get("distances", []),
        }
