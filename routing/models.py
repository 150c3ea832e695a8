"""
Purpose: Core data models for the routing domain.
What it does:
- Defines Waypoint (a user placed stop), AddressCandidate (a search hit)
  and RouteResult (distance, duration, geometry, provenance).
- Defines RouteProvenance = NETWORK | FALLBACK.

Rule: No HTTP calls, no provider logic. Models only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional
import uuid

from .geo import Coordinate


class RouteProvenance(str, Enum):
    """
    Where a RouteResult came from.
    NETWORK routes follow the road graph of a remote provider,
    FALLBACK routes are straight segments with an assumed speed.
    """
    NETWORK = "network"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class Waypoint:
    """
    A stop along the route. Order is implicit (list position).
    Frozen: repositioning or renaming yields a new instance via replace().
    """
    id: str
    name: str
    coordinate: Coordinate

    @classmethod
    def new(
        cls,
        name: str,
        lat: float,
        lon: float,
        waypoint_id: Optional[str] = None,
    ) -> Waypoint:
        return cls(
            id=waypoint_id or str(uuid.uuid4()),
            name=name,
            coordinate=Coordinate(lat=lat, lon=lon),
        )


@dataclass(frozen=True)
class AddressCandidate:
    """Ephemeral geocoder hit, consumed immediately to build a Waypoint."""
    name: str
    coordinate: Coordinate


@dataclass(frozen=True)
class RouteResult:
    """
    Output of a route resolution. Always replaced wholesale, never patched.

    geometry is lat first. For NETWORK routes it is usually denser than the
    waypoint list; only FALLBACK routes have one point per waypoint.
    """
    distance_m: float  # meters
    duration_s: float  # seconds
    geometry: List[Coordinate]
    provenance: RouteProvenance

    #base url of the provider that answered (None for fallback)
    provider: Optional[str] = None

    legs_m: List[float] = field(default_factory=list)

    def __post_init__(self):
        if self.distance_m < 0:
            raise ValueError("distance_m must be >= 0")
        if self.duration_s < 0:
            raise ValueError("duration_s must be >= 0")

    @property
    def is_fallback(self) -> bool:
        return self.provenance == RouteProvenance.FALLBACK

    @property
    def distance_km(self) -> int:
        return round(self.distance_m / 1000)

    @property
    def duration_min(self) -> int:
        return round(self.duration_s / 60)
