#Purpose: Degraded-mode route estimate used when every provider failed.
#Straight segments through the waypoints, great-circle length, assumed speed.
#Never touches the network.

from __future__ import annotations

from typing import Sequence

from .geo import leg_distances_meters, to_coordinates
from .models import RouteProvenance, RouteResult
from .policy import FALLBACK_SPEED_MPS


def estimate_fallback(waypoints: Sequence, speed_mps: float = FALLBACK_SPEED_MPS) -> RouteResult:
    """
    Approximate a route without a road graph.

    - geometry is exactly the input coordinates, in order (no interpolation)
    - distance is the sum of consecutive haversine distances
    - duration is distance / speed_mps

    The result is tagged FALLBACK so consumers can tell the duration is a
    coarse guess and not a provider estimate.
    """
    if speed_mps <= 0:
        raise ValueError("speed_mps must be > 0")

    coordinates = to_coordinates(waypoints)
    if len(coordinates) < 2:
        raise ValueError("At least two waypoints are required for a fallback route.")

    legs = leg_distances_meters(coordinates)
    total_distance = sum(legs)

    return RouteResult(
        distance_m=total_distance,
        duration_s=total_distance / speed_mps,
        geometry=list(coordinates),
        provenance=RouteProvenance.FALLBACK,
        provider=None,
        legs_m=legs,
    )
