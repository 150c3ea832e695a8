#Purpose: Geo primitives shared by every routing module.
#Owns the internal coordinate type (lat first) and great-circle math.
#No HTTP, no provider logic.

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple
import math

# Mean earth radius (6371 km) in meters
EARTH_RADIUS_M = 6_371_000.0

LatLon = Tuple[float, float]


@dataclass(frozen=True)
class Coordinate:
    """
    Immutable (lat, lon) pair in signed decimal degrees.
    Two coordinates are the same point iff their values are equal.
    """
    lat: float
    lon: float

    def as_lonlat(self) -> str:
        """OSRM / GeoJSON ordering: 'lon,lat'"""
        return f"{self.lon},{self.lat}"

    def as_tuple(self) -> LatLon:
        return (self.lat, self.lon)

    @classmethod
    def from_lonlat(cls, pair: Sequence[float]) -> Coordinate:
        #providers emit [lon, lat]; internal geometry is always lat first
        lon, lat = pair[0], pair[1]
        return cls(lat=float(lat), lon=float(lon))


def distance_meters(a: Coordinate, b: Coordinate) -> float:
    """
    Great-circle (haversine) distance between two coordinates in meters.

    Symmetric, and exactly 0.0 when a == b. The haversine term is clamped
    to [0, 1] so float overshoot near antipodal points never leaves the
    asin domain.
    """
    if a == b:
        return 0.0

    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    dphi = math.radians(b.lat - a.lat)
    dlmb = math.radians(b.lon - a.lon)

    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(h))


def leg_distances_meters(points: Sequence[Coordinate]) -> List[float]:
    """Distances between each consecutive pair, in order."""
    return [distance_meters(points[i - 1], points[i]) for i in range(1, len(points))]


def path_length_meters(points: Sequence[Coordinate]) -> float:
    return sum(leg_distances_meters(points))


def is_valid_coordinate(lat: float, lon: float) -> bool:
    return -90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0


def to_coordinates(points: Iterable) -> List[Coordinate]:
    """
    Normalize a mixed input sequence into Coordinates.
    Accepts Coordinate, anything exposing .coordinate (e.g. Waypoint),
    or a (lat, lon) tuple.
    """
    coordinates: List[Coordinate] = []
    for point in points:
        if isinstance(point, Coordinate):
            coordinates.append(point)
        elif hasattr(point, "coordinate"):
            coordinates.append(point.coordinate)
        else:
            lat, lon = point
            coordinates.append(Coordinate(lat=float(lat), lon=float(lon)))
    return coordinates
