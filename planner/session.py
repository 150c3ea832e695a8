"""
Purpose: In-memory trip planning session (the "glue").
What it does:
Owns the ordered waypoint list on behalf of the surrounding application and
reports every coordinate change to the RouteTrigger, so the route always
catches up with the latest list.

Operations:
- search_and_add(query)       geocode (region biased), keep typed house number, append
- add_at(coordinate)          map click, reverse geocoded name, append
- add / remove / move / reorder
- reposition(id, coordinate)  optimistic move, then reverse geocoded rename
- clear()                     empty list, route becomes None
- summary_text()              'A -> B -> C' for trip reports

Rule: Session owns waypoint state, RouteService owns routing logic.
"""

from __future__ import annotations

from dataclasses import replace
import logging
import threading
from typing import Callable, List, Optional, Tuple

from geocoding.address import apply_region_bias, enrich, format_trip_summary
from geocoding.nominatim_client import NominatimClient
from routing.geo import Coordinate
from routing.models import RouteResult, Waypoint
from routing.policy import RoutingPolicy, default_routing_policy
from routing.route_service import RouteService

from .trigger import RouteTrigger

logger = logging.getLogger(__name__)


class TripSession:
    """
    Waypoint list + debounced route for one user.
    """
    def __init__(
        self,
        policy: Optional[RoutingPolicy] = None,
        route_service: Optional[RouteService] = None,
        geocoder: Optional[NominatimClient] = None,
        on_route: Optional[Callable[[Optional[RouteResult]], None]] = None,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ):
        self.policy = policy or default_routing_policy()
        self.route_service = route_service or RouteService(policy=self.policy)
        self.geocoder = geocoder or NominatimClient()
        self.on_route = on_route

        self._lock = threading.Lock()
        self._waypoints: List[Waypoint] = []
        self._route: Optional[RouteResult] = None

        self.trigger = RouteTrigger(
            resolve=self.route_service.resolve_route,
            waypoints_provider=self._coordinates,
            on_result=self._on_result,
            debounce_seconds=self.policy.debounce_seconds,
            timer_factory=timer_factory,
        )

    @property
    def waypoints(self) -> Tuple[Waypoint, ...]:
        with self._lock:
            return tuple(self._waypoints)

    @property
    def route(self) -> Optional[RouteResult]:
        return self._route

    def _coordinates(self) -> List[Coordinate]:
        with self._lock:
            return [waypoint.coordinate for waypoint in self._waypoints]

    def _on_result(self, result: Optional[RouteResult]) -> None:
        self._route = result
        if self.on_route is not None:
            self.on_route(result)

    def _index_of(self, waypoint_id: str) -> int:
        for index, waypoint in enumerate(self._waypoints):
            if waypoint.id == waypoint_id:
                return index
        return -1

    # --- Mutations ---

    def add(self, waypoint: Waypoint) -> Waypoint:
        with self._lock:
            self._waypoints.append(waypoint)
        self.trigger.notify()
        return waypoint

    def add_at(self, coordinate: Coordinate) -> Waypoint:
        """
        Map click: append a waypoint at `coordinate`, named by reverse geocoding
        (the placeholder label when the lookup fails).
        """
        name = self.geocoder.reverse(coordinate)
        waypoint = Waypoint.new(name=name, lat=coordinate.lat, lon=coordinate.lon)
        return self.add(waypoint)

    def search_and_add(self, query: str) -> Optional[Waypoint]:
        """
        Geocode `query` and append the best match.
        Returns None (list untouched) when nothing was found.
        """
        if not query or not query.strip():
            return None

        final_query = apply_region_bias(query, self.policy.default_region_bias)
        candidates = self.geocoder.search(final_query)

        if not candidates:
            logger.warning(f"Address not found: {query}")
            return None

        best = candidates[0]
        waypoint = Waypoint.new(
            name=enrich(best.name, query),
            lat=best.coordinate.lat,
            lon=best.coordinate.lon,
        )
        return self.add(waypoint)

    def remove(self, waypoint_id: str) -> bool:
        with self._lock:
            index = self._index_of(waypoint_id)
            if index < 0:
                return False
            del self._waypoints[index]
        self.trigger.notify()
        return True

    def move(self, index: int, direction: str) -> bool:
        """
        Swap with the neighbour above ("up") or below ("down").
        Moves past either end are ignored.
        """
        if direction == "up":
            target = index - 1
        elif direction == "down":
            target = index + 1
        else:
            raise ValueError(f"Unknown direction: {direction}")

        with self._lock:
            if not (0 <= index < len(self._waypoints)) or not (0 <= target < len(self._waypoints)):
                return False
            self._waypoints[index], self._waypoints[target] = self._waypoints[target], self._waypoints[index]
        self.trigger.notify()
        return True

    def reorder(self, from_index: int, to_index: int) -> bool:
        """Drag-and-drop: take the item out and insert it at to_index."""
        with self._lock:
            size = len(self._waypoints)
            if not (0 <= from_index < size) or not (0 <= to_index < size) or from_index == to_index:
                return False
            item = self._waypoints.pop(from_index)
            self._waypoints.insert(to_index, item)
        self.trigger.notify()
        return True

    def reposition(self, waypoint_id: str, coordinate: Coordinate) -> Optional[Waypoint]:
        """
        Marker dragged on the map.
        1. coordinate updated right away (route recompute starts)
        2. name replaced by a reverse geocoded label
        """
        with self._lock:
            index = self._index_of(waypoint_id)
            if index < 0:
                return None
            self._waypoints[index] = replace(self._waypoints[index], coordinate=coordinate)
        self.trigger.notify()

        name = self.geocoder.reverse(coordinate)

        with self._lock:
            # the waypoint may have been removed or moved again meanwhile
            index = self._index_of(waypoint_id)
            if index < 0 or self._waypoints[index].coordinate != coordinate:
                return None
            self._waypoints[index] = replace(self._waypoints[index], name=name)
            return self._waypoints[index]

    def clear(self) -> None:
        with self._lock:
            self._waypoints.clear()
        self._route = None
        self.trigger.notify()

    def close(self) -> None:
        self.trigger.cancel()

    # --- Read side ---

    def summary_text(self) -> str:
        return format_trip_summary(
            (waypoint.name for waypoint in self.waypoints),
            self.policy.default_region_bias,
        )
