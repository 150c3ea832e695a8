#Marks routing as a package.
#Re-exports the public API (RouteService, resolve_route, estimate_fallback, ...)
#so other modules import from routing without knowing internal file names.
#No business logic.

from .geo import Coordinate, distance_meters, path_length_meters
from .models import Waypoint, AddressCandidate, RouteResult, RouteProvenance
from .policy import RoutingPolicy, default_routing_policy, routing_policy_from_env
from .osrm_client import OSRMClient, OSRMError
from .fallback import estimate_fallback
from .route_service import RouteService, resolve_route

__all__ = [
    "Coordinate",
    "distance_meters",
    "path_length_meters",
    "Waypoint",
    "AddressCandidate",
    "RouteResult",
    "RouteProvenance",
    "RoutingPolicy",
    "default_routing_policy",
    "routing_policy_from_env",
    "OSRMClient",
    "OSRMError",
    "estimate_fallback",
    "RouteService",
    "resolve_route",
]
