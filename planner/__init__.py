#Expose the high-level planning pieces:
#Trigger policy (debounced recomputation state machine)
#Trip session (waypoint list + route, the "one object" entry point)

from .trigger import RouteTrigger, TriggerState
from .session import TripSession

__all__ = [
    "RouteTrigger",
    "TriggerState",
    "TripSession",
]
