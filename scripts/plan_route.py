import logging
import sys
import time

from geocoding.nominatim_client import NominatimClient
from geocoding.policy import geocoding_policy_from_env
from planner.session import TripSession
from planner.trigger import TriggerState
from routing.osrm_client import OSRMClient, OSRMError
from routing.policy import routing_policy_from_env
from routing.route_service import RouteService

import requests

DEFAULT_STOPS = [
    "Kauppatie 12",
    "Poutuntie 3",
    "Seinäjoki, Kauppakatu 1",
]


def print_leg_matrix(session: TripSession, base_url: str, timeout: float) -> None:
    coords = [waypoint.coordinate for waypoint in session.waypoints]
    try:
        table = OSRMClient(base_url, timeout=timeout).compute_table(coords, coords)
    except (requests.RequestException, OSRMError, ValueError) as e:
        print(f"\n(stop-to-stop matrix unavailable: {e})")
        return

    print("\nStop-to-stop driving minutes:")
    for i, row in enumerate(table["durations"]):
        cells = " ".join(f"{(cell or 0) / 60:6.1f}" for cell in row)
        print(f"  {i + 1}: {cells}")


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    routing_policy = routing_policy_from_env()
    session = TripSession(
        policy=routing_policy,
        route_service=RouteService(policy=routing_policy),
        geocoder=NominatimClient(policy=geocoding_policy_from_env()),
    )

    stops = sys.argv[1:] or DEFAULT_STOPS
    for query in stops:
        waypoint = session.search_and_add(query)
        if waypoint is None:
            print(f"Address not found: {query}")
        else:
            print(f"+ {waypoint.name} ({waypoint.coordinate.lat:.5f}, {waypoint.coordinate.lon:.5f})")

    # skip the debounce window; wait out a resolution that is already in flight
    while session.trigger.state != TriggerState.IDLE:
        if not session.trigger.flush():
            time.sleep(0.1)
    route = session.route

    if route is None:
        print("\nNeed at least two stops for a route.")
        return

    source = "straight-line estimate" if route.is_fallback else route.provider
    print(f"\nRoute: {session.summary_text()}")
    print(f"Distance: {route.distance_km} km")
    print(f"Duration: {route.duration_min} min")
    print(f"Geometry: {len(route.geometry)} points ({source})")

    if not route.is_fallback:
        print_leg_matrix(session, route.provider, routing_policy.request_timeout_s)

    session.close()


if __name__ == "__main__":
    main()
