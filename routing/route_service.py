#Purpose: Route computation for downstream use (the provider chain).
#Returns the "best route" information needed by:
#map display / polyline geometry
#distance + duration summary
#Tries every configured OSRM provider in order, one at a time.
#When all of them fail it degrades to the geometric fallback, so it always answers.

from __future__ import annotations

from dataclasses import replace
import logging
import time
from typing import Callable, Optional, Sequence

import requests

from .fallback import estimate_fallback
from .geo import to_coordinates
from .models import RouteProvenance, RouteResult
from .osrm_client import OSRMClient, OSRMError
from .policy import RoutingPolicy, default_routing_policy

logger = logging.getLogger(__name__)

# Everything a single provider attempt may raise that only means "try the next one".
# ValueError covers non-JSON bodies, Key/Type/IndexError cover unexpected JSON shapes.
SOFT_FAILURES = (
    requests.RequestException,
    OSRMError,
    ValueError,
    KeyError,
    TypeError,
    IndexError,
)


class RouteService:
    """
    Provider chain resolver.

    Attempts are strictly sequential: provider N+1 is only contacted after
    provider N has fully failed (including its timeout), followed by a short
    pause. The instance holds configuration only, so concurrent calls with
    different waypoint lists do not interfere.
    """
    def __init__(
        self,
        policy: Optional[RoutingPolicy] = None,
        session: Optional[requests.Session] = None,
        client_factory: Optional[Callable[..., OSRMClient]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.policy = policy or default_routing_policy()
        self.policy.validate()
        self.session = session or requests.Session()
        self.client_factory = client_factory or self._default_client
        self.sleep = sleep

    def _default_client(self, base_url: str, profile: str, timeout: float) -> OSRMClient:
        return OSRMClient(base_url, profile=profile, timeout=timeout, session=self.session)

    def resolve_route(self, waypoints: Sequence) -> Optional[RouteResult]:
        """
        Resolve a route through the ordered waypoints.

        Returns None for fewer than two waypoints (the empty state, not an
        error). Otherwise returns a NETWORK result from the first provider
        with a usable route, or a FALLBACK estimate when all of them failed.
        Never raises for provider problems.
        """
        coordinates = to_coordinates(waypoints)
        if len(coordinates) < 2:
            return None

        providers = self.policy.provider_endpoints

        for index, base_url in enumerate(providers):
            try:
                client = self.client_factory(
                    base_url,
                    profile=self.policy.profile,
                    timeout=self.policy.request_timeout_s,
                )
                route = client.compute_route(coordinates)
                # RouteResult rejects negative values, so build it inside the attempt
                result = RouteResult(
                    distance_m=route["distance"],
                    duration_s=route["duration"],
                    geometry=route["geometry"],
                    provenance=RouteProvenance.NETWORK,
                    provider=base_url,
                    legs_m=route.get("legs", []),
                )
            except SOFT_FAILURES as e:
                logger.warning(f"Routing provider failed: {base_url} ({e.__class__.__name__}: {e})")
                if index < len(providers) - 1 and self.policy.inter_attempt_delay_s > 0:
                    self.sleep(self.policy.inter_attempt_delay_s)
                continue

            logger.info(
                f"Route resolved by {base_url}: {result.distance_m:.0f} m, "
                f"{result.duration_s:.0f} s, {len(result.geometry)} points"
            )
            return result

        logger.warning(
            f"All {len(providers)} routing providers failed. Switching to geometric fallback."
        )
        return estimate_fallback(coordinates, speed_mps=self.policy.fallback_speed_mps)


def resolve_route(
    waypoints: Sequence,
    providers: Optional[Sequence[str]] = None,
    policy: Optional[RoutingPolicy] = None,
    session: Optional[requests.Session] = None,
) -> Optional[RouteResult]:
    """
    One-call entry point. `providers` overrides the policy's endpoint list.
    """
    policy = policy or default_routing_policy()
    if providers is not None:
        # policy is frozen, so swap the endpoints via replace
        policy = replace(policy, provider_endpoints=list(providers))
    return RouteService(policy=policy, session=session).resolve_route(waypoints)
