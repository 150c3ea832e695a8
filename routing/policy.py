"""
Purpose: Central configuration for route resolution (single source of truth).
What it does:

Stores all tunable thresholds for the provider chain, the geometric
fallback and the recompute trigger:

PROVIDER_ENDPOINTS = routing.openstreetmap.de, router.project-osrm.org, osrm.router.lohro.de

REQUEST_TIMEOUT_S = 8

INTER_ATTEMPT_DELAY_S = 0.2

FALLBACK_SPEED_MPS = 16.67 (~60 km/h)

DEBOUNCE_SECONDS = 0.5

Values can be overridden from the environment (.env is loaded by dotenv):

ROUTING_PROVIDERS=https://a.example/osrm,https://b.example/osrm
ROUTING_TIMEOUT_S=5
ROUTING_DELAY_S=0.2
ROUTING_FALLBACK_SPEED_MPS=16.67
ROUTE_DEBOUNCE_S=0.5
DEFAULT_REGION=Lapua

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional
import os

from dotenv import load_dotenv

# Public OSRM deployments, tried in this order.
# Every one of them expects coordinates as lon,lat.
DEFAULT_PROVIDER_ENDPOINTS = [
    "https://routing.openstreetmap.de/routed-car",
    "https://router.project-osrm.org",
    "https://osrm.router.lohro.de",
]

FALLBACK_SPEED_MPS = 16.67


@dataclass(frozen=True)
class RoutingPolicy:
    """
    Central configuration for the provider chain and the trigger.

    Notes:
    - worst case latency of one resolution is bounded by
        len(provider_endpoints) * request_timeout_s
        + (len(provider_endpoints) - 1) * inter_attempt_delay_s
    - fallback_speed_mps only affects FALLBACK routes.
    """

    # --- Provider chain ---
    # Ordered: the first endpoint is always preferred.
    provider_endpoints: List[str] = field(default_factory=lambda: list(DEFAULT_PROVIDER_ENDPOINTS))

    # OSRM profile segment of the url (/route/v1/{profile}/...)
    profile: str = "driving"

    # How long to wait for one provider before moving on.
    request_timeout_s: float = 8.0

    # Pause between two attempts so shared public servers are not hammered.
    inter_attempt_delay_s: float = 0.2

    # --- Geometric fallback ---
    # Mixed urban/rural driving, 60 km/h
    fallback_speed_mps: float = FALLBACK_SPEED_MPS

    # --- Trigger ---
    # Quiet period after the last waypoint mutation before recomputing.
    debounce_seconds: float = 0.5

    # --- Region ---
    # Appended to comma-less search queries, stripped from trip summaries.
    default_region_bias: str = "Lapua"

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        if not self.provider_endpoints:
            raise ValueError("provider_endpoints must contain at least one endpoint")

        if any(not endpoint for endpoint in self.provider_endpoints):
            raise ValueError("provider_endpoints must not contain empty urls")

        if not self.profile:
            raise ValueError("profile must be set")

        if self.request_timeout_s <= 0:
            raise ValueError("request_timeout_s must be > 0")

        if self.inter_attempt_delay_s < 0:
            raise ValueError("inter_attempt_delay_s must be >= 0")

        if self.fallback_speed_mps <= 0:
            raise ValueError("fallback_speed_mps must be > 0")

        if self.debounce_seconds < 0:
            raise ValueError("debounce_seconds must be >= 0")


def default_routing_policy() -> RoutingPolicy:
    """
    Convenience factory for the default policy.
    """
    p = RoutingPolicy()
    p.validate()
    return p


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if not raw:
        return list(default)
    return [item.strip().rstrip("/") for item in raw.split(",") if item.strip()]


def routing_policy_from_env(base: Optional[RoutingPolicy] = None) -> RoutingPolicy:
    """
    Build a validated policy from environment variables (and .env).
    Anything unset keeps the value of `base` (defaults if omitted).
    """
    load_dotenv()
    base = base or RoutingPolicy()

    p = RoutingPolicy(
        provider_endpoints=_env_list("ROUTING_PROVIDERS", base.provider_endpoints),
        profile=os.getenv("ROUTING_PROFILE", base.profile),
        request_timeout_s=_env_float("ROUTING_TIMEOUT_S", base.request_timeout_s),
        inter_attempt_delay_s=_env_float("ROUTING_DELAY_S", base.inter_attempt_delay_s),
        fallback_speed_mps=_env_float("ROUTING_FALLBACK_SPEED_MPS", base.fallback_speed_mps),
        debounce_seconds=_env_float("ROUTE_DEBOUNCE_S", base.debounce_seconds),
        default_region_bias=os.getenv("DEFAULT_REGION", base.default_region_bias),
    )
    p.validate()
    return p
