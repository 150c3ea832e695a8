import pytest
import requests

from routing.fallback import estimate_fallback
from routing.geo import Coordinate
from routing.models import RouteProvenance
from routing.policy import RoutingPolicy
from routing.route_service import RouteService, resolve_route

from fakes import FakeResponse, FakeSession, osrm_route_payload

PROVIDER_A = "https://a.example"
PROVIDER_B = "https://b.example"
PROVIDER_C = "https://c.example"


@pytest.fixture
def policy():
    return RoutingPolicy(
        provider_endpoints=[PROVIDER_A, PROVIDER_B, PROVIDER_C],
        request_timeout_s=3.0,
        inter_attempt_delay_s=0.2,
    )


@pytest.fixture
def waypoints(lapua, seinajoki):
    return [lapua, seinajoki]


def test_third_provider_answers_after_two_soft_failures(policy, waypoints):
    """
    A: non-success status, B: code != Ok, C: valid route.
    Exactly three attempts, in order, result from C tagged NETWORK.
    """
    session = FakeSession({
        PROVIDER_A: FakeResponse({"code": "Ok", "routes": []}, status_code=503),
        PROVIDER_B: FakeResponse({"code": "NoRoute", "message": "Impossible route"}),
        PROVIDER_C: FakeResponse(osrm_route_payload(
            [[23.0068, 62.9693], [22.95, 62.90], [22.8549, 62.7877]],
            distance=25_300.0,
            duration=1_260.0,
        )),
    })
    sleeps = []
    service = RouteService(policy=policy, session=session, sleep=sleeps.append)

    result = service.resolve_route(waypoints)

    # 1. Attempts were sequential and in preference order
    urls = session.urls()
    assert len(urls) == 3
    assert urls[0].startswith(PROVIDER_A)
    assert urls[1].startswith(PROVIDER_B)
    assert urls[2].startswith(PROVIDER_C)

    # 2. A pause between attempts, none after the winner
    assert sleeps == [0.2, 0.2]

    # 3. Result comes from C, geometry reprojected to lat first
    assert result.provenance == RouteProvenance.NETWORK
    assert result.provider == PROVIDER_C
    assert result.distance_m == 25_300.0
    assert result.duration_s == 1_260.0
    assert result.geometry[0] == Coordinate(lat=62.9693, lon=23.0068)
    assert result.geometry[-1] == Coordinate(lat=62.7877, lon=22.8549)
    assert len(result.geometry) == 3


def test_request_carries_every_waypoint_and_the_timeout(policy, lapua, seinajoki):
    middle = Coordinate(62.90, 22.95)
    session = FakeSession({
        PROVIDER_A: FakeResponse(osrm_route_payload([[23.0068, 62.9693], [22.8549, 62.7877]])),
    })
    service = RouteService(policy=policy, session=session, sleep=lambda s: None)

    service.resolve_route([lapua, middle, seinajoki])

    call = session.calls[0]
    assert call["url"] == (
        f"{PROVIDER_A}/route/v1/driving/23.0068,62.9693;22.95,62.9;22.8549,62.7877"
    )
    assert call["timeout"] == 3.0
    assert call["params"]["geometries"] == "geojson"


def test_first_provider_wins_without_touching_the_rest(policy, waypoints):
    session = FakeSession({
        PROVIDER_A: FakeResponse(osrm_route_payload([[23.0068, 62.9693], [22.8549, 62.7877]])),
        PROVIDER_B: FakeResponse(osrm_route_payload([[0, 0], [1, 1]])),
    })
    sleeps = []
    result = RouteService(policy=policy, session=session, sleep=sleeps.append).resolve_route(waypoints)

    assert result.provider == PROVIDER_A
    assert len(session.calls) == 1
    assert sleeps == []


def test_all_providers_time_out_returns_fallback(policy, waypoints):
    session = FakeSession({
        PROVIDER_A: requests.Timeout("read timed out"),
        PROVIDER_B: requests.Timeout("read timed out"),
        PROVIDER_C: requests.Timeout("read timed out"),
    })
    sleeps = []
    result = RouteService(policy=policy, session=session, sleep=sleeps.append).resolve_route(waypoints)

    assert result.provenance == RouteProvenance.FALLBACK
    assert result.is_fallback
    assert result.provider is None
    assert result.distance_m > 0
    assert result.geometry == waypoints
    assert len(session.calls) == 3
    # no pause after the last provider
    assert sleeps == [0.2, 0.2]

    expected = estimate_fallback(waypoints, speed_mps=policy.fallback_speed_mps)
    assert result.distance_m == expected.distance_m
    assert result.duration_s == expected.duration_s


@pytest.mark.parametrize(
    "broken",
    [
        FakeResponse(json_error=ValueError("Expecting value")),
        FakeResponse({"code": "Ok"}),
        FakeResponse({"code": "Ok", "routes": [{"distance": 1.0}]}),
        FakeResponse(["not", "a", "dict"]),
        requests.ConnectionError("connection refused"),
    ],
)
def test_malformed_answers_are_soft_failures(broken, waypoints):
    policy = RoutingPolicy(provider_endpoints=[PROVIDER_A, PROVIDER_B], inter_attempt_delay_s=0)
    session = FakeSession({
        PROVIDER_A: broken,
        PROVIDER_B: FakeResponse(osrm_route_payload([[23.0068, 62.9693], [22.8549, 62.7877]])),
    })
    result = RouteService(policy=policy, session=session, sleep=lambda s: None).resolve_route(waypoints)

    assert result.provider == PROVIDER_B
    assert result.provenance == RouteProvenance.NETWORK


@pytest.mark.parametrize("count", [0, 1])
def test_fewer_than_two_waypoints_is_no_route(policy, lapua, count):
    session = FakeSession()
    result = RouteService(policy=policy, session=session).resolve_route([lapua] * count)

    assert result is None
    assert session.calls == []


def test_service_keeps_no_per_call_state(policy, lapua, seinajoki):
    """
    Two resolutions with different waypoint lists through one service
    instance do not leak into each other.
    """
    session = FakeSession({PROVIDER_A: requests.Timeout("down"),
                           PROVIDER_B: requests.Timeout("down"),
                           PROVIDER_C: requests.Timeout("down")})
    service = RouteService(policy=policy, session=session, sleep=lambda s: None)

    other = Coordinate(63.0, 23.1)
    first = service.resolve_route([lapua, seinajoki])
    second = service.resolve_route([lapua, other])

    assert first.geometry == [lapua, seinajoki]
    assert second.geometry == [lapua, other]
    assert first.distance_m != second.distance_m


def test_module_level_resolve_route_overrides_providers(waypoints):
    session = FakeSession({
        PROVIDER_C: FakeResponse(osrm_route_payload([[23.0068, 62.9693], [22.8549, 62.7877]])),
    })
    result = resolve_route(waypoints, providers=[PROVIDER_C], session=session)

    assert result.provider == PROVIDER_C
    assert session.urls()[0].startswith(PROVIDER_C)


def test_negative_distance_from_a_provider_moves_on(waypoints):
    """
    A answers "Ok" with a negative distance: not a usable route.
    B's route wins and resolve_route does not raise.
    """
    policy = RoutingPolicy(provider_endpoints=[PROVIDER_A, PROVIDER_B], inter_attempt_delay_s=0)
    session = FakeSession({
        PROVIDER_A: FakeResponse(osrm_route_payload(
            [[23.0068, 62.9693], [22.8549, 62.7877]], distance=-1.0,
        )),
        PROVIDER_B: FakeResponse(osrm_route_payload(
            [[23.0068, 62.9693], [22.8549, 62.7877]], distance=25_300.0,
        )),
    })
    result = RouteService(policy=policy, session=session, sleep=lambda s: None).resolve_route(waypoints)

    assert result.provider == PROVIDER_B
    assert result.provenance == RouteProvenance.NETWORK
    assert result.distance_m == 25_300.0
    assert len(session.calls) == 2
