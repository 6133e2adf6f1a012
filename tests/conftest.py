"""Shared pytest fixtures for trail_navigator tests.

Provides a controllable clock, a fake router and reusable routes.

COORDINATE SYSTEM:
    Test routes run due north along the 10°E meridian starting at 59°N
    (southern Norway). Along a meridian 0.01° of latitude ≈ 1112 m, and at
    59°N 0.001° of longitude ≈ 57 m, so offsets are easy to reason about.
"""

from typing import Optional

import pytest

from trail_navigator.model.coordinate import Coordinate, PositionFix
from trail_navigator.model.route import ComputedRoute, ElevationPoint, TurnInstruction, TurnType
from trail_navigator.session.navigation_session import NavigationSession
from trail_navigator.session.state_machine import NavigationContext, NavigationStateMachine

# Due-north route: 3 vertices, 2 segments of ~1112 m each
NORTH_ROUTE = [
    Coordinate(lat=59.00, lon=10.0),
    Coordinate(lat=59.01, lon=10.0),
    Coordinate(lat=59.02, lon=10.0),
]


class FakeClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRouter:
    """Router returning a fixed route, or raising a fixed error."""

    def __init__(self, route: Optional[ComputedRoute] = None, error: Optional[Exception] = None) -> None:
        self.route = route
        self.error = error
        self.calls: list[tuple[Coordinate, Coordinate]] = []

    def compute_route(self, origin: Coordinate, destination: Coordinate) -> ComputedRoute:
        self.calls.append((origin, destination))
        if self.error is not None:
            raise self.error
        assert self.route is not None
        return self.route


def fix(lat: float, lon: float, accuracy: float = 5.0) -> PositionFix:
    """Position fix with good accuracy unless told otherwise."""
    return PositionFix(coordinate=Coordinate(lat=lat, lon=lon), horizontal_accuracy=accuracy)


@pytest.fixture
def north_route() -> list[Coordinate]:
    return list(NORTH_ROUTE)


@pytest.fixture
def climbing_profile() -> list[ElevationPoint]:
    """Profile for NORTH_ROUTE: up 100 m, then down 40 m."""
    return [
        ElevationPoint(coordinate=NORTH_ROUTE[0], elevation=500.0, distance=0.0),
        ElevationPoint(coordinate=NORTH_ROUTE[1], elevation=600.0, distance=1112.0),
        ElevationPoint(coordinate=NORTH_ROUTE[2], elevation=560.0, distance=2224.0),
    ]


@pytest.fixture
def computed_route() -> ComputedRoute:
    """NORTH_ROUTE as the routing service would deliver it, with three instructions."""
    return ComputedRoute(
        coordinates=list(NORTH_ROUTE),
        distance=2224.0,
        duration=1600.0,
        ascent=100.0,
        descent=40.0,
        instructions=[
            TurnInstruction(text="Walk north", distance=0.0, coordinate=NORTH_ROUTE[0], type=TurnType.DEPART),
            TurnInstruction(text="Continue", distance=1112.0, coordinate=NORTH_ROUTE[1], type=TurnType.STRAIGHT),
            TurnInstruction(text="Arrive", distance=2224.0, coordinate=NORTH_ROUTE[2], type=TurnType.DESTINATION),
        ],
        summary="Start - Summit",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(start=1000.0)


@pytest.fixture
def session(clock: FakeClock) -> NavigationSession:
    """Idle session driven by the fake clock."""
    return NavigationSession(clock=clock, add_log_listener=False)


@pytest.fixture
def sm_and_ctx() -> tuple[NavigationStateMachine, NavigationContext]:
    """Fresh state machine with its context (no log listener)."""
    return NavigationStateMachine.create(add_log_listener=False)
