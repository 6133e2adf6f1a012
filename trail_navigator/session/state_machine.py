"""State machine for a navigation session.

Uses python-statemachine for the session lifecycle with:
- Clear state definitions
- Guarded transitions (conditions)
- before_* hooks that load or rewrite the navigation context
- A listener that logs every transition

States:
    IDLE: Nothing to navigate; every field at its initial value
    COMPUTING_ROUTE: Waiting for the external routing service
    ACTIVE_ROUTE: Following a route (snap, progress, deviation, arrival)
    ACTIVE_COMPASS: Bearing/distance straight to a destination
    ARRIVED: Destination reached; updates keep refreshing readouts

Transitions:
    IDLE -> COMPUTING_ROUTE: begin_route_computation
    ACTIVE_COMPASS -> COMPUTING_ROUTE: begin_route_computation (back to route mode)
    COMPUTING_ROUTE -> ACTIVE_ROUTE: complete_route_computation
    COMPUTING_ROUTE -> IDLE: fail_route_computation
    IDLE -> ACTIVE_ROUTE: follow_route
    IDLE -> ACTIVE_COMPASS: start_compass
    ACTIVE_ROUTE -> ACTIVE_ROUTE: reverse
    ARRIVED -> ACTIVE_ROUTE: reverse (route mode only)
    ACTIVE_ROUTE -> ACTIVE_COMPASS: switch_to_compass (needs a destination)
    ARRIVED -> ACTIVE_COMPASS: switch_to_compass (route mode only)
    ACTIVE_ROUTE/ACTIVE_COMPASS -> ARRIVED: arrive
    any non-idle state -> IDLE: stop

Entering IDLE resets the whole context in one step.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Optional, Sequence

from statemachine import State, StateMachine
from statemachine.exceptions import TransitionNotAllowed

from trail_navigator.core.geo_calculator import GeoCalculator
from trail_navigator.model.coordinate import Coordinate
from trail_navigator.model.navigation import (
    CameraMode,
    DeviationState,
    GPSQuality,
    NavigationMode,
    NavigationProgress,
    SnapResult,
)
from trail_navigator.model.route import ComputedRoute, ElevationPoint, TurnInstruction

logger = logging.getLogger(__name__)


@dataclass
class RouteContext:
    """Route geometry and turn-by-turn state."""

    coordinates: list[Coordinate] = field(default_factory=list)
    cumulative_distances: list[float] = field(default_factory=list)
    elevation_profile: list[ElevationPoint] = field(default_factory=list)
    total_distance: float = 0.0
    instructions: list[TurnInstruction] = field(default_factory=list)
    next_instruction: Optional[TurnInstruction] = None
    summary: str = ""
    last_segment_index: int = 0

    def clear(self) -> None:
        self.coordinates = []
        self.cumulative_distances = []
        self.elevation_profile = []
        self.total_distance = 0.0
        self.instructions = []
        self.next_instruction = None
        self.summary = ""
        self.last_segment_index = 0

    def load(
        self,
        coordinates: Sequence[Coordinate],
        elevation_profile: Sequence[ElevationPoint],
        total_distance: Optional[float],
        instructions: Sequence[TurnInstruction],
        summary: str,
    ) -> None:
        """Replace the route and reset the per-route tracking index."""
        self.coordinates = list(coordinates)
        self.cumulative_distances = GeoCalculator.cumulative_distances(self.coordinates)
        self.elevation_profile = list(elevation_profile)
        self.total_distance = (
            total_distance if total_distance is not None else GeoCalculator.total_distance_m(self.coordinates)
        )
        self.instructions = list(instructions)
        self.next_instruction = None
        self.summary = summary
        self.last_segment_index = 0

    def reverse(self) -> None:
        """Reverse geometry and mirror the elevation profile's distance axis.

        Turn instructions are dropped; they describe the forward direction only.
        """
        self.coordinates = list(reversed(self.coordinates))
        self.cumulative_distances = GeoCalculator.cumulative_distances(self.coordinates)
        if self.elevation_profile:
            max_distance = self.elevation_profile[-1].distance
            self.elevation_profile = [
                ElevationPoint(coordinate=p.coordinate, elevation=p.elevation, distance=max_distance - p.distance)
                for p in reversed(self.elevation_profile)
            ]
        self.instructions = []
        self.next_instruction = None
        self.last_segment_index = 0

    def update_next_instruction(self, along_track_distance: float) -> None:
        """Pick the first instruction ahead of the position (the last one once all are passed)."""
        if not self.instructions:
            return
        self.next_instruction = next(
            (instruction for instruction in self.instructions if instruction.distance > along_track_distance),
            self.instructions[-1],
        )


@dataclass
class TrackingContext:
    """Per-fix derived values and the deviation/arrival latches."""

    snap_result: Optional[SnapResult] = None
    progress: Optional[NavigationProgress] = None
    gps_quality: GPSQuality = GPSQuality.GOOD
    off_track_distance: float = 0.0
    deviation: DeviationState = field(default_factory=DeviationState)
    has_arrived: bool = False

    def clear(self) -> None:
        self.snap_result = None
        self.progress = None
        self.gps_quality = GPSQuality.GOOD
        self.off_track_distance = 0.0
        self.deviation = DeviationState()
        self.has_arrived = False

    def clear_route_tracking(self) -> None:
        """Drop route-derived values but keep the alert cooldown."""
        self.snap_result = None
        self.progress = None
        self.deviation = replace(self.deviation, consecutive_off_track_readings=0, is_off_track=False)


@dataclass
class CompassContext:
    """Compass readouts towards the destination."""

    bearing: float = 0.0
    distance: float = 0.0

    def clear(self) -> None:
        self.bearing = 0.0
        self.distance = 0.0


@dataclass
class NavigationContext:
    """Shared context/model for the navigation state machine.

    Sub-contexts:
        route: Route geometry, elevation profile, instructions
        tracking: Snap, progress, GPS quality, deviation and arrival latches
        compass: Bearing/distance readouts

    Note: The 'state' field is managed by python-statemachine when this
    object is passed as the model. It stores the current state value.
    """

    # State managed by python-statemachine (model pattern)
    state: Optional[str] = None

    mode: NavigationMode = NavigationMode.ROUTE
    destination: Optional[Coordinate] = None
    camera_mode: CameraMode = CameraMode.NORTH_UP
    route_error: Optional[str] = None
    last_processed_time: Optional[float] = None

    route: RouteContext = field(default_factory=RouteContext)
    tracking: TrackingContext = field(default_factory=TrackingContext)
    compass: CompassContext = field(default_factory=CompassContext)

    def reset(self) -> None:
        """Return every navigation field to its initial value (camera mode is a preference and stays)."""
        self.mode = NavigationMode.ROUTE
        self.destination = None
        self.route_error = None
        self.last_processed_time = None
        self.route.clear()
        self.tracking.clear()
        self.compass.clear()

    def __repr__(self) -> str:
        return (
            f"NavigationContext(state={self.state}, mode={self.mode.value}, "
            f"destination={self.destination}, route_points={len(self.route.coordinates)}, "
            f"segment={self.route.last_segment_index}, arrived={self.tracking.has_arrived})"
        )


class SessionLogListener:
    """Listener that logs every state transition.

    Usage:
        sm = NavigationStateMachine(context=context)
        sm.add_listener(SessionLogListener())
    """

    def after_transition(self, event: str, source: State, target: State) -> None:
        logger.info(f"[STATE] {source.name} --({event})--> {target.name}")


class NavigationStateMachine(StateMachine):
    """State machine for the navigation session lifecycle.

    See module docstring for the full transition table.

    States:
        idle: Not navigating
        computing_route: Route requested from the routing service
        active_route: Following a route
        active_compass: Navigating by bearing to a destination
        arrived: Destination reached
    """

    # ==========================================================================
    # State Definitions
    # ==========================================================================

    idle = State("Idle", initial=True)
    computing_route = State("ComputingRoute")
    active_route = State("ActiveRoute")
    active_compass = State("ActiveCompass")
    arrived = State("Arrived")

    # ==========================================================================
    # Transitions: starting navigation
    # ==========================================================================

    begin_route_computation = idle.to(computing_route) | active_compass.to(computing_route)
    complete_route_computation = computing_route.to(active_route)
    fail_route_computation = computing_route.to(idle)
    follow_route = idle.to(active_route)
    start_compass = idle.to(active_compass)

    # ==========================================================================
    # Transitions: while navigating
    # ==========================================================================

    reverse = active_route.to(active_route) | arrived.to(active_route, cond="is_route_mode")
    switch_to_compass = active_route.to(active_compass, cond="has_destination") | arrived.to(
        active_compass, cond=["is_route_mode", "has_destination"]
    )
    arrive = active_route.to(arrived) | active_compass.to(arrived)

    stop = computing_route.to(idle) | active_route.to(idle) | active_compass.to(idle) | arrived.to(idle)

    # ==========================================================================
    # Guards (Conditions)
    # ==========================================================================

    def is_route_mode(self) -> bool:
        """Guard: Navigating along a route (not compass)."""
        return self.context.mode == NavigationMode.ROUTE

    def has_destination(self) -> bool:
        """Guard: A destination is known."""
        return self.context.destination is not None

    # ==========================================================================
    # State Check Properties
    # ==========================================================================

    @property
    def is_idle(self) -> bool:
        return self.idle.is_active

    @property
    def is_computing_route(self) -> bool:
        return self.computing_route.is_active

    @property
    def is_active_route(self) -> bool:
        return self.active_route.is_active

    @property
    def is_active_compass(self) -> bool:
        return self.active_compass.is_active

    @property
    def is_arrived(self) -> bool:
        return self.arrived.is_active

    @property
    def is_navigating(self) -> bool:
        """Check if position updates should be processed."""
        return self.is_active_route or self.is_active_compass or self.is_arrived

    # ==========================================================================
    # Entry Hooks
    # ==========================================================================

    def on_enter_idle(self) -> None:
        """Hook: Entering idle resets every field in one step."""
        self.context.reset()

    # ==========================================================================
    # Transition Actions (before_* / after_* hooks)
    # ==========================================================================

    def before_begin_route_computation(self, destination: Coordinate) -> None:
        """Action before requesting a route: forget any previous navigation."""
        self.context.reset()
        self.context.mode = NavigationMode.ROUTE
        self.context.destination = destination

    def before_complete_route_computation(
        self,
        route: ComputedRoute,
        elevation_profile: Sequence[ElevationPoint] = (),
    ) -> None:
        """Action before activating a computed route."""
        self.context.route.load(
            coordinates=route.coordinates,
            elevation_profile=elevation_profile,
            total_distance=route.distance,
            instructions=route.instructions,
            summary=route.summary,
        )
        self.context.tracking.clear()

    def after_fail_route_computation(self, error_message: str) -> None:
        """Surface the routing failure (set after the idle reset)."""
        self.context.route_error = error_message

    def before_follow_route(
        self,
        coordinates: Sequence[Coordinate],
        elevation_profile: Sequence[ElevationPoint] = (),
        total_distance: Optional[float] = None,
        name: str = "",
    ) -> None:
        """Action before following an existing route."""
        self.context.mode = NavigationMode.ROUTE
        self.context.route.load(
            coordinates=coordinates,
            elevation_profile=elevation_profile,
            total_distance=total_distance,
            instructions=[],
            summary=name,
        )
        self.context.destination = self.context.route.coordinates[-1]
        self.context.tracking.clear()

    def before_start_compass(self, destination: Coordinate) -> None:
        """Action before compass navigation: no route geometry."""
        self.context.mode = NavigationMode.COMPASS
        self.context.destination = destination
        self.context.route.clear()

    def before_reverse(self) -> None:
        """Action before reversing: new direction, fresh deviation and arrival state."""
        self.context.route.reverse()
        self.context.destination = self.context.route.coordinates[-1]
        deviation = self.context.tracking.deviation
        self.context.tracking.deviation = replace(deviation, consecutive_off_track_readings=0, is_off_track=False)
        self.context.tracking.has_arrived = False

    def before_switch_to_compass(self) -> None:
        """Action before switching to compass: route geometry is discarded."""
        self.context.mode = NavigationMode.COMPASS
        self.context.route.clear()
        self.context.tracking.clear_route_tracking()

    def before_arrive(self) -> None:
        """Action before arrival: latch so arrival fires once."""
        self.context.tracking.has_arrived = True

    # ==========================================================================
    # Initialization
    # ==========================================================================

    def __init__(self, context: Optional[NavigationContext] = None, start_value: Optional[str] = None) -> None:
        """Initialize state machine with model pattern.

        Args:
            context: Shared context/model (creates new if None)
            start_value: Optional initial state value (for restoring state)
        """
        model = context or NavigationContext()
        super().__init__(model=model, start_value=start_value)

    # ==========================================================================
    # Utility Methods
    # ==========================================================================

    @property
    def context(self) -> NavigationContext:
        """Alias for model."""
        return self.model

    def get_state_name(self) -> str:
        """Get current state name for display."""
        return self.current_state.name

    def get_available_actions(self) -> list[str]:
        """Get list of transition event names leaving the current state."""
        return [t.event for t in self.current_state.transitions]

    def __repr__(self) -> str:
        return f"NavigationStateMachine(state={self.get_state_name()}, model={self.context!r})"

    def try_transition(self, event: str, **kwargs: Any) -> bool:
        """Attempt a transition, returning success/failure.

        Args:
            event: Transition event name
            **kwargs: Arguments for transition hooks

        Returns:
            True if transition succeeded, False otherwise.
        """
        try:
            self.send(event, **kwargs)
            return True
        except TransitionNotAllowed:
            logger.warning(f"Transition '{event}' not allowed from {self.get_state_name()}")
            return False

    @staticmethod
    def create(add_log_listener: bool = True) -> tuple["NavigationStateMachine", NavigationContext]:
        """Factory method to create state machine with context and optional log listener.

        Args:
            add_log_listener: If True, adds SessionLogListener.

        Returns:
            Tuple of (NavigationStateMachine, NavigationContext)
        """
        context = NavigationContext()
        sm = NavigationStateMachine(context=context)
        if add_log_listener:
            sm.add_listener(SessionLogListener())
        logger.info(f"Created NavigationStateMachine (log listener: {add_log_listener})")
        return sm, context
