"""NavigationSession - Facade over the navigation state machine.

Owns the single-writer rules for live position updates:
- Updates are ignored while idle or waiting for a route
- An update arriving while another is being processed is dropped, not queued
- Updates closer than SessionConfig.MIN_UPDATE_INTERVAL_S to the previous
  processed one are skipped

Each processed update returns the NavigationEvents it raised; the platform
layer turns them into UI updates and haptics.

Example:
    session = NavigationSession()
    session.start_following_route(coordinates=track)
    for fix in location_source:
        for event in session.process_position_update(fix):
            notify(event.message)
"""

import logging
import threading
import time
from typing import Callable, Optional, Sequence

from trail_navigator.constants import SessionConfig
from trail_navigator.core.deviation_detector import DeviationDetector, classify_gps_quality
from trail_navigator.core.geo_calculator import GeoCalculator
from trail_navigator.core.progress_estimator import ProgressEstimator
from trail_navigator.model.coordinate import Coordinate, PositionFix
from trail_navigator.model.event import ArrivalEvent, BackOnTrackEvent, NavigationEvent, OffTrackEvent
from trail_navigator.model.navigation import (
    CameraMode,
    GPSQuality,
    NavigationMode,
    NavigationProgress,
    SnapResult,
)
from trail_navigator.model.route import ComputedRoute, ElevationPoint, TurnInstruction
from trail_navigator.routing.errors import RoutingError, RoutingErrorKind
from trail_navigator.routing.valhalla import Router
from trail_navigator.session.state_machine import NavigationStateMachine

logger = logging.getLogger(__name__)


class NavigationSession:
    """Route and compass navigation driven by live position fixes.

    Args:
        clock: Monotonic time source in seconds (injectable for tests)
        add_log_listener: Log every state transition
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic, add_log_listener: bool = True):
        self.sm, self.context = NavigationStateMachine.create(add_log_listener=add_log_listener)
        self._clock = clock
        self._lock = threading.Lock()

    # =========================================================================
    # Starting navigation
    # =========================================================================

    def start_route_navigation(self, origin: Coordinate, destination: Coordinate, router: Router) -> bool:
        """Compute a route with router and start following it.

        Returns:
            True if navigation started; False on routing failure (message in
            route_error) or when not allowed from the current state.
        """
        if not self.begin_route_computation(origin=origin, destination=destination):
            return False
        try:
            route = router.compute_route(origin, destination)
        except RoutingError as exc:
            return self.fail_route_computation(exc)
        except Exception as exc:
            logger.exception(f"Router {type(router).__name__} raised an unexpected error")
            return self.fail_route_computation(exc)
        return self.complete_route_computation(route)

    def begin_route_computation(self, origin: Coordinate, destination: Coordinate) -> bool:
        """Enter ComputingRoute while an external router works on origin -> destination."""
        with self._lock:
            logger.info(f"Computing route {origin} -> {destination}")
            return self.sm.try_transition("begin_route_computation", origin=origin, destination=destination)

    def complete_route_computation(
        self,
        route: ComputedRoute,
        elevation_profile: Sequence[ElevationPoint] = (),
    ) -> bool:
        """Activate a route delivered by the router (fails the computation if it has < 2 points)."""
        with self._lock:
            if len(route.coordinates) < 2:
                return self._fail_route_computation(RoutingError(RoutingErrorKind.NO_ROUTE))
            started = self.sm.try_transition(
                "complete_route_computation", route=route, elevation_profile=elevation_profile
            )
            if started:
                logger.info(
                    f"Route navigation started: {len(route.coordinates)} points, {route.distance:.0f}m "
                    f"'{route.summary}'"
                )
            return started

    def fail_route_computation(self, error: Exception) -> bool:
        """Return to Idle after a routing failure, keeping its message in route_error.

        Returns:
            Always False (navigation did not start).
        """
        with self._lock:
            return self._fail_route_computation(error)

    def _fail_route_computation(self, error: Exception) -> bool:
        logger.warning(f"Route computation failed: {error}")
        self.sm.try_transition("fail_route_computation", error_message=str(error))
        return False

    def start_following_route(
        self,
        coordinates: Sequence[Coordinate],
        elevation_profile: Sequence[ElevationPoint] = (),
        total_distance: Optional[float] = None,
        name: str = "",
    ) -> bool:
        """Follow an existing route (saved or imported).

        Args:
            coordinates: Route vertices (at least 2, otherwise nothing happens)
            elevation_profile: Elevation samples keyed by distance from the first vertex
            total_distance: Known route length; computed from the vertices if None
            name: Route name shown as the summary

        Returns:
            True if navigation started.
        """
        if len(coordinates) < 2:
            logger.info(f"Ignoring route with {len(coordinates)} point(s)")
            return False
        with self._lock:
            started = self.sm.try_transition(
                "follow_route",
                coordinates=coordinates,
                elevation_profile=elevation_profile,
                total_distance=total_distance,
                name=name,
            )
            if started:
                total = self.context.route.total_distance
                logger.info(f"Following route '{name}': {len(coordinates)} points, {total:.0f}m")
            return started

    def start_compass_navigation(self, destination: Coordinate) -> bool:
        """Navigate by bearing and distance straight to destination."""
        with self._lock:
            started = self.sm.try_transition("start_compass", destination=destination)
            if started:
                logger.info(f"Compass navigation to {destination}")
            return started

    # =========================================================================
    # Position updates
    # =========================================================================

    def process_position_update(self, fix: PositionFix) -> list[NavigationEvent]:
        """Process one position fix.

        Returns:
            Events raised by this fix (empty when the fix was ignored, dropped
            or throttled).
        """
        if not self._lock.acquire(blocking=False):
            logger.debug("Dropping position fix: previous update still in progress")
            return []
        try:
            if not self.sm.is_navigating:
                return []

            now = self._clock()
            last = self.context.last_processed_time
            if last is not None and now - last < SessionConfig.MIN_UPDATE_INTERVAL_S:
                return []

            try:
                quality = classify_gps_quality(fix.horizontal_accuracy)
                if self.context.mode == NavigationMode.ROUTE:
                    return self._process_route_update(fix, quality, now)
                return self._process_compass_update(fix, quality)
            finally:
                self.context.last_processed_time = self._clock()
        finally:
            self._lock.release()

    def _process_route_update(self, fix: PositionFix, quality: GPSQuality, now: float) -> list[NavigationEvent]:
        route = self.context.route
        tracking = self.context.tracking

        result = ProgressEstimator.compute_progress(
            position=fix.coordinate,
            route=route.coordinates,
            cumulative_distances=route.cumulative_distances,
            elevation_profile=route.elevation_profile,
            total_distance=route.total_distance,
            from_index=route.last_segment_index,
        )
        if result is None:
            return []
        snap, progress = result

        tracking.gps_quality = quality
        tracking.snap_result = snap
        tracking.progress = progress
        route.last_segment_index = max(route.last_segment_index, snap.segment_index)
        route.update_next_instruction(snap.along_track_distance_m)

        events: list[NavigationEvent] = []
        tracking.off_track_distance = snap.cross_track_distance_m
        was_off_track = tracking.deviation.is_off_track
        tracking.deviation, should_alert = DeviationDetector.evaluate(
            state=tracking.deviation,
            cross_track_distance=snap.cross_track_distance_m,
            quality=quality,
            now=now,
        )
        if should_alert:
            logger.info(f"Off track: {snap.cross_track_distance_m:.0f}m from route")
            events.append(OffTrackEvent(cross_track_distance_m=snap.cross_track_distance_m))
        elif was_off_track and not tracking.deviation.is_off_track:
            events.append(BackOnTrackEvent(cross_track_distance_m=snap.cross_track_distance_m))

        if DeviationDetector.should_arrive(tracking.has_arrived, progress.distance_remaining):
            self.sm.try_transition("arrive")
            events.append(ArrivalEvent(mode=NavigationMode.ROUTE, distance_remaining_m=progress.distance_remaining))
        return events

    def _process_compass_update(self, fix: PositionFix, quality: GPSQuality) -> list[NavigationEvent]:
        self.context.tracking.gps_quality = quality
        destination = self.context.destination
        if destination is None:
            return []

        compass = self.context.compass
        compass.bearing = GeoCalculator.initial_bearing_deg(fix.coordinate, destination)
        compass.distance = GeoCalculator.distance_m(fix.coordinate, destination)

        if DeviationDetector.should_arrive(self.context.tracking.has_arrived, compass.distance):
            self.sm.try_transition("arrive")
            return [ArrivalEvent(mode=NavigationMode.COMPASS, distance_remaining_m=compass.distance)]
        return []

    # =========================================================================
    # Commands while navigating
    # =========================================================================

    def reverse_route(self) -> bool:
        """Follow the current route in the opposite direction."""
        with self._lock:
            return self.sm.try_transition("reverse")

    def switch_to_compass(self) -> bool:
        """Drop the route and navigate by bearing to the same destination."""
        with self._lock:
            return self.sm.try_transition("switch_to_compass")

    def stop_navigation(self) -> None:
        """Reset every field back to Idle."""
        with self._lock:
            if self.sm.is_idle:
                self.context.reset()
            else:
                self.sm.try_transition("stop")
            logger.info("Navigation stopped")

    def dismiss_deviation(self) -> None:
        """User acknowledged the off-track alert: clear it and restart the cooldown."""
        with self._lock:
            self.context.tracking.deviation = DeviationDetector.dismiss(self.context.tracking.deviation, self._clock())

    def toggle_camera_mode(self) -> CameraMode:
        """Switch between north-up and course-up map orientation."""
        with self._lock:
            current = self.context.camera_mode
            self.context.camera_mode = CameraMode.COURSE_UP if current == CameraMode.NORTH_UP else CameraMode.NORTH_UP
            return self.context.camera_mode

    # =========================================================================
    # Read-only views
    # =========================================================================

    @property
    def state_name(self) -> str:
        return self.sm.get_state_name()

    @property
    def is_active(self) -> bool:
        """True while navigating (route, compass or arrived)."""
        return self.sm.is_navigating

    @property
    def is_computing_route(self) -> bool:
        return self.sm.is_computing_route

    @property
    def mode(self) -> NavigationMode:
        return self.context.mode

    @property
    def destination(self) -> Optional[Coordinate]:
        return self.context.destination

    @property
    def route_coordinates(self) -> list[Coordinate]:
        return self.context.route.coordinates

    @property
    def instructions(self) -> list[TurnInstruction]:
        return self.context.route.instructions

    @property
    def next_instruction(self) -> Optional[TurnInstruction]:
        return self.context.route.next_instruction

    @property
    def route_summary(self) -> str:
        return self.context.route.summary

    @property
    def route_error(self) -> Optional[str]:
        return self.context.route_error

    @property
    def progress(self) -> Optional[NavigationProgress]:
        return self.context.tracking.progress

    @property
    def snap_result(self) -> Optional[SnapResult]:
        return self.context.tracking.snap_result

    @property
    def gps_quality(self) -> GPSQuality:
        return self.context.tracking.gps_quality

    @property
    def is_off_track(self) -> bool:
        return self.context.tracking.deviation.is_off_track

    @property
    def off_track_distance(self) -> float:
        return self.context.tracking.off_track_distance

    @property
    def has_arrived(self) -> bool:
        return self.context.tracking.has_arrived

    @property
    def compass_bearing(self) -> float:
        return self.context.compass.bearing

    @property
    def compass_distance(self) -> float:
        return self.context.compass.distance

    @property
    def camera_mode(self) -> CameraMode:
        return self.context.camera_mode

    def __repr__(self) -> str:
        return f"NavigationSession(state={self.state_name}, context={self.context!r})"
