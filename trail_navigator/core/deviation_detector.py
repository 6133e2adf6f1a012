"""Off-track detection with debounce and alert cooldown.

A single fix far from the route is usually GPS jitter, so an alert needs
several consecutive readings beyond the threshold. Once raised, the alert is
not repeated within the cooldown. Fixes classified as LOST never count
towards an alert.
"""

from dataclasses import replace

from trail_navigator.constants import DeviationConfig, SessionConfig
from trail_navigator.model.navigation import DeviationState, GPSQuality


def classify_gps_quality(horizontal_accuracy: float) -> GPSQuality:
    """Classify a fix by its horizontal accuracy (meters, negative = no signal)."""
    if horizontal_accuracy < 0:
        return GPSQuality.LOST
    if horizontal_accuracy < DeviationConfig.GOOD_ACCURACY_M:
        return GPSQuality.GOOD
    if horizontal_accuracy < DeviationConfig.REDUCED_ACCURACY_M:
        return GPSQuality.REDUCED
    return GPSQuality.LOST


class DeviationDetector:
    """Pure decision functions over DeviationState."""

    @staticmethod
    def evaluate(
        state: DeviationState,
        cross_track_distance: float,
        quality: GPSQuality,
        now: float,
    ) -> tuple[DeviationState, bool]:
        """Fold one reading into the deviation state.

        Args:
            state: Current state
            cross_track_distance: Meters from the route for this reading
            quality: GPS quality of this reading
            now: Clock time of this reading (seconds)

        Returns:
            Tuple (new_state, should_alert). should_alert is True only for the
            reading that raises an off-track alert.
        """
        beyond_threshold = cross_track_distance > DeviationConfig.OFF_TRACK_THRESHOLD_M

        if beyond_threshold and quality != GPSQuality.LOST:
            readings = state.consecutive_off_track_readings + 1
            counted = replace(state, consecutive_off_track_readings=readings)
            if readings < DeviationConfig.CONSECUTIVE_READINGS_REQUIRED:
                return counted, False
            if DeviationDetector.in_cooldown(state, now):
                return counted, False
            return replace(counted, is_off_track=True, last_alert_time=now), True

        # A LOST reading beyond the threshold restarts the count but keeps a standing alert
        return (
            replace(
                state,
                consecutive_off_track_readings=0,
                is_off_track=state.is_off_track and beyond_threshold,
            ),
            False,
        )

    @staticmethod
    def in_cooldown(state: DeviationState, now: float) -> bool:
        """True while an alert fired less than the cooldown ago."""
        if state.last_alert_time is None:
            return False
        return now - state.last_alert_time < DeviationConfig.ALERT_COOLDOWN_S

    @staticmethod
    def dismiss(state: DeviationState, now: float) -> DeviationState:
        """User acknowledged the alert: clear it and restart the cooldown."""
        return replace(state, is_off_track=False, last_alert_time=now)

    @staticmethod
    def should_arrive(has_arrived: bool, distance_remaining: float) -> bool:
        """One-shot arrival check: True the first time the destination is within reach."""
        return not has_arrived and distance_remaining < SessionConfig.ARRIVAL_THRESHOLD_M
