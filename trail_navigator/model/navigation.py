"""Navigation state values recomputed on every position update."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from trail_navigator.model.coordinate import Coordinate


class NavigationMode(Enum):
    """What the session is navigating by."""

    ROUTE = "route"  # Following a computed or saved route
    COMPASS = "compass"  # Bearing/distance straight to a destination


class CameraMode(Enum):
    """Map orientation while navigating."""

    NORTH_UP = "northUp"
    COURSE_UP = "courseUp"


class GPSQuality(Enum):
    """Position fix quality, derived from horizontal accuracy only."""

    GOOD = "good"  # accuracy < 20 m
    REDUCED = "reduced"  # accuracy < 50 m
    LOST = "lost"  # accuracy >= 50 m or no signal


@dataclass(frozen=True)
class SnapResult:
    """Nearest point on the route to a live position.

    Attributes:
        segment_index: Index of the route segment (start vertex) snapped to
        snapped_coordinate: Closest point on that segment
        cross_track_distance_m: Meters from the position to the snapped point
        along_track_distance_m: Meters from route start to the snapped point
        route_bearing_deg: Bearing of the snapped segment (0-360°)
    """

    segment_index: int
    snapped_coordinate: Coordinate
    cross_track_distance_m: float
    along_track_distance_m: float
    route_bearing_deg: float


@dataclass(frozen=True)
class NavigationProgress:
    """Progress along the active route."""

    distance_remaining: float
    distance_traveled: float
    total_distance: float
    elevation_gain_remaining: float
    elevation_loss_remaining: float
    estimated_time_remaining_s: float
    current_segment_index: int
    fraction_completed: float


@dataclass(frozen=True)
class DeviationState:
    """Off-track debounce state owned by the navigation session.

    Attributes:
        consecutive_off_track_readings: Readings in a row beyond the threshold
        is_off_track: True while an off-track alert is standing
        last_alert_time: Clock time of the last alert (None = never)
    """

    consecutive_off_track_readings: int = 0
    is_off_track: bool = False
    last_alert_time: Optional[float] = None
