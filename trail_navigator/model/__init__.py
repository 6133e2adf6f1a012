"""Data model classes for navigation.

- Coordinate: Geometry atom (lat, lon)
- PositionFix: Live position reading with accuracy
- ElevationPoint / ElevationStats: Elevation profile along a route
- TurnType / TurnInstruction / ComputedRoute: Routing service output
- SnapResult / NavigationProgress: Per-update derived values
- GPSQuality / NavigationMode / CameraMode / DeviationState: Session state values
- NavigationEvent: One-shot events raised by position updates
"""

from trail_navigator.model.coordinate import Coordinate, PositionFix
from trail_navigator.model.event import (
    ArrivalEvent,
    BackOnTrackEvent,
    NavigationEvent,
    OffTrackEvent,
)
from trail_navigator.model.navigation import (
    CameraMode,
    DeviationState,
    GPSQuality,
    NavigationMode,
    NavigationProgress,
    SnapResult,
)
from trail_navigator.model.route import (
    ComputedRoute,
    ElevationPoint,
    ElevationStats,
    TurnInstruction,
    TurnType,
)

__all__ = [
    "Coordinate",
    "PositionFix",
    "ElevationPoint",
    "ElevationStats",
    "TurnType",
    "TurnInstruction",
    "ComputedRoute",
    "SnapResult",
    "NavigationProgress",
    "GPSQuality",
    "NavigationMode",
    "CameraMode",
    "DeviationState",
    "NavigationEvent",
    "OffTrackEvent",
    "BackOnTrackEvent",
    "ArrivalEvent",
]
