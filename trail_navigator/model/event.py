"""NavigationEvent - One-shot signals raised by position updates.

Events are returned from NavigationSession.process_position_update() and
handed to the platform layer, which turns them into UI updates and haptics:
- Off-track alert after sustained deviation (debounced, with cooldown)
- Back on track when the deviation clears
- Arrival at the destination (fires once per session)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from trail_navigator.model.navigation import NavigationMode


@dataclass(frozen=True)
class NavigationEvent(ABC):
    """Abstract base class for navigation events.

    Subclasses store specific parameters and compute message as property.
    Use isinstance() to check event type.
    Each subclass has an event_type field for serialization.
    """

    @property
    @abstractmethod
    def message(self) -> str:
        """Human-readable event message."""

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class OffTrackEvent(NavigationEvent):
    """Raised when the user has been off the route for several readings.

    Attributes:
        cross_track_distance_m: Distance to the route at the triggering reading
        event_type: Type identifier for serialization
    """

    cross_track_distance_m: float
    event_type: str = "OffTrackEvent"

    @property
    def message(self) -> str:
        return f"Off route: {self.cross_track_distance_m:.0f}m from the track"


@dataclass(frozen=True)
class BackOnTrackEvent(NavigationEvent):
    """Raised when a standing off-track alert clears."""

    cross_track_distance_m: float
    event_type: str = "BackOnTrackEvent"

    @property
    def message(self) -> str:
        return f"Back on route ({self.cross_track_distance_m:.0f}m from the track)"


@dataclass(frozen=True)
class ArrivalEvent(NavigationEvent):
    """Raised once when the destination is within the arrival radius.

    Attributes:
        mode: Navigation mode at arrival
        distance_remaining_m: Remaining distance at the triggering reading
        event_type: Type identifier for serialization
    """

    mode: NavigationMode
    distance_remaining_m: float
    event_type: str = "ArrivalEvent"

    @property
    def message(self) -> str:
        return f"You have reached your destination ({self.distance_remaining_m:.0f}m away)"
