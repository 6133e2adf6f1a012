"""Route data - geometry, elevation profile and turn instructions.

A route is an ordered list of Coordinates. Elevation and turn-by-turn data are
attached alongside it and are always keyed by cumulative distance from the
route start.
"""

from dataclasses import dataclass, field
from enum import Enum

from trail_navigator.model.coordinate import Coordinate


@dataclass(frozen=True)
class ElevationPoint:
    """A sampled elevation along a route.

    Attributes:
        coordinate: Sample location
        elevation: Meters above sea level
        distance: Cumulative meters from route start
    """

    coordinate: Coordinate
    elevation: float
    distance: float


@dataclass(frozen=True)
class ElevationStats:
    """Summary of an elevation profile (all values rounded to whole meters)."""

    gain: int
    loss: int
    min: int
    max: int
    average: int


class TurnType(str, Enum):
    """Maneuver kind for a turn instruction."""

    STRAIGHT = "straight"
    SLIGHT_RIGHT = "slightRight"
    RIGHT = "right"
    SHARP_RIGHT = "sharpRight"
    SLIGHT_LEFT = "slightLeft"
    LEFT = "left"
    SHARP_LEFT = "sharpLeft"
    U_TURN = "uTurn"
    DESTINATION = "destination"
    DEPART = "depart"
    FERRY = "ferry"
    OTHER = "other"


@dataclass(frozen=True)
class TurnInstruction:
    """A single turn-by-turn instruction.

    Attributes:
        text: Instruction text as returned by the routing service
        distance: Meters from route start to the maneuver
        coordinate: Location of the maneuver
        type: Maneuver kind
    """

    text: str
    distance: float
    coordinate: Coordinate
    type: TurnType


@dataclass(frozen=True)
class ComputedRoute:
    """A route computed by the external routing service.

    Attributes:
        coordinates: Decoded route shape
        distance: Route length in meters
        duration: Service estimate in seconds
        ascent: Total climb in meters
        descent: Total descent in meters
        instructions: Turn-by-turn instructions in route order
        summary: Human-readable summary, e.g. "Leirdalvegen - Sognefjellsvegen"
    """

    coordinates: list[Coordinate]
    distance: float
    duration: float
    ascent: float = 0.0
    descent: float = 0.0
    instructions: list[TurnInstruction] = field(default_factory=list)
    summary: str = ""
