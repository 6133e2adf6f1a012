"""Coordinate - The fundamental geometry atom for navigation.

A Coordinate is a WGS84 latitude/longitude pair. It is an immutable value
passed by value through all geometry functions.

Used by:
- GeoCalculator (inputs and outputs of all great-circle math)
- SnapResult, ElevationPoint, TurnInstruction (locations on a route)
- PositionFix (live position from the platform location adapter)
"""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Coordinate:
    """A WGS84 geographic coordinate.

    Attributes:
        lat: Latitude in decimal degrees, [-90, 90]
        lon: Longitude in decimal degrees, [-180, 180]

    Example:
        oslo = Coordinate(lat=59.9139, lon=10.7522)
    """

    lat: float
    lon: float

    def __post_init__(self) -> None:
        """Validate data after initialization."""
        if np.isnan(self.lat) or np.isnan(self.lon):
            raise ValueError(f"Coordinate cannot contain NaN ({self.lat}, {self.lon})")
        if not Coordinate.is_valid(lat=self.lat, lon=self.lon):
            raise ValueError(f"Coordinate out of range: lat={self.lat}, lon={self.lon}")

    @staticmethod
    def is_valid(lat: float, lon: float) -> bool:
        """Check if lat/lon lie inside [-90, 90] x [-180, 180]."""
        return -90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0

    @property
    def lat_lon(self) -> tuple[float, float]:
        """Return (lat, lon) tuple - standard geographic order."""
        return (self.lat, self.lon)

    def __repr__(self) -> str:
        return f"Coordinate(lat={self.lat:.6f}, lon={self.lon:.6f})"


@dataclass(frozen=True)
class PositionFix:
    """A position reading from the platform location source.

    Attributes:
        coordinate: Reported position
        horizontal_accuracy: Accuracy radius in meters (negative = no signal)
        timestamp: Time of the reading in seconds (platform clock)
    """

    coordinate: Coordinate
    horizontal_accuracy: float
    timestamp: float = 0.0
