"""Great-circle calculations on Earth's surface.

Provides geographic helper functions for route following:
- Distance calculation (Haversine formula)
- Bearing calculation (initial heading between points)
- Cross-track / along-track distance to a great-circle path
- Closest point on a segment (clamped projection)
- Spherical linear interpolation along a great circle
- Cumulative distances and distance-based resampling of polylines

All calculations use a spherical Earth (R = 6,371 km). Functions are pure
and safe to call from any thread.
"""

from math import acos, asin, atan2, cos, degrees, pi, radians, sin, sqrt
from typing import Sequence

import numpy as np

from trail_navigator.constants import EarthConfig
from trail_navigator.model.coordinate import Coordinate

EARTH_RADIUS_M = EarthConfig.RADIUS_M


class GeoCalculator:
    """Static methods for great-circle calculations.

    Coordinates are WGS84 decimal degrees.
    Bearings are in degrees clockwise from North (0-360).
    Distances are in meters.
    """

    EARTH_RADIUS_M = EARTH_RADIUS_M

    @staticmethod
    def haversine_distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        """Calculate great-circle distance between two points using Haversine formula.

        Args:
            lat1: Latitude of first point (decimal degrees)
            lon1: Longitude of first point (decimal degrees)
            lat2: Latitude of second point (decimal degrees)
            lon2: Longitude of second point (decimal degrees)

        Returns:
            Distance in meters.
        """
        dlat = radians(lat2 - lat1)
        dlon = radians(lon2 - lon1)
        a = sin(dlat / 2) ** 2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlon / 2) ** 2
        a = min(1.0, a)
        return EARTH_RADIUS_M * 2 * atan2(sqrt(a), sqrt(1 - a))

    @staticmethod
    def distance_m(a: Coordinate, b: Coordinate) -> float:
        """Great-circle distance between two coordinates in meters."""
        return GeoCalculator.haversine_distance_m(lat1=a.lat, lon1=a.lon, lat2=b.lat, lon2=b.lon)

    @staticmethod
    def initial_bearing_deg(a: Coordinate, b: Coordinate) -> float:
        """Calculate initial bearing from a to b.

        The bearing is the compass direction to travel from start to end,
        measured clockwise from true North. Identical points give 0°.

        Args:
            a: Start point
            b: End point

        Returns:
            Bearing in degrees (0-360, clockwise from North).
        """
        lat1_rad, lat2_rad = radians(a.lat), radians(b.lat)
        dlon = radians(b.lon - a.lon)
        y = sin(dlon) * cos(lat2_rad)
        x = cos(lat1_rad) * sin(lat2_rad) - sin(lat1_rad) * cos(lat2_rad) * cos(dlon)
        bearing = (degrees(atan2(y, x)) + 360) % 360
        # (-tiny + 360) % 360 can round up to exactly 360.0
        return 0.0 if bearing >= 360 else bearing

    @staticmethod
    def cross_track_distance_m(point: Coordinate, line_start: Coordinate, line_end: Coordinate) -> float:
        """Perpendicular distance from point to the great circle through line_start and line_end.

        Args:
            point: Point to measure from
            line_start: First point defining the path
            line_end: Second point defining the path

        Returns:
            Distance in meters (always >= 0).
        """
        d13 = GeoCalculator.distance_m(line_start, point) / EARTH_RADIUS_M
        theta13 = radians(GeoCalculator.initial_bearing_deg(line_start, point))
        theta12 = radians(GeoCalculator.initial_bearing_deg(line_start, line_end))
        dxt = asin(max(-1.0, min(1.0, sin(d13) * sin(theta13 - theta12))))
        return abs(dxt * EARTH_RADIUS_M)

    @staticmethod
    def along_track_distance_m(point: Coordinate, line_start: Coordinate, line_end: Coordinate) -> float:
        """Distance along the path from line_start to the foot of the perpendicular from point.

        Args:
            point: Point to project
            line_start: First point defining the path
            line_end: Second point defining the path

        Returns:
            Signed distance in meters, negative when the foot lies before line_start.
        """
        d13 = GeoCalculator.distance_m(line_start, point) / EARTH_RADIUS_M
        dxt = GeoCalculator.cross_track_distance_m(point, line_start, line_end) / EARTH_RADIUS_M

        ratio = min(1.0, max(-1.0, cos(d13) / cos(dxt)))
        dat = acos(ratio)

        theta13 = radians(GeoCalculator.initial_bearing_deg(line_start, point))
        theta12 = radians(GeoCalculator.initial_bearing_deg(line_start, line_end))
        angle_diff = abs(theta13 - theta12)
        if pi / 2 < angle_diff < 3 * pi / 2:
            return -dat * EARTH_RADIUS_M
        return dat * EARTH_RADIUS_M

    @staticmethod
    def closest_point_on_segment(
        point: Coordinate,
        start: Coordinate,
        end: Coordinate,
    ) -> tuple[Coordinate, float]:
        """Find the closest point on the segment start->end to point.

        The along-track fraction is clamped to [0, 1], so a foot outside the
        segment returns exactly start or end. Segments shorter than 0.1 m
        are treated as the single point start.

        Args:
            point: Point to project
            start: Segment start
            end: Segment end

        Returns:
            Tuple (snapped coordinate, distance from point to it in meters).
        """
        segment_length = GeoCalculator.distance_m(start, end)
        if segment_length <= EarthConfig.DEGENERATE_SEGMENT_M:
            return start, GeoCalculator.distance_m(start, point)

        fraction = GeoCalculator.along_track_distance_m(point, start, end) / segment_length
        if fraction <= 0:
            return start, GeoCalculator.distance_m(start, point)
        if fraction >= 1:
            return end, GeoCalculator.distance_m(end, point)

        snapped = GeoCalculator.interpolate(start, end, fraction)
        return snapped, GeoCalculator.distance_m(snapped, point)

    @staticmethod
    def interpolate(a: Coordinate, b: Coordinate, fraction: float) -> Coordinate:
        """Spherical linear interpolation along the great circle from a to b.

        Args:
            a: Start point (fraction = 0)
            b: End point (fraction = 1)
            fraction: Position along the arc

        Returns:
            Interpolated coordinate; a itself when a and b coincide.
        """
        d = GeoCalculator.distance_m(a, b) / EARTH_RADIUS_M
        if d <= EarthConfig.INTERPOLATION_EPSILON_RAD:
            return a

        lat1, lon1 = radians(a.lat), radians(a.lon)
        lat2, lon2 = radians(b.lat), radians(b.lon)
        wa = sin((1 - fraction) * d) / sin(d)
        wb = sin(fraction * d) / sin(d)

        x = wa * cos(lat1) * cos(lon1) + wb * cos(lat2) * cos(lon2)
        y = wa * cos(lat1) * sin(lon1) + wb * cos(lat2) * sin(lon2)
        z = wa * sin(lat1) + wb * sin(lat2)

        lat = degrees(atan2(z, sqrt(x * x + y * y)))
        lon = degrees(atan2(y, x))
        return Coordinate(lat=max(-90.0, min(90.0, lat)), lon=max(-180.0, min(180.0, lon)))

    @staticmethod
    def segment_lengths(coordinates: Sequence[Coordinate]) -> np.ndarray:
        """Length of each consecutive segment in meters (len(coordinates) - 1 values)."""
        return np.array(
            [GeoCalculator.distance_m(coordinates[i - 1], coordinates[i]) for i in range(1, len(coordinates))],
            dtype=float,
        )

    @staticmethod
    def total_distance_m(coordinates: Sequence[Coordinate]) -> float:
        """Total polyline length in meters (0 for fewer than 2 points)."""
        if len(coordinates) < 2:
            return 0.0
        return float(GeoCalculator.segment_lengths(coordinates).sum())

    @staticmethod
    def cumulative_distances(coordinates: Sequence[Coordinate]) -> list[float]:
        """Cumulative distance from the first point to each point.

        Returns:
            Same length as coordinates, starting at 0.0 (empty for no points).
        """
        if not coordinates:
            return []
        lengths = GeoCalculator.segment_lengths(coordinates)
        return np.concatenate(([0.0], np.cumsum(lengths))).tolist()

    @staticmethod
    def sample_coordinates(coordinates: Sequence[Coordinate], interval_m: float) -> list[Coordinate]:
        """Thin a polyline to vertices roughly interval_m apart.

        Keeps the first point, every vertex reached after accumulating at least
        interval_m since the last kept one, and always the last point.

        Args:
            coordinates: Polyline vertices
            interval_m: Minimum spacing between kept vertices

        Returns:
            Sampled vertices (the input unchanged when it has fewer than 2 points).
        """
        if len(coordinates) < 2:
            return list(coordinates)

        sampled = [coordinates[0]]
        accumulated = 0.0
        for i in range(1, len(coordinates)):
            accumulated += GeoCalculator.distance_m(coordinates[i - 1], coordinates[i])
            if accumulated >= interval_m:
                sampled.append(coordinates[i])
                accumulated = 0.0

        if sampled[-1] != coordinates[-1]:
            sampled.append(coordinates[-1])
        return sampled
