"""Snap a live position onto a route polyline.

The search is bounded to a window of segments around the last known segment
so per-fix cost stays flat on long routes. If nothing in the window is close,
the rest of the route is scanned as well (e.g. after GPS reacquisition).
"""

import logging
from typing import Optional, Sequence

from trail_navigator.constants import SnapConfig
from trail_navigator.core.geo_calculator import GeoCalculator
from trail_navigator.model.coordinate import Coordinate
from trail_navigator.model.navigation import SnapResult

logger = logging.getLogger(__name__)


class SnapEngine:
    """Static snap-to-track search."""

    @staticmethod
    def snap_to_track(
        position: Coordinate,
        route: Sequence[Coordinate],
        cumulative_distances: Sequence[float],
        last_known_index: int = 0,
        window: int = SnapConfig.WINDOW_SEGMENTS,
    ) -> Optional[SnapResult]:
        """Find the closest point on the route to position.

        Args:
            position: Live position
            route: Route vertices
            cumulative_distances: Distance from route start to each vertex
            last_known_index: Segment index of the previous snap (search center)
            window: Segments searched on each side of last_known_index

        Returns:
            SnapResult, or None for routes with fewer than 2 points.
        """
        if len(route) < 2:
            return None

        last_segment = len(route) - 1
        search_start = max(0, last_known_index - window)
        search_end = min(last_segment, last_known_index + window)

        best_distance = float("inf")
        best_index = 0
        best_coordinate = route[0]

        for i in range(search_start, search_end):
            snapped, distance = GeoCalculator.closest_point_on_segment(position, route[i], route[i + 1])
            if distance < best_distance:
                best_distance = distance
                best_index = i
                best_coordinate = snapped

        window_covers_route = search_start == 0 and search_end >= last_segment
        if best_distance > SnapConfig.FALLBACK_DISTANCE_M and not window_covers_route:
            logger.info(
                f"No segment within {SnapConfig.FALLBACK_DISTANCE_M:.0f}m near index {last_known_index} "
                f"(best {best_distance:.0f}m), scanning full route"
            )
            for i in range(last_segment):
                if search_start <= i < search_end:
                    continue
                snapped, distance = GeoCalculator.closest_point_on_segment(position, route[i], route[i + 1])
                if distance < best_distance:
                    best_distance = distance
                    best_index = i
                    best_coordinate = snapped

        along_track = cumulative_distances[best_index] + GeoCalculator.distance_m(route[best_index], best_coordinate)
        route_bearing = GeoCalculator.initial_bearing_deg(route[best_index], route[best_index + 1])

        logger.debug(f"Snapped to segment {best_index}: xtd={best_distance:.1f}m, along={along_track:.0f}m")
        return SnapResult(
            segment_index=best_index,
            snapped_coordinate=best_coordinate,
            cross_track_distance_m=best_distance,
            along_track_distance_m=along_track,
            route_bearing_deg=route_bearing,
        )
