"""Progress along a route: remaining distance, remaining climb and ETA.

ETA uses Naismith's rule: 5 km/h on the flat plus 1 minute per 10 m of ascent.
Descent adds no time.
"""

from math import copysign, floor
from typing import Optional, Sequence

import numpy as np

from trail_navigator.constants import ElevationConfig, HikingConfig
from trail_navigator.core.geo_calculator import GeoCalculator
from trail_navigator.core.snap_engine import SnapEngine
from trail_navigator.model.coordinate import Coordinate
from trail_navigator.model.navigation import NavigationProgress, SnapResult
from trail_navigator.model.route import ElevationPoint, ElevationStats


def _round_half_away(value: float) -> int:
    return int(copysign(floor(abs(value) + 0.5), value))


class ProgressEstimator:
    """Static progress calculations for route navigation."""

    @staticmethod
    def remaining_distance(from_index: int, snapped: Coordinate, route: Sequence[Coordinate]) -> float:
        """Distance from the snapped point to the end of the route.

        Args:
            from_index: Segment index the position snapped to
            snapped: Snapped point on that segment
            route: Route vertices

        Returns:
            Meters to the final vertex (0 if from_index is the last vertex or beyond).
        """
        if from_index >= len(route) - 1:
            return 0.0

        remaining = GeoCalculator.distance_m(snapped, route[from_index + 1])
        if from_index + 1 < len(route) - 1:
            remaining += float(GeoCalculator.segment_lengths(route[from_index + 1 :]).sum())
        return remaining

    @staticmethod
    def remaining_elevation(along_track_distance: float, profile: Sequence[ElevationPoint]) -> tuple[float, float]:
        """Climb and descent left from the current position to the end.

        Starts at the first profile point at or beyond along_track_distance (or
        the last point if none is), then sums positive and negative steps.

        Returns:
            Tuple (gain, loss) in meters, both >= 0. (0, 0) for profiles with
            fewer than 2 points.
        """
        if len(profile) < 2:
            return 0.0, 0.0

        start_index = len(profile) - 1
        for i, point in enumerate(profile):
            if point.distance >= along_track_distance:
                start_index = i
                break

        elevations = np.array([p.elevation for p in profile[start_index:]], dtype=float)
        diffs = np.diff(elevations)
        gain = float(diffs[diffs > 0].sum())
        loss = float(np.abs(diffs[diffs < 0]).sum())
        return gain, loss

    @staticmethod
    def estimated_time(remaining_distance: float, remaining_gain: float) -> float:
        """Naismith's rule hiking time in seconds."""
        flat_time = remaining_distance / HikingConfig.FLAT_SPEED_M_PER_H * 3600
        climb_time = remaining_gain * HikingConfig.CLIMB_SECONDS_PER_METER
        return flat_time + climb_time

    @staticmethod
    def build_progress(
        snap: SnapResult,
        remaining: float,
        gain: float,
        loss: float,
        eta: float,
        total_distance: float,
    ) -> NavigationProgress:
        """Assemble a NavigationProgress, deriving traveled distance and fraction.

        The fraction is clamped to [0, 1]; a zero total gives 0.
        """
        traveled = total_distance - remaining
        fraction = min(1.0, max(0.0, traveled / total_distance)) if total_distance > 0 else 0.0
        return NavigationProgress(
            distance_remaining=remaining,
            distance_traveled=traveled,
            total_distance=total_distance,
            elevation_gain_remaining=gain,
            elevation_loss_remaining=loss,
            estimated_time_remaining_s=eta,
            current_segment_index=snap.segment_index,
            fraction_completed=fraction,
        )

    @staticmethod
    def compute_progress(
        position: Coordinate,
        route: Sequence[Coordinate],
        cumulative_distances: Sequence[float],
        elevation_profile: Sequence[ElevationPoint],
        total_distance: float,
        from_index: int,
    ) -> Optional[tuple[SnapResult, NavigationProgress]]:
        """Snap the position and compute every progress value in one call.

        Args:
            position: Live position
            route: Route vertices
            cumulative_distances: Distance from route start to each vertex
            elevation_profile: Elevation samples keyed by distance from route start
            total_distance: Route length used for traveled/fraction
            from_index: Last known segment index (snap search center)

        Returns:
            Tuple (snap, progress), or None for routes with fewer than 2 points.
        """
        snap = SnapEngine.snap_to_track(
            position=position,
            route=route,
            cumulative_distances=cumulative_distances,
            last_known_index=from_index,
        )
        if snap is None:
            return None

        remaining = ProgressEstimator.remaining_distance(snap.segment_index, snap.snapped_coordinate, route)
        gain, loss = ProgressEstimator.remaining_elevation(snap.along_track_distance_m, elevation_profile)
        eta = ProgressEstimator.estimated_time(remaining, gain)
        progress = ProgressEstimator.build_progress(snap, remaining, gain, loss, eta, total_distance)
        return snap, progress

    # -------------------------------------------------------------------------
    # Elevation profile
    # -------------------------------------------------------------------------

    @staticmethod
    def sample_for_elevation(
        route: Sequence[Coordinate], interval_m: float = ElevationConfig.SAMPLE_INTERVAL_M
    ) -> list[Coordinate]:
        """Route vertices to look up elevations for (about one per interval_m)."""
        if len(route) < 2:
            return []
        return GeoCalculator.sample_coordinates(route, interval_m)

    @staticmethod
    def build_elevation_profile(samples: Sequence[Coordinate], elevations: Sequence[float]) -> list[ElevationPoint]:
        """Pair sampled coordinates with looked-up elevations.

        Args:
            samples: Sampled route coordinates (see sample_for_elevation)
            elevations: Elevation in meters for each sample

        Returns:
            Profile keyed by cumulative distance along the samples.
        """
        if len(samples) != len(elevations):
            raise ValueError(f"Got {len(elevations)} elevations for {len(samples)} samples")

        distances = GeoCalculator.cumulative_distances(samples)
        return [
            ElevationPoint(coordinate=coordinate, elevation=float(elevation), distance=distance)
            for coordinate, elevation, distance in zip(samples, elevations, distances)
        ]

    @staticmethod
    def elevation_stats(profile: Sequence[ElevationPoint]) -> ElevationStats:
        """Total gain/loss and min/max/average elevation, rounded to whole meters."""
        if not profile:
            return ElevationStats(gain=0, loss=0, min=0, max=0, average=0)

        elevations = np.array([p.elevation for p in profile], dtype=float)
        diffs = np.diff(elevations)
        return ElevationStats(
            gain=_round_half_away(float(diffs[diffs > 0].sum())),
            loss=_round_half_away(float(np.abs(diffs[diffs < 0]).sum())),
            min=_round_half_away(float(elevations.min())),
            max=_round_half_away(float(elevations.max())),
            average=_round_half_away(float(elevations.mean())),
        )
