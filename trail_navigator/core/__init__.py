"""Core algorithms for navigation.

Everything here is stateless and safe to call from any thread:
- GeoCalculator: Great-circle distance, bearing, cross/along-track, slerp
- UTMProjection / MGRSGrid: Grid projections on the WGS84 ellipsoid
- CoordinateTranscoder: Parse and format coordinate notations
- PolylineCodec: Encoded polyline (polyline6) codec
- SnapEngine: Windowed snap-to-track
- ProgressEstimator: Remaining distance/elevation and Naismith ETA
- DeviationDetector: Off-track debounce and GPS quality classification
"""

from trail_navigator.core.coordinate_transcoder import (
    CoordinateFormat,
    CoordinateTranscoder,
    FormattedCoordinate,
)
from trail_navigator.core.deviation_detector import DeviationDetector, classify_gps_quality
from trail_navigator.core.geo_calculator import GeoCalculator
from trail_navigator.core.mgrs_grid import MGRSGrid, MGRSReference
from trail_navigator.core.polyline_codec import PolylineCodec
from trail_navigator.core.progress_estimator import ProgressEstimator
from trail_navigator.core.snap_engine import SnapEngine
from trail_navigator.core.utm_projection import UTMCoordinate, UTMProjection

__all__ = [
    # Geometry
    "GeoCalculator",
    # Projections
    "UTMProjection",
    "UTMCoordinate",
    "MGRSGrid",
    "MGRSReference",
    # Notations
    "CoordinateTranscoder",
    "CoordinateFormat",
    "FormattedCoordinate",
    # Routes
    "PolylineCodec",
    "SnapEngine",
    "ProgressEstimator",
    # Deviation
    "DeviationDetector",
    "classify_gps_quality",
]
