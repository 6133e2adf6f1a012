"""Configuration constants for Trail Navigator.

All configurable parameters are centralized here for easy tuning.

Classes:
    EarthConfig: Spherical Earth model used by great-circle math
    UTMConfig: UTM zones, bands and EPSG codes
    MGRSConfig: MGRS 100 km grid-square lettering
    RegionConfig: Preferred region for ambiguous "a, b" coordinate pairs
    PolylineConfig: Encoded polyline precision
    SnapConfig: Snap-to-track search window and fallback threshold
    HikingConfig: Naismith's rule pace parameters
    DeviationConfig: Off-track thresholds, hysteresis and cooldown
    SessionConfig: Position update throttle and arrival radius
    RoutingConfig: External routing service contract
    ElevationConfig: Elevation profile sampling
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RegionBox:
    """Latitude/longitude bounding box (inclusive).

    Attributes:
        min_lat: Southern edge (decimal degrees)
        max_lat: Northern edge (decimal degrees)
        min_lon: Western edge (decimal degrees)
        max_lon: Eastern edge (decimal degrees)
    """

    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    def contains(self, lat: float, lon: float) -> bool:
        """Check if (lat, lon) lies inside the box."""
        return self.min_lat <= lat <= self.max_lat and self.min_lon <= lon <= self.max_lon


class EarthConfig:
    """Spherical Earth model (mean radius)."""

    RADIUS_M = 6_371_000.0

    # Segments shorter than this are treated as a single point
    DEGENERATE_SEGMENT_M = 0.1
    # Angular distance (radians) below which slerp returns the start point
    INTERPOLATION_EPSILON_RAD = 1e-10


class UTMConfig:
    """UTM grid parameters (WGS84 / UTM CRSs in pyproj)."""

    GEOGRAPHIC_CRS = "EPSG:4326"
    # WGS84 / UTM zone N is EPSG:326NN (north) or EPSG:327NN (south)
    NORTH_EPSG_BASE = 32600
    SOUTH_EPSG_BASE = 32700

    # Latitude bands from 80°S, 8° each (I and O omitted)
    BANDS = "CDEFGHJKLMNPQRSTUVWX"
    NORTHERN_BANDS = "NPQRSTUVWX"
    MIN_ZONE = 1
    MAX_ZONE = 60


class MGRSConfig:
    """Military Grid Reference System 100 km square lettering (WGS84 "AA" scheme)."""

    SQUARE_SIZE_M = 100_000.0
    # Row letters repeat every 2,000 km of northing
    ROW_CYCLE_M = 2_000_000.0
    MAX_DIGITS = 5

    # Column letters cycle over three zone sets (zones 1,4,7,... use the first)
    COLUMN_LETTERS = ("ABCDEFGH", "JKLMNPQR", "STUVWXYZ")
    ROW_LETTERS = "ABCDEFGHJKLMNPQRSTUV"
    # Even zones start the row lettering at F
    EVEN_ZONE_ROW_OFFSET = 5

    # Lowest northing (100 km multiple) reached inside each latitude band
    BAND_MIN_NORTHING_M = {
        "C": 1_100_000.0,
        "D": 2_000_000.0,
        "E": 2_800_000.0,
        "F": 3_700_000.0,
        "G": 4_600_000.0,
        "H": 5_500_000.0,
        "J": 6_400_000.0,
        "K": 7_300_000.0,
        "L": 8_200_000.0,
        "M": 9_100_000.0,
        "N": 0.0,
        "P": 800_000.0,
        "Q": 1_700_000.0,
        "R": 2_600_000.0,
        "S": 3_500_000.0,
        "T": 4_400_000.0,
        "U": 5_300_000.0,
        "V": 6_200_000.0,
        "W": 7_000_000.0,
        "X": 7_900_000.0,
    }


class RegionConfig:
    """Preferred region for resolving ambiguous plain "a, b" coordinate pairs.

    Users often paste lon,lat pairs from mapping tools. When both readings of a
    pair are valid, the reading that falls inside this box wins.
    """

    # Norway and surrounding waters
    PREFERRED_REGION = RegionBox(min_lat=55.0, max_lat=75.0, min_lon=2.0, max_lon=35.0)


class PolylineConfig:
    """Encoded polyline parameters (polyline6 as returned by Valhalla)."""

    PRECISION = 6


class SnapConfig:
    """Snap-to-track search parameters."""

    # Segments searched on each side of the last known segment index
    WINDOW_SEGMENTS = 50
    # Window result farther than this triggers a scan of the rest of the route
    FALLBACK_DISTANCE_M = 200.0


class HikingConfig:
    """Naismith's rule: flat pace plus a penalty per meter climbed."""

    FLAT_SPEED_KMH = 5.0
    FLAT_SPEED_M_PER_H = FLAT_SPEED_KMH * 1000
    # 1 minute per 10 m of ascent
    CLIMB_SECONDS_PER_METER = 60.0 / 10.0


class DeviationConfig:
    """Off-track detection thresholds."""

    OFF_TRACK_THRESHOLD_M = 50.0
    CONSECUTIVE_READINGS_REQUIRED = 3
    ALERT_COOLDOWN_S = 30.0

    # GPS horizontal accuracy classes (meters)
    GOOD_ACCURACY_M = 20.0
    REDUCED_ACCURACY_M = 50.0


class SessionConfig:
    """Navigation session update pacing."""

    MIN_UPDATE_INTERVAL_S = 1.0
    ARRIVAL_THRESHOLD_M = 30.0


class RoutingConfig:
    """External routing service (Valhalla) contract."""

    BASE_URL = "https://valhalla1.openstreetmap.de/route"
    TIMEOUT_S = 30
    COSTING = "pedestrian"
    USE_TRAILS = 1.0
    LANGUAGE = "nb-NO"
    UNITS = "km"
    DIRECTIONS_TYPE = "instructions"
    USER_AGENT = "trail-navigator"
    KM_TO_M = 1000.0


class ElevationConfig:
    """Elevation profile sampling."""

    SAMPLE_INTERVAL_M = 100.0
