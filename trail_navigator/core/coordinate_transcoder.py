"""Parse and format human-facing coordinate notations.

Supported notations:
- DD:   59.913900°N, 10.752200°E  (also "59.9139, 10.7522" and "N59.9 E10.7")
- DMS:  59°54′50.0″N, 10°45′7.9″E
- DDM:  59°54.834′N, 10°45.132′E
- UTM:  32V 597453E 6643048N
- MGRS: 32V NM 97453 43048

Parsing tries MGRS, UTM, DMS, DDM then DD and the first grammar that matches
wins. Norwegian input is accepted: "Ø" (øst) is read as east.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from trail_navigator.constants import RegionBox, RegionConfig
from trail_navigator.core.mgrs_grid import MGRSGrid
from trail_navigator.core.utm_projection import UTMProjection
from trail_navigator.model.coordinate import Coordinate

logger = logging.getLogger(__name__)

_NUMBER = r"(-?\d+\.?\d*)"

_UTM_PATTERN = re.compile(r"(\d{1,2})\s*([C-HJ-NP-X])\s+(\d{5,7})\s*[EØ]?\s+(\d{1,8})\s*N?", re.IGNORECASE)
_DMS_PATTERN = re.compile(
    r"(\d+)°\s*(\d+)['′]\s*(\d+\.?\d*)[\"″]?\s*([NS])\s*[,\s]\s*"
    r"(\d+)°\s*(\d+)['′]\s*(\d+\.?\d*)[\"″]?\s*([EWØ])",
    re.IGNORECASE,
)
_DDM_PATTERN = re.compile(
    r"(\d+)°\s*(\d+\.?\d*)['′]\s*([NS])\s*[,\s]\s*(\d+)°\s*(\d+\.?\d*)['′]\s*([EWØ])",
    re.IGNORECASE,
)
_DD_LETTER_PATTERN = re.compile(
    rf"([NS])?{_NUMBER}°?([NS])?\s*[,\s]\s*([EWØ])?{_NUMBER}°?([EWØ])?",
    re.IGNORECASE,
)
_DD_PLAIN_PATTERN = re.compile(rf"{_NUMBER}\s*[,\s]\s*{_NUMBER}")


class CoordinateFormat(Enum):
    """Coordinate notation."""

    DD = "dd"  # Decimal degrees
    DMS = "dms"  # Degrees, minutes, seconds
    DDM = "ddm"  # Degrees, decimal minutes
    UTM = "utm"
    MGRS = "mgrs"

    @property
    def display_name(self) -> str:
        return self.name


@dataclass(frozen=True)
class FormattedCoordinate:
    """A formatted coordinate.

    Attributes:
        display: Text for showing to the user
        copy_text: Text for the clipboard; parses back to the same coordinate
    """

    display: str
    copy_text: str


def _hemisphere(value: float, positive: str, negative: str) -> str:
    return positive if value >= 0 else negative


def decimal_to_dms(decimal: float) -> tuple[int, int, float]:
    """Split non-negative decimal degrees into (degrees, minutes, seconds) by truncation."""
    degrees = int(decimal)
    minutes_decimal = (decimal - degrees) * 60
    minutes = int(minutes_decimal)
    seconds = (minutes_decimal - minutes) * 60
    return degrees, minutes, seconds


def decimal_to_ddm(decimal: float) -> tuple[int, float]:
    """Split non-negative decimal degrees into (degrees, decimal minutes)."""
    degrees = int(decimal)
    return degrees, (decimal - degrees) * 60


def _rounded_dms(decimal: float) -> tuple[int, int, float]:
    """Split into (degrees, minutes, seconds) after rounding to 0.1″, so 59.95″ carries into the minutes."""
    tenths = round(decimal * 36_000)
    degrees, rest = divmod(tenths, 36_000)
    minutes, seconds_tenths = divmod(rest, 600)
    return degrees, minutes, seconds_tenths / 10


def _rounded_ddm(decimal: float) -> tuple[int, float]:
    """Split into (degrees, minutes) after rounding to 0.001′."""
    degrees, thousandths = divmod(round(decimal * 60_000), 60_000)
    return degrees, thousandths / 1000


class CoordinateTranscoder:
    """Converts between Coordinate and the supported text notations.

    Args:
        preferred_region: Box used to disambiguate plain "a, b" pairs that are
            valid both as (lat, lon) and as (lon, lat)
    """

    def __init__(self, preferred_region: RegionBox = RegionConfig.PREFERRED_REGION):
        self.preferred_region = preferred_region

    # -------------------------------------------------------------------------
    # Formatting
    # -------------------------------------------------------------------------

    def format(self, coordinate: Coordinate, fmt: CoordinateFormat) -> FormattedCoordinate:
        """Format a coordinate in the given notation."""
        formatters: dict[CoordinateFormat, Callable[[float, float], FormattedCoordinate]] = {
            CoordinateFormat.DD: self._format_dd,
            CoordinateFormat.DMS: self._format_dms,
            CoordinateFormat.DDM: self._format_ddm,
            CoordinateFormat.UTM: self._format_utm,
            CoordinateFormat.MGRS: self._format_mgrs,
        }
        return formatters[fmt](coordinate.lat, coordinate.lon)

    @staticmethod
    def _format_dd(lat: float, lon: float) -> FormattedCoordinate:
        lat_dir = _hemisphere(lat, "N", "S")
        lon_dir = _hemisphere(lon, "E", "W")
        return FormattedCoordinate(
            display=f"{abs(lat):.6f}°{lat_dir}, {abs(lon):.6f}°{lon_dir}",
            copy_text=f"{abs(lat):.6f}{lat_dir}, {abs(lon):.6f}{lon_dir}",
        )

    @staticmethod
    def _format_dms(lat: float, lon: float) -> FormattedCoordinate:
        lat_d, lat_m, lat_s = _rounded_dms(abs(lat))
        lon_d, lon_m, lon_s = _rounded_dms(abs(lon))
        display = (
            f"{lat_d}°{lat_m}′{lat_s:.1f}″{_hemisphere(lat, 'N', 'S')}, "
            f"{lon_d}°{lon_m}′{lon_s:.1f}″{_hemisphere(lon, 'E', 'W')}"
        )
        return FormattedCoordinate(display=display, copy_text=display)

    @staticmethod
    def _format_ddm(lat: float, lon: float) -> FormattedCoordinate:
        lat_d, lat_m = _rounded_ddm(abs(lat))
        lon_d, lon_m = _rounded_ddm(abs(lon))
        display = (
            f"{lat_d}°{lat_m:.3f}′{_hemisphere(lat, 'N', 'S')}, "
            f"{lon_d}°{lon_m:.3f}′{_hemisphere(lon, 'E', 'W')}"
        )
        return FormattedCoordinate(display=display, copy_text=display)

    @staticmethod
    def _format_utm(lat: float, lon: float) -> FormattedCoordinate:
        utm = UTMProjection.from_lat_lon(lat=lat, lon=lon)
        return FormattedCoordinate(
            display=f"{utm.zone}{utm.band} {utm.easting:.0f}E {utm.northing:.0f}N",
            copy_text=f"{utm.zone}{utm.band} {utm.easting:.0f} {utm.northing:.0f}",
        )

    @staticmethod
    def _format_mgrs(lat: float, lon: float) -> FormattedCoordinate:
        reference = MGRSGrid.encode(lat=lat, lon=lon)
        return FormattedCoordinate(display=reference.spaced, copy_text=reference.compact)

    # -------------------------------------------------------------------------
    # Parsing
    # -------------------------------------------------------------------------

    def parse(self, text: str) -> Optional[Coordinate]:
        """Parse text in any supported notation.

        Returns:
            Coordinate, or None if no notation matches or the result is out of range.
        """
        identified = self.identify(text)
        return identified[0] if identified else None

    def identify(self, text: str) -> Optional[tuple[Coordinate, CoordinateFormat]]:
        """Parse text and report which notation matched.

        Returns:
            Tuple (coordinate, format), or None if nothing matches.
        """
        trimmed = text.strip()
        detectors: list[tuple[CoordinateFormat, Callable[[str], Optional[Coordinate]]]] = [
            (CoordinateFormat.MGRS, self._parse_mgrs),
            (CoordinateFormat.UTM, self._parse_utm),
            (CoordinateFormat.DMS, self._parse_dms),
            (CoordinateFormat.DDM, self._parse_ddm),
            (CoordinateFormat.DD, self._parse_dd),
        ]
        for fmt, detector in detectors:
            coordinate = detector(trimmed)
            if coordinate is not None:
                logger.debug(f"Parsed '{trimmed}' as {fmt.display_name}: {coordinate}")
                return coordinate, fmt
        return None

    @staticmethod
    def _checked(lat: float, lon: float) -> Optional[Coordinate]:
        if not Coordinate.is_valid(lat=lat, lon=lon):
            return None
        return Coordinate(lat=lat, lon=lon)

    def _parse_mgrs(self, text: str) -> Optional[Coordinate]:
        decoded = MGRSGrid.decode(text)
        if decoded is None:
            return None
        return self._checked(*decoded)

    def _parse_utm(self, text: str) -> Optional[Coordinate]:
        match = _UTM_PATTERN.fullmatch(text)
        if match is None:
            return None

        zone = int(match.group(1))
        if not 1 <= zone <= 60:
            return None

        lat, lon = UTMProjection.inverse(
            easting=float(match.group(3)),
            northing=float(match.group(4)),
            zone=zone,
            northern=UTMProjection.is_northern_band(match.group(2)),
        )
        return self._checked(lat, lon)

    def _parse_dms(self, text: str) -> Optional[Coordinate]:
        match = _DMS_PATTERN.fullmatch(text)
        if match is None:
            return None

        lat_d, lat_m, lat_s, lat_dir, lon_d, lon_m, lon_s, lon_dir = match.groups()
        lat = float(lat_d) + float(lat_m) / 60 + float(lat_s) / 3600
        lon = float(lon_d) + float(lon_m) / 60 + float(lon_s) / 3600
        if lat_dir.upper() == "S":
            lat = -lat
        if lon_dir.upper() == "W":
            lon = -lon
        return self._checked(lat, lon)

    def _parse_ddm(self, text: str) -> Optional[Coordinate]:
        match = _DDM_PATTERN.fullmatch(text)
        if match is None:
            return None

        lat_d, lat_m, lat_dir, lon_d, lon_m, lon_dir = match.groups()
        lat = float(lat_d) + float(lat_m) / 60
        lon = float(lon_d) + float(lon_m) / 60
        if lat_dir.upper() == "S":
            lat = -lat
        if lon_dir.upper() == "W":
            lon = -lon
        return self._checked(lat, lon)

    def _parse_dd(self, text: str) -> Optional[Coordinate]:
        match = _DD_LETTER_PATTERN.fullmatch(text)
        if match is not None:
            lat_pre, first, lat_post, lon_pre, second, lon_post = match.groups()
            lat_dir = (lat_pre or lat_post or "").upper()
            lon_dir = (lon_pre or lon_post or "").upper()
            lat, lon = float(first), float(second)

            if lat_dir or lon_dir:
                # Letters say which value is which
                if lat_dir == "S":
                    lat = -abs(lat)
                if lon_dir == "W":
                    lon = -abs(lon)
                return self._checked(lat, lon)

        match = _DD_PLAIN_PATTERN.fullmatch(text)
        if match is None:
            return None
        return self.resolve_lat_lon(float(match.group(1)), float(match.group(2)))

    def resolve_lat_lon(self, first: float, second: float) -> Optional[Coordinate]:
        """Decide whether a plain number pair is (lat, lon) or (lon, lat).

        Rules, in order:
        1. (first, second) out of range but swapped valid: swap.
        2. (first, second) inside the preferred region: keep.
        3. Swapped inside the preferred region: swap.
        4. Otherwise keep first = lat.

        Returns:
            Coordinate, or None when neither reading is in range.
        """
        if not Coordinate.is_valid(lat=first, lon=second):
            if Coordinate.is_valid(lat=second, lon=first):
                return Coordinate(lat=second, lon=first)
            return None

        if self.preferred_region.contains(lat=first, lon=second):
            return Coordinate(lat=first, lon=second)
        if self.preferred_region.contains(lat=second, lon=first):
            logger.debug(f"Swapping ({first}, {second}) into the preferred region")
            return Coordinate(lat=second, lon=first)
        return Coordinate(lat=first, lon=second)
