"""MGRS grid references on top of UTM.

An MGRS reference is a UTM zone and band, a two-letter 100 km square
identifier, and an even number of digits (easting then northing inside the
square). Encoding truncates to the requested precision; decoding returns the
centre of the named cell.
"""

import logging
import re
from dataclasses import dataclass
from math import floor
from typing import Optional

from trail_navigator.constants import MGRSConfig
from trail_navigator.core.utm_projection import UTMProjection

logger = logging.getLogger(__name__)

_MGRS_PATTERN = re.compile(r"(\d{1,2})([C-HJ-NP-X])([A-HJ-NP-Z]{2})(\d{2,10})", re.IGNORECASE)


@dataclass(frozen=True)
class MGRSReference:
    """An encoded MGRS reference.

    Attributes:
        zone: UTM zone (with the Norway/Svalbard exceptions applied)
        band: Latitude band letter
        square: Two-letter 100 km square identifier
        easting: Digits of easting inside the square
        northing: Digits of northing inside the square
    """

    zone: int
    band: str
    square: str
    easting: str
    northing: str

    @property
    def compact(self) -> str:
        """Reference without spaces, e.g. "32VNM9745343048"."""
        return f"{self.zone}{self.band}{self.square}{self.easting}{self.northing}"

    @property
    def spaced(self) -> str:
        """Reference grouped for reading, e.g. "32V NM 97453 43048"."""
        return f"{self.zone}{self.band} {self.square} {self.easting} {self.northing}"


class MGRSGrid:
    """Static MGRS encoder and decoder."""

    @staticmethod
    def zone_for(lat: float, lon: float) -> int:
        """MGRS zone, including the southwest Norway and Svalbard exceptions."""
        if 56.0 <= lat < 64.0 and 3.0 <= lon < 12.0:
            return 32
        if 72.0 <= lat < 84.0 and 0.0 <= lon < 42.0:
            if lon < 9.0:
                return 31
            if lon < 21.0:
                return 33
            if lon < 33.0:
                return 35
            return 37
        return UTMProjection.zone_for(lon)

    @staticmethod
    def _column_letters(zone: int) -> str:
        return MGRSConfig.COLUMN_LETTERS[(zone - 1) % 3]

    @staticmethod
    def _row_offset(zone: int) -> int:
        return MGRSConfig.EVEN_ZONE_ROW_OFFSET if zone % 2 == 0 else 0

    @staticmethod
    def encode(lat: float, lon: float, digits: int = MGRSConfig.MAX_DIGITS) -> MGRSReference:
        """Encode a WGS84 position as an MGRS reference.

        Args:
            lat: Latitude in decimal degrees (80°S-84°N)
            lon: Longitude in decimal degrees
            digits: Digits per axis, 1 (10 km) to 5 (1 m)

        Returns:
            MGRSReference truncated to the requested precision.
        """
        if not 1 <= digits <= MGRSConfig.MAX_DIGITS:
            raise ValueError(f"MGRS precision must be 1-{MGRSConfig.MAX_DIGITS} digits, got {digits}")

        zone = MGRSGrid.zone_for(lat=lat, lon=lon)
        easting, northing = UTMProjection.forward(lat=lat, lon=lon, zone=zone)

        column_letters = MGRSGrid._column_letters(zone)
        column_index = int(floor(easting / MGRSConfig.SQUARE_SIZE_M)) - 1
        column_index = max(0, min(column_index, len(column_letters) - 1))

        row_count = len(MGRSConfig.ROW_LETTERS)
        row_index = int(floor(northing / MGRSConfig.SQUARE_SIZE_M)) % row_count
        row_index = (row_index + MGRSGrid._row_offset(zone)) % row_count

        scale = 10 ** (MGRSConfig.MAX_DIGITS - digits)
        easting_in_square = int(floor(easting % MGRSConfig.SQUARE_SIZE_M)) // scale
        northing_in_square = int(floor(northing % MGRSConfig.SQUARE_SIZE_M)) // scale

        return MGRSReference(
            zone=zone,
            band=UTMProjection.band_for(lat),
            square=column_letters[column_index] + MGRSConfig.ROW_LETTERS[row_index],
            easting=f"{easting_in_square:0{digits}d}",
            northing=f"{northing_in_square:0{digits}d}",
        )

    @staticmethod
    def decode(text: str) -> Optional[tuple[float, float]]:
        """Decode an MGRS reference to the centre of the cell it names.

        Whitespace is ignored and letters are case-insensitive. The grammar is
        validated before any math: zone 1-60, a band letter, a square whose
        column letter belongs to the zone's set and whose row letter is A-V,
        and an even digit count.

        Args:
            text: MGRS reference, e.g. "32V NM 97453 43048"

        Returns:
            Tuple (lat, lon) in decimal degrees, or None if the text is not a
            well-formed MGRS reference.
        """
        compact = re.sub(r"\s+", "", text).upper()
        match = _MGRS_PATTERN.fullmatch(compact)
        if match is None:
            return None

        zone = int(match.group(1))
        band = match.group(2)
        column, row = match.group(3)
        digits = match.group(4)

        if not 1 <= zone <= 60 or len(digits) % 2 != 0:
            return None

        column_letters = MGRSGrid._column_letters(zone)
        if column not in column_letters or row not in MGRSConfig.ROW_LETTERS:
            logger.debug(f"MGRS square {column}{row} is not valid in zone {zone}")
            return None

        half = len(digits) // 2
        cell_size = 10 ** (MGRSConfig.MAX_DIGITS - half)

        easting = (column_letters.index(column) + 1) * MGRSConfig.SQUARE_SIZE_M
        easting += int(digits[:half]) * cell_size + cell_size / 2

        row_count = len(MGRSConfig.ROW_LETTERS)
        row_index = (MGRSConfig.ROW_LETTERS.index(row) - MGRSGrid._row_offset(zone)) % row_count
        northing = row_index * MGRSConfig.SQUARE_SIZE_M
        while northing < MGRSConfig.BAND_MIN_NORTHING_M[band]:
            northing += MGRSConfig.ROW_CYCLE_M
        northing += int(digits[half:]) * cell_size + cell_size / 2

        return UTMProjection.inverse(
            easting=easting,
            northing=northing,
            zone=zone,
            northern=UTMProjection.is_northern_band(band),
        )
