"""Encoded polyline codec (polyline6 as used by Valhalla).

Each coordinate is stored as a zig-zag encoded delta from the previous one,
scaled by 10**precision and split into 5-bit chunks. The bit-level work is
done by the `polyline` package; this module adds coordinate validation.
Valhalla uses precision 6; Google's classic format uses 5.
"""

import logging
from typing import Sequence

import polyline

from trail_navigator.constants import PolylineConfig
from trail_navigator.model.coordinate import Coordinate

logger = logging.getLogger(__name__)


class PolylineCodec:
    """Static encoder/decoder for encoded polylines."""

    @staticmethod
    def decode(encoded: str, precision: int = PolylineConfig.PRECISION) -> list[Coordinate]:
        """Decode an encoded polyline.

        Coordinates that decode outside the valid lat/lon range are skipped,
        but their deltas still accumulate. A string cut off in the middle of a
        value decodes to nothing.

        Args:
            encoded: Encoded polyline string
            precision: Decimal places the values were scaled by

        Returns:
            Decoded coordinates (empty for an empty or truncated string).
        """
        if not encoded:
            return []
        try:
            points = polyline.decode(encoded, precision)
        except IndexError:
            logger.warning(f"Truncated polyline ({len(encoded)} chars), nothing decoded")
            return []

        coordinates = [Coordinate(lat=lat, lon=lon) for lat, lon in points if Coordinate.is_valid(lat=lat, lon=lon)]
        skipped = len(points) - len(coordinates)
        if skipped:
            logger.warning(f"Skipped {skipped} out-of-range points while decoding polyline")
        return coordinates

    @staticmethod
    def encode(coordinates: Sequence[Coordinate], precision: int = PolylineConfig.PRECISION) -> str:
        """Encode coordinates, rounding each to the nearest 10**-precision degree.

        Args:
            coordinates: Points to encode
            precision: Decimal places to keep

        Returns:
            Encoded polyline string (empty for no points).
        """
        if not coordinates:
            return ""
        return polyline.encode([coordinate.lat_lon for coordinate in coordinates], precision)
