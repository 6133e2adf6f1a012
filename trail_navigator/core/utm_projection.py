"""Universal Transverse Mercator projection on the WGS84 ellipsoid.

Projection math is delegated to pyproj (the EPSG:326zz/327zz WGS84 / UTM
CRSs). This module adds the UTM zone and latitude band lookups used by the
UTM and MGRS notations. Any zone can be forced for a position, which the
Norway/Svalbard MGRS zone exceptions rely on.
"""

from dataclasses import dataclass
from functools import lru_cache
from math import floor

import pyproj

from trail_navigator.constants import UTMConfig


@lru_cache(maxsize=None)
def _transformer(zone: int, northern: bool, inverse: bool = False) -> pyproj.Transformer:
    """Cached WGS84 <-> UTM transformer (lon/lat axis order)."""
    base = UTMConfig.NORTH_EPSG_BASE if northern else UTMConfig.SOUTH_EPSG_BASE
    wgs84 = pyproj.CRS(UTMConfig.GEOGRAPHIC_CRS)
    utm = pyproj.CRS(f"EPSG:{base + zone}")
    if inverse:
        return pyproj.Transformer.from_crs(utm, wgs84, always_xy=True)
    return pyproj.Transformer.from_crs(wgs84, utm, always_xy=True)


@dataclass(frozen=True)
class UTMCoordinate:
    """A position in the UTM grid.

    Attributes:
        zone: Longitude zone 1-60
        band: Latitude band letter (C-X, no I/O)
        easting: Meters, including the 500 km false easting
        northing: Meters, including the 10,000 km false northing south of the equator
    """

    zone: int
    band: str
    easting: float
    northing: float

    @property
    def is_northern(self) -> bool:
        return UTMProjection.is_northern_band(self.band)


class UTMProjection:
    """Static helpers for UTM zone lookup and WGS84 Transverse Mercator projection."""

    @staticmethod
    def zone_for(lon: float) -> int:
        """UTM zone number for a longitude (180° folds into zone 60)."""
        zone = int(floor((lon + 180) / 6)) + 1
        return max(UTMConfig.MIN_ZONE, min(zone, UTMConfig.MAX_ZONE))

    @staticmethod
    def band_for(lat: float) -> str:
        """Latitude band letter, clamped to C..X outside 80°S-84°N."""
        index = int(floor((lat + 80) / 8))
        if lat < 0:
            # (lat + 80) / 8 rounds up to band N for tiny negative latitudes
            index = min(index, UTMConfig.BANDS.index(UTMConfig.NORTHERN_BANDS[0]) - 1)
        clamped = max(0, min(index, len(UTMConfig.BANDS) - 1))
        return UTMConfig.BANDS[clamped]

    @staticmethod
    def is_northern_band(band: str) -> bool:
        return band.upper() in UTMConfig.NORTHERN_BANDS

    @staticmethod
    def central_meridian(zone: int) -> float:
        """Central meridian of a zone in degrees."""
        return float((zone - 1) * 6 - 180 + 3)

    @staticmethod
    def from_lat_lon(lat: float, lon: float) -> UTMCoordinate:
        """Project a WGS84 position into its standard UTM zone."""
        zone = UTMProjection.zone_for(lon)
        easting, northing = UTMProjection.forward(lat=lat, lon=lon, zone=zone)
        return UTMCoordinate(zone=zone, band=UTMProjection.band_for(lat), easting=easting, northing=northing)

    @staticmethod
    def forward(lat: float, lon: float, zone: int) -> tuple[float, float]:
        """Project lat/lon into the given zone.

        Args:
            lat: Latitude in decimal degrees
            lon: Longitude in decimal degrees
            zone: Target zone (need not be the standard zone for lon)

        Returns:
            Tuple (easting, northing) in meters. Southern latitudes carry the
            10,000 km false northing.
        """
        easting, northing = _transformer(zone, northern=lat >= 0).transform(lon, lat)
        return float(easting), float(northing)

    @staticmethod
    def inverse(easting: float, northing: float, zone: int, northern: bool) -> tuple[float, float]:
        """Convert grid coordinates back to lat/lon.

        Args:
            easting: Meters including false easting
            northing: Meters including false northing (southern hemisphere)
            zone: Zone 1-60
            northern: True for the northern hemisphere

        Returns:
            Tuple (lat, lon) in decimal degrees. Grid values pyproj cannot
            invert come back as inf, so callers must range-check the result.
        """
        lon, lat = _transformer(zone, northern=northern, inverse=True).transform(easting, northing)
        return float(lat), float(lon)
