"""Tests for coordinate notations.

Tests: CoordinateTranscoder, UTMProjection, MGRSGrid
Focus: format -> parse round trips, known references, the lat/lon swap heuristic

pyproj supplies reference eastings/northings where a test checks formatting or zone forcing.
"""

import pytest
from hypothesis import given, settings, strategies as st
from pyproj import Transformer

from trail_navigator.constants import RegionBox
from trail_navigator.core.coordinate_transcoder import (
    CoordinateFormat,
    CoordinateTranscoder,
    decimal_to_ddm,
    decimal_to_dms,
)
from trail_navigator.core.geo_calculator import GeoCalculator
from trail_navigator.core.mgrs_grid import MGRSGrid
from trail_navigator.core.utm_projection import UTMProjection
from trail_navigator.model.coordinate import Coordinate

OSLO = Coordinate(lat=59.9139, lon=10.7522)

transcoder = CoordinateTranscoder()

northern_lat = st.floats(min_value=0.0, max_value=83.5, allow_nan=False)
southern_lat = st.floats(min_value=-79.5, max_value=-1e-6, allow_nan=False)


def _pyproj_utm(lat: float, lon: float, zone: int) -> tuple[float, float]:
    epsg = (32600 if lat >= 0 else 32700) + zone
    transformer = Transformer.from_crs("EPSG:4326", f"EPSG:{epsg}", always_xy=True)
    return transformer.transform(lon, lat)


class TestSexagesimal:
    """Degree splitting by truncation."""

    def test_decimal_to_dms(self) -> None:
        degrees, minutes, seconds = decimal_to_dms(59.5125)
        assert (degrees, minutes) == (59, 30)
        assert seconds == pytest.approx(45.0)

    def test_decimal_to_ddm(self) -> None:
        degrees, minutes = decimal_to_ddm(10.7522)
        assert degrees == 10
        assert minutes == pytest.approx(45.132)


class TestFormat:
    """Formatting Oslo in every notation."""

    def test_dd(self) -> None:
        formatted = transcoder.format(OSLO, CoordinateFormat.DD)
        assert formatted.display == "59.913900°N, 10.752200°E"
        assert formatted.copy_text == "59.913900N, 10.752200E"

    def test_dd_southern_western(self) -> None:
        formatted = transcoder.format(Coordinate(lat=-33.8688, lon=-70.6693), CoordinateFormat.DD)
        assert formatted.display == "33.868800°S, 70.669300°W"

    def test_dms(self) -> None:
        formatted = transcoder.format(OSLO, CoordinateFormat.DMS)
        assert formatted.display == "59°54′50.0″N, 10°45′7.9″E"
        assert formatted.copy_text == formatted.display

    def test_ddm(self) -> None:
        formatted = transcoder.format(OSLO, CoordinateFormat.DDM)
        assert formatted.display == "59°54.834′N, 10°45.132′E"

    def test_dms_rounding_carries_into_minutes(self) -> None:
        # 59°54′59.99″ and 10°59′59.99″
        coordinate = Coordinate(lat=59 + 54 / 60 + 59.99 / 3600, lon=10 + 59 / 60 + 59.99 / 3600)
        formatted = transcoder.format(coordinate, CoordinateFormat.DMS)
        assert formatted.display == "59°55′0.0″N, 11°0′0.0″E"

    def test_ddm_rounding_carries_into_degrees(self) -> None:
        coordinate = Coordinate(lat=59 + 59.9999 / 60, lon=10.5)
        formatted = transcoder.format(coordinate, CoordinateFormat.DDM)
        assert formatted.display == "60°0.000′N, 10°30.000′E"

    def test_utm_matches_pyproj(self) -> None:
        formatted = transcoder.format(OSLO, CoordinateFormat.UTM)
        easting, northing = _pyproj_utm(OSLO.lat, OSLO.lon, zone=32)
        assert formatted.display == f"32V {easting:.0f}E {northing:.0f}N"
        assert formatted.copy_text == f"32V {easting:.0f} {northing:.0f}"

    def test_mgrs_oslo_square(self) -> None:
        formatted = transcoder.format(OSLO, CoordinateFormat.MGRS)
        assert formatted.display.startswith("32V NM ")
        assert formatted.copy_text == formatted.display.replace(" ", "")
        assert len(formatted.copy_text) == len("32VNM") + 10


class TestUTMProjection:
    """Zones, bands and projected values."""

    def test_zone_and_band(self) -> None:
        assert UTMProjection.zone_for(10.75) == 32
        assert UTMProjection.zone_for(-180.0) == 1
        assert UTMProjection.zone_for(180.0) == 60
        assert UTMProjection.band_for(59.9) == "V"
        assert UTMProjection.band_for(0.0) == "N"
        assert UTMProjection.band_for(-0.1) == "M"
        assert UTMProjection.band_for(84.0) == "X"

    def test_from_lat_lon_hemisphere(self) -> None:
        oslo = UTMProjection.from_lat_lon(lat=59.9139, lon=10.7522)
        assert (oslo.zone, oslo.band) == (32, "V")
        assert oslo.is_northern
        assert not UTMProjection.from_lat_lon(lat=-33.9, lon=18.4).is_northern

    @pytest.mark.parametrize(
        "lat,lon,zone,expected",
        [
            (0.0, 3.0, 31, (500_000.0, 0.0)),  # central meridian on the equator
            (0.0, 0.0, 31, (166_021.44, 0.0)),
            (-1e-9, 3.0, 31, (500_000.0, 10_000_000.0)),  # southern false northing
        ],
    )
    def test_forward_known_values(self, lat: float, lon: float, zone: int, expected: tuple[float, float]) -> None:
        easting, northing = UTMProjection.forward(lat=lat, lon=lon, zone=zone)
        assert (easting, northing) == pytest.approx(expected, abs=0.01)

    def test_forced_zone(self) -> None:
        """Bergen lies in zone 31 but MGRS puts it in zone 32, west of the 9°E meridian."""
        easting, northing = UTMProjection.forward(lat=60.39, lon=5.32, zone=32)
        assert easting < 500_000.0
        assert (easting, northing) == pytest.approx(_pyproj_utm(60.39, 5.32, zone=32), abs=0.01)

    def test_band_just_south_of_equator(self) -> None:
        assert UTMProjection.band_for(-1e-300) == "M"

    @given(
        lat=st.one_of(northern_lat, southern_lat),
        zone=st.integers(min_value=1, max_value=60),
        offset=st.floats(min_value=-2.9, max_value=2.9, allow_nan=False),
    )
    @settings(max_examples=100, deadline=None)
    def test_inverse_undoes_forward(self, lat: float, zone: int, offset: float) -> None:
        lon = UTMProjection.central_meridian(zone) + offset
        easting, northing = UTMProjection.forward(lat=lat, lon=lon, zone=zone)
        back_lat, back_lon = UTMProjection.inverse(easting, northing, zone=zone, northern=lat >= 0)
        assert GeoCalculator.haversine_distance_m(lat, lon, back_lat, back_lon) < 0.05


class TestMGRSGrid:
    """MGRS lettering and cell-centre decoding."""

    def test_origin_reference(self) -> None:
        assert MGRSGrid.encode(lat=0.0, lon=0.0).compact == "31NAA6602100000"

    def test_reduced_precision(self) -> None:
        reference = MGRSGrid.encode(lat=0.0, lon=0.0, digits=2)
        assert reference.compact == "31NAA6600"

    def test_invalid_precision(self) -> None:
        with pytest.raises(ValueError):
            MGRSGrid.encode(lat=0.0, lon=0.0, digits=6)

    def test_norway_and_svalbard_zones(self) -> None:
        assert MGRSGrid.zone_for(lat=60.0, lon=5.0) == 32
        assert MGRSGrid.zone_for(lat=78.0, lon=15.0) == 33
        assert MGRSGrid.zone_for(lat=78.0, lon=25.0) == 35
        assert MGRSGrid.zone_for(lat=50.0, lon=5.0) == 31

    def test_decode_is_whitespace_and_case_insensitive(self) -> None:
        compact = MGRSGrid.decode("31NAA6602100000")
        spaced = MGRSGrid.decode(" 31n aa 66021 00000 ")
        assert compact is not None and spaced is not None
        assert compact == pytest.approx(spaced)
        assert compact[0] == pytest.approx(0.0, abs=1e-4)
        assert compact[1] == pytest.approx(0.0, abs=1e-4)

    @pytest.mark.parametrize(
        "text",
        [
            "31NAA660210000",  # odd digit count
            "61NAA6602100000",  # zone out of range
            "32VAM9745343048",  # column A is not in zone 32's set
            "32VNW9745343048",  # row W does not exist
            "32VNM",  # no digits
            "hello",
        ],
    )
    def test_decode_rejects_malformed(self, text: str) -> None:
        assert MGRSGrid.decode(text) is None

    @given(
        lat=st.floats(min_value=-79.5, max_value=83.5, allow_nan=False),
        lon=st.floats(min_value=-179.9, max_value=179.9, allow_nan=False),
    )
    @settings(max_examples=200, deadline=None)
    def test_round_trip_within_one_meter(self, lat: float, lon: float) -> None:
        reference = MGRSGrid.encode(lat=lat, lon=lon)
        decoded = MGRSGrid.decode(reference.compact)
        assert decoded is not None
        assert GeoCalculator.haversine_distance_m(lat, lon, *decoded) < 1.0


class TestParse:
    """Parsing and notation detection."""

    @pytest.mark.parametrize(
        "text,expected_format",
        [
            ("59°54′50.0″N, 10°45′7.9″E", CoordinateFormat.DMS),
            ("59°54'50\"N 10°45'7.9\"E", CoordinateFormat.DMS),
            ("59°54.834′N, 10°45.132′E", CoordinateFormat.DDM),
            ("59.9139°N, 10.7522°E", CoordinateFormat.DD),
            ("N59.9139 E10.7522", CoordinateFormat.DD),
            ("59.9139, 10.7522", CoordinateFormat.DD),
        ],
    )
    def test_identify(self, text: str, expected_format: CoordinateFormat) -> None:
        identified = transcoder.identify(text)
        assert identified is not None
        coordinate, fmt = identified
        assert fmt == expected_format
        assert GeoCalculator.distance_m(coordinate, OSLO) < 5.0

    @pytest.mark.parametrize("fmt", [CoordinateFormat.UTM, CoordinateFormat.MGRS])
    def test_identify_grid_notations(self, fmt: CoordinateFormat) -> None:
        formatted = transcoder.format(OSLO, fmt)
        for text in (formatted.display, formatted.copy_text):
            identified = transcoder.identify(text)
            assert identified is not None, text
            assert identified[1] == fmt
            assert GeoCalculator.distance_m(identified[0], OSLO) < 1.0

    def test_norwegian_east_letter(self) -> None:
        for text in ("59.9139N, 10.7522Ø", "59°54.834′N, 10°45.132′Ø", "59°54′50.0″N, 10°45′7.9″Ø"):
            parsed = transcoder.parse(text)
            assert parsed is not None, text
            assert parsed.lon == pytest.approx(10.7522, abs=1e-4)

    def test_south_and_west_letters_negate(self) -> None:
        parsed = transcoder.parse("33.8688S, 70.6693W")
        assert parsed == Coordinate(lat=-33.8688, lon=-70.6693)

    def test_surrounding_whitespace(self) -> None:
        assert transcoder.parse("  59.9139, 10.7522\n") == Coordinate(lat=59.9139, lon=10.7522)

    @pytest.mark.parametrize(
        "text",
        ["", "hello", "95.0, 200.0", "91°0′0″N, 10°0′0″E", "61X 500000 7000000", "59.9139"],
    )
    def test_parse_failures(self, text: str) -> None:
        assert transcoder.parse(text) is None


class TestLatLonResolution:
    """Plain "a, b" pairs: lat/lon or lon/lat?"""

    def test_pair_inside_region_is_kept(self) -> None:
        assert transcoder.parse("59.9139, 10.7522") == Coordinate(lat=59.9139, lon=10.7522)

    def test_lon_lat_pair_is_swapped_into_region(self) -> None:
        assert transcoder.parse("10.7522, 59.9139") == Coordinate(lat=59.9139, lon=10.7522)

    def test_out_of_range_latitude_is_swapped(self) -> None:
        assert transcoder.parse("151.2093, -33.8688") == Coordinate(lat=-33.8688, lon=151.2093)

    def test_ambiguous_pair_outside_region_keeps_first_as_latitude(self) -> None:
        assert transcoder.parse("-33.8688, 151.2093") == Coordinate(lat=-33.8688, lon=151.2093)
        assert transcoder.parse("40.0, 45.0") == Coordinate(lat=40.0, lon=45.0)

    def test_custom_region(self) -> None:
        alps = CoordinateTranscoder(preferred_region=RegionBox(min_lat=44.0, max_lat=48.0, min_lon=5.0, max_lon=17.0))
        assert alps.parse("10.27, 46.97") == Coordinate(lat=46.97, lon=10.27)
        assert transcoder.parse("10.27, 46.97") == Coordinate(lat=10.27, lon=46.97)


class TestRoundTrip:
    """format -> parse recovers the coordinate."""

    @given(
        lat=st.floats(min_value=-90.0, max_value=90.0, allow_nan=False),
        lon=st.floats(min_value=-180.0, max_value=180.0, allow_nan=False),
    )
    @settings(max_examples=200)
    def test_dd_within_1e6_degrees(self, lat: float, lon: float) -> None:
        original = Coordinate(lat=lat, lon=lon)
        parsed = transcoder.parse(transcoder.format(original, CoordinateFormat.DD).copy_text)
        assert parsed is not None
        assert parsed.lat == pytest.approx(lat, abs=1e-6)
        assert parsed.lon == pytest.approx(lon, abs=1e-6)

    @given(
        lat=st.floats(min_value=-89.9, max_value=89.9, allow_nan=False),
        lon=st.floats(min_value=-179.9, max_value=179.9, allow_nan=False),
    )
    @settings(max_examples=100)
    def test_dms_and_ddm(self, lat: float, lon: float) -> None:
        original = Coordinate(lat=lat, lon=lon)
        dms = transcoder.parse(transcoder.format(original, CoordinateFormat.DMS).copy_text)
        ddm = transcoder.parse(transcoder.format(original, CoordinateFormat.DDM).copy_text)
        assert dms is not None and ddm is not None
        assert dms.lat == pytest.approx(lat, abs=2e-5)
        assert dms.lon == pytest.approx(lon, abs=2e-5)
        assert ddm.lat == pytest.approx(lat, abs=1e-5)
        assert ddm.lon == pytest.approx(lon, abs=1e-5)

    @given(
        lat=st.one_of(northern_lat, southern_lat),
        zone=st.integers(min_value=1, max_value=60),
        offset=st.floats(min_value=-2.9, max_value=2.9, allow_nan=False),
    )
    @settings(max_examples=200, deadline=None)
    def test_utm_within_one_meter(self, lat: float, zone: int, offset: float) -> None:
        original = Coordinate(lat=lat, lon=UTMProjection.central_meridian(zone) + offset)
        formatted = transcoder.format(original, CoordinateFormat.UTM)
        for text in (formatted.display, formatted.copy_text):
            identified = transcoder.identify(text)
            assert identified is not None, text
            parsed, fmt = identified
            assert fmt == CoordinateFormat.UTM
            assert GeoCalculator.distance_m(original, parsed) < 1.0

    @pytest.mark.parametrize("lat", [0.0, 0.5, 0.9])
    def test_utm_just_north_of_equator(self, lat: float) -> None:
        """Northings below 100 km print with fewer than six digits."""
        original = Coordinate(lat=lat, lon=10.0)
        copy_text = transcoder.format(original, CoordinateFormat.UTM).copy_text
        assert copy_text.startswith("32N ")
        parsed = transcoder.parse(copy_text)
        assert parsed is not None, copy_text
        assert GeoCalculator.distance_m(original, parsed) < 1.0

    @given(
        lat=st.floats(min_value=-79.5, max_value=83.5, allow_nan=False),
        lon=st.floats(min_value=-179.9, max_value=179.9, allow_nan=False),
    )
    @settings(max_examples=100, deadline=None)
    def test_mgrs_within_one_meter(self, lat: float, lon: float) -> None:
        original = Coordinate(lat=lat, lon=lon)
        formatted = transcoder.format(original, CoordinateFormat.MGRS)
        for text in (formatted.display, formatted.copy_text):
            parsed = transcoder.parse(text)
            assert parsed is not None, text
            assert GeoCalculator.distance_m(original, parsed) < 1.0
