"""Valhalla routing service contract.

The navigation core never computes routes itself. This module builds the
request body for a pedestrian route, maps the JSON response onto
ComputedRoute, and wraps a single HTTP POST with typed errors. Retries,
caching and rate limiting belong to the caller.

Response fields read:
    trip.legs[0].shape             polyline6 route geometry
    trip.legs[0].maneuvers[]       instruction, length (km), begin_shape_index, type
    trip.summary                   length (km), time (s), ascent (m), descent (m)
    trip.locations[].name          optional names for the summary text
"""

import logging
from typing import Any, Protocol

import requests

from trail_navigator.constants import RoutingConfig
from trail_navigator.core.polyline_codec import PolylineCodec
from trail_navigator.model.coordinate import Coordinate
from trail_navigator.model.route import ComputedRoute, TurnInstruction, TurnType
from trail_navigator.routing.errors import RoutingError, RoutingErrorKind

logger = logging.getLogger(__name__)

# Valhalla maneuver type codes
MANEUVER_TYPES: dict[int, TurnType] = {
    0: TurnType.OTHER,  # None
    1: TurnType.DEPART,  # Start
    2: TurnType.DEPART,  # Start right
    3: TurnType.DEPART,  # Start left
    4: TurnType.DESTINATION,
    5: TurnType.DESTINATION,  # Destination right
    6: TurnType.DESTINATION,  # Destination left
    7: TurnType.STRAIGHT,  # Becomes
    8: TurnType.STRAIGHT,  # Continue
    9: TurnType.SLIGHT_RIGHT,
    10: TurnType.RIGHT,
    11: TurnType.SHARP_RIGHT,
    12: TurnType.U_TURN,  # U-turn right
    13: TurnType.U_TURN,  # U-turn left
    14: TurnType.SHARP_LEFT,
    15: TurnType.LEFT,
    16: TurnType.SLIGHT_LEFT,
    17: TurnType.STRAIGHT,  # Ramp straight
    18: TurnType.SLIGHT_RIGHT,  # Ramp right
    19: TurnType.SLIGHT_LEFT,  # Ramp left
    24: TurnType.STRAIGHT,  # Merge
    30: TurnType.FERRY,  # Ferry enter
    31: TurnType.FERRY,  # Ferry exit
}


class Router(Protocol):
    """Anything that can turn an origin/destination pair into a route."""

    def compute_route(self, origin: Coordinate, destination: Coordinate) -> ComputedRoute: ...


def map_maneuver_type(code: int) -> TurnType:
    """Map a Valhalla maneuver type code to TurnType (unknown codes -> OTHER)."""
    return MANEUVER_TYPES.get(code, TurnType.OTHER)


def build_request_body(
    origin: Coordinate,
    destination: Coordinate,
    language: str = RoutingConfig.LANGUAGE,
) -> dict[str, Any]:
    """JSON body for a pedestrian route preferring trails."""
    return {
        "locations": [
            {"lat": origin.lat, "lon": origin.lon},
            {"lat": destination.lat, "lon": destination.lon},
        ],
        "costing": RoutingConfig.COSTING,
        "costing_options": {
            RoutingConfig.COSTING: {"use_trails": RoutingConfig.USE_TRAILS},
        },
        "directions_options": {
            "language": language,
            "units": RoutingConfig.UNITS,
        },
        "directions_type": RoutingConfig.DIRECTIONS_TYPE,
    }


def _number(value: Any) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return 0.0


def parse_route_response(payload: Any) -> ComputedRoute:
    """Map a Valhalla /route response onto ComputedRoute.

    Instruction distances are the cumulative maneuver lengths before each
    maneuver, i.e. where along the route the maneuver starts.

    Raises:
        RoutingError: DECODING if the trip, first leg, shape or summary is
            missing or a maneuver or location is not an object; NO_ROUTE if the
            shape decodes to no coordinates.
    """
    try:
        trip = payload["trip"]
        first_leg = trip["legs"][0]
        shape = first_leg["shape"]
        summary = trip["summary"]
    except (KeyError, IndexError, TypeError) as exc:
        raise RoutingError(RoutingErrorKind.DECODING) from exc
    if not isinstance(first_leg, dict) or not isinstance(shape, str) or not isinstance(summary, dict):
        raise RoutingError(RoutingErrorKind.DECODING)
    maneuvers = first_leg.get("maneuvers") or []
    locations = trip.get("locations") or []
    if not isinstance(maneuvers, list) or not all(isinstance(m, dict) for m in maneuvers):
        raise RoutingError(RoutingErrorKind.DECODING)
    if not isinstance(locations, list) or not all(isinstance(loc, dict) for loc in locations):
        raise RoutingError(RoutingErrorKind.DECODING)

    coordinates = PolylineCodec.decode(shape)
    if not coordinates:
        raise RoutingError(RoutingErrorKind.NO_ROUTE)

    instructions: list[TurnInstruction] = []
    cumulative_distance = 0.0
    for maneuver in maneuvers:
        begin_index = maneuver.get("begin_shape_index")
        if not isinstance(begin_index, int) or begin_index < 0:
            begin_index = 0
        type_code = maneuver.get("type")

        instructions.append(
            TurnInstruction(
                text=maneuver.get("instruction") or "",
                distance=cumulative_distance,
                coordinate=coordinates[min(begin_index, len(coordinates) - 1)],
                type=map_maneuver_type(type_code if isinstance(type_code, int) else 0),
            )
        )
        cumulative_distance += _number(maneuver.get("length")) * RoutingConfig.KM_TO_M

    names = [location.get("name") for location in locations]
    summary_text = " - ".join(name for name in names if isinstance(name, str) and name)

    return ComputedRoute(
        coordinates=coordinates,
        distance=_number(summary.get("length")) * RoutingConfig.KM_TO_M,
        duration=_number(summary.get("time")),
        ascent=_number(summary.get("ascent")),
        descent=_number(summary.get("descent")),
        instructions=instructions,
        summary=summary_text,
    )


class ValhallaRouter:
    """Thin HTTP client for a Valhalla /route endpoint.

    Example:
        router = ValhallaRouter()
        route = router.compute_route(origin, destination)
    """

    def __init__(
        self,
        base_url: str = RoutingConfig.BASE_URL,
        timeout_s: float = RoutingConfig.TIMEOUT_S,
        language: str = RoutingConfig.LANGUAGE,
    ):
        self.base_url = base_url
        self.timeout_s = timeout_s
        self.language = language

    def compute_route(self, origin: Coordinate, destination: Coordinate) -> ComputedRoute:
        """POST a route request and parse the answer.

        Raises:
            RoutingError: TIMEOUT, OFFLINE, RATE_LIMITED (429), NO_ROUTE (400 or
                empty shape), SERVER_ERROR (other non-200) or DECODING.
        """
        body = build_request_body(origin, destination, language=self.language)
        logger.info(f"Requesting route {origin} -> {destination} from {self.base_url}")

        try:
            response = requests.post(
                self.base_url,
                json=body,
                headers={"User-Agent": RoutingConfig.USER_AGENT},
                timeout=self.timeout_s,
            )
        except requests.Timeout as exc:
            raise RoutingError(RoutingErrorKind.TIMEOUT) from exc
        except requests.RequestException as exc:
            raise RoutingError(RoutingErrorKind.OFFLINE) from exc

        if response.status_code == 429:
            raise RoutingError(RoutingErrorKind.RATE_LIMITED)
        if response.status_code == 400:
            raise RoutingError(RoutingErrorKind.NO_ROUTE)
        if response.status_code != 200:
            raise RoutingError(RoutingErrorKind.SERVER_ERROR, status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as exc:
            raise RoutingError(RoutingErrorKind.DECODING) from exc

        route = parse_route_response(payload)
        logger.info(
            f"Route received: {len(route.coordinates)} points, {route.distance:.0f}m, "
            f"{len(route.instructions)} instructions"
        )
        return route
