"""External routing service contract.

- RoutingError / RoutingErrorKind: Typed upstream failures
- ValhallaRouter: Thin HTTP client for a Valhalla /route endpoint
- build_request_body / parse_route_response / map_maneuver_type: Wire format
"""

from trail_navigator.routing.errors import RoutingError, RoutingErrorKind
from trail_navigator.routing.valhalla import (
    Router,
    ValhallaRouter,
    build_request_body,
    map_maneuver_type,
    parse_route_response,
)

__all__ = [
    "RoutingError",
    "RoutingErrorKind",
    "Router",
    "ValhallaRouter",
    "build_request_body",
    "map_maneuver_type",
    "parse_route_response",
]
