"""Routing failures surfaced to the navigation session."""

from enum import Enum
from typing import Optional


class RoutingErrorKind(Enum):
    """Why a route could not be computed."""

    NO_ROUTE = "no_route"
    OFFLINE = "offline"
    TIMEOUT = "timeout"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    DECODING = "decoding"


_MESSAGES = {
    RoutingErrorKind.NO_ROUTE: "No route found between the selected points",
    RoutingErrorKind.OFFLINE: "The routing service is unreachable (offline?)",
    RoutingErrorKind.TIMEOUT: "The routing service did not answer in time",
    RoutingErrorKind.RATE_LIMITED: "Too many routing requests, try again shortly",
    RoutingErrorKind.SERVER_ERROR: "The routing service failed",
    RoutingErrorKind.DECODING: "The routing service returned an unreadable response",
}


class RoutingError(RuntimeError):
    """Typed failure from the external routing service.

    Attributes:
        kind: Failure category
        status_code: HTTP status for SERVER_ERROR, else None
    """

    def __init__(self, kind: RoutingErrorKind, status_code: Optional[int] = None):
        self.kind = kind
        self.status_code = status_code
        super().__init__(self.message)

    @property
    def message(self) -> str:
        """Human-readable cause."""
        text = _MESSAGES[self.kind]
        if self.status_code is not None:
            return f"{text} (HTTP {self.status_code})"
        return text
