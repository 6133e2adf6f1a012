"""Navigation session lifecycle.

- NavigationStateMachine / NavigationContext: python-statemachine model
- NavigationSession: Facade with single-writer position updates
"""

from trail_navigator.session.navigation_session import NavigationSession
from trail_navigator.session.state_machine import (
    NavigationContext,
    NavigationStateMachine,
    SessionLogListener,
)

__all__ = [
    "NavigationSession",
    "NavigationStateMachine",
    "NavigationContext",
    "SessionLogListener",
]
