"""Plugin session: state machine, input debouncing and message handling."""

from circlr.core.session.debounce import Debouncer
from circlr.core.session.session import RadialSession
from circlr.core.session.state import Committing, Idle, Previewing, SessionState

__all__ = [
    "Committing",
    "Debouncer",
    "Idle",
    "Previewing",
    "RadialSession",
    "SessionState",
]
