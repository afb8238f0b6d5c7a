"""Session package."""

from .engine import SessionEngine, SessionSnapshot, TICK_INTERVAL_MS
from .state import (
    CueKind,
    Event,
    InvalidTransition,
    Phase,
    SessionState,
    INITIAL_STATE,
    transition,
)

__all__ = [
    "SessionEngine",
    "SessionSnapshot",
    "TICK_INTERVAL_MS",
    "CueKind",
    "Event",
    "InvalidTransition",
    "Phase",
    "SessionState",
    "INITIAL_STATE",
    "transition",
]
