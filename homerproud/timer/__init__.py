"""Timer package."""

from .engine import (
    TimerEngine,
    TimerState,
    LONG_BREAK_EVERY,
    MESSAGE_REFRESH_SECONDS,
)
from ..api.models import SessionType, DEFAULT_DURATIONS

__all__ = [
    "TimerEngine",
    "TimerState",
    "SessionType",
    "DEFAULT_DURATIONS",
    "LONG_BREAK_EVERY",
    "MESSAGE_REFRESH_SECONDS",
]
