"""API package."""

from .client import ApiClient, ApiError, ApiErrorKind, DEFAULT_BASE_URL
from .models import (
    Coach,
    PreferencesUpdate,
    Session,
    SessionType,
    TodaySessions,
    UserPreferences,
    UserStats,
    DEFAULT_DURATIONS,
)

__all__ = [
    "ApiClient",
    "ApiError",
    "ApiErrorKind",
    "DEFAULT_BASE_URL",
    "Coach",
    "PreferencesUpdate",
    "Session",
    "SessionType",
    "TodaySessions",
    "UserPreferences",
    "UserStats",
    "DEFAULT_DURATIONS",
]
