"""Data objects exchanged with the Make Homer Proud server.

Everything here is plain data: the server owns sessions, preferences and
stats, the client only decodes what it receives and encodes what it
sends.  Field names on the wire are snake_case.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


# ── session type ─────────────────────────────────────────────────────────


class SessionType(Enum):
    FOCUS = "focus"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def default_duration(self) -> int:
        """Planned length of the phase in seconds."""
        return DEFAULT_DURATIONS[self]

    @property
    def api_category(self) -> str:
        """Value sent to the server: ``focus`` or ``break``."""
        return "focus" if self is SessionType.FOCUS else "break"

    @property
    def is_break(self) -> bool:
        return self is not SessionType.FOCUS


DEFAULT_DURATIONS: dict[SessionType, int] = {
    SessionType.FOCUS: 25 * 60,
    SessionType.SHORT_BREAK: 5 * 60,
    SessionType.LONG_BREAK: 15 * 60,
}

_DISPLAY_NAMES: dict[SessionType, str] = {
    SessionType.FOCUS: "Focus",
    SessionType.SHORT_BREAK: "Short Break",
    SessionType.LONG_BREAK: "Long Break",
}

FALLBACK_MESSAGE = "Keep going!"
FALLBACK_START_MESSAGE = "Let's begin!"


# ── dates ────────────────────────────────────────────────────────────────


def parse_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, with or without fractional seconds.

    The offset is required: a trailing ``Z`` or a numeric offset.
    """
    if not isinstance(value, str):
        raise TypeError(f"expected an ISO-8601 string, got {type(value).__name__}")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        raise ValueError(f"timestamp without a UTC offset: {value!r}")
    return parsed


def format_datetime(value: datetime) -> str:
    """Encode *value* as UTC ISO-8601 with a ``Z`` suffix.

    Naive datetimes are taken as local time.
    """
    utc = value.astimezone(timezone.utc)
    return utc.replace(tzinfo=None).isoformat(timespec="seconds") + "Z"


def _optional_datetime(value: Any) -> datetime | None:
    return None if value is None else parse_datetime(value)


def _object(data: Any, name: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise TypeError(f"{name} must be a JSON object, got {type(data).__name__}")
    return data


# ── coach ────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Coach:
    """A god acting as focus coach.  Immutable reference data."""

    id: int
    name: str
    domain: str
    icon: str
    coaching_style: str
    focus_messages: tuple[str, ...] = ()
    break_messages: tuple[str, ...] = ()
    session_start_messages: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Coach:
        data = _object(data, cls.__name__)
        return cls(
            id=int(data["id"]),
            name=str(data["name"]),
            domain=str(data["domain"]),
            icon=str(data["icon"]),
            coaching_style=str(data["coaching_style"]),
            focus_messages=_strings(data.get("focus_messages", [])),
            break_messages=_strings(data.get("break_messages", [])),
            session_start_messages=_strings(data.get("session_start_messages", [])),
        )

    def random_message(
        self, session_type: SessionType, rng: random.Random | None = None,
    ) -> str:
        pool = self.break_messages if session_type.is_break else self.focus_messages
        return _pick(pool, FALLBACK_MESSAGE, rng)

    def random_start_message(self, rng: random.Random | None = None) -> str:
        return _pick(self.session_start_messages, FALLBACK_START_MESSAGE, rng)


def _strings(values: Any) -> tuple[str, ...]:
    if not isinstance(values, list):
        raise TypeError("message pool must be a list")
    return tuple(str(v) for v in values)


def _pick(pool: tuple[str, ...], fallback: str, rng: random.Random | None) -> str:
    if not pool:
        return fallback
    return (rng or random).choice(pool)


# ── sessions ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Session:
    id: int
    god_id: int
    session_type: str            # "focus" or "break"
    duration_seconds: int
    started_at: datetime
    completed_at: datetime | None = None
    was_completed: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Session:
        data = _object(data, cls.__name__)
        return cls(
            id=int(data["id"]),
            god_id=int(data["god_id"]),
            session_type=str(data["session_type"]),
            duration_seconds=int(data["duration_seconds"]),
            started_at=parse_datetime(data["started_at"]),
            completed_at=_optional_datetime(data.get("completed_at")),
            was_completed=bool(data.get("was_completed", False)),
        )


@dataclass(frozen=True)
class TodaySessions:
    count: int
    sessions: tuple[Session, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TodaySessions:
        data = _object(data, cls.__name__)
        return cls(
            count=int(data["count"]),
            sessions=tuple(Session.from_dict(s) for s in data.get("sessions", [])),
        )


# ── stats ────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class UserStats:
    total_sessions: int
    total_focus_minutes: int
    current_streak: int
    last_session_date: str | None = None
    sessions_by_god: dict[str, int] = field(default_factory=dict)
    id: int | None = None
    user_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserStats:
        data = _object(data, cls.__name__)
        by_god = data.get("sessions_by_god") or {}
        if not isinstance(by_god, dict):
            raise TypeError("sessions_by_god must be an object")
        return cls(
            total_sessions=int(data["total_sessions"]),
            total_focus_minutes=int(data["total_focus_minutes"]),
            current_streak=int(data["current_streak"]),
            last_session_date=data.get("last_session_date"),
            sessions_by_god={str(k): int(v) for k, v in by_god.items()},
            id=data.get("id"),
            user_id=data.get("user_id"),
        )


# ── preferences ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class UserPreferences:
    selected_god_id: int | None = None
    favorite_god_ids: tuple[int, ...] = ()
    auto_select_favorites: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    id: int | None = None
    user_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserPreferences:
        data = _object(data, cls.__name__)
        selected = data.get("selected_god_id")
        return cls(
            selected_god_id=None if selected is None else int(selected),
            favorite_god_ids=tuple(int(i) for i in data.get("favorite_god_ids", [])),
            auto_select_favorites=bool(data.get("auto_select_favorites", False)),
            created_at=_optional_datetime(data.get("created_at")),
            updated_at=_optional_datetime(data.get("updated_at")),
            id=data.get("id"),
            user_id=data.get("user_id"),
        )


@dataclass
class PreferencesUpdate:
    """Partial update for ``PUT /preferences``.  Unset fields are omitted."""

    selected_god_id: int | None = None
    favorite_god_ids: list[int] | None = None
    auto_select_favorites: bool | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if self.selected_god_id is not None:
            payload["selected_god_id"] = self.selected_god_id
        if self.favorite_god_ids is not None:
            payload["favorite_god_ids"] = list(self.favorite_god_ids)
        if self.auto_select_favorites is not None:
            payload["auto_select_favorites"] = self.auto_select_favorites
        return payload
