"""Shared test helpers for Make Homer Proud."""

from __future__ import annotations

from datetime import datetime, timezone

from homerproud.api.client import ApiError
from homerproud.api.models import (
    Coach,
    PreferencesUpdate,
    Session,
    SessionType,
    TodaySessions,
    UserPreferences,
    UserStats,
)
from homerproud.timer.engine import TimerEngine

FIXED_NOW = datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc)


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


def make_coach(id: int = 1, name: str = "Athena", **overrides) -> Coach:
    data = dict(
        id=id,
        name=name,
        domain="Wisdom & Strategy",
        icon="owl",
        coaching_style="Calm and strategic.",
        focus_messages=(f"{name} focus",),
        break_messages=(f"{name} break",),
        session_start_messages=(f"{name} start",),
    )
    data.update(overrides)
    return Coach(**data)


class FakeApi:
    """In-memory stand-in for ``ApiClient``.

    Records every call in ``calls``.  Put a method name in ``failing``
    to make that method raise a network ``ApiError``.
    """

    def __init__(self, coaches=None, preferences=None, today_count=0):
        self.coaches: list[Coach] = list(
            coaches if coaches is not None
            else [make_coach(1, "Athena"), make_coach(2, "Zeus"), make_coach(3, "Ares")]
        )
        self.prefs = preferences or UserPreferences()
        self.today_count = today_count
        self.healthy = True
        self.failing: set[str] = set()
        self.calls: list[tuple] = []
        self._next_id = 100

    def _record(self, name, *args):
        self.calls.append((name, *args))
        if name in self.failing:
            raise ApiError.network(ConnectionError(f"{name} is down"))

    def called(self, name) -> list[tuple]:
        return [c for c in self.calls if c[0] == name]

    # ── coaches ──────────────────────────────────────────────────────

    def list_gods(self):
        self._record("list_gods")
        return list(self.coaches)

    def get_god(self, god_id):
        self._record("get_god", god_id)
        for coach in self.coaches:
            if coach.id == god_id:
                return coach
        raise ApiError.server(404)

    # ── sessions ─────────────────────────────────────────────────────

    def create_session(self, god_id, session_type, duration_seconds, started_at):
        self._record("create_session", god_id, session_type, duration_seconds, started_at)
        self._next_id += 1
        return Session(
            id=self._next_id,
            god_id=god_id,
            session_type=session_type.api_category,
            duration_seconds=duration_seconds,
            started_at=started_at,
        )

    def complete_session(self, session_id, completed_at=None):
        self._record("complete_session", session_id, completed_at)
        self.today_count += 1
        return Session(
            id=session_id, god_id=1, session_type="focus",
            duration_seconds=SessionType.FOCUS.default_duration,
            started_at=FIXED_NOW, completed_at=completed_at, was_completed=True,
        )

    def today_sessions(self):
        self._record("today_sessions")
        return TodaySessions(count=self.today_count)

    # ── stats / preferences ──────────────────────────────────────────

    def stats(self):
        self._record("stats")
        return UserStats(
            total_sessions=12, total_focus_minutes=125, current_streak=3,
            last_session_date="2026-03-01",
            sessions_by_god={"Athena": 7, "Zeus": 5},
        )

    def preferences(self):
        self._record("preferences")
        return self.prefs

    def update_preferences(self, update: PreferencesUpdate):
        self._record("update_preferences", update)
        payload = update.to_payload()
        self.prefs = UserPreferences(
            selected_god_id=payload.get("selected_god_id", self.prefs.selected_god_id),
            favorite_god_ids=tuple(
                payload.get("favorite_god_ids", self.prefs.favorite_god_ids)
            ),
            auto_select_favorites=payload.get(
                "auto_select_favorites", self.prefs.auto_select_favorites,
            ),
        )
        return self.prefs

    def toggle_favorite(self, god_id):
        self._record("toggle_favorite", god_id)
        favs = list(self.prefs.favorite_god_ids)
        if god_id in favs:
            favs.remove(god_id)
        else:
            favs.append(god_id)
        self.prefs = UserPreferences(
            selected_god_id=self.prefs.selected_god_id,
            favorite_god_ids=tuple(favs),
            auto_select_favorites=self.prefs.auto_select_favorites,
        )
        return self.prefs

    def set_selected_god(self, god_id):
        self._record("set_selected_god", god_id)
        self.prefs = UserPreferences(
            selected_god_id=god_id,
            favorite_god_ids=self.prefs.favorite_god_ids,
            auto_select_favorites=self.prefs.auto_select_favorites,
        )
        return self.prefs

    def check_health(self):
        self._record("check_health")
        return self.healthy


class DeferredTaskRunner:
    """Queues jobs until ``flush()``, to simulate slow responses."""

    def __init__(self):
        self.pending: list[tuple] = []

    def submit(self, job, on_success=None, on_error=None, *, description="task"):
        self.pending.append((job, on_success, on_error))

    def flush(self) -> None:
        pending, self.pending = self.pending, []
        for job, on_success, on_error in pending:
            try:
                result = job()
            except Exception as exc:
                if on_error is not None:
                    on_error(exc)
                continue
            if on_success is not None:
                on_success(result)


def run_ticks(engine: TimerEngine, count: int) -> None:
    for _ in range(count):
        engine._on_tick()


def complete_phase(engine: TimerEngine) -> None:
    """Fast-complete the current phase by jumping to the last tick."""
    engine._remaining = 1
    engine._on_tick()
