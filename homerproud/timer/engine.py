"""Timer state machine for Make Homer Proud.

States
------
STOPPED   Not counting.  The only state in which the phase may change.
RUNNING   Counting down once per second.
PAUSED    Frozen, remembers the remaining time.

Transitions
-----------
STOPPED → RUNNING     (start; creates a server session)
PAUSED  → RUNNING     (start; resumes, no new server session)
RUNNING → PAUSED      (pause)
RUNNING | PAUSED → STOPPED   (reset; discards the server session reference)
RUNNING → STOPPED     (countdown hits 0; completes the server session
                       and advances to the next phase)

Phases
------
FOCUS → SHORT_BREAK, or LONG_BREAK when ``(today_session_count + 1)``
is a multiple of ``LONG_BREAK_EVERY``.  Any break → FOCUS.

Network side effects go through a task runner and never gate a
transition: if the server is down the timer keeps working.
"""

from __future__ import annotations

import logging
import random
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..api.client import ApiClient, ApiError
from ..api.models import Coach, Session, SessionType, TodaySessions, DEFAULT_DURATIONS
from ..coaches import resolve_launch_coach
from ..tasks import TaskRunner

logger = logging.getLogger(__name__)


# ── enums ─────────────────────────────────────────────────────────────────


class TimerState(Enum):
    STOPPED = "stopped"
    RUNNING = "running"
    PAUSED = "paused"

    @property
    def is_active(self) -> bool:
        return self is TimerState.RUNNING

    @property
    def can_start(self) -> bool:
        return self is not TimerState.RUNNING

    @property
    def can_pause(self) -> bool:
        return self is TimerState.RUNNING

    @property
    def can_reset(self) -> bool:
        return self is not TimerState.STOPPED


# ── constants ─────────────────────────────────────────────────────────────

LONG_BREAK_EVERY = 4
MESSAGE_REFRESH_SECONDS = 5 * 60
PAUSED_MESSAGE = "Paused. Ready when you are."
BREAK_MESSAGE = "Great work! Time for a break."


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine(QObject):
    """Qt-based Pomodoro engine coached by a god.

    *api* is anything with the ``ApiClient`` session methods; *runner* is
    anything with a ``submit(job, on_success, on_error)`` method.  Both
    are injected so tests can swap in fakes.

    Signals
    -------
    tick(remaining_seconds: int)
        Emitted every second while running.
    state_changed(new_state: TimerState)
        Emitted on every state transition.
    session_type_changed(session_type: SessionType)
        Emitted whenever the phase changes.
    message_changed(message: str)
        The coach said something new.
    coach_changed(coach: Coach)
        A coach was assigned.
    today_count_changed(count: int)
        Fresh number of sessions logged today on the server.
    session_completed(data: dict)
        Emitted once when a countdown reaches zero.  Keys:
        ``session_type``, ``server_id``, ``duration_seconds``,
        ``started_at``, ``completed_at``, ``coach_id``.
    """

    tick = pyqtSignal(int)
    state_changed = pyqtSignal(object)
    session_type_changed = pyqtSignal(object)
    message_changed = pyqtSignal(str)
    coach_changed = pyqtSignal(object)
    today_count_changed = pyqtSignal(int)
    session_completed = pyqtSignal(object)

    def __init__(
        self,
        api: ApiClient,
        runner: Any = None,
        parent: QObject | None = None,
        *,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        super().__init__(parent)
        self._api = api
        self._runner = runner if runner is not None else TaskRunner(self)
        self._rng = rng or random.Random()
        self._clock = clock

        # ── phase / countdown ─────────────────────────────────────────
        self._state: TimerState = TimerState.STOPPED
        self._session_type: SessionType = SessionType.FOCUS
        self._remaining: int = DEFAULT_DURATIONS[SessionType.FOCUS]

        # ── coach ─────────────────────────────────────────────────────
        self._coach: Coach | None = None
        self._message: str = ""

        # ── server bookkeeping ────────────────────────────────────────
        self._server_session_id: int | None = None
        self._started_at: datetime | None = None
        self._today_count: int = 0
        # bumped on every fresh start / reset so late responses for an
        # abandoned run are dropped
        self._run_token: int = 0

        # ── Qt timer ──────────────────────────────────────────────────
        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(1000)
        self._qt_timer.timeout.connect(self._on_tick)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def session_type(self) -> SessionType:
        return self._session_type

    @property
    def remaining(self) -> int:
        """Seconds left on the clock."""
        return self._remaining

    @property
    def total_duration(self) -> int:
        return self._session_type.default_duration

    @property
    def progress(self) -> float:
        """0.0 → 1.0 progress through the current phase."""
        total = self.total_duration
        if total <= 0:
            return 0.0
        return max(0.0, min(1.0, 1.0 - self._remaining / total))

    @property
    def time_string(self) -> str:
        minutes, seconds = divmod(max(0, self._remaining), 60)
        return f"{minutes:02d}:{seconds:02d}"

    @property
    def is_running(self) -> bool:
        return self._state.is_active

    @property
    def coach(self) -> Coach | None:
        return self._coach

    @property
    def current_message(self) -> str:
        return self._message

    @property
    def current_session_id(self) -> int | None:
        """Server id of the session being timed, once the server answered."""
        return self._server_session_id

    @property
    def session_started_at(self) -> datetime | None:
        return self._started_at

    @property
    def today_session_count(self) -> int:
        return self._today_count

    # ══════════════════════════════════════════════════════════════════
    #  COACH
    # ══════════════════════════════════════════════════════════════════

    def set_coach(self, coach: Coach) -> None:
        """Assign *coach* and greet with one of its start messages."""
        self._coach = coach
        self.coach_changed.emit(coach)
        self._set_message(coach.random_start_message(self._rng))

    def load_coach_from_preferences(self) -> None:
        """Resolve the launch coach in the background (see ``coaches``)."""

        def apply(coach: Coach | None) -> None:
            if coach is None:
                logger.warning("No coach available from the server")
                return
            logger.info("Coach for this session: %s", coach.name)
            self.set_coach(coach)

        self._runner.submit(
            lambda: resolve_launch_coach(self._api, self._rng),
            apply,
            description="load coach",
        )

    def load_today_sessions(self) -> None:
        self._runner.submit(
            self._api.today_sessions,
            self._apply_today,
            description="load today's sessions",
        )

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> None:
        """Start a fresh phase from STOPPED, or resume from PAUSED."""
        if not self._state.can_start:
            return

        if self._state == TimerState.STOPPED:
            self._run_token += 1
            self._started_at = self._clock()
            self._request_session_create()

        self._set_state(TimerState.RUNNING)
        if self._coach is not None:
            self._set_message(self._coach.random_message(self._session_type, self._rng))
        self._qt_timer.start()

    def pause(self) -> None:
        if not self._state.can_pause:
            return
        self._qt_timer.stop()
        self._set_state(TimerState.PAUSED)
        self._set_message(PAUSED_MESSAGE)

    def reset(self) -> None:
        """Abandon the current phase.  The server session is left unfinished."""
        if not self._state.can_reset:
            return
        self._qt_timer.stop()
        self._run_token += 1
        self._server_session_id = None
        self._started_at = None
        self._remaining = self._session_type.default_duration
        self._set_state(TimerState.STOPPED)
        self.tick.emit(self._remaining)
        if self._coach is not None:
            self._set_message(self._coach.random_start_message(self._rng))

    def set_session_type(self, session_type: SessionType) -> None:
        """Pick the phase to run next.  Ignored unless STOPPED."""
        if self._state != TimerState.STOPPED:
            return
        self._session_type = session_type
        self._remaining = session_type.default_duration
        self.session_type_changed.emit(session_type)
        self.tick.emit(self._remaining)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: timer mechanics
    # ══════════════════════════════════════════════════════════════════

    def _on_tick(self) -> None:
        if self._state != TimerState.RUNNING:
            return
        if self._remaining <= 0:
            self._complete_phase()
            return

        self._remaining -= 1
        self.tick.emit(self._remaining)

        if self._remaining == 0:
            self._complete_phase()
        elif self._remaining % MESSAGE_REFRESH_SECONDS == 0 and self._coach is not None:
            self._set_message(self._coach.random_message(self._session_type, self._rng))

    def _complete_phase(self) -> None:
        self._qt_timer.stop()
        completed_type = self._session_type
        completed_id = self._server_session_id
        started_at = self._started_at
        completed_at = self._clock()
        # decided before the refresh below can update the cached count
        next_type = self._next_session_type(completed_type)

        self._set_state(TimerState.STOPPED)
        self._request_session_complete(completed_id, completed_at)

        self.session_completed.emit({
            "session_type": completed_type,
            "server_id": completed_id,
            "duration_seconds": completed_type.default_duration,
            "started_at": started_at,
            "completed_at": completed_at,
            "coach_id": self._coach.id if self._coach else None,
        })

        self._run_token += 1
        self._server_session_id = None
        self._started_at = None

        self._session_type = next_type
        self._remaining = self._session_type.default_duration
        self.session_type_changed.emit(self._session_type)
        self.tick.emit(self._remaining)

        if self._session_type.is_break:
            self._set_message(BREAK_MESSAGE)
        elif self._coach is not None:
            self._set_message(self._coach.random_start_message(self._rng))

        logger.info(
            "%s complete, next up: %s",
            completed_type.display_name, self._session_type.display_name,
        )

    def _next_session_type(self, completed: SessionType) -> SessionType:
        if completed is not SessionType.FOCUS:
            return SessionType.FOCUS
        if (self._today_count + 1) % LONG_BREAK_EVERY == 0:
            return SessionType.LONG_BREAK
        return SessionType.SHORT_BREAK

    def _set_state(self, new_state: TimerState) -> None:
        self._state = new_state
        self.state_changed.emit(new_state)

    def _set_message(self, message: str) -> None:
        self._message = message
        self.message_changed.emit(message)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: server side effects
    # ══════════════════════════════════════════════════════════════════

    def _request_session_create(self) -> None:
        if self._coach is None or self._started_at is None:
            logger.info("No coach yet, session will not be logged")
            return
        api = self._api
        coach_id = self._coach.id
        session_type = self._session_type
        started_at = self._started_at
        token = self._run_token

        def apply(session: Session) -> None:
            if token != self._run_token:
                logger.debug("Dropping session %s for an abandoned run", session.id)
                return
            self._server_session_id = session.id

        self._runner.submit(
            lambda: api.create_session(
                coach_id, session_type, session_type.default_duration, started_at,
            ),
            apply,
            description="create session",
        )

    def _request_session_complete(
        self, session_id: int | None, completed_at: datetime,
    ) -> None:
        api = self._api

        def job() -> TodaySessions:
            if session_id is not None:
                try:
                    api.complete_session(session_id, completed_at)
                except ApiError as exc:
                    logger.warning("Failed to complete session %s: %s", session_id, exc)
            return api.today_sessions()

        self._runner.submit(job, self._apply_today, description="complete session")

    def _apply_today(self, today: TodaySessions) -> None:
        self._today_count = today.count
        self.today_count_changed.emit(today.count)
