"""Stats tab: totals, streak, sessions by coach, and today's log.

Everything comes from the server.  The widget has three faces:
loading, error (with a Retry button), and the dashboard itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QLabel, QPushButton,
    QFrame, QScrollArea, QStackedWidget, QProgressBar,
)

from ..api.client import ApiClient
from ..api.models import Coach, TodaySessions, UserStats
from ..tasks import TaskRunner
from .coach_icon import CoachIcon
from .styles import theme_for

logger = logging.getLogger(__name__)


# ── format helpers ───────────────────────────────────────────────────────


def format_focus_minutes(total_minutes: int) -> str:
    """'45m', '2h 5m'."""
    if total_minutes <= 0:
        return "0m"
    hours, minutes = divmod(total_minutes, 60)
    if hours == 0:
        return f"{minutes}m"
    return f"{hours}h {minutes}m"


def sessions_by_coach(stats: UserStats) -> list[tuple[str, int]]:
    """Per-coach counts, most used first, ties by name."""
    return sorted(stats.sessions_by_god.items(), key=lambda kv: (-kv[1], kv[0]))


@dataclass
class StatsSnapshot:
    stats: UserStats
    today: TodaySessions
    coaches: list[Coach]

    def coach_name(self, coach_id: int) -> str:
        for coach in self.coaches:
            if coach.id == coach_id:
                return coach.name
        return "Unknown"


def load_snapshot(api: ApiClient) -> StatsSnapshot:
    """Blocking; run it in a task."""
    return StatsSnapshot(api.stats(), api.today_sessions(), api.list_gods())


# ═══════════════════════════════════════════════════════════════════════════
#  STAT CARD
# ═══════════════════════════════════════════════════════════════════════════


class StatCard(QFrame):
    """A small stat display: big value, caption underneath."""

    def __init__(
        self, title: str, value: str = "0", parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.setObjectName("card")
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 14, 12, 14)
        layout.setSpacing(4)

        self._value_lbl = QLabel(value, self)
        self._value_lbl.setObjectName("accentLabel")
        self._value_lbl.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._value_lbl.setStyleSheet("font-size: 26px;")

        self._title_lbl = QLabel(title, self)
        self._title_lbl.setObjectName("mutedLabel")
        self._title_lbl.setAlignment(Qt.AlignmentFlag.AlignCenter)

        layout.addWidget(self._value_lbl)
        layout.addWidget(self._title_lbl)

    @property
    def value(self) -> str:
        return self._value_lbl.text()

    def set_value(self, value: str) -> None:
        self._value_lbl.setText(value)


# ═══════════════════════════════════════════════════════════════════════════
#  STATS WIDGET
# ═══════════════════════════════════════════════════════════════════════════


class StatsWidget(QWidget):
    """Statistics dashboard backed by ``GET /stats`` and friends."""

    PAGE_LOADING, PAGE_ERROR, PAGE_CONTENT = range(3)

    def __init__(
        self,
        api: ApiClient,
        runner: Any = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._api = api
        self._runner = runner if runner is not None else TaskRunner(self)
        self._loading = False
        self._build_ui()

    # ── build ─────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        self._stack = QStackedWidget(self)
        root.addWidget(self._stack)

        # ── loading ──────────────────────────────────────────────────
        loading = QLabel("Loading statistics…")
        loading.setObjectName("mutedLabel")
        loading.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._stack.addWidget(loading)

        # ── error ────────────────────────────────────────────────────
        error_page = QWidget()
        error_layout = QVBoxLayout(error_page)
        error_layout.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._error_label = QLabel("")
        self._error_label.setObjectName("errorLabel")
        self._error_label.setWordWrap(True)
        self._error_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        retry = QPushButton("Retry")
        retry.setObjectName("primaryButton")
        retry.clicked.connect(self.refresh)
        error_layout.addWidget(self._error_label)
        error_layout.addWidget(retry, alignment=Qt.AlignmentFlag.AlignCenter)
        self._stack.addWidget(error_page)

        # ── content ──────────────────────────────────────────────────
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        content = QWidget()
        layout = QVBoxLayout(content)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(20)

        cards = QHBoxLayout()
        cards.setSpacing(16)
        self._sessions_card = StatCard("Sessions")
        self._focus_card = StatCard("Focus Time")
        self._streak_card = StatCard("Day Streak")
        for card in (self._sessions_card, self._focus_card, self._streak_card):
            cards.addWidget(card)
        layout.addLayout(cards)

        self._last_session = QLabel("")
        self._last_session.setObjectName("mutedLabel")
        layout.addWidget(self._last_session)

        layout.addWidget(self._section_label("Sessions by God"))
        self._by_coach = QGridLayout()
        self._by_coach.setHorizontalSpacing(12)
        self._by_coach.setVerticalSpacing(8)
        layout.addLayout(self._by_coach)

        layout.addWidget(self._section_label("Today"))
        self._today_rows = QVBoxLayout()
        self._today_rows.setSpacing(4)
        layout.addLayout(self._today_rows)

        layout.addStretch()
        scroll.setWidget(content)
        self._stack.addWidget(scroll)

    @staticmethod
    def _section_label(text: str) -> QLabel:
        lbl = QLabel(text)
        lbl.setStyleSheet("font-size: 16px; font-weight: 700;")
        return lbl

    # ── loading ───────────────────────────────────────────────────────

    @property
    def current_page(self) -> int:
        return self._stack.currentIndex()

    @property
    def error_text(self) -> str:
        return self._error_label.text()

    def refresh(self) -> None:
        """Reload everything from the server."""
        if self._loading:
            return
        self._loading = True
        self._stack.setCurrentIndex(self.PAGE_LOADING)
        api = self._api
        self._runner.submit(
            lambda: load_snapshot(api), self._on_loaded, self._on_failed,
            description="load stats",
        )

    def _on_failed(self, exc: Exception) -> None:
        logger.warning("Failed to load stats: %s", exc)
        self._loading = False
        self._error_label.setText(str(exc))
        self._stack.setCurrentIndex(self.PAGE_ERROR)

    def _on_loaded(self, snapshot: StatsSnapshot) -> None:
        self._loading = False
        stats = snapshot.stats
        self._sessions_card.set_value(str(stats.total_sessions))
        self._focus_card.set_value(format_focus_minutes(stats.total_focus_minutes))
        self._streak_card.set_value(str(stats.current_streak))
        self._last_session.setText(
            f"Last session: {stats.last_session_date}"
            if stats.last_session_date else "No sessions yet. Summon a god and begin!"
        )
        self._fill_by_coach(stats)
        self._fill_today(snapshot)
        self._stack.setCurrentIndex(self.PAGE_CONTENT)

    # ── sections ──────────────────────────────────────────────────────

    @staticmethod
    def _clear(layout) -> None:
        while layout.count():
            item = layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.setParent(None)
                widget.deleteLater()

    def _fill_by_coach(self, stats: UserStats) -> None:
        self._clear(self._by_coach)
        rows = sessions_by_coach(stats)
        top = max((count for _, count in rows), default=0)
        for row, (name, count) in enumerate(rows):
            self._by_coach.addWidget(CoachIcon(name, 28), row, 0)
            self._by_coach.addWidget(QLabel(name), row, 1)
            bar = QProgressBar()
            bar.setRange(0, max(1, top))
            bar.setValue(count)
            bar.setTextVisible(False)
            bar.setFixedHeight(8)
            bar.setStyleSheet(
                f"QProgressBar::chunk {{ background-color: {theme_for(name).primary};"
                f" border-radius: 4px; }}"
            )
            self._by_coach.addWidget(bar, row, 2)
            self._by_coach.addWidget(QLabel(str(count)), row, 3)

    def _fill_today(self, snapshot: StatsSnapshot) -> None:
        self._clear(self._today_rows)
        if not snapshot.today.sessions:
            empty = QLabel("No sessions yet today.")
            empty.setObjectName("mutedLabel")
            self._today_rows.addWidget(empty)
            return
        for sess in snapshot.today.sessions:
            name = snapshot.coach_name(sess.god_id)
            started = sess.started_at.astimezone().strftime("%H:%M")
            status = "completed" if sess.was_completed else "unfinished"
            minutes = sess.duration_seconds // 60
            row = QLabel(
                f"{started}  ·  {sess.session_type.title()} {minutes}m  ·  "
                f"{name}  ·  {status}"
            )
            self._today_rows.addWidget(row)

    @property
    def card_values(self) -> tuple[str, str, str]:
        return (
            self._sessions_card.value,
            self._focus_card.value,
            self._streak_card.value,
        )
