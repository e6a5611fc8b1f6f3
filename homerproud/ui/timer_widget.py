"""Timer screen shown in the Timer tab.

Layout (top → bottom):
    - Coach header (icon, name, domain) with a quick coach switcher
    - Message bubble with the coach's latest words
    - ProgressRing (centred)
    - Phase selector (Focus / Short Break / Long Break), only while stopped
    - Reset + Start/Pause buttons
    - Today's session count
"""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton,
    QFrame, QComboBox, QButtonGroup, QSizePolicy,
)

from ..api.models import Coach, SessionType
from ..coaches import CoachRoster
from ..timer.engine import TimerEngine, TimerState
from .coach_icon import CoachIcon
from .progress_ring import ProgressRing
from .styles import CoachTheme, DEFAULT_THEME, get_ring_colors, ring_key


RING_LABELS: dict[SessionType, str] = {
    SessionType.FOCUS:       "FOCUS",
    SessionType.SHORT_BREAK: "SHORT BREAK",
    SessionType.LONG_BREAK:  "LONG BREAK",
}


class TimerWidget(QWidget):
    """The main timer card shown in the Timer tab."""

    def __init__(
        self,
        engine: TimerEngine,
        roster: CoachRoster | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._engine = engine
        self._roster = roster
        self._ring_colors = get_ring_colors(DEFAULT_THEME)
        self._build_ui()
        self._connect_signals()
        self._on_coach_changed(engine.coach)
        self._on_message_changed(engine.current_message)
        self._on_today_count_changed(engine.today_session_count)
        self._on_state_changed(engine.state)

    # ── build ─────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        card = QFrame(self)
        card.setObjectName("card")
        root.addWidget(card)

        layout = QVBoxLayout(card)
        layout.setContentsMargins(32, 24, 32, 24)
        layout.setSpacing(14)
        layout.setAlignment(Qt.AlignmentFlag.AlignHCenter)

        # ── coach header ─────────────────────────────────────────────
        header = QHBoxLayout()
        header.setSpacing(12)
        self._coach_icon = CoachIcon(None, 56, card)
        header.addWidget(self._coach_icon)

        name_col = QVBoxLayout()
        name_col.setSpacing(0)
        self._coach_name = QLabel("Summoning a coach…", card)
        self._coach_name.setObjectName("accentLabel")
        self._coach_name.setStyleSheet("font-size: 18px;")
        self._coach_domain = QLabel("", card)
        self._coach_domain.setObjectName("mutedLabel")
        name_col.addWidget(self._coach_name)
        name_col.addWidget(self._coach_domain)
        header.addLayout(name_col)
        header.addStretch()

        self._coach_picker = QComboBox(card)
        self._coach_picker.setToolTip("Choose who coaches this session")
        self._coach_picker.setMinimumWidth(150)
        header.addWidget(self._coach_picker)
        layout.addLayout(header)

        # ── message bubble ───────────────────────────────────────────
        bubble = QFrame(card)
        bubble.setObjectName("bubble")
        bubble_layout = QVBoxLayout(bubble)
        bubble_layout.setContentsMargins(16, 12, 16, 12)
        self._message = QLabel("", bubble)
        self._message.setWordWrap(True)
        self._message.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._message.setStyleSheet("font-size: 15px; font-style: italic;")
        bubble_layout.addWidget(self._message)
        layout.addWidget(bubble)

        # ── ring ─────────────────────────────────────────────────────
        self._ring = ProgressRing(card)
        self._ring.setFixedSize(300, 300)
        self._ring.setSizePolicy(QSizePolicy.Policy.Fixed, QSizePolicy.Policy.Fixed)
        layout.addWidget(self._ring, alignment=Qt.AlignmentFlag.AlignHCenter)

        # ── phase selector ───────────────────────────────────────────
        phase_row = QHBoxLayout()
        phase_row.setSpacing(8)
        phase_row.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._phase_group = QButtonGroup(self)
        self._phase_group.setExclusive(True)
        self._phase_buttons: dict[SessionType, QPushButton] = {}
        for session_type in SessionType:
            btn = QPushButton(session_type.display_name, card)
            btn.setObjectName("phaseButton")
            btn.setCheckable(True)
            self._phase_group.addButton(btn)
            self._phase_buttons[session_type] = btn
            phase_row.addWidget(btn)
        layout.addLayout(phase_row)

        # ── controls ─────────────────────────────────────────────────
        btn_row = QHBoxLayout()
        btn_row.setSpacing(12)
        btn_row.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._reset_btn = QPushButton("Reset", card)
        self._reset_btn.setObjectName("dangerButton")
        self._start_pause_btn = QPushButton("Start", card)
        self._start_pause_btn.setObjectName("primaryButton")
        btn_row.addWidget(self._reset_btn)
        btn_row.addWidget(self._start_pause_btn)
        layout.addLayout(btn_row)

        self._today_label = QLabel("", card)
        self._today_label.setObjectName("mutedLabel")
        self._today_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._today_label)

    # ── signals ───────────────────────────────────────────────────────

    def _connect_signals(self) -> None:
        self._start_pause_btn.clicked.connect(self.toggle_start_pause)
        self._reset_btn.clicked.connect(self._engine.reset)
        for session_type, btn in self._phase_buttons.items():
            btn.clicked.connect(
                lambda _checked=False, t=session_type: self._engine.set_session_type(t)
            )
        self._coach_picker.activated.connect(self._on_coach_picked)

        self._engine.tick.connect(self._refresh_display)
        self._engine.state_changed.connect(self._on_state_changed)
        self._engine.session_type_changed.connect(self._on_session_type_changed)
        self._engine.message_changed.connect(self._on_message_changed)
        self._engine.coach_changed.connect(self._on_coach_changed)
        self._engine.today_count_changed.connect(self._on_today_count_changed)

        if self._roster is not None:
            self._roster.changed.connect(self._populate_coach_picker)
            self._populate_coach_picker()

    # ── slots ─────────────────────────────────────────────────────────

    def toggle_start_pause(self) -> None:
        if self._engine.is_running:
            self._engine.pause()
        else:
            self._engine.start()

    def _on_state_changed(self, state: TimerState) -> None:
        if state == TimerState.RUNNING:
            self._start_pause_btn.setText("Pause")
        elif state == TimerState.PAUSED:
            self._start_pause_btn.setText("Resume")
        else:
            self._start_pause_btn.setText("Start")
        self._reset_btn.setEnabled(state.can_reset)

        stopped = state == TimerState.STOPPED
        for btn in self._phase_buttons.values():
            btn.setEnabled(stopped)

        self._on_session_type_changed(self._engine.session_type)

    def _on_session_type_changed(self, session_type: SessionType) -> None:
        self._phase_buttons[session_type].setChecked(True)
        label = RING_LABELS[session_type]
        if self._engine.state == TimerState.PAUSED:
            label = "PAUSED"
        self._ring.set_label(label)
        self._ring.set_colors(
            *self._ring_colors[ring_key(self._engine.state, session_type)]
        )
        self._refresh_display(self._engine.remaining)

    def _on_message_changed(self, message: str) -> None:
        self._message.setText(message)

    def _on_coach_changed(self, coach: Coach | None) -> None:
        if coach is None:
            return
        self._coach_icon.set_coach_name(coach.name)
        self._coach_name.setText(coach.name)
        self._coach_domain.setText(coach.domain)
        index = self._coach_picker.findData(coach.id)
        if index >= 0:
            self._coach_picker.setCurrentIndex(index)

    def _on_today_count_changed(self, count: int) -> None:
        noun = "session" if count == 1 else "sessions"
        self._today_label.setText(f"{count} {noun} today")

    def _refresh_display(self, _remaining: int) -> None:
        self._ring.set_time_text(self._engine.time_string)
        self._ring.set_percent(self._engine.progress)

    # ── quick coach switcher ──────────────────────────────────────────

    def _populate_coach_picker(self) -> None:
        if self._roster is None:
            return
        self._coach_picker.blockSignals(True)
        self._coach_picker.clear()
        for coach in self._roster.favorite_gods:
            self._coach_picker.addItem(f"★ {coach.name}", coach.id)
        for coach in self._roster.non_favorite_gods:
            self._coach_picker.addItem(coach.name, coach.id)
        current = self._engine.coach
        if current is not None:
            index = self._coach_picker.findData(current.id)
            if index >= 0:
                self._coach_picker.setCurrentIndex(index)
        self._coach_picker.blockSignals(False)

    def _on_coach_picked(self, index: int) -> None:
        if self._roster is None:
            return
        coach = self._roster.find(self._coach_picker.itemData(index))
        if coach is not None:
            self._engine.set_coach(coach)

    # ── theming ───────────────────────────────────────────────────────

    def apply_theme(self, theme: CoachTheme, palette: dict[str, str]) -> None:
        self._ring_colors = get_ring_colors(theme)
        self._ring.set_text_color(palette["text"])
        self._on_session_type_changed(self._engine.session_type)

    # ── test / inspection helpers ─────────────────────────────────────

    @property
    def ring(self) -> ProgressRing:
        return self._ring

    @property
    def start_pause_button(self) -> QPushButton:
        return self._start_pause_btn

    def phase_button(self, session_type: SessionType) -> QPushButton:
        return self._phase_buttons[session_type]

    @property
    def message_text(self) -> str:
        return self._message.text()
