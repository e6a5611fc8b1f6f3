"""Coaches tab: list of gods on the left, details on the right.

Favorites are listed first (marked ★); the god selected in preferences
is marked ●.  From the detail pane the user can favorite a god, make
it the default coach, or take it for the current session.
"""

from __future__ import annotations

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QIcon
from PyQt6.QtWidgets import (
    QWidget, QHBoxLayout, QVBoxLayout, QLabel, QListWidget, QListWidgetItem,
    QPushButton, QFrame, QStackedWidget,
)

from ..api.models import Coach
from ..coaches import CoachRoster
from .coach_icon import CoachIcon, coach_pixmap
from .styles import theme_for

SAMPLE_MESSAGES = 2


class CoachDetail(QFrame):
    """Right-hand pane describing one god."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("card")
        layout = QVBoxLayout(self)
        layout.setContentsMargins(28, 24, 28, 24)
        layout.setSpacing(12)

        hero = QHBoxLayout()
        self.icon = CoachIcon(None, 96, self)
        hero.addWidget(self.icon)
        names = QVBoxLayout()
        self.name = QLabel("", self)
        self.name.setObjectName("accentLabel")
        self.name.setStyleSheet("font-size: 26px;")
        self.domain = QLabel("", self)
        self.domain.setObjectName("mutedLabel")
        names.addWidget(self.name)
        names.addWidget(self.domain)
        hero.addLayout(names)
        hero.addStretch()
        layout.addLayout(hero)

        layout.addWidget(self._heading("Coaching Style"))
        self.style_text = QLabel("", self)
        self.style_text.setWordWrap(True)
        layout.addWidget(self.style_text)

        layout.addWidget(self._heading("Sample Messages"))
        self.samples = QLabel("", self)
        self.samples.setWordWrap(True)
        self.samples.setStyleSheet("font-style: italic;")
        layout.addWidget(self.samples)

        layout.addStretch()

        buttons = QHBoxLayout()
        self.favorite_btn = QPushButton("☆ Favorite", self)
        self.favorite_btn.setObjectName("secondaryButton")
        self.select_btn = QPushButton("Make Default Coach", self)
        self.select_btn.setObjectName("secondaryButton")
        self.use_btn = QPushButton("Coach This Session", self)
        self.use_btn.setObjectName("primaryButton")
        buttons.addWidget(self.favorite_btn)
        buttons.addWidget(self.select_btn)
        buttons.addStretch()
        buttons.addWidget(self.use_btn)
        layout.addLayout(buttons)

    @staticmethod
    def _heading(text: str) -> QLabel:
        lbl = QLabel(text)
        lbl.setStyleSheet("font-size: 15px; font-weight: 700;")
        return lbl

    def show_coach(self, coach: Coach, favorite: bool, selected: bool) -> None:
        self.icon.set_coach_name(coach.name)
        self.name.setText(coach.name)
        self.name.setStyleSheet(
            f"font-size: 26px; color: {theme_for(coach.name).primary};"
        )
        self.domain.setText(coach.domain)
        self.style_text.setText(coach.coaching_style)
        lines = [
            *coach.session_start_messages[:SAMPLE_MESSAGES],
            *coach.focus_messages[:SAMPLE_MESSAGES],
            *coach.break_messages[:SAMPLE_MESSAGES],
        ]
        self.samples.setText("\n".join(f"“{line}”" for line in lines))
        self.favorite_btn.setText("★ Favorited" if favorite else "☆ Favorite")
        self.select_btn.setText(
            "Clear Default Coach" if selected else "Make Default Coach"
        )


class CoachesPanel(QWidget):
    """Split view over a :class:`CoachRoster`."""

    use_requested = pyqtSignal(object)   # Coach

    def __init__(self, roster: CoachRoster, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._roster = roster
        self._build_ui()
        roster.changed.connect(self._rebuild)
        roster.loading_changed.connect(self._on_loading)
        roster.failed.connect(self._on_failed)
        self._rebuild()

    # ── build ─────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QHBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(12)

        self._list = QListWidget(self)
        self._list.setFixedWidth(220)
        self._list.currentItemChanged.connect(self._on_current_changed)
        root.addWidget(self._list)

        self._stack = QStackedWidget(self)
        placeholder = QWidget()
        ph_layout = QVBoxLayout(placeholder)
        ph_layout.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._status = QLabel("Select a god to learn about them.")
        self._status.setObjectName("mutedLabel")
        self._status.setWordWrap(True)
        self._status.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._retry_btn = QPushButton("Retry")
        self._retry_btn.setObjectName("primaryButton")
        self._retry_btn.setVisible(False)
        self._retry_btn.clicked.connect(self._roster.load)
        ph_layout.addWidget(self._status)
        ph_layout.addWidget(self._retry_btn, alignment=Qt.AlignmentFlag.AlignCenter)
        self._stack.addWidget(placeholder)

        self._detail = CoachDetail()
        self._detail.favorite_btn.clicked.connect(self._on_favorite)
        self._detail.select_btn.clicked.connect(self._on_select)
        self._detail.use_btn.clicked.connect(self._on_use)
        self._stack.addWidget(self._detail)
        root.addWidget(self._stack, 1)

    # ── list ──────────────────────────────────────────────────────────

    def _rebuild(self) -> None:
        current = self.current_coach()
        self._list.blockSignals(True)
        self._list.clear()
        for coach in self._roster.favorite_gods + self._roster.non_favorite_gods:
            marks = ""
            if self._roster.is_favorite(coach):
                marks += " ★"
            if self._roster.is_selected(coach):
                marks += " ●"
            item = QListWidgetItem(QIcon(coach_pixmap(coach.name, 32)), coach.name + marks)
            item.setData(Qt.ItemDataRole.UserRole, coach.id)
            self._list.addItem(item)
            if current is not None and coach.id == current.id:
                self._list.setCurrentItem(item)
        self._list.blockSignals(False)
        self._show_current()

    def current_coach(self) -> Coach | None:
        item = self._list.currentItem()
        if item is None:
            return None
        return self._roster.find(item.data(Qt.ItemDataRole.UserRole))

    def select_coach(self, coach_id: int) -> None:
        for row in range(self._list.count()):
            item = self._list.item(row)
            if item.data(Qt.ItemDataRole.UserRole) == coach_id:
                self._list.setCurrentItem(item)
                return

    def _on_current_changed(self, *_args) -> None:
        self._show_current()

    def _show_current(self) -> None:
        coach = self.current_coach()
        if coach is None:
            self._stack.setCurrentIndex(0)
            return
        self._detail.show_coach(
            coach, self._roster.is_favorite(coach), self._roster.is_selected(coach),
        )
        self._stack.setCurrentIndex(1)

    def _on_loading(self, loading: bool) -> None:
        if loading:
            self._retry_btn.setVisible(False)
            self._status.setText("Summoning the gods…")

    def _on_failed(self, message: str) -> None:
        if self._roster.error is not None:
            self._status.setText(message)
            self._retry_btn.setVisible(True)
            self._stack.setCurrentIndex(0)

    # ── actions ───────────────────────────────────────────────────────

    def _on_favorite(self) -> None:
        coach = self.current_coach()
        if coach is not None:
            self._roster.toggle_favorite(coach)

    def _on_select(self) -> None:
        coach = self.current_coach()
        if coach is None:
            return
        if self._roster.is_selected(coach):
            self._roster.clear_selection()
        else:
            self._roster.select(coach)

    def _on_use(self) -> None:
        coach = self.current_coach()
        if coach is not None:
            self.use_requested.emit(coach)

    @property
    def detail(self) -> CoachDetail:
        return self._detail

    @property
    def item_texts(self) -> list[str]:
        return [self._list.item(i).text() for i in range(self._list.count())]
