"""Settings dialog for Make Homer Proud.

Coach preferences live on the server and are written through the
roster as soon as they change.  The server address is a local setting
saved to disk; it takes effect on the next launch.
"""

from __future__ import annotations

import logging

from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QFormLayout,
    QLabel, QCheckBox, QPushButton, QLineEdit, QFrame, QWidget,
)

from ..api.client import ApiError, validate_base_url
from ..api.models import SessionType
from ..coaches import CoachRoster
from ..config import Settings, save_settings

logger = logging.getLogger(__name__)


class SettingsDialog(QDialog):
    """Modal dialog for coach preferences and connection settings."""

    def __init__(
        self,
        settings: Settings,
        roster: CoachRoster,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self.setMinimumWidth(440)
        self.setModal(True)

        self._settings = settings
        self._roster = roster

        self._build_ui()
        self._populate()
        roster.changed.connect(self._populate)

    # ══════════════════════════════════════════════════════════════════
    #  BUILD UI
    # ══════════════════════════════════════════════════════════════════

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(24, 20, 24, 20)
        root.setSpacing(16)

        # ── God selection ────────────────────────────────────────────
        root.addWidget(self._section_label("God Selection"))
        gods_form = QFormLayout()
        gods_form.setHorizontalSpacing(20)
        gods_form.setVerticalSpacing(10)

        self._auto_fav_cb = QCheckBox("Auto-select from Favorites")
        self._auto_fav_cb.setToolTip("Randomly pick a favorite god for each session")
        self._auto_fav_cb.toggled.connect(self._on_auto_favorites_toggled)
        gods_form.addRow("", self._auto_fav_cb)

        selected_row = QHBoxLayout()
        self._selected_lbl = QLabel("")
        self._selected_lbl.setObjectName("mutedLabel")
        self._clear_btn = QPushButton("Clear")
        self._clear_btn.setObjectName("secondaryButton")
        self._clear_btn.clicked.connect(self._roster.clear_selection)
        selected_row.addWidget(self._selected_lbl, 1)
        selected_row.addWidget(self._clear_btn)
        selected_wrapper = QWidget()
        selected_wrapper.setLayout(selected_row)
        gods_form.addRow("Selected God:", selected_wrapper)
        root.addLayout(gods_form)

        root.addWidget(self._separator())

        # ── Timer (fixed) ────────────────────────────────────────────
        root.addWidget(self._section_label("Timer"))
        timer_form = QFormLayout()
        for session_type in SessionType:
            timer_form.addRow(
                f"{session_type.display_name}:",
                QLabel(f"{session_type.default_duration // 60} min"),
            )
        note = QLabel("Timer durations are fixed.")
        note.setObjectName("mutedLabel")
        timer_form.addRow("", note)
        root.addLayout(timer_form)

        root.addWidget(self._separator())

        # ── Connection ───────────────────────────────────────────────
        root.addWidget(self._section_label("Server"))
        server_form = QFormLayout()
        self._url_edit = QLineEdit()
        self._url_edit.setPlaceholderText("http://localhost:8000")
        self._url_edit.editingFinished.connect(self._on_url_changed)
        server_form.addRow("API URL:", self._url_edit)
        self._url_error = QLabel("")
        self._url_error.setObjectName("errorLabel")
        self._url_error.setVisible(False)
        server_form.addRow("", self._url_error)
        restart = QLabel("Changes apply after restart.")
        restart.setObjectName("mutedLabel")
        server_form.addRow("", restart)
        root.addLayout(server_form)

        root.addWidget(self._separator())

        about = QLabel("A Pomodoro timer where Greek gods guide your productivity.")
        about.setObjectName("mutedLabel")
        about.setWordWrap(True)
        root.addWidget(about)

        root.addStretch()
        btn_row = QHBoxLayout()
        btn_row.addStretch()
        close_btn = QPushButton("Close")
        close_btn.setObjectName("secondaryButton")
        close_btn.clicked.connect(self.accept)
        btn_row.addWidget(close_btn)
        root.addLayout(btn_row)

    @staticmethod
    def _section_label(text: str) -> QLabel:
        lbl = QLabel(text)
        lbl.setStyleSheet("font-size: 15px; font-weight: 700; margin-top: 4px;")
        return lbl

    @staticmethod
    def _separator() -> QFrame:
        line = QFrame()
        line.setFrameShape(QFrame.Shape.HLine)
        line.setFixedHeight(1)
        line.setStyleSheet("background-color: rgba(255,255,255,0.08);")
        return line

    # ══════════════════════════════════════════════════════════════════
    #  POPULATE
    # ══════════════════════════════════════════════════════════════════

    def _populate(self) -> None:
        prefs = self._roster.preferences
        self._auto_fav_cb.blockSignals(True)
        self._auto_fav_cb.setChecked(bool(prefs and prefs.auto_select_favorites))
        self._auto_fav_cb.setEnabled(prefs is not None)
        self._auto_fav_cb.blockSignals(False)

        selected = self._roster.selected_god
        if selected is not None:
            self._selected_lbl.setText(selected.name)
        else:
            self._selected_lbl.setText("None - using auto-select or random")
        self._clear_btn.setEnabled(selected is not None)

        self._url_edit.setText(self._settings.api_base_url)

    # ══════════════════════════════════════════════════════════════════
    #  CHANGE HANDLERS
    # ══════════════════════════════════════════════════════════════════

    def _on_auto_favorites_toggled(self, checked: bool) -> None:
        self._roster.set_auto_select_favorites(checked)

    def _on_url_changed(self) -> None:
        text = self._url_edit.text().strip()
        if not text:
            return
        try:
            url = validate_base_url(text)
        except ApiError:
            self._show_url_error("Invalid URL, expected http://host[:port]")
            return
        self._show_url_error("")
        if url == self._settings.api_base_url:
            return
        self._settings.api_base_url = url
        try:
            save_settings(self._settings)
        except OSError as exc:
            logger.warning("Could not save settings: %s", exc)
            self._show_url_error(f"Could not save settings: {exc}")

    def _show_url_error(self, message: str) -> None:
        self._url_error.setText(message)
        self._url_error.setVisible(bool(message))

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def auto_favorites_checkbox(self) -> QCheckBox:
        return self._auto_fav_cb

    @property
    def selected_text(self) -> str:
        return self._selected_lbl.text()

    @property
    def url_error(self) -> str:
        return self._url_error.text()
