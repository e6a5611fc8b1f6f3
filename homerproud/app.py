"""Main application window for Make Homer Proud."""

from __future__ import annotations

import logging

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QIcon, QKeySequence
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel,
    QTabWidget, QStatusBar, QPushButton, QFrame,
)

from .api.client import ApiClient
from .api.models import Coach
from .coaches import CoachRoster
from .config import Settings, save_settings
from .tasks import TaskRunner
from .timer.engine import TimerEngine, TimerState
from .ui.coach_icon import coach_pixmap
from .ui.coaches_panel import CoachesPanel
from .ui.settings_dialog import SettingsDialog
from .ui.stats_widget import StatsWidget
from .ui.styles import build_stylesheet, get_palette, theme_for
from .ui.timer_widget import TimerWidget

logger = logging.getLogger(__name__)

TAB_TIMER, TAB_STATS, TAB_COACHES = range(3)


class HomerProudApp(QMainWindow):
    """Main application window."""

    def __init__(
        self,
        api: ApiClient,
        settings: Settings,
        runner=None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("Make Homer Proud")
        self.setMinimumSize(760, 640)

        self._api = api
        self._settings = settings
        self._runner = runner if runner is not None else TaskRunner(self)

        # ── engines ───────────────────────────────────────────────────
        self._engine = TimerEngine(api, self._runner, self)
        self._roster = CoachRoster(api, self._runner, self)

        # ── central widget ────────────────────────────────────────────
        central = QWidget()
        self.setCentralWidget(central)
        root_layout = QVBoxLayout(central)
        root_layout.setContentsMargins(16, 12, 16, 12)
        root_layout.setSpacing(8)

        root_layout.addWidget(self._build_top_bar(central))

        self._tabs = QTabWidget(central)
        root_layout.addWidget(self._tabs)

        self._timer_widget = TimerWidget(self._engine, self._roster, self._tabs)
        self._tabs.addTab(self._timer_widget, "Timer")

        self._stats_widget = StatsWidget(api, self._runner, self._tabs)
        self._tabs.addTab(self._stats_widget, "Stats")

        self._coaches_panel = CoachesPanel(self._roster, self._tabs)
        self._tabs.addTab(self._coaches_panel, "Gods")

        self._status_bar = QStatusBar(self)
        self.setStatusBar(self._status_bar)
        self._status_bar.showMessage("Connecting to Olympus…")

        self._build_menu_bar()

        # ── wire signals ──────────────────────────────────────────────
        self._engine.coach_changed.connect(self._on_coach_changed)
        self._engine.state_changed.connect(self._on_state_changed)
        self._engine.session_completed.connect(self._on_session_completed)
        self._coaches_panel.use_requested.connect(self._on_use_coach)
        self._roster.failed.connect(self._status_bar.showMessage)
        self._tabs.currentChanged.connect(self._on_tab_changed)

        self._apply_theme(None)
        self._restore_geometry()

    # ══════════════════════════════════════════════════════════════════
    #  STARTUP
    # ══════════════════════════════════════════════════════════════════

    def bootstrap(self) -> None:
        """Kick off the launch-time background loads."""
        self._engine.load_coach_from_preferences()
        self._engine.load_today_sessions()
        self._roster.load()
        self._runner.submit(
            self._api.check_health, self._on_health, description="health check",
        )

    def _on_health(self, healthy: bool) -> None:
        if healthy:
            self._status_bar.showMessage("Connected to Olympus", 4000)
        else:
            self._status_bar.showMessage(
                f"Server unreachable at {self._api.base_url}. "
                "The timer still works; sessions will not be logged."
            )

    # ══════════════════════════════════════════════════════════════════
    #  TOP BAR + MENUS
    # ══════════════════════════════════════════════════════════════════

    def _build_top_bar(self, parent: QWidget) -> QWidget:
        bar = QFrame(parent)
        bar.setObjectName("card")
        layout = QHBoxLayout(bar)
        layout.setContentsMargins(20, 10, 20, 10)

        title = QLabel("MAKE HOMER PROUD", bar)
        title.setObjectName("accentLabel")
        title.setStyleSheet("font-size: 17px; letter-spacing: 2px;")
        layout.addWidget(title)
        layout.addStretch()

        gear = QPushButton("⚙", bar)
        gear.setObjectName("secondaryButton")
        gear.setFixedSize(32, 32)
        gear.setStyleSheet("font-size: 18px; padding: 0;")
        gear.setToolTip("Settings (Ctrl+,)")
        gear.clicked.connect(self.open_settings)
        layout.addWidget(gear)
        return bar

    def _build_menu_bar(self) -> None:
        menu_bar = self.menuBar()

        timer_menu = menu_bar.addMenu("Timer")
        self._start_action = QAction("Start", self)
        self._start_action.setShortcut(QKeySequence(Qt.Key.Key_Space))
        self._start_action.triggered.connect(self._timer_widget.toggle_start_pause)
        timer_menu.addAction(self._start_action)

        reset_action = QAction("Reset", self)
        reset_action.setShortcut(QKeySequence("Ctrl+R"))
        reset_action.triggered.connect(self._engine.reset)
        timer_menu.addAction(reset_action)

        view_menu = menu_bar.addMenu("View")
        for index, name in ((TAB_TIMER, "Timer"), (TAB_STATS, "Stats"), (TAB_COACHES, "Gods")):
            action = QAction(name, self)
            action.setShortcut(QKeySequence(f"Ctrl+{index + 1}"))
            action.triggered.connect(
                lambda _checked=False, i=index: self._tabs.setCurrentIndex(i)
            )
            view_menu.addAction(action)

        settings_action = QAction("Settings…", self)
        settings_action.setShortcut(QKeySequence("Ctrl+,"))
        settings_action.setMenuRole(QAction.MenuRole.PreferencesRole)
        settings_action.triggered.connect(self.open_settings)
        view_menu.addAction(settings_action)

    def open_settings(self) -> None:
        dialog = SettingsDialog(self._settings, self._roster, self)
        dialog.exec()

    # ══════════════════════════════════════════════════════════════════
    #  SLOTS
    # ══════════════════════════════════════════════════════════════════

    def _on_coach_changed(self, coach: Coach) -> None:
        self._apply_theme(coach.name)
        self._status_bar.showMessage(f"{coach.name} is coaching you", 4000)

    def _on_use_coach(self, coach: Coach) -> None:
        self._engine.set_coach(coach)
        self._tabs.setCurrentIndex(TAB_TIMER)

    def _on_state_changed(self, state: TimerState) -> None:
        self._start_action.setText("Pause" if state == TimerState.RUNNING else "Start")

    def _on_session_completed(self, data: dict) -> None:
        finished = data["session_type"]
        self._status_bar.showMessage(f"{finished.display_name} complete", 6000)
        if self._tabs.currentIndex() == TAB_STATS:
            self._stats_widget.refresh()
        self.raise_()
        self.activateWindow()

    def _on_tab_changed(self, index: int) -> None:
        if index == TAB_STATS:
            self._stats_widget.refresh()

    def _apply_theme(self, coach_name: str | None) -> None:
        theme = theme_for(coach_name)
        palette = get_palette(theme)
        self.setStyleSheet(build_stylesheet(palette))
        self._timer_widget.apply_theme(theme, palette)
        self.setWindowIcon(QIcon(coach_pixmap(coach_name, 128)))

    # ══════════════════════════════════════════════════════════════════
    #  GEOMETRY
    # ══════════════════════════════════════════════════════════════════

    def _restore_geometry(self) -> None:
        s = self._settings
        self.resize(s.window_width, s.window_height)
        if s.window_x is not None and s.window_y is not None:
            self.move(s.window_x, s.window_y)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        geo = self.geometry()
        self._settings.window_x = geo.x()
        self._settings.window_y = geo.y()
        self._settings.window_width = geo.width()
        self._settings.window_height = geo.height()
        try:
            save_settings(self._settings)
        except OSError as exc:
            logger.warning("Could not save window geometry: %s", exc)
        self._engine.reset()
        super().closeEvent(event)

    # ── accessors ─────────────────────────────────────────────────────

    @property
    def engine(self) -> TimerEngine:
        return self._engine

    @property
    def roster(self) -> CoachRoster:
        return self._roster

    @property
    def tabs(self) -> QTabWidget:
        return self._tabs
