"""UI package."""

from .timer_widget import TimerWidget
from .stats_widget import StatsWidget, StatCard
from .progress_ring import ProgressRing
from .coach_icon import CoachIcon, coach_pixmap
from .coaches_panel import CoachesPanel
from .settings_dialog import SettingsDialog

__all__ = [
    "TimerWidget",
    "StatsWidget",
    "StatCard",
    "ProgressRing",
    "CoachIcon",
    "coach_pixmap",
    "CoachesPanel",
    "SettingsDialog",
]
