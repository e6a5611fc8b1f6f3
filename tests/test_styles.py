"""Tests for coach themes and stylesheet helpers."""

import pytest

from homerproud.api.models import SessionType
from homerproud.timer.engine import TimerState
from homerproud.ui.styles import (
    BASE_PALETTE, DEFAULT_THEME, THEMES, build_stylesheet, get_palette,
    get_ring_colors, hex_to_rgba, ring_key, theme_for,
)


def test_twelve_gods_themed():
    assert len(THEMES) == 12
    assert theme_for("Zeus").pattern == "bolt"


def test_theme_lookup_is_case_insensitive():
    assert theme_for("  athena ") is THEMES["athena"]


@pytest.mark.parametrize("name", [None, "", "Homer"])
def test_unknown_gets_default(name):
    assert theme_for(name) is DEFAULT_THEME


def test_palette_merges_accents():
    palette = get_palette(theme_for("Poseidon"))
    assert palette["accent"] == "#0077B6"
    assert palette["accent2"] == "#48CAE4"
    assert palette["bg"] == BASE_PALETTE["bg"]


def test_ring_keys():
    assert ring_key(TimerState.RUNNING, SessionType.FOCUS) == "focus"
    assert ring_key(TimerState.RUNNING, SessionType.LONG_BREAK) == "break"
    assert ring_key(TimerState.PAUSED, SessionType.FOCUS) == "paused"
    assert ring_key(TimerState.STOPPED, SessionType.SHORT_BREAK) == "stopped"
    assert set(get_ring_colors(DEFAULT_THEME)) == {"focus", "break", "paused", "stopped"}


def test_hex_to_rgba():
    assert hex_to_rgba("#FF8000", 0.5) == "rgba(255, 128, 0, 0.5)"


def test_stylesheet_uses_accent():
    qss = build_stylesheet(get_palette(theme_for("Ares")))
    assert "#C41E3A" in qss
    assert "QPushButton#primaryButton" in qss
