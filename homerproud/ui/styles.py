"""QSS stylesheets, per-coach theming, and ring colors.

The whole app is dark ("underworld" base colours).  Each god brings
an accent pair that tints buttons, tabs, the progress ring and the
coach icon.  Unknown gods get the Olympus indigo theme.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..api.models import SessionType
from ..timer.engine import TimerState


# ── coach themes ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class CoachTheme:
    name: str
    primary: str
    secondary: str
    pattern: str     # motif drawn by the coach icon


THEMES: dict[str, CoachTheme] = {
    t.name.lower(): t
    for t in (
        CoachTheme("Athena",     "#D4AF37", "#8B7355", "owl"),
        CoachTheme("Zeus",       "#5B4FCF", "#FFD700", "bolt"),
        CoachTheme("Poseidon",   "#0077B6", "#48CAE4", "trident"),
        CoachTheme("Ares",       "#C41E3A", "#8B0000", "shield"),
        CoachTheme("Artemis",    "#228B22", "#90EE90", "moon"),
        CoachTheme("Apollo",     "#FF8C00", "#FFD700", "sun"),
        CoachTheme("Aphrodite",  "#FF69B4", "#FFB6C1", "heart"),
        CoachTheme("Hephaestus", "#B87333", "#FF6B35", "hammer"),
        CoachTheme("Hermes",     "#00CED1", "#20B2AA", "wing"),
        CoachTheme("Dionysus",   "#8B008B", "#DA70D6", "grapes"),
        CoachTheme("Demeter",    "#DAA520", "#8FBC8F", "leaf"),
        CoachTheme("Hera",       "#4169E1", "#E6E6FA", "crown"),
    )
}

DEFAULT_THEME = CoachTheme("Olympus", "#6366F1", "#A5B4FC", "star")


def theme_for(name: str | None) -> CoachTheme:
    """Theme for a god name (case-insensitive); Olympus when unknown."""
    if not name:
        return DEFAULT_THEME
    return THEMES.get(name.strip().lower(), DEFAULT_THEME)


# ── base palette ─────────────────────────────────────────────────────────

BASE_PALETTE: dict[str, str] = {
    "bg":           "#0A0A0F",
    "bg_secondary": "#151520",
    "surface":      "#1A1A2E",
    "border":       "#2D2D3A",
    "elevated":     "#3A3A4A",
    "sidebar":      "#0D0D12",
    "text":         "#E8E8E8",
    "text_muted":   "#9D9D9D",
    "text_faint":   "#6D6D7D",
    "success":      "#4CAF50",
    "warning":      "#FF9800",
    "danger":       "#F44336",
}


def get_palette(theme: CoachTheme) -> dict[str, str]:
    """Base palette with the coach's accents merged in."""
    palette = dict(BASE_PALETTE)
    palette["accent"] = theme.primary
    palette["accent2"] = theme.secondary
    return palette


def get_ring_colors(theme: CoachTheme) -> dict[str, tuple[str, str]]:
    """Ring gradient pairs keyed by :func:`ring_key`."""
    return {
        "focus":   (theme.primary, theme.secondary),
        "break":   (theme.secondary, theme.primary),
        "paused":  ("#6C7086", "#585B70"),
        "stopped": ("#4A4A5E", "#3A3A4E"),
    }


def ring_key(state: TimerState, session_type: SessionType) -> str:
    if state == TimerState.PAUSED:
        return "paused"
    if state == TimerState.STOPPED:
        return "stopped"
    return "break" if session_type.is_break else "focus"


def hex_to_rgba(hex_color: str, alpha: float) -> str:
    """Convert '#RRGGBB' to 'rgba(R, G, B, alpha)'."""
    h = hex_color.lstrip("#")
    r, g, b = int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)
    return f"rgba({r}, {g}, {b}, {alpha})"


# ── QSS builder ──────────────────────────────────────────────────────────


def build_stylesheet(palette: dict[str, str]) -> str:
    p = palette
    return f"""
    /* ── global ─────────────────────────────────── */
    QWidget {{
        background-color: {p['bg']};
        color: {p['text']};
        font-family: "Helvetica Neue", Arial;
        font-size: 14px;
    }}

    /* ── buttons ─────────────────────────────────── */
    QPushButton {{
        background-color: {p['bg_secondary']};
        color: {p['text']};
        border: 1px solid {p['border']};
        border-radius: 10px;
        padding: 10px 24px;
        font-weight: 600;
    }}

    QPushButton:hover {{
        background-color: {p['surface']};
        border-color: {p['accent']};
    }}

    QPushButton:disabled {{
        color: {p['text_faint']};
        border-color: {p['bg_secondary']};
    }}

    QPushButton#primaryButton {{
        background-color: {p['accent']};
        color: {p['bg']};
        border: none;
        font-size: 17px;
        padding: 14px 40px;
        border-radius: 12px;
        font-weight: 700;
    }}

    QPushButton#primaryButton:hover {{
        background-color: {p['accent2']};
    }}

    QPushButton#secondaryButton {{
        background-color: transparent;
        color: {p['text_muted']};
        font-size: 13px;
        padding: 8px 16px;
        border-radius: 8px;
    }}

    QPushButton#dangerButton {{
        background-color: transparent;
        color: {p['danger']};
        font-size: 13px;
        padding: 8px 16px;
        border-radius: 8px;
    }}

    QPushButton#phaseButton {{
        background-color: transparent;
        color: {p['text_muted']};
        font-size: 13px;
        padding: 6px 14px;
        border-radius: 14px;
    }}

    QPushButton#phaseButton:checked {{
        background-color: {hex_to_rgba(p['accent'], 0.2)};
        color: {p['accent']};
        border-color: {p['accent']};
    }}

    /* ── inputs ──────────────────────────────────── */
    QLineEdit, QComboBox {{
        background-color: {p['bg_secondary']};
        border: 1px solid {p['border']};
        border-radius: 8px;
        padding: 6px 12px;
        font-size: 13px;
    }}

    QLineEdit:focus, QComboBox:focus {{
        border-color: {p['accent']};
    }}

    QCheckBox::indicator:checked {{
        background-color: {p['accent']};
        border-radius: 3px;
    }}

    /* ── tabs ────────────────────────────────────── */
    QTabWidget::pane {{
        border: none;
    }}

    QTabBar::tab {{
        background-color: transparent;
        color: {p['text_muted']};
        padding: 10px 24px;
        border: none;
        border-bottom: 2px solid transparent;
        font-weight: 600;
    }}

    QTabBar::tab:selected {{
        color: {p['accent']};
        border-bottom: 2px solid {p['accent']};
    }}

    /* ── lists ───────────────────────────────────── */
    QListWidget {{
        background-color: {p['sidebar']};
        border: none;
        outline: none;
    }}

    QListWidget::item {{
        padding: 8px 10px;
        border-radius: 6px;
    }}

    QListWidget::item:selected {{
        background-color: {hex_to_rgba(p['accent'], 0.18)};
        color: {p['text']};
    }}

    QScrollArea {{
        border: none;
    }}

    /* ── cards ───────────────────────────────────── */
    QFrame#card {{
        background-color: {p['bg_secondary']};
        border: 1px solid {hex_to_rgba(p['accent'], 0.2)};
        border-radius: 16px;
    }}

    QFrame#bubble {{
        background-color: {p['surface']};
        border: 1px solid {hex_to_rgba(p['accent'], 0.35)};
        border-radius: 14px;
    }}

    /* ── labels ──────────────────────────────────── */
    QLabel#accentLabel {{
        color: {p['accent']};
        font-weight: 700;
    }}

    QLabel#mutedLabel {{
        color: {p['text_muted']};
        font-size: 12px;
    }}

    QLabel#errorLabel {{
        color: {p['warning']};
    }}

    QStatusBar {{
        color: {p['text_muted']};
        font-size: 12px;
        border-top: 1px solid {p['border']};
    }}
    """
