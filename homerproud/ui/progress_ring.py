"""Circular countdown ring rendered with QPainter.

- Fills clockwise from 12 o'clock as the phase progresses.
- Gradient colours follow the coach theme and the timer state.
- Shows MM:SS with a phase label underneath.
- Colour changes are animated.
"""

from __future__ import annotations

from PyQt6.QtCore import Qt, QRectF, QVariantAnimation, QEasingCurve
from PyQt6.QtGui import QPainter, QPen, QColor, QConicalGradient, QFont
from PyQt6.QtWidgets import QWidget


def _lerp_color(c1: QColor, c2: QColor, t: float) -> QColor:
    t = max(0.0, min(1.0, t))
    return QColor(
        int(c1.red()   + (c2.red()   - c1.red())   * t),
        int(c1.green() + (c2.green() - c1.green()) * t),
        int(c1.blue()  + (c2.blue()  - c1.blue())  * t),
        int(c1.alpha() + (c2.alpha() - c1.alpha()) * t),
    )


class ProgressRing(QWidget):
    """Custom-painted circular timer ring."""

    RING_THICKNESS = 14

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setMinimumSize(220, 220)

        self._percent: float = 0.0
        self._time_text: str = "25:00"
        self._label: str = "FOCUS"

        self._primary = QColor("#4A4A5E")
        self._secondary = QColor("#3A3A4E")
        self._from_primary = QColor(self._primary)
        self._from_secondary = QColor(self._secondary)
        self._to_primary = QColor(self._primary)
        self._to_secondary = QColor(self._secondary)

        self._text_color = QColor("#E8E8E8")

        self._color_anim = QVariantAnimation(self)
        self._color_anim.setDuration(400)
        self._color_anim.setStartValue(0.0)
        self._color_anim.setEndValue(1.0)
        self._color_anim.setEasingCurve(QEasingCurve.Type.InOutQuad)
        self._color_anim.valueChanged.connect(self._on_color_anim)

    # ── public API ──────────────────────────────────────────────────

    @property
    def percent(self) -> float:
        return self._percent

    @property
    def time_text(self) -> str:
        return self._time_text

    @property
    def label(self) -> str:
        return self._label

    def set_percent(self, pct: float) -> None:
        self._percent = max(0.0, min(1.0, pct))
        self.update()

    def set_time_text(self, text: str) -> None:
        self._time_text = text
        self.update()

    def set_label(self, text: str) -> None:
        self._label = text
        self.update()

    def set_colors(self, primary: str, secondary: str) -> None:
        """Animate the arc gradient towards a new colour pair."""
        self._from_primary = QColor(self._primary)
        self._from_secondary = QColor(self._secondary)
        self._to_primary = QColor(primary)
        self._to_secondary = QColor(secondary)
        self._color_anim.stop()
        self._color_anim.start()

    def set_text_color(self, color: str) -> None:
        self._text_color = QColor(color)
        self.update()

    def _on_color_anim(self, value: object) -> None:
        t = float(value)  # type: ignore[arg-type]
        self._primary = _lerp_color(self._from_primary, self._to_primary, t)
        self._secondary = _lerp_color(self._from_secondary, self._to_secondary, t)
        self.update()

    # ── painting ────────────────────────────────────────────────────

    def paintEvent(self, event) -> None:  # type: ignore[override]
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        cx, cy = self.width() / 2, self.height() / 2
        diameter = max(100.0, min(self.width(), self.height()) - 2 * self.RING_THICKNESS)
        radius = diameter / 2
        ring_rect = QRectF(cx - radius, cy - radius, diameter, diameter)

        # ── track ────────────────────────────────────────────────────
        track = QColor(self._primary)
        track.setAlpha(40)
        painter.setPen(QPen(track, self.RING_THICKNESS))
        painter.drawEllipse(ring_rect)

        # ── arc ──────────────────────────────────────────────────────
        if self._percent > 0.001:
            gradient = QConicalGradient(cx, cy, 90)
            gradient.setColorAt(0.0, self._primary)
            gradient.setColorAt(0.5, self._secondary)
            gradient.setColorAt(1.0, self._primary)
            pen = QPen(gradient, self.RING_THICKNESS, Qt.PenStyle.SolidLine)
            pen.setCapStyle(Qt.PenCapStyle.RoundCap)
            painter.setPen(pen)
            # Qt arcs: 1/16th degree, 12 o'clock is 90°, clockwise is negative
            painter.drawArc(ring_rect, 90 * 16, -int(self._percent * 360 * 16))

        # ── time ─────────────────────────────────────────────────────
        time_font = QFont()
        time_font.setPixelSize(max(24, int(diameter * 0.18)))
        time_font.setWeight(QFont.Weight.Bold)
        painter.setFont(time_font)
        painter.setPen(self._text_color)
        time_rect = QRectF(ring_rect)
        time_rect.moveTop(time_rect.top() - 12)
        painter.drawText(time_rect, Qt.AlignmentFlag.AlignCenter, self._time_text)

        # ── phase label ──────────────────────────────────────────────
        label_font = QFont()
        label_font.setPixelSize(13)
        label_font.setWeight(QFont.Weight.DemiBold)
        label_font.setLetterSpacing(QFont.SpacingType.AbsoluteSpacing, 3)
        painter.setFont(label_font)
        label_color = QColor(self._primary)
        label_color.setAlpha(210)
        painter.setPen(label_color)
        label_rect = QRectF(ring_rect)
        label_rect.moveTop(label_rect.top() + diameter * 0.12)
        painter.drawText(label_rect, Qt.AlignmentFlag.AlignCenter, self._label)

        painter.end()
