"""Polygon-style coach icons drawn with QPainter.

Every god gets a bold, flat motif on a tinted disc, all in the god's
primary colour.  No image assets.  Shapes are described in a unit
square and scaled to the widget.
"""

from __future__ import annotations

import math
from typing import Callable

from PyQt6.QtCore import Qt, QPointF, QRectF
from PyQt6.QtGui import QColor, QPainter, QPainterPath, QPen, QPixmap
from PyQt6.QtWidgets import QWidget

from .styles import CoachTheme, theme_for


def _poly(points: list[tuple[float, float]]) -> QPainterPath:
    path = QPainterPath()
    path.moveTo(*points[0])
    for x, y in points[1:]:
        path.lineTo(x, y)
    path.closeSubpath()
    return path


# ── motifs (unit square, y down) ─────────────────────────────────────────


def _owl() -> QPainterPath:
    path = _poly([(0.5, 0.0), (1.0, 0.8), (0.0, 0.8)])
    eyes = QPainterPath()
    eyes.addEllipse(QPointF(0.35, 0.5), 0.1, 0.1)
    eyes.addEllipse(QPointF(0.65, 0.5), 0.1, 0.1)
    return path.subtracted(eyes)


def _bolt() -> QPainterPath:
    return _poly([
        (0.6, 0.0), (0.2, 0.55), (0.45, 0.55),
        (0.35, 1.0), (0.8, 0.4), (0.55, 0.4),
    ])


def _trident() -> QPainterPath:
    path = QPainterPath()
    path.addRect(QRectF(0.45, 0.3, 0.1, 0.7))
    path.addRect(QRectF(0.15, 0.3, 0.7, 0.08))
    for x in (0.15, 0.45, 0.75):
        path.addPath(_poly([(x, 0.3), (x + 0.05, 0.0), (x + 0.1, 0.3)]))
    return path.simplified()


def _shield() -> QPainterPath:
    return _poly([
        (0.1, 0.05), (0.9, 0.05), (0.9, 0.5), (0.5, 1.0), (0.1, 0.5),
    ])


def _moon() -> QPainterPath:
    full = QPainterPath()
    full.addEllipse(QRectF(0.05, 0.05, 0.9, 0.9))
    bite = QPainterPath()
    bite.addEllipse(QRectF(0.3, 0.0, 0.8, 0.8))
    return full.subtracted(bite)


def _sun() -> QPainterPath:
    path = QPainterPath()
    path.addEllipse(QPointF(0.5, 0.5), 0.22, 0.22)
    for i in range(8):
        a = i * math.pi / 4
        tip = (0.5 + 0.5 * math.cos(a), 0.5 + 0.5 * math.sin(a))
        left = (0.5 + 0.3 * math.cos(a - 0.2), 0.5 + 0.3 * math.sin(a - 0.2))
        right = (0.5 + 0.3 * math.cos(a + 0.2), 0.5 + 0.3 * math.sin(a + 0.2))
        path.addPath(_poly([left, tip, right]))
    return path.simplified()


def _heart() -> QPainterPath:
    path = QPainterPath()
    path.moveTo(0.5, 0.95)
    path.cubicTo(0.0, 0.6, 0.0, 0.1, 0.5, 0.3)
    path.cubicTo(1.0, 0.1, 1.0, 0.6, 0.5, 0.95)
    return path


def _hammer() -> QPainterPath:
    path = QPainterPath()
    path.addRect(QRectF(0.1, 0.1, 0.8, 0.25))
    path.addRect(QRectF(0.43, 0.35, 0.14, 0.65))
    return path.simplified()


def _wing() -> QPainterPath:
    return _poly([
        (0.05, 0.75), (0.95, 0.05), (0.8, 0.35),
        (0.95, 0.35), (0.7, 0.6), (0.8, 0.6), (0.45, 0.8),
    ])


def _grapes() -> QPainterPath:
    path = QPainterPath()
    r = 0.11
    rows = [(0.2, (0.25, 0.5, 0.75)), (0.42, (0.37, 0.63)), (0.64, (0.5,))]
    for y, xs in rows:
        for x in xs:
            path.addEllipse(QPointF(x, y + 0.15), r, r)
    path.addPath(_poly([(0.48, 0.0), (0.56, 0.0), (0.54, 0.25), (0.5, 0.25)]))
    return path.simplified()


def _leaf() -> QPainterPath:
    path = QPainterPath()
    path.moveTo(0.5, 0.0)
    path.quadTo(1.0, 0.5, 0.5, 1.0)
    path.quadTo(0.0, 0.5, 0.5, 0.0)
    return path


def _crown() -> QPainterPath:
    return _poly([
        (0.05, 0.85), (0.05, 0.25), (0.3, 0.55), (0.5, 0.1),
        (0.7, 0.55), (0.95, 0.25), (0.95, 0.85),
    ])


def _star() -> QPainterPath:
    points = []
    for i in range(10):
        a = -math.pi / 2 + i * math.pi / 5
        r = 0.5 if i % 2 == 0 else 0.2
        points.append((0.5 + r * math.cos(a), 0.5 + r * math.sin(a)))
    return _poly(points)


MOTIFS: dict[str, Callable[[], QPainterPath]] = {
    "owl": _owl,
    "bolt": _bolt,
    "trident": _trident,
    "shield": _shield,
    "moon": _moon,
    "sun": _sun,
    "heart": _heart,
    "hammer": _hammer,
    "wing": _wing,
    "grapes": _grapes,
    "leaf": _leaf,
    "crown": _crown,
    "star": _star,
}


def paint_coach_icon(painter: QPainter, rect: QRectF, theme: CoachTheme) -> None:
    """Draw the disc and motif for *theme* inside *rect*."""
    painter.save()
    painter.setRenderHint(QPainter.RenderHint.Antialiasing)

    disc = QColor(theme.primary)
    disc.setAlpha(38)
    painter.setPen(Qt.PenStyle.NoPen)
    painter.setBrush(disc)
    painter.drawEllipse(rect)

    inner = rect.width() * 0.6
    painter.translate(
        rect.center().x() - inner / 2, rect.center().y() - inner / 2,
    )
    painter.scale(inner, inner)
    painter.setBrush(QColor(theme.primary))
    painter.setPen(QPen(QColor(theme.secondary), 0.02))
    painter.drawPath(MOTIFS.get(theme.pattern, _star)())
    painter.restore()


def coach_pixmap(name: str | None, size: int = 64) -> QPixmap:
    pixmap = QPixmap(size, size)
    pixmap.fill(QColor(0, 0, 0, 0))
    painter = QPainter(pixmap)
    paint_coach_icon(painter, QRectF(0, 0, size, size), theme_for(name))
    painter.end()
    return pixmap


class CoachIcon(QWidget):
    """Square widget showing one coach's icon."""

    def __init__(
        self, name: str | None = None, size: int = 80,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.setFixedSize(size, size)
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground)
        self._theme = theme_for(name)

    @property
    def theme(self) -> CoachTheme:
        return self._theme

    def set_coach_name(self, name: str | None) -> None:
        self._theme = theme_for(name)
        self.update()

    def paintEvent(self, event) -> None:  # type: ignore[override]
        painter = QPainter(self)
        side = min(self.width(), self.height())
        paint_coach_icon(painter, QRectF(0, 0, side, side), self._theme)
        painter.end()
