"""Immediate-mode drawing primitives on top of a PyQtGraph plot."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

import pyqtgraph as pg
from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QColor, QPainter, QPainterPath, QPen


@dataclass(frozen=True)
class _Pen:
    width: float
    color: QColor


@dataclass(frozen=True)
class _Command:
    """One recorded primitive, replayed in `DisplayListItem.paint`."""

    kind: str  # "fill_arc", "draw_arc", "line", "point"
    pen: _Pen
    coords: Tuple[float, ...]


def pen_color(red: float, green: float, blue: float, alpha: float) -> QColor:
    """Clamp float channels to [0, 1] and build a QColor."""
    channels = [min(max(float(value), 0.0), 1.0) for value in (red, green, blue, alpha)]
    return QColor.fromRgbF(*channels)


def _arc_rect(cx: float, cy: float, radius: float) -> QRectF:
    return QRectF(cx - radius, cy - radius, 2.0 * radius, 2.0 * radius)


def _qt_degrees(radians: float) -> float:
    # ViewBox flips y, so Qt's clockwise-on-screen angles are negated
    return -math.degrees(radians)


class DisplayListItem(pg.GraphicsObject):
    """Graphics item that repaints whatever was recorded during the last frame.

    Pens are cosmetic, so the data-space bounds are padded by the widest pen
    converted from pixels at the current zoom.
    """

    def __init__(self) -> None:
        super().__init__()
        self._commands: List[_Command] = []
        self._bounds = QRectF()
        self._pen_width = 0.0

    def set_commands(self, commands: List[_Command], bounds: QRectF, pen_width: float = 0.0) -> None:
        self.prepareGeometryChange()
        self._commands = commands
        self._bounds = bounds
        self._pen_width = float(pen_width)
        self.update()

    def viewTransformChanged(self) -> None:  # type: ignore[override]
        self.prepareGeometryChange()

    def boundingRect(self) -> QRectF:  # type: ignore[override]
        if not self._commands:
            return QRectF()
        # One extra pixel for antialiasing
        half_width = self._pen_width / 2.0 + 1.0
        pad_x = (self.pixelLength(QPointF(1.0, 0.0)) or 0.0) * half_width
        pad_y = (self.pixelLength(QPointF(0.0, 1.0)) or 0.0) * half_width
        return self._bounds.adjusted(-pad_x, -pad_y, pad_x, pad_y)

    def paint(self, painter: QPainter, *args) -> None:  # type: ignore[override]
        painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        for command in self._commands:
            pen = QPen(command.pen.color)
            pen.setWidthF(command.pen.width)
            pen.setCosmetic(True)
            if command.kind == "fill_arc":
                cx, cy, radius, start, end = command.coords
                path = QPainterPath(QPointF(cx, cy))
                path.arcTo(_arc_rect(cx, cy, radius), _qt_degrees(start), _qt_degrees(end - start))
                path.closeSubpath()
                painter.setPen(Qt.PenStyle.NoPen)
                painter.setBrush(command.pen.color)
                painter.drawPath(path)
            elif command.kind == "draw_arc":
                cx, cy, radius, start, end = command.coords
                path = QPainterPath()
                rect = _arc_rect(cx, cy, radius)
                path.arcMoveTo(rect, _qt_degrees(start))
                path.arcTo(rect, _qt_degrees(start), _qt_degrees(end - start))
                painter.setPen(pen)
                painter.setBrush(Qt.BrushStyle.NoBrush)
                painter.drawPath(path)
            elif command.kind == "line":
                x0, y0, x1, y1 = command.coords
                painter.setPen(pen)
                painter.drawLine(QPointF(x0, y0), QPointF(x1, y1))
            elif command.kind == "point":
                x, y = command.coords
                pen.setCapStyle(Qt.PenCapStyle.RoundCap)
                painter.setPen(pen)
                painter.drawPoint(QPointF(x, y))


class QtGfx:
    """Records primitives for one frame and hands them to a `DisplayListItem`.

    Call `begin_frame`, issue drawing calls, then `end_frame` to publish.
    """

    def __init__(self, plot_item: pg.PlotItem) -> None:
        self._plot_item = plot_item
        self._item = DisplayListItem()
        plot_item.addItem(self._item)
        self._pen = _Pen(1.0, pen_color(0.0, 0.0, 0.0, 1.0))
        self._commands: List[_Command] = []
        self._extent: Optional[Tuple[float, float, float, float]] = None
        self._max_pen_width = 0.0

    @property
    def item(self) -> DisplayListItem:
        return self._item

    def begin_frame(self) -> None:
        self._commands = []
        self._extent = None
        self._max_pen_width = 0.0

    def end_frame(self) -> None:
        bounds = QRectF()
        if self._extent is not None:
            x0, y0, x1, y1 = self._extent
            bounds = QRectF(QPointF(x0, y0), QPointF(x1, y1))
        self._item.set_commands(self._commands, bounds, self._max_pen_width)

    # Drawing primitives ------------------------------------------------

    def set_pen(self, width: float, red: float, green: float, blue: float, alpha: float) -> None:
        self._pen = _Pen(float(width), pen_color(red, green, blue, alpha))

    def fill_arc(self, cx: float, cy: float, radius: float, start: float, end: float) -> None:
        self._record("fill_arc", (cx, cy, radius, start, end), cx - radius, cy - radius, cx + radius, cy + radius)

    def draw_arc(self, cx: float, cy: float, radius: float, start: float, end: float) -> None:
        self._record("draw_arc", (cx, cy, radius, start, end), cx - radius, cy - radius, cx + radius, cy + radius)

    def draw_line(self, x0: float, y0: float, x1: float, y1: float) -> None:
        self._record("line", (x0, y0, x1, y1), min(x0, x1), min(y0, y1), max(x0, x1), max(y0, y1))

    def draw_point(self, x: float, y: float) -> None:
        self._record("point", (x, y), x, y, x, y)

    def set_view(self, x0: float, y0: float, x1: float, y1: float) -> None:
        self._plot_item.vb.setRange(xRange=(x0, x1), yRange=(y0, y1), padding=0.0)

    def _record(
        self,
        kind: str,
        coords: Tuple[float, ...],
        left: float,
        bottom: float,
        right: float,
        top: float,
    ) -> None:
        self._commands.append(
            _Command(kind=kind, pen=self._pen, coords=tuple(float(value) for value in coords))
        )
        if self._extent is None:
            self._extent = (float(left), float(bottom), float(right), float(top))
        else:
            x0, y0, x1, y1 = self._extent
            self._extent = (min(x0, left), min(y0, bottom), max(x1, right), max(y1, top))
        self._max_pen_width = max(self._max_pen_width, self._pen.width)
