"""Paint drawing actions onto a QPainter surface.

Every call repaints from scratch: :func:`paint` clears the whole surface and
walks the action list in order, so later actions cover earlier ones.
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Sequence

from PySide6.QtCore import QPointF, QRectF, QSizeF, Qt
from PySide6.QtGui import QBrush, QColor, QFont, QPainter, QPainterPath, QPen, QPolygonF

from .geometry import action_bounding_box, bounding_box, translate_batch
from .types import (
    BoundingBox,
    CircleInstruction,
    DrawingAction,
    DrawingInstruction,
    EraseAction,
    FreehandAction,
    LineInstruction,
    Point,
    PolygonInstruction,
    Rect,
    RectInstruction,
    StrokeStyle,
    TextInstruction,
)

logger = logging.getLogger(__name__)

DEFAULT_COLOR = "black"
DEFAULT_FONT = "16px sans-serif"

SELECTED_DASH = (5.0, 3.0)
HIGHLIGHT_DASH = (4.0, 2.0)
HIGHLIGHT_COLOR = "rgba(255, 0, 0, 0.8)"
SELECTION_BOX_DASH = (6.0, 4.0)
SELECTION_BOX_COLOR = "blue"
PREVIEW_DASH = (5.0, 5.0)
PREVIEW_BOX_COLOR = "rgba(0, 0, 0, 0.5)"

_RGBA_RE = re.compile(
    r"^rgba?\(\s*([\d.]+)\s*,\s*([\d.]+)\s*,\s*([\d.]+)\s*(?:,\s*([\d.]+)\s*)?\)$",
    re.IGNORECASE,
)
_FONT_RE = re.compile(
    r"^(?:(?P<style>italic|oblique|normal)\s+)?"
    r"(?:(?P<weight>bold|bolder|lighter|normal|[1-9]00)\s+)?"
    r"(?P<size>\d+(?:\.\d+)?)px\s+(?P<family>.+)$",
    re.IGNORECASE,
)
_GENERIC_FAMILIES = {
    "sans-serif": QFont.SansSerif,
    "serif": QFont.Serif,
    "monospace": QFont.Monospace,
    "cursive": QFont.Cursive,
    "fantasy": QFont.Fantasy,
}


def _safe(value) -> float:
    return 0.0 if value is None else float(value)


def _visible_width(width) -> float:
    return max(1.0, _safe(width))


def parse_color(value: Optional[str], default: str = DEFAULT_COLOR) -> QColor:
    """Turn a CSS colour string into a QColor.

    Accepts named colours, ``#hex`` and ``rgb()``/``rgba()``; anything else
    falls back to ``default``.
    """
    if not value:
        return QColor(default)
    text = value.strip()
    match = _RGBA_RE.match(text)
    if match:
        r, g, b = (min(255, int(float(c))) for c in match.group(1, 2, 3))
        alpha = match.group(4)
        a = 255 if alpha is None else int(round(min(1.0, float(alpha)) * 255))
        return QColor(r, g, b, a)
    color = QColor(text)
    if not color.isValid():
        logger.debug("Unknown colour %r, using %s", value, default)
        return QColor(default)
    return color


def parse_font(value: Optional[str]) -> QFont:
    """Build a QFont from a CSS font shorthand such as ``"bold 24px serif"``."""
    match = _FONT_RE.match((value or DEFAULT_FONT).strip())
    if not match:
        match = _FONT_RE.match(DEFAULT_FONT)
    family = match.group("family").split(",")[0].strip().strip("'\"")
    font = QFont()
    hint = _GENERIC_FAMILIES.get(family.lower())
    if hint is not None:
        font.setStyleHint(hint)
    else:
        font.setFamily(family)
    font.setPixelSize(max(1, int(round(float(match.group("size"))))))
    weight = (match.group("weight") or "").lower()
    if weight in ("bold", "bolder") or (weight.isdigit() and int(weight) >= 600):
        font.setBold(True)
    if (match.group("style") or "").lower() in ("italic", "oblique"):
        font.setItalic(True)
    return font


def _dashed_pen(color: str, width: float, dashes) -> QPen:
    pen = QPen(parse_color(color))
    pen.setWidthF(width)
    # QPen dash patterns are expressed in multiples of the pen width.
    pen.setDashPattern([d / width for d in dashes])
    return pen


def _stroke_box(painter: QPainter, box: BoundingBox, pen: QPen) -> None:
    if box.is_empty or not box.is_finite():
        return
    painter.save()
    painter.setPen(pen)
    painter.setBrush(Qt.NoBrush)
    painter.drawRect(QRectF(box.min_x, box.min_y, box.width, box.height))
    painter.restore()


def clear_rect(painter: QPainter, rect: QRectF) -> None:
    painter.save()
    painter.setCompositionMode(QPainter.CompositionMode_Clear)
    painter.fillRect(rect, Qt.transparent)
    painter.restore()


def paint_path(painter: QPainter, path: Sequence[Point], style: StrokeStyle) -> None:
    """Stroke a polyline through ``path``."""
    if not path:
        return
    pen = QPen(parse_color(style.color))
    pen.setWidthF(_visible_width(style.line_width))
    pen.setCapStyle(Qt.RoundCap)
    pen.setJoinStyle(Qt.RoundJoin)
    painter.save()
    painter.setPen(pen)
    painter.setBrush(Qt.NoBrush)
    if len(path) == 1:
        painter.drawPoint(QPointF(path[0].x, path[0].y))
    else:
        painter.drawPolyline(QPolygonF([QPointF(p.x, p.y) for p in path]))
    painter.restore()


def paint_instruction(painter: QPainter, instruction: DrawingInstruction) -> None:
    """Paint one instruction; degenerate geometry paints nothing."""
    painter.save()
    try:
        if isinstance(instruction, RectInstruction):
            painter.fillRect(
                QRectF(_safe(instruction.x), _safe(instruction.y),
                       _safe(instruction.width), _safe(instruction.height)),
                parse_color(instruction.fill),
            )
        elif isinstance(instruction, CircleInstruction):
            radius = _safe(instruction.radius)
            painter.setPen(Qt.NoPen)
            painter.setBrush(QBrush(parse_color(instruction.fill)))
            painter.drawEllipse(QPointF(_safe(instruction.x), _safe(instruction.y)), radius, radius)
        elif isinstance(instruction, LineInstruction):
            pen = QPen(parse_color(instruction.stroke))
            pen.setWidthF(_visible_width(instruction.line_width))
            painter.setPen(pen)
            painter.drawLine(
                QPointF(_safe(instruction.x1), _safe(instruction.y1)),
                QPointF(_safe(instruction.x2), _safe(instruction.y2)),
            )
        elif isinstance(instruction, TextInstruction):
            painter.setPen(parse_color(instruction.fill))
            painter.setFont(parse_font(instruction.font))
            painter.drawText(QPointF(_safe(instruction.x), _safe(instruction.y)), instruction.text)
        elif isinstance(instruction, PolygonInstruction):
            _paint_polygon(painter, instruction)
        elif isinstance(instruction, EraseAction):
            rect = instruction.clear_rect
            clear_rect(painter, QRectF(rect.x, rect.y, rect.width, rect.height))
    finally:
        painter.restore()


def _paint_polygon(painter: QPainter, polygon: PolygonInstruction) -> None:
    if len(polygon.points) < 2:
        return
    path = QPainterPath()
    first, *rest = polygon.points
    path.moveTo(first.x, first.y)
    for point in rest:
        path.lineTo(point.x, point.y)
    path.closeSubpath()
    if polygon.fill:
        painter.fillPath(path, parse_color(polygon.fill))
    if polygon.stroke:
        pen = QPen(parse_color(polygon.stroke))
        pen.setWidthF(_visible_width(polygon.line_width))
        painter.strokePath(path, pen)


def paint_action(painter: QPainter, action: DrawingAction) -> None:
    if isinstance(action, FreehandAction):
        paint_path(painter, action.path, action.style)
    else:
        paint_instruction(painter, action)


def paint(painter: QPainter, actions: Sequence[DrawingAction], size: QSizeF) -> None:
    """Clear the surface and paint every action; selected ones get a dashed box."""
    clear_rect(painter, QRectF(0, 0, size.width(), size.height()))
    painter.setRenderHint(QPainter.Antialiasing)
    outline = _dashed_pen(DEFAULT_COLOR, 1.0, SELECTED_DASH)
    for action in actions:
        paint_action(painter, action)
        if action.selected:
            _stroke_box(painter, action_bounding_box(action), outline)


def paint_preview(
    painter: QPainter,
    instructions: Sequence[DrawingInstruction],
    position: Point,
    show_box: bool = True,
) -> None:
    """Paint a pending batch centred on ``position`` with its outline."""
    for instruction in translate_batch(instructions, position):
        paint_instruction(painter, instruction)
    if not show_box:
        return
    box = bounding_box(instructions)
    if box.is_empty or not box.is_finite():
        return
    half_w, half_h = box.width / 2, box.height / 2
    shifted = BoundingBox(position.x - half_w, position.y - half_h, position.x + half_w, position.y + half_h)
    _stroke_box(painter, shifted, _dashed_pen(PREVIEW_BOX_COLOR, 1.0, PREVIEW_DASH))


def paint_selection_box(painter: QPainter, rect: Rect) -> None:
    box = BoundingBox(rect.x, rect.y, rect.x + rect.width, rect.y + rect.height)
    _stroke_box(painter, box, _dashed_pen(SELECTION_BOX_COLOR, 1.0, SELECTION_BOX_DASH))


def paint_scene(painter: QPainter, state, size: QSizeF) -> None:
    """Paint one full frame for a :class:`~whiteboard.controller.CanvasState`."""
    paint(painter, state.actions, size)

    if state.current_path:
        paint_path(painter, state.current_path, state.style)

    if state.has_pending_preview and state.preview_position is not None:
        paint_preview(painter, state.pending_preview, state.preview_position, state.preview_visible)

    if state.selection_box is not None:
        paint_selection_box(painter, state.selection_box)

    highlight = _dashed_pen(HIGHLIGHT_COLOR, 2.0, HIGHLIGHT_DASH)
    for action in state.actions:
        if action.selected:
            _stroke_box(painter, action_bounding_box(action), highlight)
