"""Bounding boxes, hit-testing and batch translation.

Two empty-input conventions coexist here: :func:`bounding_box` returns
:data:`EMPTY_BOUNDS` (infinite, inverted) when it finds no coordinates,
while :func:`freehand_bounding_box` returns a zero box for an empty path.
Callers use :attr:`BoundingBox.is_empty` to guard the first case.
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Iterable, Iterator, List, Sequence, Tuple

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
    TextInstruction,
)

EMPTY_BOUNDS = BoundingBox(math.inf, math.inf, -math.inf, -math.inf)


def _safe(value) -> float:
    return 0.0 if value is None else float(value)


def _coordinates(instruction: DrawingInstruction) -> Iterator[Tuple[float, float]]:
    if isinstance(instruction, EraseAction):
        rect = instruction.clear_rect
        yield rect.x, rect.y
        yield rect.x + rect.width, rect.y + rect.height
        return

    x = getattr(instruction, "x", None)
    y = getattr(instruction, "y", None)
    if x is not None and y is not None:
        if isinstance(instruction, CircleInstruction):
            r = abs(_safe(instruction.radius))
            yield x - r, y - r
            yield x + r, y + r
        else:
            yield x, y
        if isinstance(instruction, RectInstruction):
            yield x + _safe(instruction.width), y + _safe(instruction.height)

    if isinstance(instruction, LineInstruction):
        if instruction.x1 is not None and instruction.y1 is not None:
            yield instruction.x1, instruction.y1
        if instruction.x2 is not None and instruction.y2 is not None:
            yield instruction.x2, instruction.y2

    if isinstance(instruction, PolygonInstruction):
        for point in instruction.points:
            yield point.x, point.y


def bounding_box(instructions: Iterable[DrawingInstruction]) -> BoundingBox:
    """Return the box around every coordinate found in ``instructions``."""
    min_x = min_y = math.inf
    max_x = max_y = -math.inf
    for instruction in instructions:
        for x, y in _coordinates(instruction):
            min_x = min(min_x, x)
            min_y = min(min_y, y)
            max_x = max(max_x, x)
            max_y = max(max_y, y)
    return BoundingBox(min_x, min_y, max_x, max_y)


def freehand_bounding_box(path: Sequence[Point]) -> BoundingBox:
    """Return the box around a freehand path; an empty path gives a zero box."""
    if not path:
        return BoundingBox(0.0, 0.0, 0.0, 0.0)
    xs = [p.x for p in path]
    ys = [p.y for p in path]
    return BoundingBox(min(xs), min(ys), max(xs), max(ys))


def action_bounding_box(action: DrawingAction) -> BoundingBox:
    if isinstance(action, FreehandAction):
        return freehand_bounding_box(action.path)
    return bounding_box([action])


def point_in_box(x: float, y: float, box: BoundingBox) -> bool:
    """Inclusive containment test on all four sides."""
    return box.min_x <= x <= box.max_x and box.min_y <= y <= box.max_y


def normalize_rect(start: Point, end: Point) -> Rect:
    """Return the rectangle spanning two corner points in any order."""
    return Rect(
        min(start.x, end.x),
        min(start.y, end.y),
        abs(start.x - end.x),
        abs(start.y - end.y),
    )


def box_contains(outer: Rect, inner: BoundingBox) -> bool:
    """True when ``inner`` lies entirely inside ``outer``.

    Boxes without coordinates are never contained.
    """
    if inner.is_empty:
        return False
    return (
        inner.min_x >= outer.x
        and inner.max_x <= outer.x + outer.width
        and inner.min_y >= outer.y
        and inner.max_y <= outer.y + outer.height
    )


def center_offset(instructions: Sequence[DrawingInstruction], target: Point) -> Tuple[float, float]:
    """Offset that moves the batch's bounding-box centre onto ``target``."""
    box = bounding_box(instructions)
    if box.is_empty or not box.is_finite():
        return 0.0, 0.0
    center = box.center
    return target.x - center.x, target.y - center.y


def translate_instruction(instruction: DrawingInstruction, dx: float, dy: float) -> DrawingInstruction:
    """Return a copy of ``instruction`` shifted by ``(dx, dy)``.

    Absent coordinates stay absent.
    """
    if isinstance(instruction, EraseAction):
        rect = instruction.clear_rect
        return replace(instruction, clear_rect=replace(rect, x=rect.x + dx, y=rect.y + dy))

    if isinstance(instruction, PolygonInstruction):
        points = tuple(Point(p.x + dx, p.y + dy) for p in instruction.points)
        return replace(instruction, points=points)

    if isinstance(instruction, LineInstruction):
        changes = {}
        for name, delta in (("x1", dx), ("y1", dy), ("x2", dx), ("y2", dy)):
            value = getattr(instruction, name)
            if value is not None:
                changes[name] = value + delta
        return replace(instruction, **changes)

    if isinstance(instruction, (RectInstruction, CircleInstruction, TextInstruction)):
        changes = {}
        if instruction.x is not None:
            changes["x"] = instruction.x + dx
        if instruction.y is not None:
            changes["y"] = instruction.y + dy
        return replace(instruction, **changes)

    return instruction


def translate_batch(instructions: Sequence[DrawingInstruction], target: Point) -> List[DrawingInstruction]:
    """Centre a batch on ``target``; always computed from the given originals."""
    dx, dy = center_offset(instructions, target)
    return [translate_instruction(inst, dx, dy) for inst in instructions]
