"""Data types for whiteboard documents.

This module contains the core data structures used throughout the
whiteboard: the drawing instruction variants, freehand strokes and the
transient geometry records used by the controller.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Optional, Tuple, Union


class ActionType(Enum):
    """Discriminator for every entry that can live in the action list."""

    FREEHAND = "freehand"
    ERASE = "erase"
    RECT = "rect"
    CIRCLE = "circle"
    LINE = "line"
    TEXT = "text"
    POLYGON = "polygon"


class Mode(Enum):
    """Which gesture a pointer-down starts."""

    DRAW = "draw"
    SELECT = "select"


class Status(Enum):
    """Interaction state of the canvas."""

    IDLE = "idle"
    FREEHAND_DRAWING = "freehand-drawing"
    SELECTING = "selecting"
    AI_PREVIEW_PENDING = "ai-preview-pending"


@dataclass(frozen=True)
class Point:
    """A single canvas coordinate."""

    x: float
    y: float


@dataclass(frozen=True)
class StrokeStyle:
    """Pen settings for freehand strokes."""

    color: str = "black"
    line_width: float = 3.0


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle given by its top-left corner and size."""

    x: float
    y: float
    width: float
    height: float

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


@dataclass(frozen=True)
class BoundingBox:
    """Minimal axis-aligned box around a shape or shape set.

    A box with ``min_x > max_x`` carries no coordinates at all; see
    :data:`whiteboard.geometry.EMPTY_BOUNDS`.
    """

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def is_empty(self) -> bool:
        return self.min_x > self.max_x or self.min_y > self.max_y

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Point:
        return Point((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in (self.min_x, self.min_y, self.max_x, self.max_y))

    def to_rect(self) -> Rect:
        return Rect(self.min_x, self.min_y, self.width, self.height)


@dataclass(frozen=True)
class RectInstruction:
    """Filled rectangle."""

    action_type: ClassVar[ActionType] = ActionType.RECT

    id: str
    x: Optional[float] = None
    y: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    fill: Optional[str] = None
    selected: bool = False


@dataclass(frozen=True)
class CircleInstruction:
    """Filled circle centred on ``(x, y)``."""

    action_type: ClassVar[ActionType] = ActionType.CIRCLE

    id: str
    x: Optional[float] = None
    y: Optional[float] = None
    radius: Optional[float] = None
    fill: Optional[str] = None
    selected: bool = False


@dataclass(frozen=True)
class LineInstruction:
    """Stroked segment from ``(x1, y1)`` to ``(x2, y2)``."""

    action_type: ClassVar[ActionType] = ActionType.LINE

    id: str
    x1: Optional[float] = None
    y1: Optional[float] = None
    x2: Optional[float] = None
    y2: Optional[float] = None
    stroke: Optional[str] = None
    line_width: Optional[float] = None
    selected: bool = False


@dataclass(frozen=True)
class TextInstruction:
    """Filled text anchored at its baseline origin."""

    action_type: ClassVar[ActionType] = ActionType.TEXT

    id: str
    x: Optional[float] = None
    y: Optional[float] = None
    text: str = ""
    font: Optional[str] = None
    fill: Optional[str] = None
    selected: bool = False


@dataclass(frozen=True)
class PolygonInstruction:
    """Closed polygon; needs at least two points to be painted."""

    action_type: ClassVar[ActionType] = ActionType.POLYGON

    id: str
    points: Tuple[Point, ...] = ()
    fill: Optional[str] = None
    stroke: Optional[str] = None
    line_width: Optional[float] = None
    selected: bool = False


@dataclass(frozen=True)
class EraseAction:
    """A rectangle cleared back to the canvas background."""

    action_type: ClassVar[ActionType] = ActionType.ERASE

    id: str
    clear_rect: Rect
    style: StrokeStyle = field(default_factory=StrokeStyle)
    selected: bool = False


@dataclass(frozen=True)
class FreehandAction:
    """A committed hand-drawn stroke."""

    action_type: ClassVar[ActionType] = ActionType.FREEHAND

    id: str
    path: Tuple[Point, ...]
    style: StrokeStyle = field(default_factory=StrokeStyle)
    selected: bool = False


DrawingInstruction = Union[
    RectInstruction,
    CircleInstruction,
    LineInstruction,
    TextInstruction,
    PolygonInstruction,
    EraseAction,
]

DrawingAction = Union[FreehandAction, DrawingInstruction]
