"""Whiteboard with AI-generated drawing instructions, built with PySide6 and QML.

The implementation keeps every interaction as a pure state transition so the
canvas can repaint the full document from a single state value each frame.
"""

from .controller import CanvasState
from .errors import GenerationError, SchemaError, WhiteboardError
from .generation import GenerationClient
from .geometry import bounding_box, freehand_bounding_box, point_in_box
from .model import WhiteboardModel
from .renderer import paint
from .types import (
    CircleInstruction,
    DrawingAction,
    DrawingInstruction,
    EraseAction,
    FreehandAction,
    LineInstruction,
    Mode,
    Point,
    PolygonInstruction,
    Rect,
    RectInstruction,
    Status,
    StrokeStyle,
    TextInstruction,
)
from .ui import create_whiteboard_window, main

__all__ = [
    "CanvasState",
    "CircleInstruction",
    "DrawingAction",
    "DrawingInstruction",
    "EraseAction",
    "FreehandAction",
    "GenerationClient",
    "GenerationError",
    "LineInstruction",
    "Mode",
    "Point",
    "PolygonInstruction",
    "Rect",
    "RectInstruction",
    "SchemaError",
    "Status",
    "StrokeStyle",
    "TextInstruction",
    "WhiteboardError",
    "WhiteboardModel",
    "bounding_box",
    "create_whiteboard_window",
    "freehand_bounding_box",
    "main",
    "paint",
    "point_in_box",
]
