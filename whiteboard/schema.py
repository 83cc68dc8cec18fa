"""Wire schema for drawing instructions.

The generation service answers with ``{"instructions": [...]}`` where each
entry is a flat JSON object discriminated by ``type``. These models
validate that shape and convert it into the typed instructions from
:mod:`whiteboard.types`.
"""

from __future__ import annotations

import logging
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import SchemaError
from .types import (
    CircleInstruction,
    DrawingInstruction,
    EraseAction,
    LineInstruction,
    Point,
    PolygonInstruction,
    Rect,
    RectInstruction,
    StrokeStyle,
    TextInstruction,
)

logger = logging.getLogger(__name__)

NO_INSTRUCTIONS_MESSAGE = "No valid instructions were returned."

InstructionKind = Literal["rect", "circle", "line", "text", "polygon", "erase"]


class PointPayload(BaseModel):
    x: float
    y: float


class InstructionPayload(BaseModel):
    """One drawing instruction as it travels over the wire."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: InstructionKind
    id: str = ""
    x: Optional[float] = None
    y: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    radius: Optional[float] = None
    x1: Optional[float] = None
    y1: Optional[float] = None
    x2: Optional[float] = None
    y2: Optional[float] = None
    fill: Optional[str] = None
    stroke: Optional[str] = None
    line_width: Optional[float] = Field(default=None, alias="lineWidth")
    text: Optional[str] = None
    font: Optional[str] = None
    points: Optional[List[PointPayload]] = None
    selected: Optional[bool] = None

    def to_instruction(self) -> DrawingInstruction:
        """Build the typed variant, keeping only the fields it owns."""
        selected = bool(self.selected)
        if self.type == "rect":
            return RectInstruction(
                id=self.id, x=self.x, y=self.y, width=self.width,
                height=self.height, fill=self.fill, selected=selected,
            )
        if self.type == "circle":
            return CircleInstruction(
                id=self.id, x=self.x, y=self.y, radius=self.radius,
                fill=self.fill, selected=selected,
            )
        if self.type == "line":
            return LineInstruction(
                id=self.id, x1=self.x1, y1=self.y1, x2=self.x2, y2=self.y2,
                stroke=self.stroke, line_width=self.line_width, selected=selected,
            )
        if self.type == "text":
            return TextInstruction(
                id=self.id, x=self.x, y=self.y, text=self.text or "",
                font=self.font, fill=self.fill, selected=selected,
            )
        if self.type == "polygon":
            points = tuple(Point(p.x, p.y) for p in self.points or [])
            return PolygonInstruction(
                id=self.id, points=points, fill=self.fill, stroke=self.stroke,
                line_width=self.line_width, selected=selected,
            )
        # erase
        rect = Rect(self.x or 0.0, self.y or 0.0, self.width or 0.0, self.height or 0.0)
        style = StrokeStyle(color=self.fill or "white", line_width=self.line_width or 1.0)
        return EraseAction(id=self.id, clear_rect=rect, style=style, selected=selected)


class DrawingResponse(BaseModel):
    """Top-level response body of the generation service."""

    instructions: List[InstructionPayload]


def parse_response(data: Any) -> List[DrawingInstruction]:
    """Validate a decoded response body and return typed instructions.

    Raises:
        SchemaError: when ``instructions`` is missing, not a list, or any
            entry fails validation.
    """
    if not isinstance(data, dict) or not isinstance(data.get("instructions"), list):
        raise SchemaError(NO_INSTRUCTIONS_MESSAGE)
    try:
        response = DrawingResponse.model_validate(data)
    except ValidationError as exc:
        logger.warning("Rejected drawing payload: %s", exc)
        raise SchemaError(f"Invalid drawing instructions: {exc.error_count()} error(s)") from exc
    return [payload.to_instruction() for payload in response.instructions]
