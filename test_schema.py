"""Tests for the drawing instruction wire schema."""

import pytest

from whiteboard.errors import SchemaError
from whiteboard.schema import parse_response
from whiteboard.types import (
    CircleInstruction,
    EraseAction,
    LineInstruction,
    Point,
    PolygonInstruction,
    Rect,
    RectInstruction,
    TextInstruction,
)


def test_parse_every_variant():
    data = {
        "instructions": [
            {"type": "rect", "id": "r", "x": 1, "y": 2, "width": 3, "height": 4, "fill": "red"},
            {"type": "circle", "id": "c", "x": 5, "y": 6, "radius": 7},
            {"type": "line", "id": "l", "x1": 0, "y1": 0, "x2": 9, "y2": 9, "stroke": "blue", "lineWidth": 2},
            {"type": "text", "id": "t", "x": 1, "y": 1, "text": "Hi", "font": "20px serif"},
            {"type": "polygon", "id": "p", "points": [{"x": 0, "y": 0}, {"x": 4, "y": 0}, {"x": 2, "y": 3}]},
            {"type": "erase", "id": "e", "x": 0, "y": 0, "width": 10, "height": 10},
        ]
    }
    rect, circle, line, text, polygon, erase = parse_response(data)

    assert rect == RectInstruction(id="r", x=1, y=2, width=3, height=4, fill="red")
    assert circle == CircleInstruction(id="c", x=5, y=6, radius=7)
    assert line == LineInstruction(id="l", x1=0, y1=0, x2=9, y2=9, stroke="blue", line_width=2)
    assert text == TextInstruction(id="t", x=1, y=1, text="Hi", font="20px serif")
    assert isinstance(polygon, PolygonInstruction)
    assert polygon.points == (Point(0, 0), Point(4, 0), Point(2, 3))
    assert isinstance(erase, EraseAction)
    assert erase.clear_rect == Rect(0, 0, 10, 10)


def test_fields_foreign_to_variant_are_dropped():
    (circle,) = parse_response({
        "instructions": [{"type": "circle", "id": "c", "x": 1, "y": 1, "radius": 2,
                          "points": [{"x": 0, "y": 0}]}]
    })
    assert isinstance(circle, CircleInstruction)
    assert not hasattr(circle, "points")


def test_missing_id_is_allowed():
    (rect,) = parse_response({"instructions": [{"type": "rect", "x": 1, "y": 1}]})
    assert rect.id == ""


@pytest.mark.parametrize("data", [None, [], {}, {"instructions": None}, {"instructions": {"type": "rect"}}])
def test_missing_instruction_array(data):
    with pytest.raises(SchemaError, match="No valid instructions"):
        parse_response(data)


def test_unknown_type_is_rejected():
    with pytest.raises(SchemaError):
        parse_response({"instructions": [{"type": "star", "id": "s"}]})


def test_non_numeric_coordinate_is_rejected():
    with pytest.raises(SchemaError):
        parse_response({"instructions": [{"type": "rect", "id": "r", "x": "left"}]})

