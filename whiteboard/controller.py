"""Interaction state machine for the whiteboard canvas.

Every operation is a pure function taking the current :class:`CanvasState`
plus an event and returning the next state. The Qt layer in
:mod:`whiteboard.model` owns a single state value and replaces it after
each event, so the canvas never sees a half-applied transition.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import AbstractSet, Optional, Sequence, Tuple

from .geometry import (
    action_bounding_box,
    bounding_box,
    box_contains,
    normalize_rect,
    point_in_box,
    translate_batch,
)
from .schema import NO_INSTRUCTIONS_MESSAGE
from .types import (
    DrawingAction,
    DrawingInstruction,
    FreehandAction,
    Mode,
    Point,
    Rect,
    Status,
    StrokeStyle,
)

logger = logging.getLogger(__name__)

MIN_LINE_WIDTH = 1.0
MAX_LINE_WIDTH = 10.0


@dataclass(frozen=True)
class CanvasState:
    """Everything the canvas needs to repaint and to handle the next event."""

    actions: Tuple[DrawingAction, ...] = ()
    mode: Mode = Mode.DRAW
    status: Status = Status.IDLE
    style: StrokeStyle = StrokeStyle()
    current_path: Tuple[Point, ...] = ()
    drag_start: Optional[Point] = None
    drag_registered: bool = False
    selection_box: Optional[Rect] = None
    pending_preview: Tuple[DrawingInstruction, ...] = ()
    preview_position: Optional[Point] = None
    preview_visible: bool = False
    drawing_enabled: bool = True
    generating: bool = False
    error: Optional[str] = None
    next_id: int = 0

    @property
    def has_pending_preview(self) -> bool:
        return self.status == Status.AI_PREVIEW_PENDING and bool(self.pending_preview)

    @property
    def selected_count(self) -> int:
        return sum(1 for action in self.actions if action.selected)


def _allocate_id(
    state: CanvasState, prefix: str, taken: AbstractSet[str] = frozenset()
) -> Tuple[str, CanvasState]:
    """Mint the next ``<prefix>_<n>`` id not used by any action or in ``taken``."""
    used = {action.id for action in state.actions} | set(taken)
    next_id = state.next_id
    while f"{prefix}_{next_id}" in used:
        next_id += 1
    return f"{prefix}_{next_id}", replace(state, next_id=next_id + 1)


def _commit_stroke(state: CanvasState) -> CanvasState:
    if not state.current_path:
        return replace(state, status=Status.IDLE)
    stroke_id, state = _allocate_id(state, "stroke")
    action = FreehandAction(id=stroke_id, path=state.current_path, style=state.style)
    return replace(
        state,
        actions=state.actions + (action,),
        current_path=(),
        status=Status.IDLE,
    )


def _finish_gesture(state: CanvasState) -> CanvasState:
    """Close whatever drag is running so another state can take over."""
    if state.status == Status.FREEHAND_DRAWING:
        return _commit_stroke(state)
    if state.status == Status.SELECTING:
        return replace(
            state, status=Status.IDLE, drag_start=None, drag_registered=False, selection_box=None
        )
    return state


def _discard_preview(state: CanvasState) -> CanvasState:
    status = Status.IDLE if state.status == Status.AI_PREVIEW_PENDING else state.status
    return replace(
        state,
        status=status,
        pending_preview=(),
        preview_position=None,
        preview_visible=False,
        drawing_enabled=True,
    )


# --- Selection --------------------------------------------------------------
def select_in_rect(actions: Sequence[DrawingAction], rect: Rect) -> Tuple[DrawingAction, ...]:
    """Mark exactly the actions whose bounding box lies inside ``rect``."""
    return tuple(
        replace(action, selected=box_contains(rect, action_bounding_box(action)))
        for action in actions
    )


def select_at(actions: Sequence[DrawingAction], x: float, y: float) -> Tuple[DrawingAction, ...]:
    """Select the topmost action under ``(x, y)``, deselecting the rest."""
    found: Optional[int] = None
    for index in range(len(actions) - 1, -1, -1):
        if point_in_box(x, y, action_bounding_box(actions[index])):
            found = index
            break
    return tuple(replace(action, selected=index == found) for index, action in enumerate(actions))


def select_all(state: CanvasState) -> CanvasState:
    return replace(state, actions=tuple(replace(a, selected=True) for a in state.actions))


def deselect_all(state: CanvasState) -> CanvasState:
    return replace(state, actions=tuple(replace(a, selected=False) for a in state.actions))


# --- Pointer events ---------------------------------------------------------
def pointer_down(state: CanvasState, x: float, y: float) -> CanvasState:
    if state.status != Status.IDLE:
        return state

    if state.mode == Mode.DRAW:
        if not state.drawing_enabled:
            return state
        return replace(state, status=Status.FREEHAND_DRAWING, current_path=(Point(x, y),))

    start = Point(x, y)
    return replace(
        state,
        status=Status.SELECTING,
        drag_start=start,
        drag_registered=False,
        selection_box=Rect(x, y, 0.0, 0.0),
    )


def pointer_move(state: CanvasState, x: float, y: float) -> CanvasState:
    if state.status == Status.AI_PREVIEW_PENDING:
        return replace(state, preview_position=Point(x, y))

    if state.status == Status.FREEHAND_DRAWING:
        return replace(state, current_path=state.current_path + (Point(x, y),))

    if state.status == Status.SELECTING and state.drag_start is not None:
        current = Point(x, y)
        moved = state.drag_registered or current != state.drag_start
        return replace(
            state,
            selection_box=normalize_rect(state.drag_start, current),
            drag_registered=moved,
        )

    return state


def pointer_up(state: CanvasState, x: float, y: float) -> CanvasState:
    if state.status == Status.FREEHAND_DRAWING:
        return _commit_stroke(state)

    if state.status == Status.SELECTING:
        if state.drag_registered and state.selection_box is not None:
            actions = select_in_rect(state.actions, state.selection_box)
            selection_box = state.selection_box
        else:
            start = state.drag_start or Point(x, y)
            actions = select_at(state.actions, start.x, start.y)
            selection_box = None
        return replace(
            state,
            actions=actions,
            status=Status.IDLE,
            drag_start=None,
            drag_registered=False,
            selection_box=selection_box,
        )

    return state


def click(state: CanvasState, x: float, y: float) -> CanvasState:
    """Commit the pending preview centred on ``(x, y)``; no-op otherwise."""
    if not state.has_pending_preview:
        return state

    used = {action.id for action in state.actions}
    placed = []
    for instruction in translate_batch(state.pending_preview, Point(x, y)):
        instruction_id = instruction.id
        if not instruction_id or instruction_id in used:
            instruction_id, state = _allocate_id(state, "ai", used)
        used.add(instruction_id)
        placed.append(replace(instruction, id=instruction_id, selected=False))

    state = replace(state, actions=state.actions + tuple(placed))
    return _discard_preview(state)


# --- Settings ---------------------------------------------------------------
def set_mode(state: CanvasState, mode: Mode) -> CanvasState:
    state = _finish_gesture(state)
    return replace(state, mode=mode, selection_box=None)


def set_style_color(state: CanvasState, color: str) -> CanvasState:
    return replace(state, style=replace(state.style, color=color))


def set_style_width(state: CanvasState, width: float) -> CanvasState:
    clamped = max(MIN_LINE_WIDTH, min(MAX_LINE_WIDTH, float(width)))
    return replace(state, style=replace(state.style, line_width=clamped))


# --- Generation -------------------------------------------------------------
def begin_generation(state: CanvasState) -> CanvasState:
    """Mark a request as in flight; a second request while loading is ignored."""
    if state.generating:
        logger.info("Generation already in progress; ignoring new request")
        return state
    return replace(state, generating=True, error=None)


def receive_generation(state: CanvasState, instructions: Sequence[DrawingInstruction]) -> CanvasState:
    if not instructions:
        return fail_generation(state, NO_INSTRUCTIONS_MESSAGE)
    state = _finish_gesture(state)
    return replace(
        state,
        status=Status.AI_PREVIEW_PENDING,
        pending_preview=tuple(instructions),
        preview_position=None,
        preview_visible=True,
        drawing_enabled=False,
        generating=False,
        error=None,
    )


def fail_generation(state: CanvasState, message: str) -> CanvasState:
    return replace(state, generating=False, error=message or "Unknown error occurred.")


def show_preview_at_origin(state: CanvasState) -> CanvasState:
    """Show the pending batch at the coordinates it was generated with."""
    if not state.has_pending_preview:
        return state
    box = bounding_box(state.pending_preview)
    if box.is_empty or not box.is_finite():
        return state
    return replace(state, preview_position=box.center, preview_visible=True)


# --- Document edits ---------------------------------------------------------
def undo(state: CanvasState) -> CanvasState:
    """Drop the most recent action and any pending preview."""
    return _discard_preview(replace(state, actions=state.actions[:-1]))


def delete_selected(state: CanvasState) -> CanvasState:
    return replace(state, actions=tuple(a for a in state.actions if not a.selected))


def clear(state: CanvasState) -> CanvasState:
    """Empty the document and reset every transient gesture."""
    return replace(
        state,
        actions=(),
        status=Status.IDLE,
        current_path=(),
        drag_start=None,
        drag_registered=False,
        selection_box=None,
        pending_preview=(),
        preview_position=None,
        preview_visible=False,
        drawing_enabled=True,
        error=None,
    )
