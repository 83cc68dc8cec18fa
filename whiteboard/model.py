"""Core WhiteboardModel class.

This module provides the Qt object that owns the canvas state and exposes
the interaction controller to QML.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from PySide6.QtCore import Property, QObject, QSize, QThreadPool, Signal, Slot

from . import controller
from .capture import image_to_data_url, render_to_image, save_image, selection_to_data_url
from .config import DEFAULT_PALETTE, WhiteboardConfig
from .controller import CanvasState
from .generation import GenerationClient, GenerationTask
from .types import Mode

logger = logging.getLogger(__name__)


class WhiteboardModel(QObject):
    """Qt model exposing the whiteboard state to QML."""

    stateChanged = Signal()
    modeChanged = Signal()
    brushChanged = Signal()
    loadingChanged = Signal()
    errorChanged = Signal()
    previewChanged = Signal()
    promptChanged = Signal()

    def __init__(
        self,
        config: Optional[WhiteboardConfig] = None,
        client: Optional[GenerationClient] = None,
        thread_pool: Optional[QThreadPool] = None,
    ):
        super().__init__()
        self._config = config or WhiteboardConfig()
        self._client = client or GenerationClient.from_config(self._config)
        self._thread_pool = thread_pool or QThreadPool.globalInstance()
        self._state = CanvasState()
        self._prompt = self._config.default_prompt
        self._canvas_size = QSize(800, 600)
        self._active_task: Optional[GenerationTask] = None

    # --- State plumbing -----------------------------------------------------
    @property
    def state(self) -> CanvasState:
        return self._state

    def apply(self, transition: Callable[..., CanvasState], *args) -> None:
        """Run one controller transition and emit what changed."""
        old = self._state
        new = transition(old, *args)
        if new is old:
            return
        self._state = new
        if new.mode != old.mode:
            self.modeChanged.emit()
        if new.style != old.style:
            self.brushChanged.emit()
        if new.generating != old.generating:
            self.loadingChanged.emit()
        if new.error != old.error:
            self.errorChanged.emit()
        if new.status != old.status or new.pending_preview != old.pending_preview:
            self.previewChanged.emit()
        self.stateChanged.emit()

    def setCanvasSize(self, width: float, height: float) -> None:
        self._canvas_size = QSize(max(1, int(width)), max(1, int(height)))

    # --- Properties exposed to QML -----------------------------------------
    @Property(bool, notify=modeChanged)
    def selectionEnabled(self) -> bool:
        return self._state.mode == Mode.SELECT

    @selectionEnabled.setter  # type: ignore[no-redef]
    def selectionEnabled(self, value: bool) -> None:
        self.setSelectionEnabled(value)

    @Property(str, notify=modeChanged)
    def mode(self) -> str:
        return self._state.mode.value

    @Property(str, notify=brushChanged)
    def brushColor(self) -> str:
        return self._state.style.color

    @brushColor.setter  # type: ignore[no-redef]
    def brushColor(self, value: str) -> None:
        self.setBrushColor(value)

    @Property(float, notify=brushChanged)
    def brushWidth(self) -> float:
        return self._state.style.line_width

    @brushWidth.setter  # type: ignore[no-redef]
    def brushWidth(self, value: float) -> None:
        self.setBrushWidth(value)

    @Property(list, constant=True)
    def palette(self) -> List[str]:
        return list(self._config.palette or DEFAULT_PALETTE)

    @Property(str, notify=promptChanged)
    def prompt(self) -> str:
        return self._prompt

    @prompt.setter  # type: ignore[no-redef]
    def prompt(self, value: str) -> None:
        self.setPrompt(value)

    @Property(int, notify=stateChanged)
    def actionCount(self) -> int:
        return len(self._state.actions)

    @Property(int, notify=stateChanged)
    def selectedCount(self) -> int:
        return self._state.selected_count

    @Property(bool, notify=previewChanged)
    def hasPendingPreview(self) -> bool:
        return self._state.has_pending_preview

    @Property(bool, notify=previewChanged)
    def drawingEnabled(self) -> bool:
        return self._state.drawing_enabled

    @Property(bool, notify=loadingChanged)
    def loading(self) -> bool:
        return self._state.generating

    @Property(str, notify=errorChanged)
    def errorMessage(self) -> str:
        return self._state.error or ""

    # --- Pointer events -----------------------------------------------------
    @Slot(float, float)
    def pointerDown(self, x: float, y: float) -> None:
        self.apply(controller.pointer_down, x, y)

    @Slot(float, float)
    def pointerMove(self, x: float, y: float) -> None:
        self.apply(controller.pointer_move, x, y)

    @Slot(float, float)
    def pointerUp(self, x: float, y: float) -> None:
        self.apply(controller.pointer_up, x, y)

    @Slot(float, float)
    def click(self, x: float, y: float) -> None:
        self.apply(controller.click, x, y)

    # --- Settings -----------------------------------------------------------
    @Slot(bool)
    def setSelectionEnabled(self, enabled: bool) -> None:
        self.apply(controller.set_mode, Mode.SELECT if enabled else Mode.DRAW)

    @Slot(str)
    def setBrushColor(self, color: str) -> None:
        if color and color != self._state.style.color:
            self.apply(controller.set_style_color, color)

    @Slot(float)
    def setBrushWidth(self, width: float) -> None:
        self.apply(controller.set_style_width, width)

    @Slot(str)
    def setPrompt(self, prompt: str) -> None:
        if self._prompt != prompt:
            self._prompt = prompt
            self.promptChanged.emit()

    # --- Document edits -----------------------------------------------------
    @Slot()
    def undo(self) -> None:
        self.apply(controller.undo)

    @Slot()
    def deleteSelected(self) -> None:
        self.apply(controller.delete_selected)

    @Slot()
    def clear(self) -> None:
        self.apply(controller.clear)

    @Slot()
    def selectAll(self) -> None:
        self.apply(controller.select_all)

    @Slot()
    def deselectAll(self) -> None:
        self.apply(controller.deselect_all)

    @Slot()
    def previewAtOrigin(self) -> None:
        self.apply(controller.show_preview_at_origin)

    # --- Capture ------------------------------------------------------------
    @Slot(str, result=bool)
    def saveImage(self, target: str) -> bool:
        """Export the document as PNG to a path or file:// URL."""
        image = render_to_image(self._state.actions, self._canvas_size)
        return save_image(image, target)

    @Slot(result=str)
    def canvasDataUrl(self) -> str:
        return image_to_data_url(render_to_image(self._state.actions, self._canvas_size))

    def _selection_image(self) -> Optional[str]:
        selection = self._state.selection_box
        if selection is None or selection.is_empty:
            return None
        image = render_to_image(self._state.actions, self._canvas_size)
        return selection_to_data_url(image, selection) or None

    # --- Generation ---------------------------------------------------------
    @Slot()
    def requestGeneration(self) -> None:
        """Start a background generation request for the current prompt."""
        if self._state.generating:
            logger.info("Ignoring generation request while one is in flight")
            return
        self.apply(controller.begin_generation)

        selection = self._state.selection_box
        if selection is not None and selection.is_empty:
            selection = None
        image = self._selection_image()

        task = GenerationTask(self._client, self._prompt, image, selection)
        task.signals.finished.connect(self._on_generation_finished)
        task.signals.failed.connect(self._on_generation_failed)
        self._active_task = task
        self._thread_pool.start(task)

    @Slot(object)
    def _on_generation_finished(self, instructions) -> None:
        self._active_task = None
        self.apply(controller.receive_generation, list(instructions or []))

    @Slot(str)
    def _on_generation_failed(self, message: str) -> None:
        self._active_task = None
        logger.warning("Generation failed: %s", message)
        self.apply(controller.fail_generation, message)
