"""QML canvas item that feeds pointer events to the model and repaints it."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Property, QObject, QSizeF, Qt, QTimer, Signal
from PySide6.QtGui import QPainter
from PySide6.QtQuick import QQuickPaintedItem

from .model import WhiteboardModel
from .renderer import paint_scene

DEFAULT_FRAME_INTERVAL_MS = 16


class WhiteboardCanvas(QQuickPaintedItem):
    """Paints the whole scene on a fixed-rate timer and after every state change."""

    modelChanged = Signal()
    frameIntervalChanged = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._model: Optional[WhiteboardModel] = None
        self.setAcceptedMouseButtons(Qt.LeftButton)
        self.setAcceptHoverEvents(True)
        self.setAntialiasing(True)

        self._frame_timer = QTimer(self)
        self._frame_timer.setInterval(DEFAULT_FRAME_INTERVAL_MS)
        self._frame_timer.timeout.connect(self.update)
        self._frame_timer.start()

        self.widthChanged.connect(self._sync_size)
        self.heightChanged.connect(self._sync_size)

    def _get_model(self) -> Optional[WhiteboardModel]:
        return self._model

    def _set_model(self, model: Optional[WhiteboardModel]) -> None:
        if self._model is model:
            return
        if self._model is not None:
            self._model.stateChanged.disconnect(self.update)
        self._model = model
        if model is not None:
            model.stateChanged.connect(self.update)
        self._sync_size()
        self.modelChanged.emit()

    model = Property(QObject, _get_model, _set_model, notify=modelChanged)

    def _get_frame_interval(self) -> int:
        return self._frame_timer.interval()

    def _set_frame_interval(self, value: int) -> None:
        value = max(1, int(value))
        if self._frame_timer.interval() != value:
            self._frame_timer.setInterval(value)
            self.frameIntervalChanged.emit()

    frameInterval = Property(int, _get_frame_interval, _set_frame_interval, notify=frameIntervalChanged)

    def _sync_size(self) -> None:
        if self._model is not None:
            self._model.setCanvasSize(self.width(), self.height())

    # --- Painting -----------------------------------------------------------
    def paint(self, painter: QPainter) -> None:  # type: ignore[override]
        if self._model is None:
            return
        paint_scene(painter, self._model.state, QSizeF(self.width(), self.height()))

    # --- Pointer events -----------------------------------------------------
    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        if self._model is None:
            event.ignore()
            return
        pos = event.position()
        self._model.pointerDown(pos.x(), pos.y())
        event.accept()

    def mouseMoveEvent(self, event) -> None:  # type: ignore[override]
        if self._model is None:
            return
        pos = event.position()
        self._model.pointerMove(pos.x(), pos.y())
        event.accept()

    def mouseReleaseEvent(self, event) -> None:  # type: ignore[override]
        if self._model is None:
            return
        pos = event.position()
        self._model.pointerUp(pos.x(), pos.y())
        self._model.click(pos.x(), pos.y())
        event.accept()

    def hoverMoveEvent(self, event) -> None:  # type: ignore[override]
        if self._model is not None:
            pos = event.position()
            self._model.pointerMove(pos.x(), pos.y())
        super().hoverMoveEvent(event)
