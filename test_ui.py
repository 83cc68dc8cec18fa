"""Tests for the canvas item and the QML window."""

import pytest
from PySide6.QtCore import SIGNAL, QEvent, QPointF, QSize, Qt
from PySide6.QtGui import QImage, QMouseEvent, QPainter
from PySide6.QtQml import QQmlApplicationEngine

from whiteboard import WhiteboardModel, create_whiteboard_window, ui
from whiteboard.canvas import WhiteboardCanvas
from whiteboard.config import WhiteboardConfig
from whiteboard.qml import WHITEBOARD_QML_PATH, load_whiteboard_qml


def mouse_event(kind, x, y):
    pos = QPointF(x, y)
    return QMouseEvent(kind, pos, pos, Qt.LeftButton, Qt.LeftButton, Qt.NoModifier)


@pytest.fixture
def whiteboard_model(app):
    return WhiteboardModel()


@pytest.fixture
def canvas(whiteboard_model):
    item = WhiteboardCanvas()
    item.setWidth(200)
    item.setHeight(150)
    item.model = whiteboard_model
    return item


class TestCanvas:
    def test_model_receives_canvas_size(self, canvas, whiteboard_model):
        assert whiteboard_model._canvas_size == QSize(200, 150)

    def test_mouse_gesture_commits_stroke(self, canvas, whiteboard_model):
        canvas.mousePressEvent(mouse_event(QEvent.MouseButtonPress, 10, 10))
        canvas.mouseMoveEvent(mouse_event(QEvent.MouseMove, 40, 40))
        canvas.mouseReleaseEvent(mouse_event(QEvent.MouseButtonRelease, 40, 40))
        assert whiteboard_model.actionCount == 1

    def test_paint_draws_model_state(self, canvas, whiteboard_model):
        whiteboard_model.pointerDown(0, 75)
        whiteboard_model.pointerMove(200, 75)
        whiteboard_model.pointerUp(200, 75)

        image = QImage(200, 150, QImage.Format_ARGB32_Premultiplied)
        image.fill(Qt.transparent)
        painter = QPainter(image)
        canvas.paint(painter)
        painter.end()
        assert image.pixelColor(100, 75).alpha() == 255

    def test_state_changes_request_repaint(self, app):
        first, second = WhiteboardModel(), WhiteboardModel()
        state_changed = SIGNAL("stateChanged()")
        item = WhiteboardCanvas()

        item.model = first
        assert first.receivers(state_changed) == 1

        item.model = second
        assert first.receivers(state_changed) == 0
        assert second.receivers(state_changed) == 1

    def test_frame_interval(self, canvas):
        canvas.frameInterval = 33
        assert canvas.frameInterval == 33


class TestWindow:
    def test_qml_source_is_packaged(self):
        assert WHITEBOARD_QML_PATH.exists()
        assert "WhiteboardCanvas" in load_whiteboard_qml()

    def test_create_window(self, whiteboard_model):
        engine = create_whiteboard_window(whiteboard_model)
        assert isinstance(engine, QQmlApplicationEngine)
        assert engine.rootObjects()


class FakeEngine:
    def rootObjects(self):
        return [object()]


class TestMain:
    def test_invalid_environment_falls_back_to_defaults(self, app, monkeypatch, caplog):
        seen = {}

        def fake_window(model, config=None):
            seen["config"] = config
            return FakeEngine()

        monkeypatch.setenv("WHITEBOARD_SMOKE", "1")
        monkeypatch.setenv("WHITEBOARD_TIMEOUT", "-1")
        monkeypatch.setattr(ui, "create_whiteboard_window", fake_window)

        with caplog.at_level("WARNING", logger="whiteboard.ui"):
            assert ui.main() == 0

        assert seen["config"] == WhiteboardConfig()
        assert "using defaults" in caplog.text

    def test_smoke_run_with_valid_environment(self, app, monkeypatch):
        seen = {}

        def fake_window(model, config=None):
            seen["config"] = config
            return FakeEngine()

        monkeypatch.setenv("WHITEBOARD_SMOKE", "1")
        monkeypatch.setenv("WHITEBOARD_TIMEOUT", "5")
        monkeypatch.setattr(ui, "create_whiteboard_window", fake_window)

        assert ui.main() == 0
        assert seen["config"].timeout == 5.0
