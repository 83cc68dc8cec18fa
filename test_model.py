"""Tests for the QObject-facing WhiteboardModel."""

import base64
import json

import httpx
import pytest
from PySide6.QtCore import QCoreApplication, QThreadPool

from whiteboard import WhiteboardModel
from whiteboard.config import WhiteboardConfig
from whiteboard.generation import GenerationClient
from whiteboard.types import LineInstruction, Mode, RectInstruction, Status

RESPONSE = {
    "instructions": [
        {"type": "rect", "id": "body", "x": 0, "y": 0, "width": 40, "height": 20, "fill": "brown"},
        {"type": "line", "id": "roof", "x1": 0, "y1": 0, "x2": 40, "y2": -20},
    ]
}


class RecordingTransport(httpx.BaseTransport):
    def __init__(self, status=200, body=None):
        self.status = status
        self.body = RESPONSE if body is None else body
        self.requests = []

    def handle_request(self, request):
        self.requests.append(request)
        return httpx.Response(self.status, json=self.body)


@pytest.fixture
def thread_pool(app):
    return QThreadPool()


def make_model(thread_pool, transport=None):
    transport = transport or RecordingTransport()
    client = GenerationClient(base_url="http://draw.test", transport=transport)
    return WhiteboardModel(config=WhiteboardConfig(), client=client, thread_pool=thread_pool)


def wait_for(pool):
    pool.waitForDone()
    QCoreApplication.processEvents()


@pytest.fixture
def model(thread_pool):
    return make_model(thread_pool)


def draw(model, *points):
    model.pointerDown(*points[0])
    for point in points[1:]:
        model.pointerMove(*point)
    model.pointerUp(*points[-1])
    model.click(*points[-1])


class TestDefaults:
    def test_initial_properties(self, model):
        assert model.actionCount == 0
        assert model.mode == "draw"
        assert not model.selectionEnabled
        assert model.brushColor == "black"
        assert model.brushWidth == 3.0
        assert model.prompt == "draw a house with a tree"
        assert model.palette == ["red", "blue", "green", "orange", "black"]
        assert not model.loading
        assert model.errorMessage == ""


class TestDrawing:
    def test_freehand_stroke(self, model):
        changes = []
        model.stateChanged.connect(lambda: changes.append(True))
        draw(model, (0, 0), (10, 10), (20, 5))
        assert model.actionCount == 1
        assert changes

    def test_brush_settings(self, model):
        emitted = []
        model.brushChanged.connect(lambda: emitted.append(True))
        model.setBrushColor("red")
        model.setBrushWidth(50)
        assert model.brushColor == "red"
        assert model.brushWidth == 10.0
        assert len(emitted) == 2

    def test_undo(self, model):
        draw(model, (0, 0), (1, 1))
        draw(model, (2, 2), (3, 3))
        model.undo()
        assert model.actionCount == 1

    def test_clear(self, model):
        draw(model, (0, 0), (1, 1))
        model.clear()
        assert model.actionCount == 0


class TestSelection:
    def test_select_and_delete(self, model):
        draw(model, (10, 10), (20, 20))
        model.setSelectionEnabled(True)
        assert model.state.mode == Mode.SELECT
        draw(model, (0, 0), (50, 50))
        assert model.selectedCount == 1
        model.deleteSelected()
        assert model.actionCount == 0

    def test_select_all_and_deselect(self, model):
        draw(model, (10, 10), (20, 20))
        draw(model, (30, 30), (40, 40))
        model.selectAll()
        assert model.selectedCount == 2
        model.deselectAll()
        assert model.selectedCount == 0


class TestGeneration:
    def test_request_enters_preview_and_click_places(self, thread_pool):
        transport = RecordingTransport()
        model = make_model(thread_pool, transport)
        model.setPrompt("a house")

        model.requestGeneration()
        assert model.loading
        wait_for(thread_pool)

        assert not model.loading
        assert model.hasPendingPreview
        assert not model.drawingEnabled
        assert len(transport.requests) == 1

        model.pointerMove(100, 100)
        model.pointerUp(200, 150)
        model.click(200, 150)
        assert model.actionCount == 2
        assert not model.hasPendingPreview
        assert model.state.status == Status.IDLE
        kinds = [type(action) for action in model.state.actions]
        assert kinds == [RectInstruction, LineInstruction]

    def test_request_while_loading_is_ignored(self, thread_pool):
        transport = RecordingTransport()
        model = make_model(thread_pool, transport)
        model.requestGeneration()
        model.requestGeneration()
        wait_for(thread_pool)
        assert len(transport.requests) == 1

    def test_failure_sets_error_and_keeps_document(self, thread_pool):
        model = make_model(thread_pool, RecordingTransport(status=500, body={"error": "Invalid response"}))
        draw(model, (0, 0), (5, 5))
        errors = []
        model.errorChanged.connect(lambda: errors.append(model.errorMessage))

        model.requestGeneration()
        wait_for(thread_pool)

        assert model.errorMessage == "Request failed with status 500"
        assert errors[-1] == "Request failed with status 500"
        assert model.actionCount == 1
        assert not model.hasPendingPreview
        assert model.drawingEnabled

    def test_selection_crop_is_sent(self, thread_pool):
        transport = RecordingTransport()
        model = make_model(thread_pool, transport)
        draw(model, (10, 10), (30, 30))
        model.setSelectionEnabled(True)
        draw(model, (0, 0), (60, 40))

        model.requestGeneration()
        wait_for(thread_pool)

        body = json.loads(transport.requests[0].content)
        assert body["image"].startswith("data:image/jpeg;base64,")
        base64.b64decode(body["image"].split(",", 1)[1])
        assert body["selection"] == {"x": 0, "y": 0, "width": 60, "height": 40}

    def test_undo_discards_preview(self, thread_pool):
        model = make_model(thread_pool)
        model.requestGeneration()
        wait_for(thread_pool)
        model.undo()
        assert not model.hasPendingPreview
        assert model.drawingEnabled


class TestExport:
    def test_save_image(self, model, tmp_path):
        draw(model, (0, 0), (50, 50))
        target = tmp_path / "drawing"
        assert model.saveImage(str(target))
        assert (tmp_path / "drawing.png").exists()

    def test_save_image_from_file_url(self, model, tmp_path):
        target = tmp_path / "board.png"
        assert model.saveImage(target.as_uri())
        assert target.exists()

    def test_canvas_data_url(self, model):
        assert model.canvasDataUrl().startswith("data:image/png;base64,")
