"""QML UI definition for the whiteboard."""

from __future__ import annotations

from pathlib import Path

QML_DIR = Path(__file__).with_name("qml_ui")
WHITEBOARD_QML_PATH = QML_DIR / "WhiteboardWindow.qml"


def load_whiteboard_qml() -> str:
    """Return the whiteboard QML source as a string."""
    return WHITEBOARD_QML_PATH.read_text(encoding="utf-8")


__all__ = [
    "QML_DIR",
    "WHITEBOARD_QML_PATH",
    "load_whiteboard_qml",
]
