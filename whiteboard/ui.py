"""UI creation functions for the whiteboard."""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from PySide6.QtCore import QUrl
from PySide6.QtQml import QQmlApplicationEngine, qmlRegisterType
from pydantic import ValidationError

from .canvas import WhiteboardCanvas
from .config import WhiteboardConfig, load_config
from .model import WhiteboardModel
from .qml import QML_DIR, WHITEBOARD_QML_PATH

logger = logging.getLogger(__name__)

_types_registered = False


def register_qml_types() -> None:
    """Expose WhiteboardCanvas to QML as ``Whiteboard 1.0``."""
    global _types_registered
    if _types_registered:
        return
    qmlRegisterType(WhiteboardCanvas, "Whiteboard", 1, 0, "WhiteboardCanvas")
    _types_registered = True


def create_whiteboard_window(
    whiteboard_model: WhiteboardModel,
    config: Optional[WhiteboardConfig] = None,
) -> QQmlApplicationEngine:
    """Create and return a QQmlApplicationEngine hosting the whiteboard UI."""
    config = config or WhiteboardConfig()
    register_qml_types()

    engine = QQmlApplicationEngine()
    engine.rootContext().setContextProperty("whiteboardModel", whiteboard_model)
    engine.rootContext().setContextProperty("frameIntervalMs", config.frame_interval_ms)
    engine.addImportPath(str(QML_DIR))
    engine.load(QUrl.fromLocalFile(str(WHITEBOARD_QML_PATH)))
    return engine


def main() -> int:
    """Main entry point for the whiteboard application."""
    from PySide6.QtWidgets import QApplication

    try:
        config = load_config()
        config_error = None
    except ValidationError as exc:
        config = WhiteboardConfig()
        config_error = exc
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if config_error is not None:
        logger.warning("Invalid WHITEBOARD_* settings, using defaults: %s", config_error)

    smoke_mode = "--smoke" in sys.argv or os.environ.get("WHITEBOARD_SMOKE") == "1"

    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)

    whiteboard_model = WhiteboardModel(config=config)
    engine = create_whiteboard_window(whiteboard_model, config)
    if not engine.rootObjects():
        logger.error("Failed to load %s", WHITEBOARD_QML_PATH)
        return 1

    if smoke_mode:
        return 0

    logger.info("Whiteboard ready; generation service at %s%s", config.api_url, config.endpoint)
    return app.exec()
