"""Canvas capture helpers: offscreen rendering, crops and data URLs."""

from __future__ import annotations

import base64
import logging
from pathlib import Path
from typing import Sequence, Union

from PySide6.QtCore import QByteArray, QBuffer, QIODevice, QRect, QSize, QSizeF, QUrl, Qt
from PySide6.QtGui import QImage, QPainter

from .renderer import paint
from .types import DrawingAction, Rect

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_NAME = "canvas-drawing.png"

_MIME_TYPES = {"PNG": "image/png", "JPEG": "image/jpeg", "JPG": "image/jpeg"}


def render_to_image(actions: Sequence[DrawingAction], size: QSize) -> QImage:
    """Paint ``actions`` onto a transparent image of ``size``."""
    image = QImage(max(1, size.width()), max(1, size.height()), QImage.Format_ARGB32_Premultiplied)
    image.fill(Qt.transparent)
    painter = QPainter(image)
    try:
        paint(painter, actions, QSizeF(image.width(), image.height()))
    finally:
        painter.end()
    return image


def image_to_base64(image: QImage, fmt: str = "PNG") -> str:
    """Return the encoded image as base64, or an empty string on failure."""
    if image.isNull():
        return ""

    byte_array = QByteArray()
    buffer = QBuffer(byte_array)
    if not buffer.open(QIODevice.WriteOnly):
        return ""
    save_ok = image.save(buffer, fmt)
    buffer.close()
    if not save_ok:
        return ""

    raw = bytes(byte_array)
    if not raw:
        return ""
    return base64.b64encode(raw).decode("ascii")


def image_to_data_url(image: QImage, fmt: str = "PNG") -> str:
    fmt = fmt.upper()
    payload = image_to_base64(image, fmt)
    if not payload:
        return ""
    return f"data:{_MIME_TYPES.get(fmt, 'image/png')};base64,{payload}"


def selection_to_data_url(image: QImage, selection: Rect) -> str:
    """Crop ``selection`` out of ``image`` onto white and encode it as JPEG.

    Returns an empty string when the selection has no area.
    """
    if selection.is_empty or image.isNull():
        return ""
    source = QRect(int(selection.x), int(selection.y), int(selection.width), int(selection.height))
    crop = QImage(source.width(), source.height(), QImage.Format_RGB32)
    crop.fill(Qt.white)
    painter = QPainter(crop)
    try:
        painter.drawImage(0, 0, image, source.x(), source.y(), source.width(), source.height())
    finally:
        painter.end()
    return image_to_data_url(crop, "JPEG")


def save_image(image: QImage, target: Union[str, Path]) -> bool:
    """Write ``image`` to ``target`` (a path or ``file://`` URL) as PNG."""
    path_text = str(target)
    if path_text.startswith("file://"):
        path_text = QUrl(path_text).toLocalFile()
    if not path_text:
        path_text = DEFAULT_EXPORT_NAME
    path = Path(path_text)
    if path.suffix == "":
        path = path.with_suffix(".png")
    ok = image.save(str(path), "PNG")
    if ok:
        logger.info("Saved canvas to %s", path)
    else:
        logger.error("Could not save canvas to %s", path)
    return ok
