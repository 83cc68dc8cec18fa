"""
Generation client for the whiteboard
====================================

HTTP client for the drawing generation service. The service receives a text
prompt (plus an optional image crop of the current selection) and answers
with ``{"instructions": [...]}``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from PySide6.QtCore import QObject, QRunnable, Signal

from .config import WhiteboardConfig
from .errors import GenerationError, SchemaError
from .schema import parse_response
from .types import DrawingInstruction, Rect

logger = logging.getLogger(__name__)

IMAGE_PREFIX = "data:image/"


class GenerationClient:
    """
    Client for the drawing generation endpoint.

    Every failure mode (blank prompt, bad image, transport error, non-2xx
    status, malformed body) surfaces as :class:`GenerationError` carrying a
    message fit for the user.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        timeout: float = 60.0,
        endpoint: str = "/api/draw",
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.endpoint = endpoint
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @classmethod
    def from_config(cls, config: WhiteboardConfig) -> "GenerationClient":
        return cls(base_url=config.api_url, timeout=config.timeout, endpoint=config.endpoint)

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"Content-Type": "application/json"},
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "GenerationClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @staticmethod
    def build_payload(
        prompt: str,
        image: Optional[str] = None,
        selection: Optional[Rect] = None,
    ) -> Dict[str, Any]:
        if not prompt or not prompt.strip():
            raise GenerationError("Please enter a prompt.")
        if image and not image.startswith(IMAGE_PREFIX):
            raise GenerationError("Invalid image format")

        payload: Dict[str, Any] = {"prompt": prompt.strip()}
        if image:
            payload["image"] = image
        if selection is not None:
            payload["selection"] = {
                "x": selection.x,
                "y": selection.y,
                "width": selection.width,
                "height": selection.height,
            }
        return payload

    def generate(
        self,
        prompt: str,
        image: Optional[str] = None,
        selection: Optional[Rect] = None,
    ) -> List[DrawingInstruction]:
        """
        Ask the service for drawing instructions.

        Args:
            prompt: Scene description
            image: Optional ``data:image/...`` URL of the selected region
            selection: Optional selected rectangle in canvas coordinates

        Returns:
            Typed instructions, in paint order
        """
        payload = self.build_payload(prompt, image, selection)
        logger.info(
            "[GENERATION] POST %s%s (image=%s)", self.base_url, self.endpoint, bool(image)
        )

        try:
            response = self._get_client().post(self.endpoint, json=payload)
        except httpx.HTTPError as exc:
            logger.error("[GENERATION] Transport error: %s", exc)
            raise GenerationError(f"Request failed: {exc}") from exc

        if response.status_code >= 400:
            logger.error("[GENERATION] Service returned %s: %s", response.status_code, response.text[:200])
            raise GenerationError(f"Request failed with status {response.status_code}")

        try:
            data = response.json()
        except ValueError as exc:
            raise GenerationError("Service returned invalid JSON.") from exc

        try:
            instructions = parse_response(data)
        except SchemaError as exc:
            raise GenerationError(str(exc)) from exc

        logger.info("[GENERATION] Received %d instruction(s)", len(instructions))
        return instructions


class GenerationSignals(QObject):
    """Signals for GenerationTask"""

    finished = Signal(object)  # list of DrawingInstruction
    failed = Signal(str)  # error message


class GenerationTask(QRunnable):
    """
    Background task running one generation request.

    Usage:
        task = GenerationTask(client, prompt, image, selection)
        task.signals.finished.connect(...)
        QThreadPool.globalInstance().start(task)
    """

    def __init__(
        self,
        client: GenerationClient,
        prompt: str,
        image: Optional[str] = None,
        selection: Optional[Rect] = None,
    ):
        super().__init__()
        self.client = client
        self.prompt = prompt
        self.image = image
        self.selection = selection
        self.signals = GenerationSignals()

    def run(self):
        """Execute the request and report through signals."""
        try:
            instructions = self.client.generate(self.prompt, self.image, self.selection)
        except GenerationError as exc:
            self.signals.failed.emit(str(exc))
            return
        except Exception as exc:
            logger.exception("[GENERATION] Unexpected failure")
            self.signals.failed.emit(f"Unknown error occurred: {exc}")
            return
        self.signals.finished.emit(instructions)
