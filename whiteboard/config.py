"""Runtime configuration read from environment variables."""

from __future__ import annotations

import os
from typing import List, Mapping, Optional

from pydantic import BaseModel, Field

DEFAULT_PALETTE = ["red", "blue", "green", "orange", "black"]


class WhiteboardConfig(BaseModel):
    """Settings for the whiteboard window and generation client."""

    api_url: str = "http://localhost:3000"
    endpoint: str = "/api/draw"
    timeout: float = Field(default=60.0, gt=0)
    frame_interval_ms: int = Field(default=16, ge=1)
    default_prompt: str = "draw a house with a tree"
    palette: List[str] = Field(default_factory=lambda: list(DEFAULT_PALETTE))
    log_level: str = "INFO"


def load_config(env: Optional[Mapping[str, str]] = None) -> WhiteboardConfig:
    """Build a config from ``WHITEBOARD_*`` variables, falling back to defaults."""
    env = os.environ if env is None else env
    values = {}
    if env.get("WHITEBOARD_API_URL"):
        values["api_url"] = env["WHITEBOARD_API_URL"].rstrip("/")
    if env.get("WHITEBOARD_ENDPOINT"):
        values["endpoint"] = env["WHITEBOARD_ENDPOINT"]
    if env.get("WHITEBOARD_TIMEOUT"):
        values["timeout"] = env["WHITEBOARD_TIMEOUT"]
    if env.get("WHITEBOARD_FRAME_INTERVAL_MS"):
        values["frame_interval_ms"] = env["WHITEBOARD_FRAME_INTERVAL_MS"]
    if env.get("WHITEBOARD_LOG_LEVEL"):
        values["log_level"] = env["WHITEBOARD_LOG_LEVEL"].upper()
    return WhiteboardConfig.model_validate(values)
