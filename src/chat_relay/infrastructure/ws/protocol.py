"""WebSocket frame models for the push channel."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel

PONG = "pong"
ERROR = "error"


class WsInbound(BaseModel):
    """Client → Server. Only ``ping`` is understood."""

    type: str
    data: dict[str, Any] = {}


class WsOutbound(BaseModel):
    """Server → Client: ai_response | error | pong."""

    type: str
    data: dict[str, Any] = {}


def frame(event_type: str, data: dict[str, Any] | None = None) -> str:
    return WsOutbound(type=event_type, data=data or {}).model_dump_json()
