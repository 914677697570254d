"""Reply payloads and extraction of replies sent by the processor."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

import pydantic
from pydantic import BaseModel, ConfigDict

from chat_relay.application.exceptions import ReplyDecodeError

AI_RESPONSE_EVENT = "ai_response"


@dataclass(frozen=True, slots=True)
class ReplyPayload:
    text: str | None
    audio: str | None
    error: bool
    timestamp: datetime

    def to_event(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "audio": self.audio,
            "error": self.error,
            "timestamp": self.timestamp.isoformat(),
        }


class ProcessorReply(BaseModel):
    """Body the processor answers with, synchronously or through the callback."""

    model_config = ConfigDict(extra="allow")

    text: str | None = None
    output: str | None = None
    audio: str | None = None


def reply_from_processor(body: Any, now: datetime) -> ReplyPayload:
    """Build a success payload from a decoded processor body.

    ``text`` wins over ``output``; a body carrying neither and no audio
    is not a reply.
    """
    if not isinstance(body, dict):
        raise ReplyDecodeError(f"expected a JSON object, got {type(body).__name__}")
    try:
        reply = ProcessorReply.model_validate(body)
    except pydantic.ValidationError as exc:
        raise ReplyDecodeError(str(exc)) from exc

    text = reply.text or reply.output
    audio = reply.audio or None
    if not text and audio is None:
        raise ReplyDecodeError("reply has no text, output or audio")
    return ReplyPayload(text=text, audio=audio, error=False, timestamp=now)


def error_reply(text: str, now: datetime) -> ReplyPayload:
    return ReplyPayload(text=text, audio=None, error=True, timestamp=now)


def reply_from_relay(body: Any, now: datetime) -> ReplyPayload:
    """Build the payload for a decoded synchronous processor answer.

    Any decoded body is a reply. A workflow that answers through the
    callback acknowledges with a body that has no reply fields, which gives
    an empty success payload. A list body contributes its first object.
    """
    if isinstance(body, list):
        body = next((item for item in body if isinstance(item, dict)), None)
    if not isinstance(body, dict):
        body = {}

    text = _str_field(body, "text") or _str_field(body, "output")
    return ReplyPayload(text=text, audio=_str_field(body, "audio"), error=False, timestamp=now)


def _str_field(body: dict[str, Any], key: str) -> str | None:
    value = body.get(key)
    return value if isinstance(value, str) and value else None
