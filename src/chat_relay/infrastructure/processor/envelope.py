from __future__ import annotations

import json
from typing import Any

from chat_relay.application.dto.message import InboundMessage


def build_envelope(message: InboundMessage, chat_id: str) -> dict[str, Any]:
    """Shape a message the way the processor workflow expects a chat update."""
    return {
        "message": {
            "chat": {"id": chat_id},
            "text": message.text or "",
            "voice": {"file_id": message.audio.file_id} if message.audio else None,
            "photo": [{"file_id": message.image.file_id}] if message.image else None,
        },
    }


def serialize_envelope(message: InboundMessage, chat_id: str) -> str:
    return json.dumps(build_envelope(message, chat_id))
