from __future__ import annotations

from typing import Protocol

from chat_relay.application.dto.reply import ReplyPayload


class ReplyBroadcaster(Protocol):
    async def broadcast(self, payload: ReplyPayload) -> int: ...
