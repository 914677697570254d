from __future__ import annotations

from typing import Protocol

from chat_relay.application.dto.message import InboundMessage
from chat_relay.application.dto.reply import ReplyPayload


class MessageRelay(Protocol):
    async def relay(self, message: InboundMessage) -> ReplyPayload: ...
