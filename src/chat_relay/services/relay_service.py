from __future__ import annotations

from chat_relay.application.dto.message import InboundMessage
from chat_relay.application.dto.reply import ReplyPayload
from chat_relay.application.ports.processor import MessageRelay
from chat_relay.application.ports.push import ReplyBroadcaster
from chat_relay.application.ports.uploads import AttachmentStore


async def relay_and_broadcast(
    message: InboundMessage,
    relay: MessageRelay,
    broadcaster: ReplyBroadcaster,
    store: AttachmentStore,
) -> ReplyPayload:
    """Run one relay call and broadcast its outcome exactly once.

    Attachments are released as soon as the relay call returns, before the
    reply is pushed out.
    """
    try:
        payload = await relay.relay(message)
    finally:
        await store.release(message.attachments)

    await broadcaster.broadcast(payload)
    return payload
