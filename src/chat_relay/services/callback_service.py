from __future__ import annotations

import logging
from typing import Any

from chat_relay.application.dto.reply import ReplyPayload, reply_from_processor
from chat_relay.application.exceptions import CallbackDecodeError, ReplyDecodeError
from chat_relay.application.ports.clock import Clock
from chat_relay.application.ports.push import ReplyBroadcaster

logger = logging.getLogger(__name__)


async def handle_callback(
    body: Any,
    broadcaster: ReplyBroadcaster,
    clock: Clock,
) -> ReplyPayload:
    """Broadcast a reply the processor delivered out of band.

    Replies are not correlated with any earlier message: every live
    connection receives them.
    """
    try:
        payload = reply_from_processor(body, clock.now())
    except ReplyDecodeError as exc:
        raise CallbackDecodeError(exc.detail) from exc

    logger.info("Received callback reply from processor (audio=%s)", payload.audio is not None)
    await broadcaster.broadcast(payload)
    return payload
