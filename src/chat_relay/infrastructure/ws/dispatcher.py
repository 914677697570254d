from __future__ import annotations

import asyncio
import logging

from chat_relay.application.dto.reply import AI_RESPONSE_EVENT, ReplyPayload
from chat_relay.infrastructure.ws.manager import ConnectionRegistry
from chat_relay.infrastructure.ws.protocol import frame

logger = logging.getLogger(__name__)


class BroadcastDispatcher:
    """Pushes reply payloads to every connection registered at broadcast time."""

    def __init__(self, registry: ConnectionRegistry) -> None:
        self._registry = registry

    async def broadcast(self, payload: ReplyPayload) -> int:
        """Send ``payload`` as an ``ai_response`` event; return how many pushes succeeded."""
        targets = self._registry.snapshot()
        if not targets:
            logger.info("No live connections, reply dropped (error=%s)", payload.error)
            return 0

        raw = frame(AI_RESPONSE_EVENT, payload.to_event())
        results = await asyncio.gather(*(self._push(cid, raw) for cid in targets))
        delivered = sum(results)
        logger.info(
            "Broadcast ai_response to %d/%d connections (error=%s)",
            delivered,
            len(targets),
            payload.error,
        )
        return delivered

    async def _push(self, connection_id: str, raw: str) -> bool:
        connection = self._registry.get(connection_id)
        if connection is None:
            return False
        try:
            await connection.websocket.send_text(raw)
        except Exception:
            logger.warning("Push to %s failed", connection_id, exc_info=True)
            return False
        return True
