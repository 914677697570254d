"""In-process registry of live WebSocket connections."""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime

from fastapi import WebSocket

from chat_relay.application.ports.clock import Clock, SystemClock

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Connection:
    id: str
    opened_at: datetime
    websocket: WebSocket


class ConnectionRegistry:
    """Tracks accepted WebSocket connections by id.

    Every method runs to completion without awaiting, so on the event loop
    a mutation is never observed half-done.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or SystemClock()
        self._connections: dict[str, Connection] = {}

    def register(self, websocket: WebSocket) -> str:
        connection_id = uuid.uuid4().hex
        while connection_id in self._connections:
            connection_id = uuid.uuid4().hex
        self._connections[connection_id] = Connection(
            id=connection_id,
            opened_at=self._clock.now(),
            websocket=websocket,
        )
        logger.info("Client connected: %s (total=%d)", connection_id, len(self._connections))
        return connection_id

    def unregister(self, connection_id: str) -> bool:
        if self._connections.pop(connection_id, None) is None:
            return False
        logger.info("Client disconnected: %s (total=%d)", connection_id, len(self._connections))
        return True

    def get(self, connection_id: str) -> Connection | None:
        return self._connections.get(connection_id)

    def snapshot(self) -> frozenset[str]:
        return frozenset(self._connections)

    @property
    def count(self) -> int:
        return len(self._connections)

    def clear(self) -> None:
        """Drop every entry. Only used at shutdown."""
        self._connections.clear()
