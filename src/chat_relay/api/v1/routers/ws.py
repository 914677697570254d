from __future__ import annotations

import asyncio
import contextlib
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from chat_relay.api.deps import RegistryDep, SettingsDep
from chat_relay.infrastructure.ws.protocol import ERROR, PONG, WsInbound, frame

logger = logging.getLogger(__name__)
router = APIRouter(tags=["websocket"])


@router.websocket("/ws")
async def ws_push(
    websocket: WebSocket,
    registry: RegistryDep,
    settings: SettingsDep,
) -> None:
    """Push channel: clients receive every ``ai_response`` broadcast."""
    await websocket.accept()
    connection_id = registry.register(websocket)

    heartbeat_task = asyncio.create_task(
        _heartbeat(websocket, settings.WS_HEARTBEAT_SECONDS),
        name=f"ws-heartbeat-{connection_id}",
    )
    try:
        await _read_loop(websocket)
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WS error for %s", connection_id)
    finally:
        heartbeat_task.cancel()
        try:
            with contextlib.suppress(asyncio.CancelledError):
                await heartbeat_task
        finally:
            registry.unregister(connection_id)


async def _heartbeat(ws: WebSocket, interval: int) -> None:
    try:
        while True:
            await asyncio.sleep(interval)
            await ws.send_text(frame(PONG))
    except asyncio.CancelledError:
        pass
    except Exception:
        logger.debug("Heartbeat stopped", exc_info=True)


async def _read_loop(ws: WebSocket) -> None:
    while True:
        raw = await ws.receive_text()
        try:
            msg = WsInbound.model_validate_json(raw)
        except Exception:
            await ws.send_text(frame(ERROR, {"code": "invalid_payload"}))
            continue

        if msg.type == "ping":
            await ws.send_text(frame(PONG))
        else:
            await ws.send_text(frame(ERROR, {"code": "unknown_type", "type": msg.type}))
