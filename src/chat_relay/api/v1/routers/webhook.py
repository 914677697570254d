from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, status

from chat_relay.api.deps import ClockDep, DispatcherDep, SettingsDep
from chat_relay.api.v1.schemas.common import Ack
from chat_relay.application.exceptions import CallbackDecodeError
from chat_relay.services import callback_service

router = APIRouter(prefix="/webhook", tags=["webhook"])


@router.post("/{callback_path:path}", response_model=Ack)
async def processor_callback(
    callback_path: str,
    request: Request,
    settings: SettingsDep,
    dispatcher: DispatcherDep,
    clock: ClockDep,
) -> Ack:
    if callback_path.strip("/") != settings.PROCESSOR_CALLBACK_PATH.strip("/"):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")

    try:
        body = await request.json()
    except ValueError as exc:
        raise CallbackDecodeError("callback body is not valid JSON") from exc

    await callback_service.handle_callback(body, dispatcher, clock)
    return Ack()
