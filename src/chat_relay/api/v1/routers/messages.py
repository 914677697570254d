from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, File, Form, UploadFile

from chat_relay.api.deps import DispatcherDep, RelayClientDep, UploadStoreDep
from chat_relay.api.middleware.correlation_id import current_request_id
from chat_relay.api.v1.schemas.common import MessageAccepted
from chat_relay.services import message_service, relay_service

router = APIRouter(prefix="/api", tags=["messages"])


@router.post("/message", response_model=MessageAccepted)
async def submit_message(
    background_tasks: BackgroundTasks,
    store: UploadStoreDep,
    relay: RelayClientDep,
    dispatcher: DispatcherDep,
    text: Annotated[str | None, Form()] = None,
    audio: Annotated[UploadFile | None, File()] = None,
    image: Annotated[UploadFile | None, File()] = None,
) -> MessageAccepted:
    """Accept a chat message; the processor's reply arrives later as a broadcast."""
    message = await message_service.accept_message(
        text, audio, image, store, request_id=current_request_id(),
    )
    background_tasks.add_task(
        relay_service.relay_and_broadcast, message, relay, dispatcher, store,
    )
    return MessageAccepted()
