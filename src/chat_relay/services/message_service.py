from __future__ import annotations

import logging

from fastapi import UploadFile

from chat_relay.application.dto.message import Attachment, InboundMessage
from chat_relay.application.exceptions import PayloadTooLargeError, ValidationError
from chat_relay.application.ports.uploads import AttachmentStore

logger = logging.getLogger(__name__)


async def accept_message(
    text: str | None,
    audio: UploadFile | None,
    image: UploadFile | None,
    store: AttachmentStore,
    request_id: str | None = None,
) -> InboundMessage:
    """Validate an inbound chat message and stage its attachments.

    Size limits are checked for every attachment before anything is written,
    so an oversized file rejects the request without partial work. The
    caller owns the returned attachments and must release them.
    """
    uploads = {
        field: upload
        for field, upload in (("audio", audio), ("image", image))
        if _is_present(upload)
    }
    logger.info(
        "Received message: text=%s audio=%s image=%s",
        bool(text),
        "audio" in uploads,
        "image" in uploads,
    )

    if not text and not uploads:
        raise ValidationError("Message must include text, audio or image")

    for field, upload in uploads.items():
        if upload.size is not None and upload.size > store.max_bytes:
            raise PayloadTooLargeError(f"{field} exceeds {store.max_bytes} bytes")

    staged: dict[str, Attachment] = {}
    try:
        for field, upload in uploads.items():
            staged[field] = await store.save(field, upload)
    except BaseException:
        await store.release(staged.values())
        raise

    return InboundMessage(
        text=text or None,
        audio=staged.get("audio"),
        image=staged.get("image"),
        request_id=request_id,
    )


def _is_present(upload: UploadFile | None) -> bool:
    return upload is not None and bool(upload.filename)
