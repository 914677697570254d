from __future__ import annotations

from typing import Iterable, Protocol

from fastapi import UploadFile

from chat_relay.application.dto.message import Attachment


class AttachmentStore(Protocol):
    @property
    def max_bytes(self) -> int: ...

    async def save(self, field: str, upload: UploadFile) -> Attachment: ...

    async def release(self, attachments: Iterable[Attachment]) -> None: ...
