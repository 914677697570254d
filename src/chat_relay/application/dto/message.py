from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path


@dataclass(frozen=True, slots=True)
class Attachment:
    field: str  # audio | image
    temp_path: Path
    original_name: str
    mime_type: str
    size_bytes: int
    created_at: datetime

    @property
    def file_id(self) -> str:
        return self.temp_path.name


@dataclass(frozen=True, slots=True)
class InboundMessage:
    text: str | None = None
    audio: Attachment | None = None
    image: Attachment | None = None
    request_id: str | None = None

    @property
    def attachments(self) -> list[Attachment]:
        return [a for a in (self.audio, self.image) if a is not None]

    @property
    def is_empty(self) -> bool:
        return not self.text and self.audio is None and self.image is None
