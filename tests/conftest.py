"""Shared test fixtures."""
from __future__ import annotations

import io
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from chat_relay.application.dto.message import Attachment, InboundMessage
from chat_relay.application.dto.reply import ReplyPayload
from chat_relay.infrastructure.uploads.store import UploadStore
from chat_relay.infrastructure.ws.dispatcher import BroadcastDispatcher
from chat_relay.infrastructure.ws.manager import ConnectionRegistry

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
FALLBACK_TEXT = "Sorry, I encountered an error processing your request. Please try again."


@dataclass
class FixedClock:
    value: datetime = FIXED_NOW

    def now(self) -> datetime:
        return self.value


@dataclass
class FakeWebSocket:
    """Records pushed frames; ``fail`` simulates a dead peer."""
    sent: list[str] = field(default_factory=list)
    fail: bool = False

    async def send_text(self, data: str) -> None:
        if self.fail:
            raise RuntimeError("connection closed")
        self.sent.append(data)


@dataclass
class RecordingBroadcaster:
    payloads: list[ReplyPayload] = field(default_factory=list)

    async def broadcast(self, payload: ReplyPayload) -> int:
        self.payloads.append(payload)
        return 1


@dataclass
class StubRelay:
    reply: ReplyPayload
    seen: list[InboundMessage] = field(default_factory=list)
    existed_during_call: list[bool] = field(default_factory=list)

    async def relay(self, message: InboundMessage) -> ReplyPayload:
        self.seen.append(message)
        self.existed_during_call.extend(a.temp_path.exists() for a in message.attachments)
        return self.reply


def make_upload(
    content: bytes,
    filename: str = "clip.webm",
    content_type: str = "audio/webm",
    *,
    declare_size: bool = True,
) -> UploadFile:
    return UploadFile(
        file=io.BytesIO(content),
        size=len(content) if declare_size else None,
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


def make_attachment(tmp_path: Path, field_name: str = "audio", content: bytes = b"voice") -> Attachment:
    path = tmp_path / f"{field_name}-0123abcd.webm"
    path.write_bytes(content)
    return Attachment(
        field=field_name,
        temp_path=path,
        original_name="note.webm",
        mime_type="audio/webm",
        size_bytes=len(content),
        created_at=FIXED_NOW,
    )


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def registry(clock) -> ConnectionRegistry:
    return ConnectionRegistry(clock)


@pytest.fixture
def dispatcher(registry) -> BroadcastDispatcher:
    return BroadcastDispatcher(registry)


@pytest.fixture
def store(tmp_path, clock) -> UploadStore:
    return UploadStore(tmp_path / "uploads", max_bytes=1024, chunk_size=100, clock=clock)
