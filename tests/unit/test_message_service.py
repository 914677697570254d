from __future__ import annotations

import pytest

from chat_relay.application.exceptions import PayloadTooLargeError, ValidationError
from chat_relay.services import message_service
from tests.conftest import make_upload


@pytest.mark.asyncio
async def test_text_only_message(store):
    message = await message_service.accept_message("2+2=?", None, None, store, request_id="abc")

    assert message.text == "2+2=?"
    assert message.attachments == []
    assert message.request_id == "abc"


@pytest.mark.asyncio
async def test_attachments_are_staged(store):
    message = await message_service.accept_message(
        None,
        make_upload(b"voice", "note.webm", "audio/webm"),
        make_upload(b"pixels", "pic.png", "image/png"),
        store,
    )

    assert message.text is None
    assert message.audio is not None and message.audio.temp_path.read_bytes() == b"voice"
    assert message.image is not None and message.image.temp_path.read_bytes() == b"pixels"


@pytest.mark.asyncio
@pytest.mark.parametrize("text", [None, ""])
async def test_empty_message_is_rejected(store, text):
    with pytest.raises(ValidationError):
        await message_service.accept_message(text, None, None, store)


@pytest.mark.asyncio
async def test_upload_without_filename_counts_as_absent(store):
    blank = make_upload(b"", filename="")

    with pytest.raises(ValidationError):
        await message_service.accept_message(None, blank, None, store)


@pytest.mark.asyncio
async def test_declared_oversize_rejects_before_writing(store):
    audio = make_upload(b"a" * 10)
    image = make_upload(b"i" * 2048, "big.png", "image/png")

    with pytest.raises(PayloadTooLargeError):
        await message_service.accept_message("hi", audio, image, store)

    assert not store.base_dir.exists() or list(store.base_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_streamed_oversize_releases_staged_attachments(store):
    audio = make_upload(b"a" * 10)
    image = make_upload(b"i" * 2048, "big.png", "image/png", declare_size=False)

    with pytest.raises(PayloadTooLargeError):
        await message_service.accept_message("hi", audio, image, store)

    assert list(store.base_dir.iterdir()) == []
