"""Per-request temporary storage for message attachments."""
from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Iterable

import aiofiles
import aiofiles.os
from fastapi import UploadFile

from chat_relay.application.dto.message import Attachment
from chat_relay.application.exceptions import PayloadTooLargeError
from chat_relay.application.ports.clock import Clock, SystemClock

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


class UploadStore:
    """Streams uploads into uniquely named files under one directory.

    Files live until :meth:`release` is called for them, or until
    :meth:`sweep` empties the directory at shutdown.
    """

    def __init__(
        self,
        base_dir: Path,
        max_bytes: int,
        *,
        chunk_size: int = 64 * 1024,
        clock: Clock | None = None,
    ) -> None:
        self._base_dir = Path(base_dir)
        self._max_bytes = max_bytes
        self._chunk_size = chunk_size
        self._clock = clock or SystemClock()

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    @property
    def max_bytes(self) -> int:
        return self._max_bytes

    def ensure_dir(self) -> None:
        self._base_dir.mkdir(parents=True, exist_ok=True)

    async def save(self, field: str, upload: UploadFile) -> Attachment:
        """Copy ``upload`` to a fresh file; raise if it exceeds the size cap."""
        original_name = upload.filename or field
        path = self._base_dir / f"{field}-{uuid.uuid4().hex}{Path(original_name).suffix}"
        self.ensure_dir()

        written = 0
        try:
            async with aiofiles.open(path, "wb") as out:
                while chunk := await upload.read(self._chunk_size):
                    written += len(chunk)
                    if written > self._max_bytes:
                        raise PayloadTooLargeError(
                            f"{field} exceeds {self._max_bytes} bytes"
                        )
                    await out.write(chunk)
        except BaseException:
            await self._remove(path)
            raise

        logger.debug("Stored %s upload %r as %s (%d bytes)", field, original_name, path.name, written)
        return Attachment(
            field=field,
            temp_path=path,
            original_name=original_name,
            mime_type=upload.content_type or DEFAULT_MIME_TYPE,
            size_bytes=written,
            created_at=self._clock.now(),
        )

    async def release(self, attachments: Iterable[Attachment]) -> None:
        for attachment in attachments:
            await self._remove(attachment.temp_path)

    def sweep(self) -> int:
        """Delete every file left in the upload directory."""
        if not self._base_dir.is_dir():
            return 0
        removed = 0
        for entry in self._base_dir.iterdir():
            if not entry.is_file():
                continue
            try:
                entry.unlink()
                removed += 1
            except OSError:
                logger.warning("Could not remove leftover upload %s", entry, exc_info=True)
        return removed

    async def _remove(self, path: Path) -> None:
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            pass
        except OSError:
            logger.warning("Could not remove upload %s", path, exc_info=True)
