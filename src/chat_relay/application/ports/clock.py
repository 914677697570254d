from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Wall-clock time in UTC, used to stamp attachments and replies."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
