from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class Ack(BaseModel):
    success: bool = True


class MessageAccepted(Ack):
    message: str = "Message processed"


class HealthResponse(BaseModel):
    status: str = "healthy"
    connections: int
    timestamp: datetime
