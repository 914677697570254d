from __future__ import annotations

from pathlib import Path

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROCESSOR_WEBHOOK_URL: str = "https://your-n8n-app.onrender.com/webhook/webhook-trigger"
    PROCESSOR_CALLBACK_PATH: str = "n8n-response"
    PROCESSOR_CHAT_ID: str = "web-interface"

    RELAY_TIMEOUT_SECONDS: float = 30.0
    RELAY_FALLBACK_TEXT: str = (
        "Sorry, I encountered an error processing your request. Please try again."
    )

    UPLOAD_DIR: Path = Path("uploads")
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024
    UPLOAD_CHUNK_SIZE: int = 64 * 1024

    CORS_ORIGINS: list[str] = ["http://localhost:5173"]

    WS_HEARTBEAT_SECONDS: int = 30

    HOST: str = "0.0.0.0"
    PORT: int = 3001
    LOG_LEVEL: str = "INFO"

    @property
    def callback_route(self) -> str:
        return "/webhook/" + self.PROCESSOR_CALLBACK_PATH.strip("/")

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
