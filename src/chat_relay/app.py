from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chat_relay.api.middleware.correlation_id import CorrelationIdMiddleware
from chat_relay.api.middleware.timing import RequestTimingMiddleware
from chat_relay.api.v1.routers import health, messages, webhook, ws
from chat_relay.application.exceptions import (
    CallbackDecodeError,
    PayloadTooLargeError,
    ValidationError,
)
from chat_relay.application.ports.clock import SystemClock
from chat_relay.config import Settings, settings as default_settings
from chat_relay.infrastructure.processor.client import RelayClient
from chat_relay.infrastructure.uploads.store import UploadStore
from chat_relay.infrastructure.ws.dispatcher import BroadcastDispatcher
from chat_relay.infrastructure.ws.manager import ConnectionRegistry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    settings: Settings = app.state.settings
    clock = app.state.clock

    app.state.registry = ConnectionRegistry(clock)
    app.state.dispatcher = BroadcastDispatcher(app.state.registry)

    store = UploadStore(
        settings.UPLOAD_DIR,
        settings.MAX_UPLOAD_BYTES,
        chunk_size=settings.UPLOAD_CHUNK_SIZE,
        clock=clock,
    )
    store.ensure_dir()
    app.state.upload_store = store
    logger.info("Upload directory ready at %s", store.base_dir)

    http = httpx.AsyncClient(
        timeout=settings.RELAY_TIMEOUT_SECONDS,
        transport=app.state.http_transport,
    )
    app.state.relay_client = RelayClient(
        http,
        settings.PROCESSOR_WEBHOOK_URL,
        timeout=settings.RELAY_TIMEOUT_SECONDS,
        fallback_text=settings.RELAY_FALLBACK_TEXT,
        chat_id=settings.PROCESSOR_CHAT_ID,
        clock=clock,
    )
    logger.info("Relaying messages to %s", settings.PROCESSOR_WEBHOOK_URL)
    logger.info("Processor callbacks accepted at %s", settings.callback_route)

    try:
        yield
    finally:
        logger.info("Shutting down server...")
        await http.aclose()
        removed = store.sweep()
        logger.info("Removed %d leftover upload(s)", removed)
        app.state.registry.clear()


def create_app(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    settings = settings or default_settings

    app = FastAPI(
        title="Chat Relay",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.clock = SystemClock()
    app.state.http_transport = transport

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(messages.router)
    app.include_router(webhook.router)
    app.include_router(ws.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def _validation(_req: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": exc.detail})

    @app.exception_handler(PayloadTooLargeError)
    async def _too_large(_req: Request, exc: PayloadTooLargeError) -> JSONResponse:
        return JSONResponse(status_code=413, content={"detail": exc.detail})

    @app.exception_handler(CallbackDecodeError)
    async def _callback_decode(_req: Request, exc: CallbackDecodeError) -> JSONResponse:
        logger.error("Error processing processor callback: %s", exc.detail)
        return JSONResponse(status_code=500, content={"error": exc.detail})

    @app.exception_handler(Exception)
    async def _internal(req: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s %s", req.method, req.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})
