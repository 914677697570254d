"""FastAPI dependency injection helpers.

Pipeline components are built once in the application lifespan and kept on
``app.state``; these helpers hand them to routes.
"""
from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from starlette.requests import HTTPConnection

from chat_relay.application.ports.clock import Clock
from chat_relay.config import Settings
from chat_relay.infrastructure.processor.client import RelayClient
from chat_relay.infrastructure.uploads.store import UploadStore
from chat_relay.infrastructure.ws.dispatcher import BroadcastDispatcher
from chat_relay.infrastructure.ws.manager import ConnectionRegistry


def get_settings(conn: HTTPConnection) -> Settings:
    return conn.app.state.settings


def get_clock(conn: HTTPConnection) -> Clock:
    return conn.app.state.clock


def get_registry(conn: HTTPConnection) -> ConnectionRegistry:
    return conn.app.state.registry


def get_upload_store(conn: HTTPConnection) -> UploadStore:
    return conn.app.state.upload_store


def get_relay_client(conn: HTTPConnection) -> RelayClient:
    return conn.app.state.relay_client


def get_dispatcher(conn: HTTPConnection) -> BroadcastDispatcher:
    return conn.app.state.dispatcher


SettingsDep = Annotated[Settings, Depends(get_settings)]
ClockDep = Annotated[Clock, Depends(get_clock)]
RegistryDep = Annotated[ConnectionRegistry, Depends(get_registry)]
UploadStoreDep = Annotated[UploadStore, Depends(get_upload_store)]
RelayClientDep = Annotated[RelayClient, Depends(get_relay_client)]
DispatcherDep = Annotated[BroadcastDispatcher, Depends(get_dispatcher)]
