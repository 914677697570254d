from __future__ import annotations

from fastapi import APIRouter

from chat_relay.api.deps import ClockDep, RegistryDep
from chat_relay.api.v1.schemas.common import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health(registry: RegistryDep, clock: ClockDep) -> HealthResponse:
    return HealthResponse(connections=registry.count, timestamp=clock.now())
