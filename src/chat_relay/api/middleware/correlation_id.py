from __future__ import annotations

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="")

HEADER = "X-Request-ID"
MAX_LENGTH = 64


def current_request_id() -> str | None:
    return correlation_id_ctx.get() or None


def _accept(raw: str | None) -> str:
    # Client-supplied ids are forwarded to the processor, keep them short and printable.
    if raw and len(raw) <= MAX_LENGTH and raw.isprintable():
        return raw
    return uuid.uuid4().hex


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        cid = _accept(request.headers.get(HEADER))
        token = correlation_id_ctx.set(cid)
        try:
            response = await call_next(request)
        finally:
            correlation_id_ctx.reset(token)
        response.headers[HEADER] = cid
        return response
