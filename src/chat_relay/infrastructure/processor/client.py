"""HTTP client for the external message processor."""
from __future__ import annotations

import asyncio
import logging
import time
from contextlib import ExitStack
from typing import Any

import httpx

from chat_relay.application.dto.message import InboundMessage
from chat_relay.application.dto.reply import ReplyPayload, error_reply, reply_from_relay
from chat_relay.application.exceptions import (
    RelayError,
    RelayFailureError,
    RelayTimeoutError,
)
from chat_relay.application.ports.clock import Clock, SystemClock
from chat_relay.infrastructure.processor.envelope import serialize_envelope

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RelayClient:
    """Forwards one message per call to the processor webhook.

    A call makes a single attempt and never raises: timeouts, transport
    errors, error statuses and undecodable bodies all come back as an
    error payload.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        endpoint_url: str,
        *,
        timeout: float,
        fallback_text: str,
        chat_id: str,
        clock: Clock | None = None,
    ) -> None:
        self._http = http
        self._endpoint_url = endpoint_url
        self._timeout = timeout
        self._fallback_text = fallback_text
        self._chat_id = chat_id
        self._clock = clock or SystemClock()

    async def relay(self, message: InboundMessage) -> ReplyPayload:
        started = time.perf_counter()
        try:
            body = await self._post(message)
            reply = reply_from_relay(body, self._clock.now())
        except RelayTimeoutError:
            logger.error(
                "Processor did not answer within %.1fs (request_id=%s)",
                self._timeout,
                message.request_id,
            )
            return error_reply(self._fallback_text, self._clock.now())
        except RelayError as exc:
            logger.error("Error calling processor webhook: %s (request_id=%s)", exc.detail, message.request_id)
            return error_reply(self._fallback_text, self._clock.now())
        except Exception:
            logger.exception("Unexpected relay failure (request_id=%s)", message.request_id)
            return error_reply(self._fallback_text, self._clock.now())

        logger.info(
            "Processor replied in %.1fms (request_id=%s)",
            (time.perf_counter() - started) * 1000,
            message.request_id,
        )
        return reply

    async def _post(self, message: InboundMessage) -> Any:
        headers = {REQUEST_ID_HEADER: message.request_id} if message.request_id else {}
        # The envelope goes out as a plain form field; the body is always multipart.
        parts: list[tuple[str, tuple[Any, ...]]] = [
            ("data", (None, serialize_envelope(message, self._chat_id))),
        ]

        with ExitStack() as stack:
            for attachment in message.attachments:
                # httpx multipart bodies only accept sync file objects.
                fh = stack.enter_context(open(attachment.temp_path, "rb"))
                parts.append(
                    (attachment.field, (attachment.original_name, fh, attachment.mime_type))
                )
            try:
                response = await asyncio.wait_for(
                    self._http.post(
                        self._endpoint_url,
                        files=parts,
                        headers=headers,
                    ),
                    timeout=self._timeout,
                )
            except (TimeoutError, httpx.TimeoutException) as exc:
                raise RelayTimeoutError("processor timed out") from exc
            except httpx.HTTPError as exc:
                raise RelayFailureError(str(exc) or type(exc).__name__) from exc

        if response.is_error:
            raise RelayFailureError(f"processor responded with HTTP {response.status_code}")
        try:
            return response.json()
        except ValueError as exc:
            raise RelayFailureError("processor reply is not valid JSON") from exc
