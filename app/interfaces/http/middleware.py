"""ASGI middleware: request ids and request body limits."""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from fastapi import status

from app.core.logging import REQUEST_ID_HEADER, bind_request_id, reset_request_id
from app.interfaces.http.errors import INVALID_BODY_ERROR, RequestBodyTooLargeError, error_response

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

MAX_BODY_SIZE = 1 << 20


class RequestIdMiddleware:
    """Reuse the client's ``X-Request-ID`` or generate one, and echo it back.

    The id is also left in ``scope["state"]`` for the handlers that run
    outside this middleware, such as the catch-all 500 handler.
    """

    def __init__(self, app: "ASGIApp", header_name: str = REQUEST_ID_HEADER) -> None:
        self.app = app
        self._header = header_name.lower().encode()

    async def __call__(self, scope: "Scope", receive: "Receive", send: "Send") -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        request_id = headers.get(self._header, b"").decode("latin-1").strip() or str(uuid.uuid4())
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_request_id(message: "Message") -> None:
            if message["type"] == "http.response.start":
                response_headers = list(message.get("headers", []))
                response_headers.append((self._header, request_id.encode("latin-1")))
                message["headers"] = response_headers
            await send(message)

        token = bind_request_id(request_id)
        try:
            logger.info("%s %s", scope.get("method"), scope.get("path"))
            await self.app(scope, receive, send_with_request_id)
        finally:
            reset_request_id(token)


class BodySizeLimitMiddleware:
    """Reject request bodies larger than ``max_body_size`` bytes.

    A declared ``Content-Length`` over the limit is answered straight away.
    Chunked bodies are counted as they are read; crossing the limit aborts the
    read and the request is reported as an invalid body.
    """

    def __init__(self, app: "ASGIApp", max_body_size: int = MAX_BODY_SIZE) -> None:
        self.app = app
        self.max_body_size = max_body_size

    async def __call__(self, scope: "Scope", receive: "Receive", send: "Send") -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        declared = dict(scope.get("headers", [])).get(b"content-length", b"")
        if declared.isdigit() and int(declared) > self.max_body_size:
            logger.warning("%s %s rejected: body of %s bytes", scope.get("method"), scope.get("path"), int(declared))
            response = error_response(status.HTTP_400_BAD_REQUEST, *INVALID_BODY_ERROR)
            await response(scope, receive, send)
            return

        received = 0

        async def limited_receive() -> "Message":
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_size:
                    raise RequestBodyTooLargeError(f"request body exceeds {self.max_body_size} bytes")
            return message

        await self.app(scope, limited_receive, send)


__all__ = ["BodySizeLimitMiddleware", "MAX_BODY_SIZE", "REQUEST_ID_HEADER", "RequestIdMiddleware"]
