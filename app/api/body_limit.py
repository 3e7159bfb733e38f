"""
Request body size cap.

Counts the bytes actually received, so chunked uploads without a
Content-Length are capped the same as declared ones. The body is buffered
up to the cap and replayed to the application unchanged.
"""

import logging

from fastapi.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger("phonepe_relay.api")


def _too_large() -> JSONResponse:
    return JSONResponse(
        status_code=413,
        content={"success": False, "message": "Request body too large."},
    )


class BodySizeLimitMiddleware:
    """Reject HTTP requests whose body exceeds `settings.max_body_bytes` with 413."""

    def __init__(self, app: ASGIApp, settings):
        self.app = app
        self.settings = settings

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        limit = self.settings.max_body_bytes

        content_length = dict(scope["headers"]).get(b"content-length", b"")
        if content_length.isdigit() and int(content_length) > limit:
            logger.warning("Rejected %s: Content-Length %s exceeds %d", scope["path"], content_length.decode(), limit)
            await _too_large()(scope, receive, send)
            return

        chunks: list[bytes] = []
        received = 0
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] == "http.disconnect":
                return
            body = message.get("body", b"")
            received += len(body)
            if received > limit:
                logger.warning("Rejected %s: body exceeds %d bytes", scope["path"], limit)
                await _too_large()(scope, receive, send)
                return
            chunks.append(body)
            more_body = message.get("more_body", False)

        buffered: Message = {"type": "http.request", "body": b"".join(chunks), "more_body": False}
        replayed = False

        async def replay() -> Message:
            nonlocal replayed
            if not replayed:
                replayed = True
                return buffered
            return await receive()

        await self.app(scope, replay, send)
