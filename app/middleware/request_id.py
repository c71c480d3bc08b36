"""Request ID middleware.

Forwards a well-formed client X-Request-ID or generates one, echoes it on
the response and exposes it to logging for the duration of the request.
Raw ASGI so streaming responses are untouched.
"""

import re
import uuid

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.shared.telemetry.logging import request_id_var

_REQUEST_ID_RE = re.compile(r"^[a-zA-Z0-9_-]{1,64}$")


def _request_id_from(headers: Headers, header_name: str) -> str:
    raw = (headers.get(header_name) or "").strip()
    return raw if _REQUEST_ID_RE.fullmatch(raw) else uuid.uuid4().hex


class RequestIDMiddleware:
    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID") -> None:
        self.app = app
        self.header_name = header_name

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return
        request_id = _request_id_from(Headers(scope=scope), self.header_name)
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message)[self.header_name] = request_id
            await send(message)

        token = request_id_var.set(request_id)
        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            request_id_var.reset(token)
