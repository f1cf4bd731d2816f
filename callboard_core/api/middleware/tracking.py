"""
Request Tracking Middleware

Assigns a request ID to every HTTP request, exposes it on
``request.state`` and in the response headers, and binds it into the
structlog context so every log line of the request carries it.
"""

import time
import uuid
from typing import Optional

import structlog
from starlette.types import ASGIApp, Message, Receive, Scope, Send


logger = structlog.get_logger(__name__)


def _header(scope: Scope, name: str) -> Optional[str]:
    target = name.lower().encode()
    for key, value in scope.get("headers", []):
        if key == target:
            return value.decode("latin-1")
    return None


class RequestTrackingMiddleware:
    """
    ASGI middleware for request tracking.

    Usage:
        app = FastAPI()
        app.add_middleware(RequestTrackingMiddleware)
    """

    def __init__(
        self,
        app: ASGIApp,
        header_name: str = "X-Request-ID",
        log_requests: bool = True,
    ):
        self.app = app
        self.header_name = header_name
        self.log_requests = log_requests

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = _header(scope, self.header_name) or f"req_{uuid.uuid4().hex}"
        scope.setdefault("state", {})["request_id"] = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start = time.perf_counter()
        status_code = 500

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                headers = list(message.get("headers", []))
                headers.append((self.header_name.lower().encode(), request_id.encode()))
                message["headers"] = headers
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            if self.log_requests:
                logger.info(
                    "request_completed",
                    method=scope.get("method"),
                    path=scope.get("path"),
                    status_code=status_code,
                    duration_ms=round((time.perf_counter() - start) * 1000, 2),
                )
            structlog.contextvars.clear_contextvars()


__all__ = ["RequestTrackingMiddleware"]
