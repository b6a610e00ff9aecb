"""Request ID and access logging middleware."""

import logging
import time
from uuid import uuid4

from starlette.requests import Request

from ..config import settings
from ..deps import get_client_ip

logger = logging.getLogger(__name__)


class RequestContextMiddleware:
    """
    Tag every response with a request ID and log one access line.

    Uses pure ASGI middleware pattern instead of BaseHTTPMiddleware so the
    one-shot SSE responses are passed through untouched.

    Headers added:
        - X-Request-Id: Unique request identifier for tracing
        - X-Content-Type-Options: nosniff
        - Strict-Transport-Security: (production only)
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = str(uuid4())
        start_time = time.perf_counter()
        status_code = 500

        async def send_with_headers(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                headers = list(message.get("headers", []))
                headers.append((b"x-request-id", request_id.encode()))
                headers.append((b"x-content-type-options", b"nosniff"))
                if not settings.debug and settings.environment == "production":
                    headers.append(
                        (b"strict-transport-security", b"max-age=31536000; includeSubDomains")
                    )
                message = {**message, "headers": headers}
            await send(message)

        try:
            await self.app(scope, receive, send_with_headers)
        finally:
            latency_ms = int((time.perf_counter() - start_time) * 1000)
            logger.info(
                f"{get_client_ip(Request(scope))} {scope['method']} {scope['path']} "
                f"{status_code} {latency_ms}ms request_id={request_id}"
            )
