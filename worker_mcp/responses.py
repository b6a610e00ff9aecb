"""Handler response value shared by tools and REST routes.

Tool handlers return a ``HandlerResponse`` rather than a framework response
object so they can be invoked from the JSON-RPC engine and from plain HTTP
routes alike.
"""

import json
from dataclasses import dataclass, field
from typing import Any

from starlette.responses import Response

JSON_CONTENT_TYPE = "application/json; charset=utf-8"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"


@dataclass(frozen=True)
class HandlerResponse:
    """Status code, headers and raw body produced by a tool handler."""

    status_code: int = 200
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code <= 299

    @property
    def content_type(self) -> str:
        for key, value in self.headers.items():
            if key.lower() == "content-type":
                return value
        return ""

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.body)


def json_response(data: Any, status: int = 200) -> HandlerResponse:
    """Build a JSON handler response."""
    body = json.dumps(data, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    return HandlerResponse(
        status_code=status,
        headers={"content-type": JSON_CONTENT_TYPE},
        body=body,
    )


def text_response(text: str, status: int = 200) -> HandlerResponse:
    """Build a plain text handler response."""
    return HandlerResponse(
        status_code=status,
        headers={"content-type": TEXT_CONTENT_TYPE},
        body=text.encode("utf-8"),
    )


def error_response(message: str, status: int) -> HandlerResponse:
    return json_response({"error": message}, status=status)


def not_configured(capability: str) -> HandlerResponse:
    """Response for a tool whose required capability is absent."""
    return error_response(f"{capability} not configured", 500)


def to_http_response(response: HandlerResponse) -> Response:
    """Convert a handler response into a Starlette response."""
    return Response(
        content=response.body,
        status_code=response.status_code,
        headers=response.headers,
    )
