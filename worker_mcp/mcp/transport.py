"""MCP Streamable HTTP transport.

Only POST reaches the JSON-RPC engine; any other verb is refused with a bare
405 and no envelope. The envelope is returned as JSON, or as a single SSE
``message`` event when the client accepts ``text/event-stream``. Protocol
failures are carried inside the envelope, so the HTTP status is always 200.
"""

import json
import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse, StreamingResponse

from ..context import ExecutionContext
from ..deps import get_context, get_engine
from .engine import MCPEngine

logger = logging.getLogger(__name__)

router = APIRouter(tags=["MCP Transport"])

SSE_MEDIA_TYPE = "text/event-stream"
SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # Disable nginx buffering
}


def wants_event_stream(request: Request) -> bool:
    return SSE_MEDIA_TYPE in request.headers.get("accept", "")


def format_sse_message(payload: dict) -> str:
    data = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    return f"event: message\ndata: {data}\n\n"


async def single_event(payload: dict) -> AsyncGenerator[str, None]:
    """Yield one SSE frame, then end the stream."""
    yield format_sse_message(payload)


def build_response(request: Request, payload: dict) -> Response:
    if wants_event_stream(request):
        return StreamingResponse(
            single_event(payload),
            media_type=SSE_MEDIA_TYPE,
            headers=SSE_HEADERS,
        )
    return JSONResponse(payload)


@router.api_route(
    "/mcp",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"],
)
async def mcp_transport_endpoint(
    request: Request,
    engine: Annotated[MCPEngine, Depends(get_engine)],
    ctx: Annotated[ExecutionContext, Depends(get_context)],
) -> Response:
    """MCP JSON-RPC endpoint.

    Config example (Claude Code):
    ```json
    {"mcpServers": {"worker": {"type": "http", "url": "http://localhost:8787/mcp"}}}
    ```
    """
    if request.method != "POST":
        return PlainTextResponse("Method Not Allowed", status_code=405)

    body = await request.body()
    payload = await engine.handle(body, ctx)
    if "error" in payload:
        logger.debug(f"MCP error response: {payload['error']}")
    return build_response(request, payload)
