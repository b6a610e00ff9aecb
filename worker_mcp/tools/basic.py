"""Basic tools that need no external capability.

Handles:
- hello: greeting with server time
- api: echo of method and query
- ping: liveness text
"""

from typing import Any

from ..context import ExecutionContext
from ..mcp.models import ToolDefinition
from ..responses import HandlerResponse, text_response
from ..services.site import echo_api, greet

HELLO_TOOL = ToolDefinition(
    name="hello",
    description="Return greeting and time. Optional query param: name.",
    inputSchema={
        "type": "object",
        "properties": {
            "name": {"type": "string"},
        },
        "required": [],
        "additionalProperties": False,
    },
)

API_TOOL = ToolDefinition(
    name="api",
    description="Echo method and query. Optional query object and method.",
    inputSchema={
        "type": "object",
        "properties": {
            "method": {"type": "string"},
            "query": {
                "type": "object",
                "additionalProperties": {"type": "string"},
            },
        },
        "required": [],
        "additionalProperties": False,
    },
)

PING_TOOL = ToolDefinition(
    name="ping",
    description="Return pong",
    inputSchema={
        "type": "object",
        "properties": {},
        "required": [],
        "additionalProperties": False,
    },
)


async def handle_hello(params: dict[str, Any], ctx: ExecutionContext) -> HandlerResponse:
    name = params.get("name")
    return greet(ctx, name if isinstance(name, str) else None)


async def handle_api(params: dict[str, Any], ctx: ExecutionContext) -> HandlerResponse:
    """Echo the requested method and the string-valued query entries."""
    query = params.get("query")
    query = (
        {k: v for k, v in query.items() if isinstance(v, str)} if isinstance(query, dict) else {}
    )
    method = params.get("method")
    return echo_api(ctx, method if isinstance(method, str) else "GET", query)


async def handle_ping(params: dict[str, Any], ctx: ExecutionContext) -> HandlerResponse:
    return text_response("Ping successful!")
