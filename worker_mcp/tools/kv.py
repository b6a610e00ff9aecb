"""Key-value tools.

Handles:
- get-kv: read a value by key
- set-kv: store a string value with an optional TTL
"""

import math
from typing import Any

from ..context import ExecutionContext
from ..mcp.models import ToolDefinition
from ..responses import HandlerResponse, error_response, json_response, not_configured

GET_KV_TOOL = ToolDefinition(
    name="get-kv",
    description="Get Key Value from storage",
    inputSchema={
        "type": "object",
        "properties": {
            "key": {"type": "string", "description": "Key to fetch"},
        },
        "required": ["key"],
        "additionalProperties": False,
    },
)

SET_KV_TOOL = ToolDefinition(
    name="set-kv",
    description="Set Key Value to storage",
    inputSchema={
        "type": "object",
        "properties": {
            "key": {"type": "string", "description": "Key to store"},
            "value": {"type": "string", "description": "Value to store"},
            "expirationTtl": {
                "type": "number",
                "description": "Optional TTL in seconds",
            },
        },
        "required": ["key", "value"],
        "additionalProperties": False,
    },
)


def _ttl(value: Any) -> int | None:
    """Positive whole-second TTL, or None."""
    # bool is an int subclass but never a TTL
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    ttl = math.floor(value)
    return ttl if ttl > 0 else None


async def handle_get_kv(params: dict[str, Any], ctx: ExecutionContext) -> HandlerResponse:
    if ctx.kv is None:
        return not_configured("KV")

    key = params.get("key")
    if not isinstance(key, str) or not key:
        return error_response("Invalid key", 400)

    value = await ctx.kv.get(key)
    return json_response({"key": key, "value": value})


async def handle_set_kv(params: dict[str, Any], ctx: ExecutionContext) -> HandlerResponse:
    if ctx.kv is None:
        return not_configured("KV")

    key = params.get("key")
    value = params.get("value")
    if not isinstance(key, str) or not key or not isinstance(value, str):
        return error_response("Invalid key or value", 400)

    ttl = _ttl(params.get("expirationTtl"))
    await ctx.kv.put(key, value, ttl=ttl)
    return json_response({"ok": True, "key": key, "expirationTtl": ttl})
