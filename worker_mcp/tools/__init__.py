"""MCP tools.

Each tool is a ToolDefinition plus an async handler taking:
- params: dict[str, Any] - arguments from the tools/call request, unvalidated
- ctx: ExecutionContext - injected capabilities

and returning a HandlerResponse. Handlers report bad input with a 4xx
response and a missing capability with a 500 response; they only raise on
unexpected failures.
"""

from ..mcp.registry import ToolRegistry
from .basic import API_TOOL, HELLO_TOOL, PING_TOOL, handle_api, handle_hello, handle_ping
from .kv import GET_KV_TOOL, SET_KV_TOOL, handle_get_kv, handle_set_kv
from .network import HTTP_REQUEST_TOOL, WEATHER_TOOL, handle_http_request, handle_weather

# Registration order is tools/list order
TOOLS = [
    (HELLO_TOOL, handle_hello),
    (API_TOOL, handle_api),
    (PING_TOOL, handle_ping),
    (GET_KV_TOOL, handle_get_kv),
    (SET_KV_TOOL, handle_set_kv),
    (HTTP_REQUEST_TOOL, handle_http_request),
    (WEATHER_TOOL, handle_weather),
]


def build_registry() -> ToolRegistry:
    """Create the frozen registry of all built-in tools."""
    registry = ToolRegistry()
    for definition, handler in TOOLS:
        registry.register(definition, handler)
    return registry.freeze()


__all__ = [
    "TOOLS",
    "build_registry",
]
