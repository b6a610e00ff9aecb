"""MCP (Model Context Protocol) transport module.

This module contains the JSON-RPC tool-dispatch core:
- JSON-RPC 2.0 helpers and error codes
- Tool registry and definitions
- Response normalizer (handler response -> tool content)
- Dispatch engine

The HTTP router lives in .transport and is mounted by the server.
"""

from .engine import MCPEngine
from .jsonrpc import (
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    SERVER_ERROR,
    jsonrpc_error,
    jsonrpc_response,
)
from .models import TextContent, ToolContent, ToolDefinition
from .normalizer import to_tool_content
from .registry import ToolNotFoundError, ToolRegistry

__all__ = [
    # Engine
    "MCPEngine",
    # Registry
    "ToolRegistry",
    "ToolNotFoundError",
    "ToolDefinition",
    # Normalizer
    "to_tool_content",
    "TextContent",
    "ToolContent",
    # JSON-RPC helpers
    "jsonrpc_response",
    "jsonrpc_error",
    "PARSE_ERROR",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "INVALID_PARAMS",
    "SERVER_ERROR",
]
