"""Pydantic models for the MCP JSON-RPC protocol."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class JSONRPCRequest(BaseModel):
    """Envelope check for an incoming request.

    Only ``jsonrpc`` and ``method`` are validated here; ``params`` is checked
    by the method that consumes it.
    """

    jsonrpc: Literal["2.0"]
    id: Any = None
    method: StrictStr
    params: Any = None


class ToolDefinition(BaseModel):
    """Tool metadata returned by tools/list.

    ``inputSchema`` is advisory documentation for callers; arguments are not
    validated against it before a handler runs.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Unique, case-sensitive tool name")
    description: str = Field(..., description="Human-readable description")
    inputSchema: dict[str, Any] = Field(
        default_factory=lambda: {
            "type": "object",
            "properties": {},
            "required": [],
            "additionalProperties": False,
        },
        description="JSON Schema describing accepted arguments",
    )


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolContent(BaseModel):
    """Result payload of a tools/call request."""

    content: list[TextContent] = Field(default_factory=list)
    isError: bool = False


class ServerInfo(BaseModel):
    name: str
    version: str


class InitializeResult(BaseModel):
    protocolVersion: str
    serverInfo: ServerInfo
    capabilities: dict[str, Any] = Field(default_factory=lambda: {"tools": {}})
