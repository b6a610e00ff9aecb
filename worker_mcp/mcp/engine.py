"""JSON-RPC dispatch for the MCP endpoint.

Each request goes through the same steps: parse the body, validate the
envelope, dispatch on ``method`` and build exactly one response envelope.
No state survives between requests; the registry is only read.

Methods, checked in this order:
- initialize: server identity and capabilities
- tools/list: registered tool definitions
- tools/call: run one tool and normalize its response
- ping: liveness
"""

import json
import logging
import math
from typing import Any

from pydantic import ValidationError

from ..context import ExecutionContext
from .jsonrpc import (
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    SERVER_ERROR,
    jsonrpc_error,
    jsonrpc_response,
)
from .models import InitializeResult, JSONRPCRequest, ServerInfo
from .normalizer import to_tool_content
from .registry import ToolRegistry

logger = logging.getLogger(__name__)


class InvalidParamsError(ValueError):
    """Raised when tools/call params are missing or malformed."""


def _reject_constant(token: str) -> Any:
    raise ValueError(f"Non-finite number {token} is not valid JSON")


def _finite_float(token: str) -> float:
    value = float(token)
    if not math.isfinite(value):
        raise ValueError(f"Number {token} is out of range")
    return value


def parse_body(body: bytes | str) -> Any:
    """Decode a request body as strict JSON.

    NaN, Infinity and numbers that overflow a float are rejected, since
    they cannot be written back out as JSON.
    """
    return json.loads(body, parse_constant=_reject_constant, parse_float=_finite_float)


class MCPEngine:
    def __init__(
        self,
        registry: ToolRegistry,
        server_name: str,
        server_version: str,
        protocol_version: str = "2024-11-05",
    ):
        self.registry = registry
        self.server_info = ServerInfo(name=server_name, version=server_version)
        self.protocol_version = protocol_version

    async def handle(self, body: bytes | str, ctx: ExecutionContext) -> dict:
        """Process one raw request body and return the response envelope.

        Never raises: every failure is reported as a JSON-RPC error.
        """
        try:
            payload = parse_body(body)
        except (ValueError, UnicodeDecodeError) as e:
            return jsonrpc_error(None, PARSE_ERROR, data=str(e))

        try:
            request = JSONRPCRequest.model_validate(payload)
        except ValidationError:
            return jsonrpc_error(None, INVALID_REQUEST)

        try:
            return await self.dispatch(request, ctx)
        except Exception as e:
            logger.error(f"MCP dispatch failed for {request.method}: {e}", exc_info=True)
            return jsonrpc_error(request.id, SERVER_ERROR, f"Server error: {e}", data=str(e))

    async def dispatch(self, request: JSONRPCRequest, ctx: ExecutionContext) -> dict:
        id = request.id
        method = request.method

        if method == "initialize":
            result = InitializeResult(
                protocolVersion=self.protocol_version,
                serverInfo=self.server_info,
            )
            return jsonrpc_response(id, result.model_dump())
        elif method == "tools/list":
            tools = [tool.model_dump() for tool in self.registry.list()]
            return jsonrpc_response(id, {"tools": tools})
        elif method == "tools/call":
            try:
                name, arguments = parse_call_params(request.params)
            except InvalidParamsError as e:
                return jsonrpc_error(id, INVALID_PARAMS, data=str(e))
            return jsonrpc_response(id, await self.call_tool(name, arguments, ctx))
        elif method == "ping":
            return jsonrpc_response(id, {"ok": True})
        else:
            return jsonrpc_error(id, METHOD_NOT_FOUND, data=method)

    async def call_tool(
        self, name: str, arguments: dict[str, Any], ctx: ExecutionContext
    ) -> dict:
        """Invoke a tool once and return its normalized content.

        Raises:
            ToolNotFoundError: if ``name`` is not registered
        """
        handler = self.registry.lookup(name)
        response = await handler(arguments, ctx)
        content = to_tool_content(response)
        if content.isError:
            logger.info(f"Tool {name} returned status {response.status_code}")
        return content.model_dump()


def parse_call_params(params: Any) -> tuple[str, dict[str, Any]]:
    """Extract the tool name and arguments from tools/call params."""
    if not isinstance(params, dict):
        raise InvalidParamsError("params must be an object")

    name = params.get("name")
    if not isinstance(name, str):
        raise InvalidParamsError("params.name must be a string")

    arguments = params.get("arguments")
    if arguments is None:
        arguments = {}
    elif not isinstance(arguments, dict):
        raise InvalidParamsError("params.arguments must be an object")

    return name, arguments
