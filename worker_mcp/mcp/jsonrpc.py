"""JSON-RPC 2.0 helpers for the MCP transport.

See: https://www.jsonrpc.org/specification
"""

from typing import Any

JSONRPC_VERSION = "2.0"

# Standard JSON-RPC error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
SERVER_ERROR = -32000  # Handler faults and unknown tools

ERROR_MESSAGES = {
    PARSE_ERROR: "Parse error",
    INVALID_REQUEST: "Invalid Request",
    METHOD_NOT_FOUND: "Method not found",
    INVALID_PARAMS: "Invalid params",
    SERVER_ERROR: "Server error",
}


def jsonrpc_response(id: Any, result: Any) -> dict:
    """Create a JSON-RPC 2.0 success response.

    Args:
        id: Request ID (echoed verbatim)
        result: The result payload

    Returns:
        JSON-RPC 2.0 response dict
    """
    return {"jsonrpc": JSONRPC_VERSION, "id": id, "result": result}


def jsonrpc_error(id: Any, code: int, message: str | None = None, data: Any = None) -> dict:
    """Create a JSON-RPC 2.0 error response.

    Args:
        id: Request ID (None when it could not be determined)
        code: Error code (negative integer)
        message: Human-readable message, defaults to the standard text for ``code``
        data: Optional extra detail; omitted from the envelope when None

    Returns:
        JSON-RPC 2.0 error response dict
    """
    error: dict[str, Any] = {
        "code": code,
        "message": message or ERROR_MESSAGES.get(code, "Server error"),
    }
    if data is not None:
        error["data"] = data
    return {"jsonrpc": JSONRPC_VERSION, "id": id, "error": error}
