"""FastAPI dependency injection functions.

- Execution context and MCP engine lookup from application state
- Bearer token extraction for the OpenAI-compatible surface
- Client IP extraction for access logging
"""

from fastapi import Request

from .context import ExecutionContext
from .mcp.engine import MCPEngine


def get_context(request: Request) -> ExecutionContext:
    """Capabilities built at startup for this application."""
    return request.app.state.context


def get_engine(request: Request) -> MCPEngine:
    return request.app.state.engine


def get_bearer_token(request: Request) -> str | None:
    """Extract the token from an ``Authorization: Bearer`` header.

    The scheme is matched case-insensitively. Returns None when the header is
    missing or uses another scheme.
    """
    authorization = request.headers.get("authorization", "")
    prefix = "bearer "
    if not authorization.lower().startswith(prefix):
        return None
    return authorization[len(prefix) :].strip()


def get_client_ip(request: Request) -> str | None:
    """Extract client IP from X-Forwarded-For header or direct connection."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return None
