"""Small service functions shared by the REST routes and MCP tools."""

import logging
from datetime import datetime, timezone

from ..context import ExecutionContext
from ..responses import HandlerResponse, error_response, json_response

logger = logging.getLogger(__name__)

DEFAULT_NAME = "friend"
HELLO_BLOB_KEY = "hello.txt"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def greet(ctx: ExecutionContext, name: str | None = None, path: str = "/hello") -> HandlerResponse:
    return json_response(
        {
            "message": f"{ctx.greeting}, {name or DEFAULT_NAME}!",
            "time": utc_now_iso(),
            "path": path,
        }
    )


def echo_api(ctx: ExecutionContext, method: str, query: dict[str, str]) -> HandlerResponse:
    return json_response(
        {
            "ok": True,
            "query": query,
            "method": method,
            "greeting": ctx.greeting,
        }
    )


async def database_now(ctx: ExecutionContext) -> HandlerResponse:
    """Current time as reported by the relational store."""
    if ctx.db is None:
        return error_response("Database not configured", 500)
    try:
        row = await ctx.db.query_first("SELECT CURRENT_TIMESTAMP AS now")
    except Exception as e:
        logger.error(f"Database query failed: {e}", exc_info=True)
        return error_response(str(e), 500)
    now = row.get("now") if row else None
    return json_response({"now": str(now) if now is not None else None})


async def read_hello_blob(ctx: ExecutionContext) -> HandlerResponse:
    if ctx.blobs is None:
        return error_response("Blob store not configured", 500)
    data = await ctx.blobs.get(HELLO_BLOB_KEY)
    if data is None:
        return error_response(f"{HELLO_BLOB_KEY} not found", 404)
    return json_response({"content": data.decode("utf-8", errors="replace")})
