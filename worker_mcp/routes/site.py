"""Plain HTTP routes around the storage and network capabilities."""

import json
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from ..context import ExecutionContext
from ..deps import get_context
from ..responses import to_http_response
from ..services.http_client import perform_http_request
from ..services.site import HELLO_BLOB_KEY, database_now, echo_api, greet, read_hello_blob

logger = logging.getLogger(__name__)

router = APIRouter()

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD"]
KV_ROUTE_TTL_SECONDS = 3600


@router.get("/hello", tags=["Site"])
async def hello(
    request: Request,
    ctx: Annotated[ExecutionContext, Depends(get_context)],
    name: str | None = None,
) -> Response:
    return to_http_response(greet(ctx, name, path=request.url.path))


@router.api_route("/api", methods=ALL_METHODS, tags=["Site"])
async def api_echo(
    request: Request,
    ctx: Annotated[ExecutionContext, Depends(get_context)],
) -> Response:
    return to_http_response(echo_api(ctx, request.method, dict(request.query_params)))


@router.api_route("/request", methods=ALL_METHODS, tags=["Site"])
async def outbound_request(
    request: Request,
    ctx: Annotated[ExecutionContext, Depends(get_context)],
) -> Response:
    """Perform an outbound HTTP request described by the JSON body."""
    if request.method != "POST":
        return JSONResponse({"error": "Method not allowed"}, status_code=405)

    try:
        body = json.loads(await request.body())
    except ValueError as e:
        return JSONResponse({"error": "Invalid JSON", "detail": str(e)}, status_code=400)

    if not isinstance(body, dict):
        return JSONResponse({"error": "Invalid payload"}, status_code=400)

    return to_http_response(await perform_http_request(ctx.http, body))


@router.api_route("/kv", methods=ALL_METHODS, tags=["Storage"])
async def kv(
    request: Request,
    ctx: Annotated[ExecutionContext, Depends(get_context)],
    key: str = "message",
) -> Response:
    if ctx.kv is None:
        return JSONResponse({"error": "KV not configured"}, status_code=500)

    if request.method == "GET":
        return JSONResponse({"key": key, "value": await ctx.kv.get(key)})

    if request.method == "POST":
        body = (await request.body()).decode("utf-8", errors="replace")
        await ctx.kv.put(key, body, ttl=KV_ROUTE_TTL_SECONDS)
        return PlainTextResponse(f"Saved to KV (TTL {KV_ROUTE_TTL_SECONDS}s)")

    return JSONResponse({"error": "Method not allowed"}, status_code=405)


@router.get("/d1", tags=["Storage"])
async def d1(ctx: Annotated[ExecutionContext, Depends(get_context)]) -> Response:
    return to_http_response(await database_now(ctx))


@router.api_route("/r2", methods=["GET", "POST"], tags=["Storage"])
async def r2(
    request: Request,
    ctx: Annotated[ExecutionContext, Depends(get_context)],
) -> Response:
    if request.method == "POST":
        if ctx.blobs is None:
            return JSONResponse({"error": "Blob store not configured"}, status_code=500)
        body = await request.body()
        await ctx.blobs.put(HELLO_BLOB_KEY, body or b"Hello R2!")
        return PlainTextResponse(f"Saved {HELLO_BLOB_KEY} to blob store")

    return to_http_response(await read_hello_blob(ctx))


@router.get("/counter", tags=["Storage"])
@router.get("/counter/incr", tags=["Storage"])
async def counter(
    request: Request,
    ctx: Annotated[ExecutionContext, Depends(get_context)],
    name: Annotated[str, Query(min_length=1)] = "global",
) -> Response:
    """Read a named counter, or increment it via /counter/incr."""
    if ctx.counters is None:
        return PlainTextResponse("Counters not configured", status_code=500)

    if request.url.path.endswith("/incr"):
        value = await ctx.counters.increment(name)
    else:
        value = await ctx.counters.get(name)
    return PlainTextResponse(str(value))
