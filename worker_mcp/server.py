"""FastAPI server exposing MCP tools over JSON-RPC and an OpenAI-compatible API."""

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from datetime import datetime, timezone

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import settings
from .context import ExecutionContext
from .db import PrismaRowStore
from .mcp.engine import MCPEngine
from .mcp.registry import ToolRegistry
from .mcp.transport import router as mcp_router
from .middleware import RequestContextMiddleware
from .routes import openai_router, site_router
from .services import FileBlobStore, RedisCounterStore, RedisKVStore, WorkersAIEmbeddings
from .services.kv_store import create_redis
from .tools import build_registry

logger = logging.getLogger(__name__)

ROUTES = [
    "/hello",
    "/api",
    "/mcp (POST)",
    "/request (POST)",
    "/kv (GET|POST?key=...)",
    "/d1",
    "/r2 (GET|POST)",
    "/counter",
    "/counter/incr",
    "/v1/models (GET)",
    "/v1/embeddings (POST)",
]

# ============ SENTRY INITIALIZATION ============


def _filter_sentry_event(event: dict) -> dict:
    """Remove sensitive data from Sentry events."""
    if "request" in event and "headers" in event["request"]:
        headers = event["request"]["headers"]
        for key in ["authorization", "Authorization"]:
            if key in headers:
                headers[key] = "[REDACTED]"
    return event


if settings.sentry_dsn:
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.starlette import StarletteIntegration

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        traces_sample_rate=0.1 if settings.environment == "production" else 1.0,
        integrations=[
            FastApiIntegration(),
            StarletteIntegration(),
        ],
        before_send=lambda event, hint: _filter_sentry_event(event),
    )
    logger.info("Sentry error tracking initialized")
else:
    logger.debug("Sentry DSN not configured - error tracking disabled")


# ============ CAPABILITIES ============


async def build_context(stack: AsyncExitStack) -> ExecutionContext:
    """Create the capabilities enabled by settings.

    Cleanup callbacks are registered on ``stack``.
    """
    http = await stack.enter_async_context(
        httpx.AsyncClient(timeout=settings.http_timeout_seconds, follow_redirects=True)
    )
    ctx = ExecutionContext(greeting=settings.greeting, http=http)

    if settings.redis_url:
        redis = create_redis(settings.redis_url)
        stack.push_async_callback(redis.aclose)
        ctx.kv = RedisKVStore(redis)
        ctx.counters = RedisCounterStore(redis)
        logger.info("Key-value and counter capabilities enabled (Redis)")

    if settings.database_url:
        db = PrismaRowStore(settings.database_url)
        stack.push_async_callback(db.close)
        ctx.db = db
        logger.info("Relational capability enabled (Prisma)")

    if settings.blob_dir:
        ctx.blobs = FileBlobStore(settings.blob_dir)
        logger.info(f"Blob capability enabled at {settings.blob_dir}")

    if settings.cloudflare_account_id and settings.cloudflare_api_token:
        ctx.embeddings = WorkersAIEmbeddings(
            http, settings.cloudflare_account_id, settings.cloudflare_api_token
        )
        logger.info("Embeddings backend enabled (Workers AI)")

    return ctx


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    logger.info(f"Starting Worker MCP Server v{__version__}")

    if not settings.debug and settings.cors_allowed_origins == "*":
        logger.warning(
            "CORS is configured to allow all origins ('*'). "
            "Set CORS_ALLOWED_ORIGINS to specific domains in production."
        )

    async with AsyncExitStack() as stack:
        if getattr(app.state, "context", None) is None:
            app.state.context = await build_context(stack)
        yield
    logger.info("Worker MCP Server stopped")


# ============ APPLICATION ============


def create_app(
    context: ExecutionContext | None = None,
    registry: ToolRegistry | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        context: Pre-built capabilities; when None they are created at startup
        registry: Tool registry; defaults to the built-in tools
    """
    app = FastAPI(
        title="Worker MCP Server",
        description="MCP tools over JSON-RPC with an OpenAI-compatible embeddings API",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.context = context
    app.state.engine = MCPEngine(
        registry if registry is not None else build_registry(),
        server_name=settings.mcp_server_name,
        server_version=settings.mcp_server_version,
        protocol_version=settings.mcp_protocol_version,
    )

    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=86400,
    )

    app.include_router(mcp_router)
    app.include_router(openai_router)
    app.include_router(site_router)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    @app.get("/", tags=["Health"])
    async def root():
        """Root endpoint with route listing."""
        return {
            "name": "Worker MCP Server",
            "version": __version__,
            "routes": ROUTES,
        }

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint (lightweight liveness check)."""
        return {
            "status": "healthy",
            "version": __version__,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return app


# ============ EXCEPTION HANDLERS ============


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions with consistent response format.

    Unmatched routes get a bare plain-text 404.
    """
    if exc.status_code == 404:
        return PlainTextResponse("Not Found", status_code=404)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with sanitized error messages."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "An internal server error occurred. Please try again."},
    )


app = create_app()


# ============ MAIN ============


def main():
    """Run the server with uvicorn."""
    import uvicorn

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "worker_mcp.server:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
