"""Shared fixtures: in-memory capabilities and an ASGI test client."""

from collections.abc import AsyncIterator, Callable
from typing import Any

import httpx
import pytest

from worker_mcp.context import ExecutionContext
from worker_mcp.mcp.engine import MCPEngine
from worker_mcp.server import create_app
from worker_mcp.tools import build_registry


class FakeKV:
    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int | None] = {}

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def put(self, key: str, value: str, ttl: int | None = None) -> None:
        self.data[key] = value
        self.ttls[key] = ttl


class FakeCounters:
    def __init__(self) -> None:
        self.counts: dict[str, int] = {}

    async def get(self, name: str) -> int:
        return self.counts.get(name, 0)

    async def increment(self, name: str) -> int:
        self.counts[name] = self.counts.get(name, 0) + 1
        return self.counts[name]


class FakeBlobs:
    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}

    async def get(self, key: str) -> bytes | None:
        return self.objects.get(key)

    async def put(self, key: str, data: bytes) -> None:
        self.objects[key] = data


class FakeRows:
    def __init__(self, row: dict[str, Any] | None = None, error: Exception | None = None):
        self.row = row if row is not None else {"now": "2026-01-01 00:00:00"}
        self.error = error
        self.queries: list[str] = []

    async def query_first(self, sql: str) -> dict[str, Any] | None:
        self.queries.append(sql)
        if self.error:
            raise self.error
        return self.row


class FakeEmbeddings:
    def __init__(self, result: Any = None, error: Exception | None = None):
        self.result = result if result is not None else {"data": [[0.1, 0.2, 0.3]]}
        self.error = error
        self.calls: list[tuple[str, Any]] = []

    async def run(self, model: str, text: str | list[str]) -> Any:
        self.calls.append((model, text))
        if self.error:
            raise self.error
        return self.result


def mock_http(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    """An AsyncClient whose requests are answered by ``handler``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def kv() -> FakeKV:
    return FakeKV()


@pytest.fixture
def ctx(kv: FakeKV) -> ExecutionContext:
    return ExecutionContext(
        greeting="Hello",
        kv=kv,
        db=FakeRows(),
        blobs=FakeBlobs(),
        counters=FakeCounters(),
        http=mock_http(lambda request: httpx.Response(200, json={"echo": str(request.url)})),
        embeddings=FakeEmbeddings(),
    )


@pytest.fixture
def engine() -> MCPEngine:
    return MCPEngine(build_registry(), server_name="test-server", server_version="9.9.9")


@pytest.fixture
async def client(ctx: ExecutionContext) -> AsyncIterator[httpx.AsyncClient]:
    app = create_app(context=ctx)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c
