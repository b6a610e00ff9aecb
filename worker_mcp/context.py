"""Execution context passed to every tool handler.

Handlers never reach for module-level clients: every external capability
(storage, network, counters, embeddings) is injected here, and any of them
may be absent. A handler that needs a missing capability answers with a
configuration error response instead of raising.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Protocol

import httpx

from .responses import HandlerResponse


class KVStore(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def put(self, key: str, value: str, ttl: int | None = None) -> None: ...


class RowStore(Protocol):
    async def query_first(self, sql: str) -> dict[str, Any] | None: ...


class BlobStore(Protocol):
    async def get(self, key: str) -> bytes | None: ...

    async def put(self, key: str, data: bytes) -> None: ...


class CounterStore(Protocol):
    async def get(self, name: str) -> int: ...

    async def increment(self, name: str) -> int: ...


class EmbeddingsBackend(Protocol):
    async def run(self, model: str, text: str | list[str]) -> Any: ...


@dataclass
class ExecutionContext:
    """Capabilities available to a handler for one invocation."""

    greeting: str = "Hello"

    kv: KVStore | None = None
    db: RowStore | None = None
    blobs: BlobStore | None = None
    http: httpx.AsyncClient | None = None
    counters: CounterStore | None = None
    embeddings: EmbeddingsBackend | None = None


# Type alias for tool handler functions
ToolHandler = Callable[
    [dict[str, Any], ExecutionContext],
    Awaitable[HandlerResponse],
]
