"""Capability bindings and shared service logic.

- kv_store: Redis-backed key-value and durable counter capabilities
- blob_store: Filesystem blob capability
- http_client: Outbound HTTP request parsing and execution
- embeddings: Workers AI embeddings backend
- site: Greeting, echo, database-time and blob helpers shared by tools and routes
"""

from .blob_store import FileBlobStore
from .embeddings import WorkersAIEmbeddings
from .kv_store import RedisCounterStore, RedisKVStore

__all__ = [
    "FileBlobStore",
    "RedisCounterStore",
    "RedisKVStore",
    "WorkersAIEmbeddings",
]
