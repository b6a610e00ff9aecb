"""Redis-backed key-value and durable counter capabilities."""

import logging

from redis.asyncio import Redis

logger = logging.getLogger(__name__)

COUNTER_PREFIX = "counter:"


class RedisKVStore:
    """Key-value capability over a shared Redis connection."""

    def __init__(self, client: Redis):
        self._client = client

    async def get(self, key: str) -> str | None:
        return await self._client.get(key)

    async def put(self, key: str, value: str, ttl: int | None = None) -> None:
        if ttl and ttl > 0:
            await self._client.set(key, value, ex=ttl)
        else:
            await self._client.set(key, value)


class RedisCounterStore:
    """Named durable counters.

    Increments use Redis INCR, so concurrent increments of the same counter
    are serialized by the server.
    """

    def __init__(self, client: Redis):
        self._client = client

    async def get(self, name: str) -> int:
        value = await self._client.get(f"{COUNTER_PREFIX}{name}")
        return int(value) if value is not None else 0

    async def increment(self, name: str) -> int:
        value = await self._client.incr(f"{COUNTER_PREFIX}{name}")
        logger.debug(f"Counter {name} incremented to {value}")
        return int(value)


def create_redis(url: str) -> Redis:
    """Create a Redis client that returns decoded strings."""
    return Redis.from_url(url, decode_responses=True)
