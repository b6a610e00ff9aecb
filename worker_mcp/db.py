"""Relational row store for raw SQL over Prisma."""

import asyncio
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from prisma import Prisma

logger = logging.getLogger(__name__)

CONNECT_ATTEMPTS = 3
CONNECT_BACKOFF_SECONDS = 1.0


class PrismaRowStore:
    """Row store capability that runs raw queries on a lazily connected client.

    A query that fails on an existing connection is retried once on a fresh
    one, which covers connections the database closed while idle.
    """

    def __init__(self, database_url: str):
        self._database_url = database_url
        self._client: "Prisma | None" = None
        self._lock = asyncio.Lock()

    async def _connect(self) -> "Prisma":
        # The generated client only exists after `prisma generate`.
        from prisma import Prisma

        delay = CONNECT_BACKOFF_SECONDS
        for attempt in range(1, CONNECT_ATTEMPTS + 1):
            client = Prisma(datasource={"url": self._database_url})
            try:
                await client.connect()
                return client
            except Exception as e:
                if attempt == CONNECT_ATTEMPTS:
                    raise
                logger.warning(
                    f"Row store connect attempt {attempt} failed ({e}), retry in {delay}s"
                )
                await asyncio.sleep(delay)
                delay *= 2

    async def get_client(self) -> "Prisma":
        async with self._lock:
            if self._client is None:
                self._client = await self._connect()
            return self._client

    async def _discard(self, client: "Prisma") -> None:
        async with self._lock:
            if self._client is client:
                self._client = None
        try:
            await client.disconnect()
        except Exception as e:
            logger.debug(f"Disconnect of dropped row store client failed: {e}")

    async def query_first(self, sql: str) -> dict[str, Any] | None:
        client = await self.get_client()
        try:
            return await client.query_first(sql)
        except Exception as e:
            logger.warning(f"Row store query failed ({e}), reconnecting once")
            await self._discard(client)
        client = await self.get_client()
        return await client.query_first(sql)

    async def close(self) -> None:
        async with self._lock:
            client, self._client = self._client, None
        if client is not None:
            await client.disconnect()
