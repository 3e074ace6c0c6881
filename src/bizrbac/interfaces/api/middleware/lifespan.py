"""Lifespan middleware - opens the pool and verifies the catalog on startup."""

import logging
from typing import Any

from psycopg_pool import AsyncConnectionPool

logger = logging.getLogger(__name__)


class LifespanMiddleware:
    """Opens the connection pool on startup and closes it on shutdown.

    After the pool is up every stored role-permission condition is parsed;
    an unknown shape aborts startup instead of failing at request time.
    """

    def __init__(self, pool: AsyncConnectionPool, resolver, ownership=None) -> None:
        self._pool = pool
        self._resolver = resolver
        self._ownership = ownership

    async def process_startup(
        self, scope: dict[str, Any], event: dict[str, Any]
    ) -> None:
        await self._pool.open()
        await self._resolver.verify_catalog(self._ownership)

    async def process_shutdown(
        self, scope: dict[str, Any], event: dict[str, Any]
    ) -> None:
        await self._pool.close()
        logger.info("Connection pool closed")
