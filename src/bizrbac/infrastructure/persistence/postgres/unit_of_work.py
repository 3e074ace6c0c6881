"""PostgreSQL Unit of Work implementation."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from psycopg import AsyncConnection
from psycopg_pool import AsyncConnectionPool

from bizrbac.infrastructure.persistence.postgres.audit_log_repository import (
    PostgresAuditLogRepository,
)
from bizrbac.infrastructure.persistence.postgres.catalog_repository import (
    PostgresCatalogRepository,
)
from bizrbac.infrastructure.persistence.postgres.resource_repository import (
    PostgresCustomerRepository,
    PostgresOrderRepository,
)
from bizrbac.infrastructure.persistence.postgres.user_repository import (
    PostgresUserRepository,
)


class PostgresUnitOfWork:
    """Repositories bound to one pooled connection and its transaction."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn
        self.users = PostgresUserRepository(conn)
        self.catalog = PostgresCatalogRepository(conn)
        self.audit_logs = PostgresAuditLogRepository(conn)
        self.orders = PostgresOrderRepository(conn)
        self.customers = PostgresCustomerRepository(conn)

    async def commit(self) -> None:
        await self._conn.commit()

    async def rollback(self) -> None:
        await self._conn.rollback()


def create_uow_factory(pool: AsyncConnectionPool) -> object:
    """Create UnitOfWork factory (async context manager).

    Commits when the block exits cleanly. Any exception, cancellation
    included, rolls back, so an interrupted audit write leaves no row.
    """

    @asynccontextmanager
    async def factory() -> AsyncIterator[PostgresUnitOfWork]:
        async with pool.connection() as conn:
            uow = PostgresUnitOfWork(conn)
            try:
                yield uow
                await uow.commit()
            except BaseException:
                await uow.rollback()
                raise

    return factory
