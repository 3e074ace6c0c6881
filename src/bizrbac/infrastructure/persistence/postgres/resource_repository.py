"""PostgreSQL order and customer ownership lookups."""

from psycopg import AsyncConnection

from bizrbac.domain.entities import ResourceOwner


class PostgresOrderRepository:
    """Order ownership data."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_owner(self, order_id: str) -> ResourceOwner | None:
        """Get tenant and assignee of order."""
        cur = await self._conn.execute(
            "SELECT id, business_id, assigned_user_id FROM customer_order WHERE id = %s",
            (order_id,),
        )
        r = await cur.fetchone()
        if not r:
            return None
        return ResourceOwner(resource_id=r[0], tenant_id=r[1], assigned_user_id=r[2])


class PostgresCustomerRepository:
    """Customer ownership data."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_owner(self, customer_id: str) -> ResourceOwner | None:
        """Get tenant of customer."""
        cur = await self._conn.execute(
            "SELECT id, business_id FROM customer WHERE id = %s",
            (customer_id,),
        )
        r = await cur.fetchone()
        if not r:
            return None
        return ResourceOwner(resource_id=r[0], tenant_id=r[1])
