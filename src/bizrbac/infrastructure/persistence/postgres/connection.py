"""PostgreSQL async connection pool."""

from psycopg_pool import AsyncConnectionPool


def create_pool(
    conninfo: str,
    min_size: int = 2,
    max_size: int = 10,
    timeout: float = 30.0,
) -> AsyncConnectionPool:
    """Create the shared pool, closed until LifespanMiddleware opens it.

    ``timeout`` bounds how long a unit of work waits for a free connection;
    an exhausted pool then surfaces as a storage error and the decision
    fails closed.
    """
    return AsyncConnectionPool(
        conninfo=conninfo,
        min_size=min_size,
        max_size=max_size,
        timeout=timeout,
        name="bizrbac",
        open=False,
    )
