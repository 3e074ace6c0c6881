"""Unit of Work port - transactional boundary."""

from collections.abc import AsyncIterator
from typing import Protocol

from bizrbac.application.ports.repositories import (
    AuditSink,
    CustomerRepository,
    IdentityLookup,
    OrderRepository,
    PermissionCatalog,
)


class UnitOfWork(Protocol):
    """Unit of Work - manages transaction and repository access."""

    @property
    def users(self) -> IdentityLookup: ...

    @property
    def catalog(self) -> PermissionCatalog: ...

    @property
    def audit_logs(self) -> AuditSink: ...

    @property
    def orders(self) -> OrderRepository: ...

    @property
    def customers(self) -> CustomerRepository: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    """Factory for creating UnitOfWork instances."""

    async def __call__(self) -> AsyncIterator[UnitOfWork]: ...
