"""Resource ownership checks, dispatched by resource type."""

import logging
from collections.abc import Iterable
from typing import Protocol

from bizrbac.application.ports import UnitOfWork

logger = logging.getLogger(__name__)


class OwnershipChecker(Protocol):
    """Ownership rule for one resource type."""

    resource_type: str

    async def check(
        self, uow: UnitOfWork, resource_id: str, user_id: str, tenant_id: str
    ) -> bool: ...


class OrderOwnershipChecker:
    """Order must belong to the tenant and be assigned to the caller."""

    resource_type = "order"

    async def check(
        self, uow: UnitOfWork, resource_id: str, user_id: str, tenant_id: str
    ) -> bool:
        owner = await uow.orders.get_owner(resource_id)
        return (
            owner is not None
            and owner.tenant_id == tenant_id
            and owner.assigned_user_id == user_id
        )


class CustomerOwnershipChecker:
    """Customer must belong to the caller's tenant."""

    resource_type = "customer"

    async def check(
        self, uow: UnitOfWork, resource_id: str, user_id: str, tenant_id: str
    ) -> bool:
        owner = await uow.customers.get_owner(resource_id)
        return owner is not None and owner.tenant_id == tenant_id


class UserOwnershipChecker:
    """Target user must belong to the caller's tenant."""

    resource_type = "user"

    async def check(
        self, uow: UnitOfWork, resource_id: str, user_id: str, tenant_id: str
    ) -> bool:
        target = await uow.users.get_user(resource_id)
        return target is not None and target.tenant_id == tenant_id


def default_checkers() -> list[OwnershipChecker]:
    return [OrderOwnershipChecker(), CustomerOwnershipChecker(), UserOwnershipChecker()]


class OwnershipRegistry:
    """OwnershipLookup backed by a registry of typed checkers.

    Storage errors propagate so the resolver can fail closed.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        checkers: Iterable[OwnershipChecker] | None = None,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._checkers: dict[str, OwnershipChecker] = {}
        for checker in default_checkers() if checkers is None else checkers:
            self.register(checker)

    def register(self, checker: OwnershipChecker) -> None:
        self._checkers[checker.resource_type] = checker

    def supports(self, resource_type: str) -> bool:
        return resource_type in self._checkers

    async def is_owner(
        self, resource_type: str, resource_id: str, user_id: str, tenant_id: str
    ) -> bool:
        checker = self._checkers.get(resource_type)
        if checker is None:
            logger.warning("No ownership checker for resource type %r", resource_type)
            return False
        async with self._uow_factory() as uow:
            return await checker.check(uow, resource_id, user_id, tenant_id)
