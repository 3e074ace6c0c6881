"""Bind/unbind role permission use cases."""

import logging
from collections.abc import Mapping
from typing import Any

from bizrbac.application.ports import PermissionCache
from bizrbac.domain.entities import RolePermission
from bizrbac.domain.exceptions import NotFound
from bizrbac.domain.value_objects import parse_conditions

logger = logging.getLogger(__name__)


class BindRolePermissionUseCase:
    """Attach a permission to a role, optionally guarded by conditions."""

    def __init__(self, unit_of_work_factory: type, cache: PermissionCache) -> None:
        self._uow_factory = unit_of_work_factory
        self._cache = cache

    async def execute(
        self,
        role_name: str,
        permission: str,
        conditions: Mapping[str, Any] | None = None,
    ) -> RolePermission:
        """Bind permission to role. Conditions are validated before writing.

        Catalog changes are rare, so the whole permission cache is cleared.
        """
        parsed = parse_conditions(conditions)
        try:
            async with self._uow_factory() as uow:
                role = await uow.catalog.get_role_by_name(role_name)
                if not role:
                    raise NotFound("Role", role_name)
                if await uow.catalog.get_permission(permission) is None:
                    raise NotFound("Permission", permission)
                await uow.catalog.bind(role.id, permission, parsed)
        finally:
            self._cache.invalidate_all()
        logger.info("Bound %s to role %s", permission, role_name)
        return RolePermission(role=role, permission_name=permission, conditions=parsed)


class UnbindRolePermissionUseCase:
    """Detach a permission from a role."""

    def __init__(self, unit_of_work_factory: type, cache: PermissionCache) -> None:
        self._uow_factory = unit_of_work_factory
        self._cache = cache

    async def execute(self, role_name: str, permission: str) -> None:
        try:
            async with self._uow_factory() as uow:
                role = await uow.catalog.get_role_by_name(role_name)
                if not role:
                    raise NotFound("Role", role_name)
                if not await uow.catalog.unbind(role.id, permission):
                    raise NotFound("RolePermission", f"{role_name}/{permission}")
        finally:
            self._cache.invalidate_all()
        logger.info("Unbound %s from role %s", permission, role_name)
