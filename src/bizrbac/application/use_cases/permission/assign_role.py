"""Assign role use case."""

import logging

from bizrbac.application.ports import PermissionCache
from bizrbac.domain.entities import Role
from bizrbac.domain.exceptions import NotFound

logger = logging.getLogger(__name__)


class AssignRoleUseCase:
    """Change a user's role."""

    def __init__(self, unit_of_work_factory: type, cache: PermissionCache) -> None:
        self._uow_factory = unit_of_work_factory
        self._cache = cache

    async def execute(self, user_id: str, role_name: str) -> Role:
        try:
            async with self._uow_factory() as uow:
                role = await uow.catalog.get_role_by_name(role_name)
                if not role:
                    raise NotFound("Role", role_name)
                if await uow.users.get_user(user_id) is None:
                    raise NotFound("User", user_id)
                await uow.users.set_role(user_id, role.id)
        finally:
            self._cache.invalidate(user_id)
        logger.info("Assigned role %s to user %s", role.name, user_id)
        return role
