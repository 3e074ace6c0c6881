"""Revoke custom permission use case."""

import logging

from bizrbac.application.ports import PermissionCache
from bizrbac.domain.entities import split_permission_name
from bizrbac.domain.exceptions import NotFound

logger = logging.getLogger(__name__)


class RevokeCustomPermissionUseCase:
    """Force-deny a permission for one user, even if their role grants it."""

    def __init__(self, unit_of_work_factory: type, cache: PermissionCache) -> None:
        self._uow_factory = unit_of_work_factory
        self._cache = cache

    async def execute(self, user_id: str, permission: str) -> None:
        """Set override to False. Cache is invalidated before returning."""
        split_permission_name(permission)
        try:
            async with self._uow_factory() as uow:
                if await uow.users.get_user(user_id) is None:
                    raise NotFound("User", user_id)
                await uow.users.set_custom_permission(user_id, permission, False)
        finally:
            self._cache.invalidate(user_id)
        logger.info("Revoked custom permission %s from user %s", permission, user_id)
