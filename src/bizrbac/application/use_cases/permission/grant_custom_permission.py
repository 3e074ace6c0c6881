"""Grant custom permission use case."""

import logging

from bizrbac.application.ports import PermissionCache
from bizrbac.domain.entities import split_permission_name
from bizrbac.domain.exceptions import NotFound

logger = logging.getLogger(__name__)


class GrantCustomPermissionUseCase:
    """Force-grant a permission to one user, overriding their role."""

    def __init__(self, unit_of_work_factory: type, cache: PermissionCache) -> None:
        self._uow_factory = unit_of_work_factory
        self._cache = cache

    async def execute(self, user_id: str, permission: str) -> None:
        """Set override to True. Cache is invalidated before returning.

        Any well-formed name is accepted; it need not be in the catalog.
        """
        split_permission_name(permission)
        try:
            async with self._uow_factory() as uow:
                if await uow.users.get_user(user_id) is None:
                    raise NotFound("User", user_id)
                await uow.users.set_custom_permission(user_id, permission, True)
        finally:
            self._cache.invalidate(user_id)
        logger.info("Granted custom permission %s to user %s", permission, user_id)
