"""Get effective user permissions use case."""

from bizrbac.application.dto.user_permissions_dto import UserPermissionsOutput
from bizrbac.domain.exceptions import NotFound


class GetUserPermissionsUseCase:
    """Role permissions with custom overrides applied.

    Conditional bindings are listed as held; their conditions are only
    checked per request by the resolver.
    """

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, user_id: str) -> UserPermissionsOutput:
        async with self._uow_factory() as uow:
            user = await uow.users.get_user(user_id)
            if not user:
                raise NotFound("User", user_id)

            role = None
            if user.role_id is not None:
                role = await uow.catalog.get_role_by_id(user.role_id)
            elif user.legacy_role is not None:
                role = await uow.catalog.get_role_by_name(str(user.legacy_role))

            role_permissions: list[str] = []
            if role:
                bindings = await uow.catalog.list_role_permissions(role.id)
                role_permissions = sorted(b.permission_name for b in bindings)

        effective = set(role_permissions)
        for permission, granted in user.custom_permissions.items():
            if granted:
                effective.add(permission)
            else:
                effective.discard(permission)

        return UserPermissionsOutput(
            user_id=user.id,
            role=role,
            role_permissions=role_permissions,
            custom_permissions=dict(user.custom_permissions),
            effective_permissions=sorted(effective),
        )
