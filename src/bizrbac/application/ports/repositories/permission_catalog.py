"""Permission catalog port - permissions, roles and their bindings."""

from typing import Protocol
from uuid import UUID

from bizrbac.domain.entities import Permission, Role, RolePermission
from bizrbac.domain.value_objects import Condition


class PermissionCatalog(Protocol):
    """Port for role/permission persistence. Read-mostly."""

    async def get_role_by_id(self, role_id: UUID) -> Role | None: ...

    async def get_role_by_name(self, name: str) -> Role | None: ...

    async def get_permission(self, name: str) -> Permission | None: ...

    async def list_permissions(self) -> list[Permission]: ...

    async def get_role_permission(
        self, role_id: UUID, permission_name: str
    ) -> RolePermission | None: ...

    async def list_role_permissions(
        self, role_id: UUID | None = None
    ) -> list[RolePermission]: ...

    async def bind(
        self,
        role_id: UUID,
        permission_name: str,
        conditions: tuple[Condition, ...] = (),
    ) -> None: ...

    async def unbind(self, role_id: UUID, permission_name: str) -> bool: ...
