"""Role binding API resources (owner only)."""

import falcon.asgi

from bizrbac.application.use_cases.permission.bind_role_permission import (
    BindRolePermissionUseCase,
    UnbindRolePermissionUseCase,
)
from bizrbac.domain.entities import RolePermission
from bizrbac.domain.exceptions import NotFound, ValidationError
from bizrbac.domain.value_objects import dump_conditions
from bizrbac.interfaces.api.access_gate import AccessGate


def _binding_media(binding: RolePermission) -> dict:
    return {
        "role": binding.role.name,
        "permission": binding.permission_name,
        "conditions": dump_conditions(binding.conditions),
    }


class RolePermissionsResource:
    """/v1/roles/{role}/permissions - list and bind; .../{permission} - unbind.

    Every change clears the whole permission cache before responding.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        gate: AccessGate,
        bind_permission: BindRolePermissionUseCase,
        unbind_permission: UnbindRolePermissionUseCase,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._bind = bind_permission
        self._unbind = unbind_permission
        owner_only = gate.owner_only()
        self.on_get = owner_only(self._list)
        self.on_put = owner_only(self._bind_permission)
        self.on_delete_binding = owner_only(self._unbind_permission)

    async def _list(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role: str
    ) -> None:
        async with self._uow_factory() as uow:
            found = await uow.catalog.get_role_by_name(role)
            bindings = await uow.catalog.list_role_permissions(found.id) if found else []
        if found is None:
            resp.status = falcon.HTTP_404
            resp.media = {"error": "Role not found"}
            return
        resp.media = {
            "role": found.name,
            "display_name": found.display_name,
            "level": found.level,
            "permissions": [_binding_media(b) for b in bindings],
        }
        resp.status = falcon.HTTP_200

    async def _bind_permission(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role: str
    ) -> None:
        """Bind {"permission", "conditions"?}; re-binding replaces the conditions."""
        try:
            body = await req.get_media()
            permission = body["permission"]
            conditions = body.get("conditions")
        except (KeyError, TypeError, AttributeError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Missing required field: {e}"}
            return

        try:
            binding = await self._bind.execute(role, permission, conditions)
        except ValidationError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return
        except NotFound as e:
            resp.status = falcon.HTTP_404
            resp.media = {"error": str(e)}
            return
        resp.media = _binding_media(binding)
        resp.status = falcon.HTTP_200

    async def _unbind_permission(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        role: str,
        permission: str,
    ) -> None:
        try:
            await self._unbind.execute(role, permission)
        except NotFound as e:
            resp.status = falcon.HTTP_404
            resp.media = {"error": str(e)}
            return
        resp.status = falcon.HTTP_204
