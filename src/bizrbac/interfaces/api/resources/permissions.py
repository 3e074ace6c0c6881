"""Permission API resources."""

import falcon.asgi

from bizrbac.application.use_cases.permission.assign_role import AssignRoleUseCase
from bizrbac.application.use_cases.permission.get_user_permissions import (
    GetUserPermissionsUseCase,
)
from bizrbac.application.use_cases.permission.grant_custom_permission import (
    GrantCustomPermissionUseCase,
)
from bizrbac.application.use_cases.permission.revoke_custom_permission import (
    RevokeCustomPermissionUseCase,
)
from bizrbac.domain.exceptions import NotFound, ValidationError
from bizrbac.domain.value_objects import PermissionPatterns
from bizrbac.interfaces.api.access_gate import AccessGate, path_param


async def _same_tenant(uow_factory, req: falcon.asgi.Request, user_id: str) -> bool:
    """Target user exists and belongs to the caller's tenant."""
    async with uow_factory() as uow:
        target = await uow.users.get_user(user_id)
    return target is not None and target.tenant_id == req.context.user.tenant_id


class PermissionCatalogResource:
    """GET /v1/permissions - catalog grouped by category."""

    def __init__(self, unit_of_work_factory: type, gate: AccessGate) -> None:
        self._uow_factory = unit_of_work_factory
        self.on_get = gate.protect("settings:read")(self._list)

    async def _list(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        async with self._uow_factory() as uow:
            permissions = await uow.catalog.list_permissions()
            bindings = await uow.catalog.list_role_permissions()

        roles_by_permission: dict[str, list[dict]] = {}
        for b in bindings:
            roles_by_permission.setdefault(b.permission_name, []).append({
                "role": b.role.name,
                "display_name": b.role.display_name,
                "level": b.role.level,
                "conditional": b.is_conditional,
            })

        by_category: dict[str, list[dict]] = {}
        for p in permissions:
            by_category.setdefault(p.category, []).append({
                "name": p.name,
                "resource": p.resource,
                "action": p.action,
                "description": p.description,
                "roles": roles_by_permission.get(p.name, []),
            })

        resp.media = {
            "permissions": by_category,
            "metadata": {
                "total_permissions": len(permissions),
                "categories": sorted(by_category),
            },
        }
        resp.status = falcon.HTTP_200


class UserPermissionsResource:
    """GET/POST /v1/users/{user_id}/permissions - effective permissions, grant/revoke."""

    def __init__(
        self,
        unit_of_work_factory: type,
        gate: AccessGate,
        get_permissions: GetUserPermissionsUseCase,
        grant_permission: GrantCustomPermissionUseCase,
        revoke_permission: RevokeCustomPermissionUseCase,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._get_permissions = get_permissions
        self._grant = grant_permission
        self._revoke = revoke_permission
        self.on_get = gate.protect(
            PermissionPatterns.USER_READ, resource_id=path_param("user_id")
        )(self._get)
        self.on_post = gate.protect("users:update", resource_id=path_param("user_id"))(
            self._update
        )

    async def _get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: str
    ) -> None:
        """Effective permissions of user."""
        if not await _same_tenant(self._uow_factory, req, user_id):
            resp.status = falcon.HTTP_404
            resp.media = {"error": "User not found"}
            return
        result = await self._get_permissions.execute(user_id)
        resp.media = {
            "user_id": result.user_id,
            "role": result.role.name if result.role else None,
            "role_permissions": result.role_permissions,
            "custom_permissions": result.custom_permissions,
            "effective_permissions": result.effective_permissions,
        }
        resp.status = falcon.HTTP_200

    async def _update(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: str
    ) -> None:
        """Grant or revoke a custom permission: {"action": "grant"|"revoke", "permission"}."""
        try:
            body = await req.get_media()
            action = body["action"]
            permission = body["permission"]
        except (KeyError, TypeError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Missing required field: {e}"}
            return

        if action not in ("grant", "revoke"):
            resp.status = falcon.HTTP_400
            resp.media = {"error": "Invalid action. Must be 'grant' or 'revoke'"}
            return

        if not await _same_tenant(self._uow_factory, req, user_id):
            resp.status = falcon.HTTP_404
            resp.media = {"error": "User not found"}
            return

        use_case = self._grant if action == "grant" else self._revoke
        try:
            await use_case.execute(user_id, permission)
        except ValidationError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return
        except NotFound as e:
            resp.status = falcon.HTTP_404
            resp.media = {"error": str(e)}
            return

        updated = await self._get_permissions.execute(user_id)
        resp.media = {
            "user_id": user_id,
            "permission": permission,
            "action": action,
            "effective_permissions": updated.effective_permissions,
        }
        resp.status = falcon.HTTP_200


class UserRoleResource:
    """PUT /v1/users/{user_id}/role - assign role."""

    def __init__(
        self,
        unit_of_work_factory: type,
        gate: AccessGate,
        assign_role: AssignRoleUseCase,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._assign = assign_role
        self.on_put = gate.protect("users:update", resource_id=path_param("user_id"))(
            self._assign_role
        )

    async def _assign_role(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: str
    ) -> None:
        try:
            body = await req.get_media()
            role_name = body["role"]
        except (KeyError, TypeError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Missing required field: {e}"}
            return

        if not await _same_tenant(self._uow_factory, req, user_id):
            resp.status = falcon.HTTP_404
            resp.media = {"error": "User not found"}
            return

        try:
            role = await self._assign.execute(user_id, role_name)
        except NotFound as e:
            resp.status = falcon.HTTP_404
            resp.media = {"error": str(e)}
            return
        resp.media = {"user_id": user_id, "role": role.name, "display_name": role.display_name}
        resp.status = falcon.HTTP_200


class CurrentUserPermissionsResource:
    """GET /v1/me/permissions - the caller's own effective permissions."""

    def __init__(
        self,
        unit_of_work_factory: type,
        gate: AccessGate,
        get_permissions: GetUserPermissionsUseCase,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._get_permissions = get_permissions
        self.on_get = gate.require_business_context()(self._get)

    async def _get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        caller = req.context.user
        if not await _same_tenant(self._uow_factory, req, caller.user_id):
            resp.status = falcon.HTTP_404
            resp.media = {"error": "User not found"}
            return
        result = await self._get_permissions.execute(caller.user_id)
        resp.media = {
            "user_id": result.user_id,
            "business_id": caller.tenant_id,
            "role": result.role.name if result.role else None,
            "effective_permissions": result.effective_permissions,
        }
        resp.status = falcon.HTTP_200
