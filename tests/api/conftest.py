"""Fixtures for API tests."""

import pytest
from falcon.testing import TestClient

from bizrbac.application.use_cases.audit.list_audit_logs import ListAuditLogsUseCase
from bizrbac.application.use_cases.permission.assign_role import AssignRoleUseCase
from bizrbac.application.use_cases.permission.bind_role_permission import (
    BindRolePermissionUseCase,
    UnbindRolePermissionUseCase,
)
from bizrbac.application.use_cases.permission.get_user_permissions import (
    GetUserPermissionsUseCase,
)
from bizrbac.application.use_cases.permission.grant_custom_permission import (
    GrantCustomPermissionUseCase,
)
from bizrbac.application.use_cases.permission.revoke_custom_permission import (
    RevokeCustomPermissionUseCase,
)
from bizrbac.domain.entities import UserSnapshot
from bizrbac.interfaces.api.access_gate import AccessGate
from bizrbac.interfaces.api.app import create_app
from bizrbac.interfaces.api.middleware.auth import RequestUser
from bizrbac.interfaces.api.resources.audit_logs import AuditLogsResource
from bizrbac.interfaces.api.resources.health import HealthResource
from bizrbac.interfaces.api.resources.permissions import (
    CurrentUserPermissionsResource,
    PermissionCatalogResource,
    UserPermissionsResource,
    UserRoleResource,
)
from bizrbac.interfaces.api.resources.roles import RolePermissionsResource


class AuthBypassMiddleware:
    """Middleware that sets context.user from the X-Test-User header.

    X-Test-No-Tenant drops the tenant, as for a token without a business claim.
    """

    def __init__(self, users: dict[str, UserSnapshot]) -> None:
        self._users = users

    async def process_request(self, req, resp):
        user = self._users.get(req.get_header("X-Test-User") or "")
        if user is None:
            req.context.user = None
            return
        tenant_id = None if req.get_header("X-Test-No-Tenant") else user.tenant_id
        req.context.user = RequestUser(user_id=user.id, tenant_id=tenant_id)


@pytest.fixture
def users(fake_uow, roles) -> dict[str, UserSnapshot]:
    """Callers by id: owner/manager/employee in B1, an owner in B2."""
    seeded = [
        UserSnapshot(id="owner-1", tenant_id="B1", role_id=roles["OWNER"].id),
        UserSnapshot(id="mgr-1", tenant_id="B1", role_id=roles["MANAGER"].id),
        UserSnapshot(id="emp-1", tenant_id="B1", role_id=roles["EMPLOYEE"].id),
        UserSnapshot(id="owner-2", tenant_id="B2", role_id=roles["OWNER"].id),
    ]
    return {u.id: fake_uow.users.add(u) for u in seeded}


@pytest.fixture
def app(uow_factory, resolver, users):
    """Falcon ASGI app with API resources for testing."""
    gate = AccessGate(resolver)
    get_permissions = GetUserPermissionsUseCase(unit_of_work_factory=uow_factory)
    return create_app(
        health_resource=HealthResource(resolver._audit),
        permission_catalog_resource=PermissionCatalogResource(uow_factory, gate),
        user_permissions_resource=UserPermissionsResource(
            uow_factory,
            gate,
            get_permissions,
            GrantCustomPermissionUseCase(uow_factory, resolver.cache),
            RevokeCustomPermissionUseCase(uow_factory, resolver.cache),
        ),
        user_role_resource=UserRoleResource(
            uow_factory, gate, AssignRoleUseCase(uow_factory, resolver.cache)
        ),
        audit_logs_resource=AuditLogsResource(ListAuditLogsUseCase(uow_factory), gate),
        role_permissions_resource=RolePermissionsResource(
            uow_factory,
            gate,
            BindRolePermissionUseCase(uow_factory, resolver.cache),
            UnbindRolePermissionUseCase(uow_factory, resolver.cache),
        ),
        current_user_permissions_resource=CurrentUserPermissionsResource(
            uow_factory, gate, get_permissions
        ),
        middleware=[AuthBypassMiddleware(users)],
    )


@pytest.fixture
def client(app) -> TestClient:
    """Falcon ASGI test client."""
    return TestClient(app)
