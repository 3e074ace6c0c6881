"""Application entry point and composition root."""

import logging
from datetime import timedelta

from bizrbac import __version__
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
from bizrbac.config import Settings, get_settings
from bizrbac.infrastructure.auth.keycloak_provider import KeycloakProvider
from bizrbac.infrastructure.permission import (
    AuditLogger,
    ConditionEvaluator,
    OwnershipRegistry,
    PermissionResolver,
    SystemClock,
    UserPermissionCache,
)
from bizrbac.infrastructure.persistence.postgres.connection import create_pool
from bizrbac.infrastructure.persistence.postgres.unit_of_work import (
    create_uow_factory,
)
from bizrbac.interfaces.api.access_gate import AccessGate
from bizrbac.interfaces.api.app import create_app
from bizrbac.interfaces.api.middleware.auth import AuthMiddleware
from bizrbac.interfaces.api.middleware.lifespan import LifespanMiddleware
from bizrbac.interfaces.api.resources.audit_logs import AuditLogsResource
from bizrbac.interfaces.api.resources.health import HealthResource
from bizrbac.interfaces.api.resources.permissions import (
    CurrentUserPermissionsResource,
    PermissionCatalogResource,
    UserPermissionsResource,
    UserRoleResource,
)
from bizrbac.interfaces.api.resources.roles import RolePermissionsResource


def configure_logging(settings: Settings) -> None:
    """Root logging setup; module loggers propagate here."""
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    """CLI entry point."""
    print(f"bizrbac v{__version__}")


def build_resolver(
    uow_factory, settings: Settings, clock=None
) -> tuple[PermissionResolver, OwnershipRegistry, AuditLogger]:
    """Wire the decision engine. Each call returns an isolated instance."""
    clock = clock or SystemClock(settings.business_timezone)
    ownership = OwnershipRegistry(uow_factory)
    audit_logger = AuditLogger(uow_factory, timeout=settings.authorization_timeout_seconds)
    resolver = PermissionResolver(
        unit_of_work_factory=uow_factory,
        cache=UserPermissionCache(
            clock, ttl=timedelta(seconds=settings.permission_cache_ttl_seconds)
        ),
        condition_evaluator=ConditionEvaluator(ownership, clock),
        audit_logger=audit_logger,
        clock=clock,
        timeout=settings.authorization_timeout_seconds,
    )
    return resolver, ownership, audit_logger


def create_bizrbac_app():
    """Composition root - build Falcon app with all dependencies."""
    settings = get_settings()
    configure_logging(settings)
    pool = create_pool(
        settings.database_url,
        min_size=settings.database_pool_min_size,
        max_size=settings.database_pool_max_size,
        timeout=settings.database_pool_timeout_seconds,
    )
    uow_factory = create_uow_factory(pool)

    keycloak = (
        KeycloakProvider(
            server_url=settings.keycloak_url,
            realm=settings.keycloak_realm,
            client_id=settings.keycloak_client_id,
            client_secret=settings.keycloak_client_secret,
            tenant_claim=settings.keycloak_tenant_claim,
        )
        if settings.keycloak_client_secret
        else None
    )
    if keycloak is None:
        logging.getLogger(__name__).warning(
            "KEYCLOAK_CLIENT_SECRET not set; every protected request will get 401"
        )

    resolver, ownership, audit_logger = build_resolver(uow_factory, settings)
    gate = AccessGate(resolver)

    get_permissions = GetUserPermissionsUseCase(unit_of_work_factory=uow_factory)
    grant_permission = GrantCustomPermissionUseCase(
        unit_of_work_factory=uow_factory, cache=resolver.cache
    )
    revoke_permission = RevokeCustomPermissionUseCase(
        unit_of_work_factory=uow_factory, cache=resolver.cache
    )
    assign_role = AssignRoleUseCase(unit_of_work_factory=uow_factory, cache=resolver.cache)
    list_audit_logs = ListAuditLogsUseCase(unit_of_work_factory=uow_factory)
    bind_permission = BindRolePermissionUseCase(
        unit_of_work_factory=uow_factory, cache=resolver.cache
    )
    unbind_permission = UnbindRolePermissionUseCase(
        unit_of_work_factory=uow_factory, cache=resolver.cache
    )

    return create_app(
        health_resource=HealthResource(audit_logger, resolver.cache),
        permission_catalog_resource=PermissionCatalogResource(uow_factory, gate),
        user_permissions_resource=UserPermissionsResource(
            uow_factory, gate, get_permissions, grant_permission, revoke_permission
        ),
        user_role_resource=UserRoleResource(uow_factory, gate, assign_role),
        audit_logs_resource=AuditLogsResource(list_audit_logs, gate),
        role_permissions_resource=RolePermissionsResource(
            uow_factory, gate, bind_permission, unbind_permission
        ),
        current_user_permissions_resource=CurrentUserPermissionsResource(
            uow_factory, gate, get_permissions
        ),
        middleware=[
            LifespanMiddleware(pool, resolver, ownership),
            AuthMiddleware(keycloak),
        ],
    )


def run_server() -> None:
    """Run uvicorn server."""
    import uvicorn

    uvicorn.run(create_bizrbac_app(), host="0.0.0.0", port=8000)
