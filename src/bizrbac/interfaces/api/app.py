"""Falcon ASGI application."""

import logging

import falcon
import falcon.asgi
from falcon.asgi import App

from bizrbac.interfaces.api.resources.audit_logs import AuditLogsResource
from bizrbac.interfaces.api.resources.health import HealthResource
from bizrbac.interfaces.api.resources.permissions import (
    CurrentUserPermissionsResource,
    PermissionCatalogResource,
    UserPermissionsResource,
    UserRoleResource,
)
from bizrbac.interfaces.api.resources.roles import RolePermissionsResource

logger = logging.getLogger(__name__)


async def handle_unexpected(req, resp, ex, params) -> None:
    """Log the traceback server-side; return a generic 500."""
    logger.exception("Unhandled error on %s %s", req.method, req.path)
    resp.status = falcon.HTTP_500
    resp.media = {"title": "500 Internal Server Error"}


def create_app(
    health_resource: HealthResource,
    permission_catalog_resource: PermissionCatalogResource,
    user_permissions_resource: UserPermissionsResource,
    user_role_resource: UserRoleResource,
    audit_logs_resource: AuditLogsResource,
    role_permissions_resource: RolePermissionsResource,
    current_user_permissions_resource: CurrentUserPermissionsResource,
    middleware: list | None = None,
) -> App:
    """Create Falcon ASGI app with routes."""
    app = falcon.asgi.App(middleware=middleware or [])
    app.add_error_handler(Exception, handle_unexpected)
    app.add_route("/v1/health", health_resource)
    app.add_route("/v1/health/ready", health_resource, suffix="ready")
    app.add_route("/v1/permissions", permission_catalog_resource)
    app.add_route("/v1/users/{user_id}/permissions", user_permissions_resource)
    app.add_route("/v1/users/{user_id}/role", user_role_resource)
    app.add_route("/v1/audit-logs", audit_logs_resource)
    app.add_route("/v1/roles/{role}/permissions", role_permissions_resource)
    app.add_route(
        "/v1/roles/{role}/permissions/{permission}",
        role_permissions_resource,
        suffix="binding",
    )
    app.add_route("/v1/me/permissions", current_user_permissions_resource)
    return app
