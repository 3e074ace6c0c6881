"""Domain entities."""

from bizrbac.domain.entities.audit_log import ACCESS_ACTION, AuditLogEntry
from bizrbac.domain.entities.permission import Permission, split_permission_name
from bizrbac.domain.entities.resource_owner import ResourceOwner
from bizrbac.domain.entities.role import Role
from bizrbac.domain.entities.role_permission import RolePermission
from bizrbac.domain.entities.user import UserSnapshot

__all__ = [
    "ACCESS_ACTION",
    "AuditLogEntry",
    "Permission",
    "ResourceOwner",
    "Role",
    "RolePermission",
    "UserSnapshot",
    "split_permission_name",
]
