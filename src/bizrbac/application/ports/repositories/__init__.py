"""Repository ports."""

from bizrbac.application.ports.repositories.audit_sink import AuditSink
from bizrbac.application.ports.repositories.identity_lookup import IdentityLookup
from bizrbac.application.ports.repositories.permission_catalog import (
    PermissionCatalog,
)
from bizrbac.application.ports.repositories.resource_repository import (
    CustomerRepository,
    OrderRepository,
)

__all__ = [
    "AuditSink",
    "CustomerRepository",
    "IdentityLookup",
    "OrderRepository",
    "PermissionCatalog",
]
