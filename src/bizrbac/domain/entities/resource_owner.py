"""Ownership view of a tenant-scoped business record."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ResourceOwner:
    """Tenant and (optional) assignee of an order, customer or user record."""

    resource_id: str
    tenant_id: str
    assigned_user_id: str | None = None
