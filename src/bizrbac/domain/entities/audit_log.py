"""Audit log entry - immutable record of one authorization decision."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from uuid import UUID

from bizrbac.domain.value_objects.audit_result import AuditResult

ACCESS_ACTION = "ACCESSED"


@dataclass(frozen=True)
class AuditLogEntry:
    """Append-only record. Never updated or deleted by the engine."""

    id: UUID
    user_id: str
    permission: str
    resource: str
    result: AuditResult
    reason: str
    created_at: datetime
    tenant_id: str | None = None
    resource_id: str | None = None
    action: str = ACCESS_ACTION
    metadata: Mapping[str, object] = field(default_factory=dict)
    ip_address: str | None = None
    user_agent: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))
