"""Audit log query DTOs."""

from dataclasses import dataclass, field
from datetime import datetime

from bizrbac.domain.entities import AuditLogEntry
from bizrbac.domain.value_objects import AuditResult


@dataclass
class AuditLogFilters:
    """Filters for compliance review of the audit log."""

    user_id: str | None = None
    tenant_id: str | None = None
    resource: str | None = None
    action: str | None = None
    result: AuditResult | None = None
    start: datetime | None = None
    end: datetime | None = None


@dataclass
class AuditLogPage:
    """One page of audit entries, newest first, with the unpaged total."""

    logs: list[AuditLogEntry] = field(default_factory=list)
    total: int = 0
