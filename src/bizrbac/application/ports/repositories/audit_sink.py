"""Audit sink port - append-only permission audit log."""

from typing import Protocol

from bizrbac.application.dto.audit_dto import AuditLogFilters
from bizrbac.domain.entities import AuditLogEntry


class AuditSink(Protocol):
    """Port for audit persistence. Entries are never updated or deleted."""

    async def append(self, entry: AuditLogEntry) -> None: ...

    async def query(
        self, filters: AuditLogFilters, limit: int, offset: int
    ) -> tuple[list[AuditLogEntry], int]: ...
