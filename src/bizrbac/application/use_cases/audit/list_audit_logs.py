"""List audit logs use case."""

from bizrbac.application.dto.audit_dto import AuditLogFilters, AuditLogPage
from bizrbac.domain.exceptions import ValidationError

MAX_LIMIT = 500


class ListAuditLogsUseCase:
    """Compliance review of recorded authorization decisions."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self, filters: AuditLogFilters, limit: int = 100, offset: int = 0
    ) -> AuditLogPage:
        """Newest-first page. limit is clamped to 1..500."""
        if offset < 0:
            raise ValidationError("offset must be >= 0")
        for bound in (filters.start, filters.end):
            if bound is not None and bound.tzinfo is None:
                raise ValidationError("start and end must carry a UTC offset")
        if filters.start and filters.end and filters.start > filters.end:
            raise ValidationError("start must not be after end")
        limit = min(max(limit, 1), MAX_LIMIT)
        async with self._uow_factory() as uow:
            logs, total = await uow.audit_logs.query(filters, limit, offset)
        return AuditLogPage(logs=logs, total=total)
