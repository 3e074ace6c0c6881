"""Audit log API resource."""

from datetime import UTC, datetime

import falcon.asgi

from bizrbac.application.dto.audit_dto import AuditLogFilters
from bizrbac.application.use_cases.audit.list_audit_logs import ListAuditLogsUseCase
from bizrbac.domain.exceptions import ValidationError
from bizrbac.domain.value_objects import AuditResult, PermissionPatterns
from bizrbac.interfaces.api.access_gate import AccessGate


class AuditLogsResource:
    """GET /v1/audit-logs - compliance review, scoped to the caller's tenant."""

    def __init__(self, list_audit_logs: ListAuditLogsUseCase, gate: AccessGate) -> None:
        self._list = list_audit_logs
        self.on_get = gate.protect(PermissionPatterns.BUSINESS_SETTINGS)(self._get)

    async def _get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        try:
            result = req.get_param("result")
            filters = AuditLogFilters(
                user_id=req.get_param("user_id"),
                tenant_id=req.context.user.tenant_id,
                resource=req.get_param("resource"),
                action=req.get_param("action"),
                result=AuditResult(result.upper()) if result else None,
                start=_parse_datetime(req.get_param("start")),
                end=_parse_datetime(req.get_param("end")),
            )
            limit = req.get_param_as_int("limit") or 100
            offset = req.get_param_as_int("offset") or 0
            page = await self._list.execute(filters, limit=limit, offset=offset)
        except (ValueError, ValidationError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return

        resp.media = {
            "logs": [
                {
                    "id": str(entry.id),
                    "user_id": entry.user_id,
                    "action": entry.action,
                    "resource": entry.resource,
                    "resource_id": entry.resource_id,
                    "permission": entry.permission,
                    "result": str(entry.result),
                    "reason": entry.reason,
                    "business_id": entry.tenant_id,
                    "metadata": dict(entry.metadata),
                    "ip_address": entry.ip_address,
                    "user_agent": entry.user_agent,
                    "created_at": entry.created_at.isoformat(),
                }
                for entry in page.logs
            ],
            "total": page.total,
        }
        resp.status = falcon.HTTP_200


def _parse_datetime(value: str | None) -> datetime | None:
    """ISO 8601; values without an offset are taken as UTC."""
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)
