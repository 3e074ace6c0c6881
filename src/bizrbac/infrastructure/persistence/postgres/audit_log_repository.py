"""PostgreSQL audit log repository - AuditSink implementation."""

from typing import Any

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from bizrbac.application.dto.audit_dto import AuditLogFilters
from bizrbac.domain.entities import AuditLogEntry
from bizrbac.domain.value_objects import AuditResult

_COLUMNS = (
    "id, user_id, permission, resource, result, reason, created_at, "
    "business_id, resource_id, action, metadata, ip_address, user_agent"
)


def _entry(r) -> AuditLogEntry:
    return AuditLogEntry(
        id=r[0],
        user_id=r[1],
        permission=r[2],
        resource=r[3],
        result=AuditResult(r[4]),
        reason=r[5],
        created_at=r[6],
        tenant_id=r[7],
        resource_id=r[8],
        action=r[9],
        metadata=r[10] or {},
        ip_address=r[11],
        user_agent=r[12],
    )


def _where(filters: AuditLogFilters) -> tuple[str, list[Any]]:
    clauses: list[str] = []
    params: list[Any] = []
    for column, value in (
        ("user_id", filters.user_id),
        ("business_id", filters.tenant_id),
        ("resource", filters.resource),
        ("action", filters.action),
        ("result", str(filters.result) if filters.result else None),
    ):
        if value is not None:
            clauses.append(f"{column} = %s")
            params.append(value)
    if filters.start is not None:
        clauses.append("created_at >= %s")
        params.append(filters.start)
    if filters.end is not None:
        clauses.append("created_at <= %s")
        params.append(filters.end)
    return (" WHERE " + " AND ".join(clauses) if clauses else "", params)


class PostgresAuditLogRepository:
    """Append-only audit log. No update or delete statements exist here."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def append(self, entry: AuditLogEntry) -> None:
        """Insert entry."""
        await self._conn.execute(
            f"INSERT INTO permission_audit_log ({_COLUMNS}) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
            (
                entry.id,
                entry.user_id,
                entry.permission,
                entry.resource,
                str(entry.result),
                entry.reason,
                entry.created_at,
                entry.tenant_id,
                entry.resource_id,
                entry.action,
                Jsonb(dict(entry.metadata)),
                entry.ip_address,
                entry.user_agent,
            ),
        )

    async def query(
        self, filters: AuditLogFilters, limit: int, offset: int
    ) -> tuple[list[AuditLogEntry], int]:
        """Page of entries, newest first, plus total count."""
        where, params = _where(filters)
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM permission_audit_log{where} "
            "ORDER BY created_at DESC, id LIMIT %s OFFSET %s",
            (*params, limit, offset),
        )
        rows = await cur.fetchall()
        cur = await self._conn.execute(
            f"SELECT count(*) FROM permission_audit_log{where}",
            params,
        )
        total = (await cur.fetchone())[0]
        return [_entry(r) for r in rows], total
