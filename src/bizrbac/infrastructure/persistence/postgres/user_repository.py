"""PostgreSQL user repository - IdentityLookup implementation."""

from uuid import UUID

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from bizrbac.domain.entities import UserSnapshot
from bizrbac.domain.exceptions import NotFound
from bizrbac.domain.value_objects import LegacyRole


class PostgresUserRepository:
    """User repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_user(self, user_id: str) -> UserSnapshot | None:
        """Get user snapshot by id."""
        cur = await self._conn.execute(
            "SELECT id, business_id, role_id, legacy_role, custom_permissions, is_active "
            "FROM app_user WHERE id = %s",
            (user_id,),
        )
        r = await cur.fetchone()
        if not r:
            return None
        return UserSnapshot(
            id=r[0],
            tenant_id=r[1],
            role_id=r[2],
            legacy_role=LegacyRole.parse(r[3]),
            custom_permissions={k: bool(v) for k, v in (r[4] or {}).items()},
            is_active=r[5],
        )

    async def set_custom_permission(
        self, user_id: str, permission: str, granted: bool
    ) -> None:
        """Set one override key without touching the others."""
        cur = await self._conn.execute(
            "UPDATE app_user SET custom_permissions = "
            "COALESCE(custom_permissions, '{}'::jsonb) || %s, updated_at = now() "
            "WHERE id = %s",
            (Jsonb({permission: granted}), user_id),
        )
        if cur.rowcount == 0:
            raise NotFound("User", user_id)

    async def set_role(self, user_id: str, role_id: UUID) -> None:
        """Assign relational role."""
        cur = await self._conn.execute(
            "UPDATE app_user SET role_id = %s, updated_at = now() WHERE id = %s",
            (role_id, user_id),
        )
        if cur.rowcount == 0:
            raise NotFound("User", user_id)
