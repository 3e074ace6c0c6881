"""PostgreSQL permission catalog - roles, permissions, bindings."""

from uuid import UUID, uuid4

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from bizrbac.domain.entities import Permission, Role, RolePermission
from bizrbac.domain.exceptions import NotFound
from bizrbac.domain.value_objects import Condition, dump_conditions, parse_conditions

_ROLE_COLUMNS = "id, name, display_name, level, is_system"
_BINDING_SELECT = (
    "SELECT r.id, r.name, r.display_name, r.level, r.is_system, p.name, rp.conditions "
    "FROM role_permission rp "
    "JOIN role r ON r.id = rp.role_id "
    "JOIN permission p ON p.id = rp.permission_id"
)


def _role(r) -> Role:
    return Role(id=r[0], name=r[1], display_name=r[2], level=r[3], is_system=r[4])


def _binding(r) -> RolePermission:
    return RolePermission(
        role=_role(r[:5]),
        permission_name=r[5],
        conditions=parse_conditions(r[6]),
    )


class PostgresCatalogRepository:
    """PermissionCatalog implementation. Conditions are parsed on load."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_role_by_id(self, role_id: UUID) -> Role | None:
        """Get role by id."""
        cur = await self._conn.execute(
            f"SELECT {_ROLE_COLUMNS} FROM role WHERE id = %s",
            (role_id,),
        )
        r = await cur.fetchone()
        return _role(r) if r else None

    async def get_role_by_name(self, name: str) -> Role | None:
        """Get role by name."""
        cur = await self._conn.execute(
            f"SELECT {_ROLE_COLUMNS} FROM role WHERE name = %s",
            (name,),
        )
        r = await cur.fetchone()
        return _role(r) if r else None

    async def get_permission(self, name: str) -> Permission | None:
        """Get permission by name."""
        cur = await self._conn.execute(
            "SELECT name, category, description FROM permission WHERE name = %s",
            (name,),
        )
        r = await cur.fetchone()
        if not r:
            return None
        return Permission(name=r[0], category=r[1], description=r[2])

    async def list_permissions(self) -> list[Permission]:
        """List all permissions ordered by category and name."""
        cur = await self._conn.execute(
            "SELECT name, category, description FROM permission ORDER BY category, name"
        )
        rows = await cur.fetchall()
        return [Permission(name=r[0], category=r[1], description=r[2]) for r in rows]

    async def get_role_permission(
        self, role_id: UUID, permission_name: str
    ) -> RolePermission | None:
        """Get binding of permission to role."""
        cur = await self._conn.execute(
            f"{_BINDING_SELECT} WHERE rp.role_id = %s AND p.name = %s",
            (role_id, permission_name),
        )
        r = await cur.fetchone()
        return _binding(r) if r else None

    async def list_role_permissions(
        self, role_id: UUID | None = None
    ) -> list[RolePermission]:
        """List bindings, optionally for one role."""
        if role_id is None:
            cur = await self._conn.execute(f"{_BINDING_SELECT} ORDER BY r.level DESC, p.name")
        else:
            cur = await self._conn.execute(
                f"{_BINDING_SELECT} WHERE rp.role_id = %s ORDER BY p.name",
                (role_id,),
            )
        rows = await cur.fetchall()
        return [_binding(r) for r in rows]

    async def bind(
        self,
        role_id: UUID,
        permission_name: str,
        conditions: tuple[Condition, ...] = (),
    ) -> None:
        """Create or replace binding."""
        dumped = dump_conditions(conditions)
        cur = await self._conn.execute(
            "INSERT INTO role_permission (id, role_id, permission_id, conditions) "
            "SELECT %s, %s, p.id, %s FROM permission p WHERE p.name = %s "
            "ON CONFLICT (role_id, permission_id) DO UPDATE SET conditions = EXCLUDED.conditions",
            (uuid4(), role_id, Jsonb(dumped) if dumped else None, permission_name),
        )
        if cur.rowcount == 0:
            raise NotFound("Permission", permission_name)

    async def unbind(self, role_id: UUID, permission_name: str) -> bool:
        """Delete binding. Returns False if it did not exist."""
        cur = await self._conn.execute(
            "DELETE FROM role_permission rp USING permission p "
            "WHERE rp.permission_id = p.id AND rp.role_id = %s AND p.name = %s",
            (role_id, permission_name),
        )
        return cur.rowcount > 0
