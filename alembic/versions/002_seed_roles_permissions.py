"""Seed built-in roles, permission catalog and role bindings.

Revision ID: 002
Revises: 001
Create Date: 2026-10-19

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

revision: str = "002"
down_revision: str | None = "001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

ROLES = [
    ("OWNER", "İşletme Sahibi", 4),
    ("MANAGER", "Yönetici", 3),
    ("EMPLOYEE", "Çalışan", 2),
    ("DRIVER", "Sürücü", 1),
]

PERMISSIONS = {
    "USER_MANAGEMENT": ["users:create", "users:read", "users:update", "users:delete"],
    "BUSINESS": ["business:read", "business:update", "business:manage"],
    "CUSTOMERS": ["customers:create", "customers:read", "customers:update", "customers:delete"],
    "ORDERS": ["orders:create", "orders:read", "orders:update", "orders:delete", "orders:assign"],
    "INVOICES": [
        "invoices:create", "invoices:read", "invoices:update", "invoices:delete", "invoices:send",
    ],
    "EINVOICES": ["einvoices:create", "einvoices:read", "einvoices:send", "einvoices:cancel"],
    "ROUTES": ["routes:create", "routes:read", "routes:update", "routes:delete", "routes:assign"],
    "VEHICLES": ["vehicles:create", "vehicles:read", "vehicles:update", "vehicles:delete"],
    "SERVICES": ["services:create", "services:read", "services:update", "services:delete"],
    "REPORTS": ["reports:read", "reports:financial"],
    "WHATSAPP": ["whatsapp:send", "whatsapp:manage"],
    "SETTINGS": ["settings:read", "settings:update"],
}

MANAGER = [
    "users:read", "users:update", "business:read",
    "customers:create", "customers:read", "customers:update", "customers:delete",
    "orders:create", "orders:read", "orders:update", "orders:delete", "orders:assign",
    "invoices:create", "invoices:read", "invoices:update", "invoices:send",
    "routes:create", "routes:read", "routes:update", "routes:assign",
    "vehicles:read", "vehicles:update",
    "services:create", "services:read", "services:update", "services:delete",
    "reports:read", "reports:financial", "whatsapp:send", "settings:read",
]

EMPLOYEE = [
    "users:read", "business:read",
    "customers:create", "customers:read", "customers:update",
    "orders:create", "orders:read", "orders:update",
    "invoices:create", "invoices:read",
    "services:read", "reports:read", "whatsapp:send", "settings:read",
]

# Drivers only touch orders assigned to them.
DRIVER = {
    "orders:read": '{"resourceOwnership": true, "resourceType": "order"}',
    "orders:update": '{"resourceOwnership": true, "resourceType": "order"}',
    "routes:read": None,
    "customers:read": None,
}


def _bind(role: str, permission: str, conditions: str | None = None) -> None:
    op.get_bind().execute(
        sa.text(
            "INSERT INTO role_permission (id, role_id, permission_id, conditions) "
            "SELECT gen_random_uuid(), r.id, p.id, CAST(:conditions AS jsonb) "
            "FROM role r, permission p WHERE r.name = :role AND p.name = :permission"
        ),
        {"role": role, "permission": permission, "conditions": conditions},
    )


def upgrade() -> None:
    conn = op.get_bind()
    for name, display_name, level in ROLES:
        conn.execute(
            sa.text(
                "INSERT INTO role (id, name, display_name, level, is_system) "
                "VALUES (gen_random_uuid(), :name, :display_name, :level, true)"
            ),
            {"name": name, "display_name": display_name, "level": level},
        )
    for category, names in PERMISSIONS.items():
        for name in names:
            conn.execute(
                sa.text(
                    "INSERT INTO permission (id, name, category) "
                    "VALUES (gen_random_uuid(), :name, :category)"
                ),
                {"name": name, "category": category},
            )

    op.execute("""
        INSERT INTO role_permission (id, role_id, permission_id)
        SELECT gen_random_uuid(), r.id, p.id FROM role r CROSS JOIN permission p
        WHERE r.name = 'OWNER'
    """)
    for permission in MANAGER:
        _bind("MANAGER", permission)
    for permission in EMPLOYEE:
        _bind("EMPLOYEE", permission)
    for permission, conditions in DRIVER.items():
        _bind("DRIVER", permission, conditions)


def downgrade() -> None:
    op.execute("DELETE FROM role_permission")
    op.execute("DELETE FROM permission")
    op.execute("DELETE FROM role")
