"""Initial schema - roles, permissions, bindings, users, audit log.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "role",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("display_name", sa.String(255), nullable=False),
        sa.Column("level", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_system", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_role_name", "role", ["name"], unique=True)

    op.create_table(
        "permission",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("description", sa.String(255), nullable=True),
    )
    op.create_index("ix_permission_name", "permission", ["name"], unique=True)

    op.create_table(
        "role_permission",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("role_id", sa.UUID(), sa.ForeignKey("role.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "permission_id",
            sa.UUID(),
            sa.ForeignKey("permission.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("conditions", JSONB(), nullable=True),
        sa.UniqueConstraint("role_id", "permission_id", name="uq_role_permission"),
    )

    op.create_table(
        "app_user",
        sa.Column("id", sa.String(255), primary_key=True),
        sa.Column("business_id", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("role_id", sa.UUID(), sa.ForeignKey("role.id"), nullable=True),
        sa.Column("legacy_role", sa.String(50), nullable=True),
        sa.Column("custom_permissions", JSONB(), nullable=False, server_default="{}"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_app_user_business_id", "app_user", ["business_id"])

    op.create_table(
        "customer",
        sa.Column("id", sa.String(255), primary_key=True),
        sa.Column("business_id", sa.String(255), nullable=False),
    )
    op.create_index("ix_customer_business_id", "customer", ["business_id"])

    op.create_table(
        "customer_order",
        sa.Column("id", sa.String(255), primary_key=True),
        sa.Column("business_id", sa.String(255), nullable=False),
        sa.Column("assigned_user_id", sa.String(255), sa.ForeignKey("app_user.id"), nullable=True),
    )
    op.create_index("ix_customer_order_business_id", "customer_order", ["business_id"])

    op.create_table(
        "permission_audit_log",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("resource", sa.String(100), nullable=False),
        sa.Column("resource_id", sa.String(255), nullable=True),
        sa.Column("permission", sa.String(100), nullable=False),
        sa.Column("result", sa.String(10), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("business_id", sa.String(255), nullable=True),
        sa.Column("metadata", JSONB(), nullable=False, server_default="{}"),
        sa.Column("ip_address", sa.String(100), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("result IN ('GRANTED', 'DENIED', 'ERROR')", name="ck_audit_result"),
    )
    op.create_index("ix_audit_user_created", "permission_audit_log", ["user_id", "created_at"])
    op.create_index("ix_audit_business_created", "permission_audit_log", ["business_id", "created_at"])


def downgrade() -> None:
    op.drop_table("permission_audit_log")
    op.drop_table("customer_order")
    op.drop_table("customer")
    op.drop_table("app_user")
    op.drop_table("role_permission")
    op.drop_table("permission")
    op.drop_table("role")
