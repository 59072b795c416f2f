"""Create tenant and booking tables

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def _tenant_fk() -> sa.Column:
    return sa.Column(
        "tenant_id",
        sa.String(36),
        sa.ForeignKey("tenants.id", ondelete="RESTRICT"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "tenants",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    # Serves the single active-tenant lookup made on every request
    op.create_index("idx_tenant_id_active", "tenants", ["id", "is_active"])

    op.create_table(
        "admin_users",
        sa.Column("id", sa.String(36), primary_key=True),
        _tenant_fk(),
        sa.Column("username", sa.String(50), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        *_timestamps(),
    )
    op.create_index("idx_admin_users_tenant", "admin_users", ["tenant_id"])

    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        _tenant_fk(),
        sa.Column("user_id", sa.String(100), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(30), nullable=True),
        sa.Column("member_type", sa.String(20), nullable=False, server_default="guest"),
        *_timestamps(),
        sa.UniqueConstraint("tenant_id", "user_id", name="uq_users_tenant_user"),
    )
    op.create_index("idx_users_tenant", "users", ["tenant_id"])

    op.create_table(
        "staff_members",
        sa.Column("id", sa.String(36), primary_key=True),
        _tenant_fk(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index("idx_staff_members_tenant", "staff_members", ["tenant_id"])

    op.create_table(
        "business_hours",
        sa.Column("id", sa.String(36), primary_key=True),
        _tenant_fk(),
        sa.Column("day_of_week", sa.SmallInteger, nullable=False),
        sa.Column("start_time", sa.String(5), nullable=False),
        sa.Column("end_time", sa.String(5), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.text("true")),
        *_timestamps(),
        sa.CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_business_hours_day"),
    )
    op.create_index(
        "idx_business_hours_tenant_day", "business_hours", ["tenant_id", "day_of_week"]
    )

    op.create_table(
        "reservation_menu",
        sa.Column("id", sa.String(36), primary_key=True),
        _tenant_fk(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("duration_minutes", sa.Integer, nullable=False, server_default="30"),
        *_timestamps(),
    )
    op.create_index("idx_reservation_menu_tenant", "reservation_menu", ["tenant_id"])

    op.create_table(
        "reservations",
        sa.Column("id", sa.String(36), primary_key=True),
        _tenant_fk(),
        sa.Column("user_id", sa.String(100), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("datetime", sa.DateTime(timezone=True), nullable=False),
        sa.Column("note", sa.Text, nullable=True),
        sa.Column("admin_note", sa.Text, nullable=True),
        sa.Column("member_type", sa.String(20), nullable=False),
        sa.Column(
            "reservation_menu_id",
            sa.String(36),
            sa.ForeignKey("reservation_menu.id"),
            nullable=True,
        ),
        sa.Column("duration_minutes", sa.Integer, nullable=False, server_default="30"),
        sa.Column(
            "staff_member_id",
            sa.String(36),
            sa.ForeignKey("staff_members.id"),
            nullable=True,
        ),
        sa.Column(
            "is_created_by_user", sa.Boolean, nullable=False, server_default=sa.text("true")
        ),
        *_timestamps(),
    )
    op.create_index("idx_reservations_tenant_datetime", "reservations", ["tenant_id", "datetime"])
    op.create_index("idx_reservations_tenant_user", "reservations", ["tenant_id", "user_id"])


def downgrade() -> None:
    op.drop_index("idx_reservations_tenant_user", table_name="reservations")
    op.drop_index("idx_reservations_tenant_datetime", table_name="reservations")
    op.drop_table("reservations")
    op.drop_index("idx_reservation_menu_tenant", table_name="reservation_menu")
    op.drop_table("reservation_menu")
    op.drop_index("idx_business_hours_tenant_day", table_name="business_hours")
    op.drop_table("business_hours")
    op.drop_index("idx_staff_members_tenant", table_name="staff_members")
    op.drop_table("staff_members")
    op.drop_index("idx_users_tenant", table_name="users")
    op.drop_table("users")
    op.drop_index("idx_admin_users_tenant", table_name="admin_users")
    op.drop_table("admin_users")
    op.drop_index("idx_tenant_id_active", table_name="tenants")
    op.drop_table("tenants")
