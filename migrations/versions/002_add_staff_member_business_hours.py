"""Add staff member business hours

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = "002"
down_revision = "001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "staff_member_business_hours",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "tenant_id",
            sa.String(36),
            sa.ForeignKey("tenants.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "staff_member_id",
            sa.String(36),
            sa.ForeignKey("staff_members.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("day_of_week", sa.SmallInteger, nullable=False),
        sa.Column("start_time", sa.String(5), nullable=False),
        sa.Column("end_time", sa.String(5), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.text("true")),
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
        sa.CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_staff_hours_day"),
    )
    op.create_index(
        "idx_staff_hours_staff_day",
        "staff_member_business_hours",
        ["staff_member_id", "day_of_week"],
    )
    op.create_index(
        "idx_staff_hours_tenant", "staff_member_business_hours", ["tenant_id"]
    )


def downgrade() -> None:
    op.drop_index("idx_staff_hours_tenant", table_name="staff_member_business_hours")
    op.drop_index("idx_staff_hours_staff_day", table_name="staff_member_business_hours")
    op.drop_table("staff_member_business_hours")
