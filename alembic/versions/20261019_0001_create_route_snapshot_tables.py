"""create route_data, app_users and reports tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "route_data",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("route_code", sa.String(length=64), nullable=False),
        sa.Column("client_code", sa.String(length=64), nullable=False),
        sa.Column("client_name", sa.String(length=255), nullable=True),
        sa.Column("visit_day", sa.String(length=64), nullable=True),
        sa.Column(
            "data",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            comment="Dynamic attribute bag keyed by canonical column key",
        ),
        sa.Column(
            "batch_id",
            sa.String(length=64),
            nullable=False,
            comment="Upload timestamp shared by every row of one snapshot",
        ),
        sa.Column("uploaded_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_route_data_route_code", "route_data", ["route_code"], unique=False)
    op.create_index(
        "ix_route_data_route_code_uploaded_at",
        "route_data",
        ["route_code", "uploaded_at"],
        unique=False,
    )

    op.create_table(
        "app_users",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("role", sa.String(length=32), server_default="user", nullable=False),
        sa.Column(
            "route",
            sa.String(length=64),
            nullable=True,
            comment="Route code this seller is assigned to",
        ),
        sa.Column(
            "quota_percentage",
            sa.Numeric(precision=5, scale=2),
            nullable=True,
            comment="R+N quota target shown to the assistant",
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_app_users_route", "app_users", ["route"], unique=False)

    op.create_table(
        "reports",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=32), server_default="pending", nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["app_users.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_reports_user_id", "reports", ["user_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_reports_user_id", table_name="reports")
    op.drop_table("reports")
    op.drop_index("ix_app_users_route", table_name="app_users")
    op.drop_table("app_users")
    op.drop_index("ix_route_data_route_code_uploaded_at", table_name="route_data")
    op.drop_index("ix_route_data_route_code", table_name="route_data")
    op.drop_table("route_data")
