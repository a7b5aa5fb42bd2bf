"""Initial schema."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "20261019_01_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "rate_limit_windows",
        sa.Column("client_id", sa.String(length=255), primary_key=True),
        sa.Column("window_start", sa.TIMESTAMP(timezone=True), primary_key=True),
        sa.Column(
            "request_count",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("0"),
        ),
    )
    op.create_index(
        "idx_rate_limit_window_start", "rate_limit_windows", ["window_start"]
    )

    op.create_table(
        "site_options",
        sa.Column("name", sa.String(length=191), primary_key=True),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )

    op.create_table(
        "request_audit_log",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("timestamp", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("client_id", sa.String(length=255), nullable=False),
        sa.Column("auth_client", sa.String(length=64), nullable=False),
        sa.Column("method", sa.String(length=10), nullable=False),
        sa.Column("route", sa.Text(), nullable=False),
        sa.Column("ip_address", sa.String(length=45), nullable=True),
        sa.Column("user_agent", sa.String(length=512), nullable=True),
        sa.Column("request_id", sa.Text(), nullable=True),
    )
    op.create_index("idx_audit_timestamp", "request_audit_log", ["timestamp"])
    op.create_index(
        "idx_audit_client", "request_audit_log", ["client_id", "timestamp"]
    )


def downgrade() -> None:
    op.drop_index("idx_audit_client", table_name="request_audit_log")
    op.drop_index("idx_audit_timestamp", table_name="request_audit_log")
    op.drop_table("request_audit_log")
    op.drop_table("site_options")
    op.drop_index("idx_rate_limit_window_start", table_name="rate_limit_windows")
    op.drop_table("rate_limit_windows")
