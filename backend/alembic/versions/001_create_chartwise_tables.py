"""Create saved_charts, user_profiles and notifications tables

Revision ID: 001
Revises: None
Create Date: 2026-01-15 00:00:00.000000+00:00

What:  Initial schema: one table per resource.
       - saved_charts:   charts saved from the dashboard
       - user_profiles:  one settings-page profile per user
       - notifications:  in-app notifications

Rollback: downgrade() drops all three tables (destructive, all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ── saved_charts ──────────────────────────────────────────────────────
    op.create_table(
        "saved_charts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user", sa.String(255), nullable=False,
                  comment="Owner's identity-provider subject id"),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("chart_type", sa.String(50), nullable=False,
                  comment="bar, line, pie, scatter, ... (free-form)"),
        sa.Column("chart_config", sa.JSON(), nullable=False),
        sa.Column("chart_image_data", sa.Text(), nullable=True,
                  comment="Rendered chart image, excluded from list responses"),
        sa.Column("file_name", sa.String(255), nullable=False,
                  comment="Name of the uploaded data file the chart was built from"),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.PrimaryKeyConstraint("id", name="pk_saved_charts"),
    )
    op.create_index("idx_saved_charts_user_created_at", "saved_charts", ["user", "created_at"])
    op.create_index("idx_saved_charts_user_chart_type", "saved_charts", ["user", "chart_type"])

    # ── user_profiles ─────────────────────────────────────────────────────
    op.create_table(
        "user_profiles",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("nickname", sa.String(100), nullable=False),
        sa.Column("avatar", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, server_default=""),
        sa.Column("bio", sa.Text(), nullable=False, server_default=""),
        sa.Column("phone", sa.String(50), nullable=False, server_default=""),
        sa.Column("job_title", sa.String(255), nullable=False, server_default=""),
        sa.Column("company", sa.String(255), nullable=False, server_default=""),
        sa.Column("department", sa.String(255), nullable=False, server_default=""),
        sa.Column("location", sa.String(255), nullable=False, server_default=""),
        sa.Column("social_links", sa.JSON(), nullable=False),
        sa.Column("preferences", sa.JSON(), nullable=False),
        sa.Column("profile_completeness", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_active", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.PrimaryKeyConstraint("id", name="pk_user_profiles"),
        sa.UniqueConstraint("user_id", name="uq_user_profiles_user_id"),
    )
    op.create_index("ix_user_profiles_nickname", "user_profiles", ["nickname"])

    # ── notifications ─────────────────────────────────────────────────────
    op.create_table(
        "notifications",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("type", sa.String(50), nullable=False, server_default="info"),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("icon", sa.String(32), nullable=False),
        sa.Column("priority", sa.String(20), nullable=False, server_default="medium"),
        sa.Column("action_url", sa.String(500), nullable=True),
        sa.Column("action_label", sa.String(100), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.PrimaryKeyConstraint("id", name="pk_notifications"),
    )
    op.create_index("idx_notifications_user_created_at", "notifications", ["user_id", "created_at"])
    op.create_index("idx_notifications_user_is_read", "notifications", ["user_id", "is_read"])


def downgrade() -> None:
    op.drop_index("idx_notifications_user_is_read", table_name="notifications")
    op.drop_index("idx_notifications_user_created_at", table_name="notifications")
    op.drop_table("notifications")

    op.drop_index("ix_user_profiles_nickname", table_name="user_profiles")
    op.drop_table("user_profiles")

    op.drop_index("idx_saved_charts_user_chart_type", table_name="saved_charts")
    op.drop_index("idx_saved_charts_user_created_at", table_name="saved_charts")
    op.drop_table("saved_charts")
