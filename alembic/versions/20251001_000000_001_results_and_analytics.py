"""Anonymized results and analytics tables.

Revision ID: 001
Revises:
Create Date: 2025-10-01 00:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create result and analytics tables."""

    # One row per scored submission
    op.create_table(
        "user_results",
        sa.Column("id", sa.Uuid(as_uuid=False), nullable=False),
        sa.Column("anonymous_user_id", sa.String(22), nullable=False),
        sa.Column("test_name", sa.String(50), nullable=False),
        sa.Column("test_type", sa.String(100), nullable=False),
        sa.Column("answers", sa.JSON(), nullable=False),
        sa.Column("results", sa.JSON(), nullable=False),
        sa.Column("language", sa.String(5), nullable=False, server_default="en"),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ip_hash", sa.String(64), nullable=True),
        sa.Column("device_hash", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_user_results"),
    )
    op.create_index(
        "ix_user_results_anonymous_user_id", "user_results", ["anonymous_user_id"]
    )
    op.create_index("ix_user_results_completed_at", "user_results", ["completed_at"])
    op.create_index(
        "ix_user_results_user_completed",
        "user_results",
        ["anonymous_user_id", "completed_at"],
    )
    op.create_index(
        "ix_user_results_test_completed",
        "user_results",
        ["test_name", "completed_at"],
    )

    # Per-user counters
    op.create_table(
        "user_analytics",
        sa.Column("id", sa.Uuid(as_uuid=False), nullable=False),
        sa.Column("anonymous_user_id", sa.String(22), nullable=False),
        sa.Column("total_tests_taken", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("tests_by_type", sa.JSON(), nullable=False),
        sa.Column("last_active_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "preferred_language", sa.String(5), nullable=False, server_default="en"
        ),
        sa.Column(
            "opt_out_analytics", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_user_analytics"),
    )
    op.create_index(
        "ix_user_analytics_anonymous_user_id",
        "user_analytics",
        ["anonymous_user_id"],
        unique=True,
    )

    # Daily aggregates, no personal data
    op.create_table(
        "system_analytics",
        sa.Column("id", sa.Uuid(as_uuid=False), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("total_tests", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("test_breakdown", sa.JSON(), nullable=False),
        sa.Column("language_usage", sa.JSON(), nullable=False),
        sa.Column("severity_distributions", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_system_analytics"),
    )
    op.create_index(
        "ix_system_analytics_date", "system_analytics", ["date"], unique=True
    )


def downgrade() -> None:
    """Drop result and analytics tables."""
    op.drop_index("ix_system_analytics_date", table_name="system_analytics")
    op.drop_table("system_analytics")

    op.drop_index("ix_user_analytics_anonymous_user_id", table_name="user_analytics")
    op.drop_table("user_analytics")

    op.drop_index("ix_user_results_test_completed", table_name="user_results")
    op.drop_index("ix_user_results_user_completed", table_name="user_results")
    op.drop_index("ix_user_results_completed_at", table_name="user_results")
    op.drop_index("ix_user_results_anonymous_user_id", table_name="user_results")
    op.drop_table("user_results")
