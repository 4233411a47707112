"""Initial schema: workspaces, workspace_access, assignments, tasks.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_CANONICAL_TYPES = sa.text(
    "workspace_type IN ('DEFAULT', 'ROADMAP', 'GROUP_PROJECT')"
)


def upgrade() -> None:
    # -- Workspaces & access --
    op.create_table(
        "workspaces",
        sa.Column("workspace_id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, server_default=""),
        sa.Column("workspace_type", sa.String(50), nullable=False),
        sa.Column("owner_user_id", UUID(as_uuid=True), nullable=False, index=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "uq_workspace_owner_type",
        "workspaces",
        ["owner_user_id", "workspace_type"],
        unique=True,
        postgresql_where=_CANONICAL_TYPES,
        sqlite_where=_CANONICAL_TYPES,
    )

    op.create_table(
        "workspace_access",
        sa.Column("access_id", UUID(as_uuid=True), primary_key=True),
        sa.Column("workspace_id", UUID(as_uuid=True),
                  sa.ForeignKey("workspaces.workspace_id"), nullable=False, index=True),
        sa.Column("user_id", UUID(as_uuid=True), nullable=False, index=True),
        sa.Column("access_level", sa.String(20), nullable=False),
        sa.Column("is_active", sa.Boolean, server_default=sa.true(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("workspace_id", "user_id", name="uq_workspace_access_user"),
    )

    # -- Assignments & tasks --
    op.create_table(
        "assignments",
        sa.Column("assignment_id", UUID(as_uuid=True), primary_key=True),
        sa.Column("workspace_id", UUID(as_uuid=True),
                  sa.ForeignKey("workspaces.workspace_id"), nullable=False, index=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, server_default=""),
        sa.Column("assignment_type", sa.String(50), nullable=False),
        sa.Column("roadmap_id", UUID(as_uuid=True), nullable=True),
        sa.Column("total_reward_points", sa.Integer, server_default="0", nullable=False),
        sa.Column("total_estimated_hours", sa.Float, server_default="0", nullable=False),
        sa.Column("deadline", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "tasks",
        sa.Column("task_id", UUID(as_uuid=True), primary_key=True),
        sa.Column("assignment_id", UUID(as_uuid=True),
                  sa.ForeignKey("assignments.assignment_id"), nullable=True, index=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, server_default=""),
        sa.Column("status", sa.String(20), server_default="TODO", nullable=False),
        sa.Column("priority", sa.Integer, nullable=True),
        sa.Column("reward_points", sa.Integer, nullable=True),
        sa.Column("estimated_hours", sa.Float, nullable=True),
        sa.Column("spent_hours", sa.Float, server_default="0", nullable=False),
        sa.Column("title_color", sa.String(7), nullable=True),
        sa.Column("topic", sa.String(255), nullable=True),
        sa.Column("order_number", sa.Integer, server_default="0", nullable=False),
        sa.Column("deadline", sa.DateTime(timezone=True), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("assignee_user_id", UUID(as_uuid=True), nullable=True, index=True),
        sa.Column("reporter_user_id", UUID(as_uuid=True), nullable=True, index=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("tasks")
    op.drop_table("assignments")
    op.drop_table("workspace_access")
    op.drop_index("uq_workspace_owner_type", table_name="workspaces")
    op.drop_table("workspaces")
