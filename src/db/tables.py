"""SQLAlchemy ORM table models for SwitchBoard Workspaces.

All 4 tables defined in a single file.

Ownership graph (no ORM cascades: deletes are sequenced explicitly by
WorkspaceAccessManager.delete_workspace):
- workspaces 1..n workspace_access
- workspaces 1..n assignments 1..n tasks
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from src.db.session import Base
from src.models.common import CANONICAL_WORKSPACE_TYPES

# At most one DEFAULT / ROADMAP / GROUP_PROJECT workspace per owner.
_CANONICAL_TYPE_PREDICATE = text(
    "workspace_type IN ("
    + ", ".join(f"'{t.value}'" for t in CANONICAL_WORKSPACE_TYPES)
    + ")"
)


# ---------------------------------------------------------------------------
# Workspaces & access
# ---------------------------------------------------------------------------


class WorkspaceRow(Base):
    __tablename__ = "workspaces"
    __table_args__ = (
        Index(
            "uq_workspace_owner_type",
            "owner_user_id",
            "workspace_type",
            unique=True,
            postgresql_where=_CANONICAL_TYPE_PREDICATE,
            sqlite_where=_CANONICAL_TYPE_PREDICATE,
        ),
    )

    workspace_id: Mapped[UUID] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    workspace_type: Mapped[str] = mapped_column(String(50), nullable=False)
    owner_user_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class WorkspaceAccessRow(Base):
    """Explicit per-user grant. The owner never has a row here."""

    __tablename__ = "workspace_access"
    __table_args__ = (
        UniqueConstraint("workspace_id", "user_id", name="uq_workspace_access_user"),
    )

    access_id: Mapped[UUID] = mapped_column(primary_key=True)
    workspace_id: Mapped[UUID] = mapped_column(
        ForeignKey("workspaces.workspace_id"), nullable=False, index=True
    )
    user_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    access_level: Mapped[str] = mapped_column(String(20), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


# ---------------------------------------------------------------------------
# Assignments & tasks
# ---------------------------------------------------------------------------


class AssignmentRow(Base):
    __tablename__ = "assignments"

    assignment_id: Mapped[UUID] = mapped_column(primary_key=True)
    workspace_id: Mapped[UUID] = mapped_column(
        ForeignKey("workspaces.workspace_id"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    assignment_type: Mapped[str] = mapped_column(String(50), nullable=False)
    roadmap_id: Mapped[UUID | None] = mapped_column(nullable=True)
    total_reward_points: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_estimated_hours: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    deadline: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class TaskRow(Base):
    """Unit of work. Timestamps started_at/completed_at are write-once."""

    __tablename__ = "tasks"

    task_id: Mapped[UUID] = mapped_column(primary_key=True)
    assignment_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("assignments.assignment_id"), nullable=True, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    status: Mapped[str] = mapped_column(String(20), default="TODO", nullable=False)
    priority: Mapped[int | None] = mapped_column(Integer, nullable=True)
    reward_points: Mapped[int | None] = mapped_column(Integer, nullable=True)
    estimated_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    spent_hours: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    title_color: Mapped[str | None] = mapped_column(String(7), nullable=True)
    topic: Mapped[str | None] = mapped_column(String(255), nullable=True)
    order_number: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    deadline: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    assignee_user_id: Mapped[UUID | None] = mapped_column(nullable=True, index=True)
    reporter_user_id: Mapped[UUID | None] = mapped_column(nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
