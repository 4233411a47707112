"""Assignment and task models, plus roadmap and task request payloads."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from src.models.common import (
    AssignmentType,
    TaskStatus,
    UTCTimestamp,
    UUIDv7,
    WorkspaceServiceBase,
    new_uuid7,
    utc_now,
)

HEX_COLOR_PATTERN = r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$"


class Task(WorkspaceServiceBase):
    """A unit of work with status, priority, estimate, deadline, and order."""

    task_id: UUIDv7 = Field(default_factory=new_uuid7)
    assignment_id: UUID | None = None
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(default="", max_length=5000)
    status: TaskStatus = TaskStatus.TODO
    priority: int | None = Field(default=None, ge=1, le=5)
    reward_points: int | None = Field(default=None, ge=0)
    estimated_hours: float | None = Field(default=None, ge=0.0)
    spent_hours: float = Field(default=0.0, ge=0.0)
    title_color: str | None = Field(default=None, pattern=HEX_COLOR_PATTERN)
    topic: str | None = None
    order_number: int = 0
    deadline: datetime | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    assignee_user_id: UUID | None = None
    reporter_user_id: UUID | None = None
    created_at: UTCTimestamp = Field(default_factory=utc_now)
    updated_at: UTCTimestamp = Field(default_factory=utc_now)


class Assignment(WorkspaceServiceBase):
    """A titled group of tasks inside a workspace.

    Totals and deadline aggregate over ``tasks``; see ``with_totals``.
    """

    assignment_id: UUIDv7 = Field(default_factory=new_uuid7)
    workspace_id: UUID
    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    assignment_type: AssignmentType = AssignmentType.CUSTOM
    roadmap_id: UUID | None = None
    total_reward_points: int = 0
    total_estimated_hours: float = 0.0
    deadline: datetime | None = None
    tasks: list[Task] = Field(default_factory=list)
    created_at: UTCTimestamp = Field(default_factory=utc_now)
    updated_at: UTCTimestamp = Field(default_factory=utc_now)

    def with_totals(self) -> "Assignment":
        """Return a copy whose aggregates reflect the current task list."""
        deadlines = [t.deadline for t in self.tasks if t.deadline is not None]
        return self.model_copy(update={
            "total_reward_points": sum(t.reward_points or 0 for t in self.tasks),
            "total_estimated_hours": sum(t.estimated_hours or 0.0 for t in self.tasks),
            "deadline": max(deadlines) if deadlines else None,
        })


# ---------------------------------------------------------------------------
# Roadmap requests
# ---------------------------------------------------------------------------


class TaskRoadmapRequest(WorkspaceServiceBase):
    """One step of a roadmap; its deadline is computed, never supplied."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(default="", max_length=5000)
    reward_points: int | None = Field(default=None, ge=0)
    estimated_hours: float | None = None
    title_color: str | None = Field(default=None, pattern=HEX_COLOR_PATTERN)
    topic: str | None = None
    order_number: int = 0


class AssignmentRoadmapRequest(WorkspaceServiceBase):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    roadmap_id: UUID | None = None
    tasks: list[TaskRoadmapRequest] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Task requests
# ---------------------------------------------------------------------------


class TaskPayload(WorkspaceServiceBase):
    """Task fields accepted on create and (partially) on update."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=5000)
    status: TaskStatus | None = None
    priority: int | None = Field(default=None, ge=1, le=5)
    reward_points: int | None = Field(default=None, ge=0)
    estimated_hours: float | None = Field(default=None, ge=0.0)
    title_color: str | None = Field(default=None, pattern=HEX_COLOR_PATTERN)
    topic: str | None = None
    order_number: int | None = None
    deadline: datetime | None = None
    assignment_id: UUID | None = None


class TaskCreateRequest(WorkspaceServiceBase):
    assignee_user_id: UUID | None = None
    reporter_user_id: UUID | None = None
    tasks: list[TaskPayload] = Field(default_factory=list)
