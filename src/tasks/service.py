"""Task service: CRUD and status lifecycle for tasks.

Status timestamps are write-once: ``started_at`` is stamped the first time a
task moves into ONGOING, ``completed_at`` the first time it moves into
COMPLETED. Re-entering either state later leaves the original stamp.
"""

import logging
from datetime import datetime
from uuid import UUID

from src.db.tables import TaskRow
from src.models.assignment import Task, TaskCreateRequest, TaskPayload
from src.models.common import TaskStatus, as_utc, utc_now
from src.repositories.assignments import TaskRepository
from src.workspaces.errors import ResourceNotFoundError

logger = logging.getLogger(__name__)

# TaskPayload fields copied onto a row by update_task when not None.
_PATCHABLE_FIELDS = (
    "title", "description", "priority", "reward_points", "estimated_hours",
    "title_color", "topic", "order_number", "deadline", "assignment_id",
)


def task_from_row(row: TaskRow) -> Task:
    return Task(
        task_id=row.task_id,
        assignment_id=row.assignment_id,
        title=row.title,
        description=row.description or "",
        status=TaskStatus(row.status),
        priority=row.priority,
        reward_points=row.reward_points,
        estimated_hours=row.estimated_hours,
        spent_hours=row.spent_hours or 0.0,
        title_color=row.title_color,
        topic=row.topic,
        order_number=row.order_number,
        deadline=as_utc(row.deadline),
        started_at=as_utc(row.started_at),
        completed_at=as_utc(row.completed_at),
        assignee_user_id=row.assignee_user_id,
        reporter_user_id=row.reporter_user_id,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


def apply_status(row: TaskRow, status: TaskStatus, now: datetime) -> None:
    """Set ``status`` on ``row`` and stamp lifecycle timestamps once."""
    previous = row.status
    row.status = status.value
    if (
        status == TaskStatus.ONGOING
        and previous != TaskStatus.ONGOING
        and row.started_at is None
    ):
        row.started_at = now
    elif (
        status == TaskStatus.COMPLETED
        and previous != TaskStatus.COMPLETED
        and row.completed_at is None
    ):
        row.completed_at = now


class TaskService:
    def __init__(self, tasks: TaskRepository) -> None:
        self._tasks = tasks

    async def _require(self, task_id: UUID) -> TaskRow:
        row = await self._tasks.get(task_id)
        if row is None:
            logger.error("Task not found: %s", task_id)
            raise ResourceNotFoundError(f"Task not found with id: {task_id}")
        return row

    async def create_tasks(self, request: TaskCreateRequest) -> list[Task]:
        logger.info("Creating %d tasks", len(request.tasks))
        tasks: list[Task] = []
        for payload in request.tasks:
            if payload.title is None:
                raise ValueError("Task title is required")
            tasks.append(Task(
                assignment_id=payload.assignment_id,
                title=payload.title,
                description=payload.description or "",
                status=payload.status or TaskStatus.TODO,
                priority=payload.priority,
                reward_points=payload.reward_points,
                estimated_hours=payload.estimated_hours,
                title_color=payload.title_color,
                topic=payload.topic,
                order_number=payload.order_number or 0,
                deadline=payload.deadline,
                assignee_user_id=request.assignee_user_id,
                reporter_user_id=request.reporter_user_id,
            ))
        rows = await self._tasks.create_many(tasks)
        logger.info("Saved %d tasks", len(rows))
        return [task_from_row(r) for r in rows]

    async def get_task(self, task_id: UUID) -> Task:
        return task_from_row(await self._require(task_id))

    async def list_tasks(self, *, limit: int = 50, offset: int = 0) -> list[Task]:
        rows = await self._tasks.list_all(limit=limit, offset=offset)
        return [task_from_row(r) for r in rows]

    async def list_by_assignment(self, assignment_id: UUID) -> list[Task]:
        return [task_from_row(r) for r in await self._tasks.list_by_assignment(assignment_id)]

    async def list_by_assignee(self, user_id: UUID) -> list[Task]:
        return [task_from_row(r) for r in await self._tasks.list_by_assignee(user_id)]

    async def list_by_reporter(self, user_id: UUID) -> list[Task]:
        return [task_from_row(r) for r in await self._tasks.list_by_reporter(user_id)]

    async def list_by_status(self, status: TaskStatus) -> list[Task]:
        return [task_from_row(r) for r in await self._tasks.list_by_status(status.value)]

    async def list_overdue(self, now: datetime | None = None) -> list[Task]:
        rows = await self._tasks.list_overdue(now or utc_now(), TaskStatus.COMPLETED.value)
        return [task_from_row(r) for r in rows]

    async def update_task(self, task_id: UUID, patch: TaskPayload,
                          assignee_user_id: UUID | None = None) -> Task:
        """Copy the non-null fields of ``patch`` onto the task."""
        logger.info("Updating task %s", task_id)
        row = await self._require(task_id)

        for name in _PATCHABLE_FIELDS:
            value = getattr(patch, name)
            if value is not None:
                setattr(row, name, value)
        if patch.status is not None:
            apply_status(row, patch.status, utc_now())
        if assignee_user_id is not None:
            row.assignee_user_id = assignee_user_id

        await self._tasks.touch(row)
        return task_from_row(row)

    async def update_status(self, task_id: UUID, status: TaskStatus) -> Task:
        logger.info("Updating status of task %s to %s", task_id, status.value)
        row = await self._require(task_id)
        apply_status(row, status, utc_now())
        await self._tasks.touch(row)
        return task_from_row(row)

    async def assign(self, task_id: UUID, assignee_id: UUID) -> Task:
        logger.info("Assigning task %s to user %s", task_id, assignee_id)
        row = await self._require(task_id)
        row.assignee_user_id = assignee_id
        await self._tasks.touch(row)
        return task_from_row(row)

    async def add_time_spent(self, task_id: UUID, hours: float) -> Task:
        if hours < 0:
            logger.error("Invalid hours value for task %s: %s", task_id, hours)
            raise ValueError("Hours spent cannot be negative")

        row = await self._require(task_id)
        row.spent_hours = (row.spent_hours or 0.0) + hours
        await self._tasks.touch(row)
        logger.info("Added %.2fh to task %s", hours, task_id)
        return task_from_row(row)

    async def delete_task(self, task_id: UUID) -> None:
        if not await self._tasks.exists(task_id):
            logger.error("Task not found: %s", task_id)
            raise ResourceNotFoundError(f"Task not found with id: {task_id}")
        await self._tasks.delete(task_id)
        logger.info("Task deleted: %s", task_id)
