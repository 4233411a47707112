"""Assignment and task repositories."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.tables import AssignmentRow, TaskRow
from src.models.assignment import Assignment, Task
from src.models.common import utc_now


def _task_row(task: Task, assignment_id: UUID | None) -> TaskRow:
    return TaskRow(
        task_id=task.task_id, assignment_id=assignment_id,
        title=task.title, description=task.description,
        status=task.status.value, priority=task.priority,
        reward_points=task.reward_points, estimated_hours=task.estimated_hours,
        spent_hours=task.spent_hours, title_color=task.title_color,
        topic=task.topic, order_number=task.order_number,
        deadline=task.deadline, started_at=task.started_at,
        completed_at=task.completed_at,
        assignee_user_id=task.assignee_user_id,
        reporter_user_id=task.reporter_user_id,
        created_at=task.created_at, updated_at=task.updated_at,
    )


class AssignmentRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create_with_tasks(self, assignment: Assignment) -> AssignmentRow:
        """Persist an assignment and all its tasks as one SAVEPOINT write."""
        row = AssignmentRow(
            assignment_id=assignment.assignment_id,
            workspace_id=assignment.workspace_id,
            title=assignment.title, description=assignment.description,
            assignment_type=assignment.assignment_type.value,
            roadmap_id=assignment.roadmap_id,
            total_reward_points=assignment.total_reward_points,
            total_estimated_hours=assignment.total_estimated_hours,
            deadline=assignment.deadline,
            created_at=assignment.created_at, updated_at=assignment.updated_at,
        )
        async with self._session.begin_nested():
            self._session.add(row)
            await self._session.flush()
            self._session.add_all(
                [_task_row(t, assignment.assignment_id) for t in assignment.tasks]
            )
            await self._session.flush()
        return row

    async def list_by_workspace(self, workspace_id: UUID) -> list[AssignmentRow]:
        result = await self._session.execute(
            select(AssignmentRow)
            .where(AssignmentRow.workspace_id == workspace_id)
            .order_by(AssignmentRow.created_at)
        )
        return list(result.scalars().all())

    async def delete_by_workspace(self, workspace_id: UUID) -> int:
        result = await self._session.execute(
            delete(AssignmentRow).where(AssignmentRow.workspace_id == workspace_id)
        )
        await self._session.flush()
        return result.rowcount or 0


class TaskRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create_many(self, tasks: list[Task]) -> list[TaskRow]:
        rows = [_task_row(t, t.assignment_id) for t in tasks]
        self._session.add_all(rows)
        await self._session.flush()
        return rows

    async def get(self, task_id: UUID) -> TaskRow | None:
        return await self._session.get(TaskRow, task_id)

    async def exists(self, task_id: UUID) -> bool:
        result = await self._session.execute(
            select(TaskRow.task_id).where(TaskRow.task_id == task_id)
        )
        return result.first() is not None

    async def list_all(self, *, limit: int = 50, offset: int = 0) -> list[TaskRow]:
        result = await self._session.execute(
            select(TaskRow)
            .order_by(TaskRow.created_at, TaskRow.task_id)
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    async def list_by_assignment(self, assignment_id: UUID) -> list[TaskRow]:
        result = await self._session.execute(
            select(TaskRow)
            .where(TaskRow.assignment_id == assignment_id)
            .order_by(TaskRow.order_number)
        )
        return list(result.scalars().all())

    async def list_by_assignee(self, user_id: UUID) -> list[TaskRow]:
        result = await self._session.execute(
            select(TaskRow).where(TaskRow.assignee_user_id == user_id)
        )
        return list(result.scalars().all())

    async def list_by_reporter(self, user_id: UUID) -> list[TaskRow]:
        result = await self._session.execute(
            select(TaskRow).where(TaskRow.reporter_user_id == user_id)
        )
        return list(result.scalars().all())

    async def list_by_status(self, status: str) -> list[TaskRow]:
        result = await self._session.execute(
            select(TaskRow).where(TaskRow.status == status)
        )
        return list(result.scalars().all())

    async def list_overdue(self, now: datetime, completed_status: str) -> list[TaskRow]:
        result = await self._session.execute(
            select(TaskRow).where(
                TaskRow.deadline.is_not(None),
                TaskRow.deadline < now,
                TaskRow.status != completed_status,
            )
        )
        return list(result.scalars().all())

    async def touch(self, row: TaskRow) -> TaskRow:
        """Flush in-place edits made on a loaded row."""
        row.updated_at = utc_now()
        await self._session.flush()
        return row

    async def delete(self, task_id: UUID) -> None:
        await self._session.execute(delete(TaskRow).where(TaskRow.task_id == task_id))
        await self._session.flush()

    async def delete_by_assignments(self, assignment_ids: list[UUID]) -> int:
        if not assignment_ids:
            return 0
        result = await self._session.execute(
            delete(TaskRow).where(TaskRow.assignment_id.in_(assignment_ids))
        )
        await self._session.flush()
        return result.rowcount or 0
