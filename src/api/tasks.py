"""FastAPI task endpoints.

POST   /api/v1/tasks  (create a batch)
GET    /api/v1/tasks  (paged list)
GET    /api/v1/tasks/overdue  (past deadline, not completed)
GET    /api/v1/tasks/assignment/{assignment_id}
GET    /api/v1/tasks/assignee/{user_id}
GET    /api/v1/tasks/reporter/{user_id}
GET    /api/v1/tasks/status/{status}
GET    /api/v1/tasks/{task_id}
PUT    /api/v1/tasks/{task_id}  (partial update)
PATCH  /api/v1/tasks/{task_id}/status
PATCH  /api/v1/tasks/{task_id}/assign
POST   /api/v1/tasks/{task_id}/time  (log hours spent)
DELETE /api/v1/tasks/{task_id}
"""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from src.api.dependencies import get_task_service
from src.models.assignment import Task, TaskCreateRequest, TaskPayload
from src.models.common import TaskStatus
from src.tasks.service import TaskService

router = APIRouter(prefix="/api/v1/tasks", tags=["tasks"])


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class TaskUpdateRequest(TaskPayload):
    assignee_user_id: UUID | None = None


class StatusUpdateRequest(BaseModel):
    status: TaskStatus


class AssignRequest(BaseModel):
    assignee_user_id: UUID


class TimeSpentRequest(BaseModel):
    hours: float


# ---------------------------------------------------------------------------
# Collection endpoints
# ---------------------------------------------------------------------------


@router.post("", status_code=201, response_model=list[Task])
async def create_tasks(
    body: TaskCreateRequest,
    service: TaskService = Depends(get_task_service),
) -> list[Task]:
    try:
        return await service.create_tasks(body)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("", response_model=list[Task])
async def list_tasks(
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    service: TaskService = Depends(get_task_service),
) -> list[Task]:
    return await service.list_tasks(limit=limit, offset=offset)


@router.get("/overdue", response_model=list[Task])
async def list_overdue_tasks(
    service: TaskService = Depends(get_task_service),
) -> list[Task]:
    return await service.list_overdue()


@router.get("/assignment/{assignment_id}", response_model=list[Task])
async def list_tasks_by_assignment(
    assignment_id: UUID,
    service: TaskService = Depends(get_task_service),
) -> list[Task]:
    return await service.list_by_assignment(assignment_id)


@router.get("/assignee/{user_id}", response_model=list[Task])
async def list_tasks_by_assignee(
    user_id: UUID,
    service: TaskService = Depends(get_task_service),
) -> list[Task]:
    return await service.list_by_assignee(user_id)


@router.get("/reporter/{user_id}", response_model=list[Task])
async def list_tasks_by_reporter(
    user_id: UUID,
    service: TaskService = Depends(get_task_service),
) -> list[Task]:
    return await service.list_by_reporter(user_id)


@router.get("/status/{status}", response_model=list[Task])
async def list_tasks_by_status(
    status: TaskStatus,
    service: TaskService = Depends(get_task_service),
) -> list[Task]:
    return await service.list_by_status(status)


# ---------------------------------------------------------------------------
# Single task
# ---------------------------------------------------------------------------


@router.get("/{task_id}", response_model=Task)
async def get_task(
    task_id: UUID,
    service: TaskService = Depends(get_task_service),
) -> Task:
    try:
        return await service.get_task(task_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.put("/{task_id}", response_model=Task)
async def update_task(
    task_id: UUID,
    body: TaskUpdateRequest,
    service: TaskService = Depends(get_task_service),
) -> Task:
    patch = TaskPayload(**body.model_dump(exclude={"assignee_user_id"}))
    try:
        return await service.update_task(task_id, patch, body.assignee_user_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.patch("/{task_id}/status", response_model=Task)
async def update_task_status(
    task_id: UUID,
    body: StatusUpdateRequest,
    service: TaskService = Depends(get_task_service),
) -> Task:
    try:
        return await service.update_status(task_id, body.status)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.patch("/{task_id}/assign", response_model=Task)
async def assign_task(
    task_id: UUID,
    body: AssignRequest,
    service: TaskService = Depends(get_task_service),
) -> Task:
    try:
        return await service.assign(task_id, body.assignee_user_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.post("/{task_id}/time", response_model=Task)
async def add_time_spent(
    task_id: UUID,
    body: TimeSpentRequest,
    service: TaskService = Depends(get_task_service),
) -> Task:
    try:
        return await service.add_time_spent(task_id, body.hours)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.delete("/{task_id}", status_code=204)
async def delete_task(
    task_id: UUID,
    service: TaskService = Depends(get_task_service),
) -> None:
    try:
        await service.delete_task(task_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
