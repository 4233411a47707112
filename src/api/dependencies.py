"""FastAPI dependency injection factories for repositories and services.

Each factory takes AsyncSession via Depends(get_async_session). FastAPI
caches that dependency per request, so every repository and service built
for one request shares the same Unit-of-Work session.
"""

from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.session import get_async_session
from src.repositories.assignments import AssignmentRepository, TaskRepository
from src.repositories.workspace import WorkspaceAccessRepository, WorkspaceRepository
from src.roadmap.service import RoadmapService
from src.tasks.service import TaskService
from src.workspaces.access import WorkspaceAccessManager

# ---------------------------------------------------------------------------
# Caller identity
# ---------------------------------------------------------------------------


async def get_current_user_id(
    x_user_id: UUID = Header(..., alias="X-User-Id"),
) -> UUID:
    """Caller id from the gateway header. Trusted as given, never verified."""
    return x_user_id


# ---------------------------------------------------------------------------
# Repositories
# ---------------------------------------------------------------------------


async def get_workspace_repo(
    session: AsyncSession = Depends(get_async_session),
) -> WorkspaceRepository:
    return WorkspaceRepository(session)


async def get_workspace_access_repo(
    session: AsyncSession = Depends(get_async_session),
) -> WorkspaceAccessRepository:
    return WorkspaceAccessRepository(session)


async def get_assignment_repo(
    session: AsyncSession = Depends(get_async_session),
) -> AssignmentRepository:
    return AssignmentRepository(session)


async def get_task_repo(
    session: AsyncSession = Depends(get_async_session),
) -> TaskRepository:
    return TaskRepository(session)


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------


async def get_access_manager(
    workspaces: WorkspaceRepository = Depends(get_workspace_repo),
    access: WorkspaceAccessRepository = Depends(get_workspace_access_repo),
    assignments: AssignmentRepository = Depends(get_assignment_repo),
    tasks: TaskRepository = Depends(get_task_repo),
) -> WorkspaceAccessManager:
    return WorkspaceAccessManager(workspaces, access, assignments, tasks)


async def get_roadmap_service(
    manager: WorkspaceAccessManager = Depends(get_access_manager),
    assignments: AssignmentRepository = Depends(get_assignment_repo),
) -> RoadmapService:
    return RoadmapService(manager, assignments)


async def get_task_service(
    tasks: TaskRepository = Depends(get_task_repo),
) -> TaskService:
    return TaskService(tasks)
