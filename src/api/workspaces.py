"""FastAPI workspace endpoints.

POST   /api/v1/workspaces  (create)
GET    /api/v1/workspaces/owner  (owned, bootstraps defaults)
GET    /api/v1/workspaces/accessible  (owned, optionally shared)
POST   /api/v1/workspaces/activate  (bootstrap defaults)
GET    /api/v1/workspaces/{workspace_id}  (get)
DELETE /api/v1/workspaces/{workspace_id}  (cascading delete)
POST   /api/v1/workspaces/{workspace_id}/users/{user_id}  (grant)
DELETE /api/v1/workspaces/{workspace_id}/users/{user_id}  (revoke)
PUT    /api/v1/workspaces/{workspace_id}/users/{user_id}/access  (update level)
GET    /api/v1/workspaces/{workspace_id}/users  (list grantees)

Caller identity comes from the X-User-Id header.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from src.api.dependencies import (
    get_access_manager,
    get_current_user_id,
    get_roadmap_service,
)
from src.config.settings import Settings, get_settings
from src.models.common import AccessLevel, OperationResult
from src.models.workspace import WorkspaceCreateRequest, WorkspaceView
from src.roadmap.service import RoadmapService
from src.workspaces.access import WorkspaceAccessManager
from src.workspaces.errors import (
    AccessConflictError,
    AccessListValidationError,
    ResourceNotFoundError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/workspaces", tags=["workspaces"])


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CreateWorkspaceRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(default="", max_length=1000)
    read_access_user_ids: list[UUID] = Field(default_factory=list)
    write_access_user_ids: list[UUID] = Field(default_factory=list)
    admin_access_user_ids: list[UUID] = Field(default_factory=list)


def _location(workspace_id: UUID) -> str:
    return f"{router.prefix}/{workspace_id}"


# ---------------------------------------------------------------------------
# Collection endpoints (declared before /{workspace_id})
# ---------------------------------------------------------------------------


@router.post("", status_code=201, response_model=OperationResult)
async def create_workspace(
    body: CreateWorkspaceRequest,
    user_id: UUID = Depends(get_current_user_id),
    manager: WorkspaceAccessManager = Depends(get_access_manager),
) -> OperationResult:
    request = WorkspaceCreateRequest(**body.model_dump(), owner_user_id=user_id)
    try:
        workspace = await manager.create_workspace(request)
    except AccessListValidationError as exc:
        raise HTTPException(status_code=400, detail=exc.errors) from exc

    view = await manager.describe(workspace)
    logger.info("Workspace created: %s (%s)", workspace.workspace_id, workspace.name)
    return OperationResult.ok(
        "Workspace created successfully",
        data=view,
        location=_location(workspace.workspace_id),
    )


@router.get("/owner", response_model=list[WorkspaceView])
async def get_owned_workspaces(
    user_id: UUID = Depends(get_current_user_id),
    service: RoadmapService = Depends(get_roadmap_service),
    manager: WorkspaceAccessManager = Depends(get_access_manager),
) -> list[WorkspaceView]:
    """Owned workspaces; a first-time caller gets the defaults created."""
    workspaces = await service.get_owned_workspaces(user_id)
    return [await manager.describe(w) for w in workspaces]


@router.get("/accessible", response_model=list[WorkspaceView])
async def get_accessible_workspaces(
    include_shared: bool | None = Query(None),
    user_id: UUID = Depends(get_current_user_id),
    service: RoadmapService = Depends(get_roadmap_service),
    manager: WorkspaceAccessManager = Depends(get_access_manager),
    settings: Settings = Depends(get_settings),
) -> list[WorkspaceView]:
    if include_shared is None:
        include_shared = settings.ACCESSIBLE_INCLUDES_SHARED
    workspaces = await service.get_accessible_workspaces(
        user_id, include_shared=include_shared,
    )
    return [await manager.describe(w) for w in workspaces]


@router.post("/activate", response_model=OperationResult)
async def activate_workspaces(
    user_id: UUID = Depends(get_current_user_id),
    manager: WorkspaceAccessManager = Depends(get_access_manager),
) -> JSONResponse:
    result = await manager.bootstrap(user_id)
    if not result.created:
        outcome = OperationResult.failed("User already has workspaces")
        return JSONResponse(status_code=200, content=outcome.model_dump(mode="json"))

    outcome = OperationResult.ok(
        "Default workspaces activated successfully",
        data=result.workspaces,
        location=f"{router.prefix}/owner",
    )
    return JSONResponse(status_code=201, content=outcome.model_dump(mode="json"))


# ---------------------------------------------------------------------------
# Single workspace
# ---------------------------------------------------------------------------


@router.get("/{workspace_id}", response_model=WorkspaceView)
async def get_workspace(
    workspace_id: UUID,
    manager: WorkspaceAccessManager = Depends(get_access_manager),
) -> WorkspaceView:
    try:
        workspace = await manager.get_workspace(workspace_id)
    except ResourceNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return await manager.describe(workspace)


@router.delete("/{workspace_id}", response_model=OperationResult)
async def delete_workspace(
    workspace_id: UUID,
    manager: WorkspaceAccessManager = Depends(get_access_manager),
) -> OperationResult:
    """Delete a workspace with its assignments, tasks, and grants."""
    try:
        await manager.delete_workspace(workspace_id)
    except ResourceNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return OperationResult.ok(
        "Workspace deleted successfully", location=_location(workspace_id),
    )


# ---------------------------------------------------------------------------
# Access grants
# ---------------------------------------------------------------------------


@router.post(
    "/{workspace_id}/users/{user_id}",
    status_code=201,
    response_model=OperationResult,
)
async def add_user_to_workspace(
    workspace_id: UUID,
    user_id: UUID,
    access_level: AccessLevel = Query(...),
    manager: WorkspaceAccessManager = Depends(get_access_manager),
) -> OperationResult:
    try:
        await manager.grant(workspace_id, user_id, access_level)
    except ResourceNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except AccessConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return OperationResult.ok(
        "User added to workspace successfully",
        location=f"{_location(workspace_id)}/users/{user_id}",
    )


@router.delete("/{workspace_id}/users/{user_id}", response_model=OperationResult)
async def remove_user_from_workspace(
    workspace_id: UUID,
    user_id: UUID,
    manager: WorkspaceAccessManager = Depends(get_access_manager),
) -> OperationResult:
    try:
        await manager.revoke(workspace_id, user_id)
    except ResourceNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return OperationResult.ok(
        "User removed from workspace successfully",
        location=f"{_location(workspace_id)}/users/{user_id}",
    )


@router.put(
    "/{workspace_id}/users/{user_id}/access",
    response_model=OperationResult,
)
async def update_user_access_level(
    workspace_id: UUID,
    user_id: UUID,
    access_level: AccessLevel = Query(...),
    manager: WorkspaceAccessManager = Depends(get_access_manager),
) -> OperationResult:
    try:
        await manager.update_level(workspace_id, user_id, access_level)
    except ResourceNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return OperationResult.ok(
        "User access level updated successfully",
        location=f"{_location(workspace_id)}/users/{user_id}",
    )


@router.get("/{workspace_id}/users", response_model=list[UUID])
async def get_workspace_users(
    workspace_id: UUID,
    manager: WorkspaceAccessManager = Depends(get_access_manager),
) -> list[UUID]:
    try:
        return await manager.list_users(workspace_id)
    except ResourceNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
