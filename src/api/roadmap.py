"""FastAPI roadmap endpoints.

GET  /api/v1/roadmap/workspace  (the caller's ROADMAP workspace)
POST /api/v1/roadmap/assignments  (schedule and persist a roadmap assignment)
"""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from src.api.dependencies import (
    get_access_manager,
    get_current_user_id,
    get_roadmap_service,
)
from src.config.settings import Settings, get_settings
from src.models.assignment import AssignmentRoadmapRequest
from src.models.common import OperationResult
from src.models.workspace import WorkspaceView
from src.roadmap.service import RoadmapService
from src.workspaces.access import WorkspaceAccessManager

router = APIRouter(prefix="/api/v1/roadmap", tags=["roadmap"])


@router.get("/workspace", response_model=WorkspaceView)
async def get_roadmap_workspace(
    user_id: UUID = Depends(get_current_user_id),
    service: RoadmapService = Depends(get_roadmap_service),
    manager: WorkspaceAccessManager = Depends(get_access_manager),
) -> WorkspaceView:
    try:
        workspace = await service.get_roadmap_workspace(user_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return await manager.describe(workspace)


@router.post("/assignments", status_code=201, response_model=OperationResult)
async def add_roadmap_assignment(
    body: AssignmentRoadmapRequest,
    user_id: UUID = Depends(get_current_user_id),
    service: RoadmapService = Depends(get_roadmap_service),
    settings: Settings = Depends(get_settings),
) -> OperationResult | JSONResponse:
    """Schedule the tasks against daily capacity and store the assignment.

    Persistence failures come back as a 500 carrying the failed result body.
    """
    try:
        result = await service.add_roadmap_assignment(
            body, user_id, settings.DAILY_CAPACITY_HOURS,
        )
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    if not result.success:
        return JSONResponse(status_code=500, content=result.model_dump(mode="json"))
    return result
