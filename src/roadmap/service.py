"""Workspace/roadmap façade.

Composes WorkspaceAccessManager (ownership, bootstrap) with the roadmap
scheduler to answer "get or create my workspaces" and "add a scheduled
roadmap assignment to my roadmap workspace".
"""

import logging
from datetime import date
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from src.models.assignment import Assignment, AssignmentRoadmapRequest
from src.models.common import (
    AssignmentType,
    OperationResult,
    WorkspaceType,
    new_uuid7,
)
from src.models.workspace import Workspace
from src.repositories.assignments import AssignmentRepository
from src.roadmap.scheduler import schedule_tasks
from src.workspaces.access import WorkspaceAccessManager
from src.workspaces.errors import ResourceNotFoundError

logger = logging.getLogger(__name__)


class RoadmapService:
    def __init__(
        self,
        manager: WorkspaceAccessManager,
        assignments: AssignmentRepository,
    ) -> None:
        self._manager = manager
        self._assignments = assignments

    async def get_owned_workspaces(self, owner_id: UUID) -> list[Workspace]:
        """Owned workspaces, bootstrapping the defaults for a new owner."""
        workspaces = await self._manager.list_owned(owner_id)
        if not workspaces:
            logger.info("No workspaces for user %s; creating defaults", owner_id)
            workspaces = (await self._manager.bootstrap(owner_id)).workspaces
        return workspaces

    async def get_roadmap_workspace(self, owner_id: UUID) -> Workspace:
        workspaces = await self.get_owned_workspaces(owner_id)
        for workspace in workspaces:
            if workspace.workspace_type == WorkspaceType.ROADMAP:
                return workspace

        logger.error("Roadmap workspace not found for user %s", owner_id)
        raise ResourceNotFoundError(
            f"Roadmap workspace not found for user with ID: {owner_id}"
        )

    async def get_accessible_workspaces(
        self, user_id: UUID, *, include_shared: bool = False,
    ) -> list[Workspace]:
        """Owned workspaces, plus shared ones when ``include_shared``.

        Owned-only is the long-standing behavior of this listing. Shared
        workspaces are appended after owned ones, without duplicates.
        """
        workspaces = await self._manager.list_owned(user_id)
        if include_shared:
            seen = {w.workspace_id for w in workspaces}
            for shared in await self._manager.list_shared(user_id):
                if shared.workspace_id not in seen:
                    seen.add(shared.workspace_id)
                    workspaces.append(shared)
        logger.info(
            "User %s can access %d workspaces (include_shared=%s)",
            user_id, len(workspaces), include_shared,
        )
        return workspaces

    async def add_roadmap_assignment(
        self,
        request: AssignmentRoadmapRequest,
        owner_id: UUID,
        daily_capacity_hours: float,
        *,
        today: date | None = None,
    ) -> OperationResult:
        """Schedule ``request`` into the owner's roadmap workspace.

        Persistence failures come back as ``OperationResult(success=False)``;
        lookup and configuration errors still raise.
        """
        logger.info("Adding roadmap assignment %r for user %s", request.title, owner_id)
        workspace = await self.get_roadmap_workspace(owner_id)

        tasks = schedule_tasks(request.tasks, daily_capacity_hours, today=today)
        assignment_id = new_uuid7()
        assignment = Assignment(
            assignment_id=assignment_id,
            workspace_id=workspace.workspace_id,
            title=request.title,
            description=request.description,
            assignment_type=AssignmentType.ROADMAP,
            roadmap_id=request.roadmap_id,
            tasks=[t.model_copy(update={"assignment_id": assignment_id}) for t in tasks],
        ).with_totals()

        try:
            await self._assignments.create_with_tasks(assignment)
        except SQLAlchemyError:
            logger.exception(
                "Error saving roadmap assignment to workspace %s", workspace.workspace_id,
            )
            return OperationResult.failed("Error adding roadmap assignment to workspace")

        logger.info(
            "Roadmap assignment %s saved in workspace %s",
            assignment.assignment_id, workspace.name,
        )
        return OperationResult.ok(
            "Roadmap assignment added to workspace successfully",
            data=assignment,
            location=f"/api/v1/workspaces/{workspace.workspace_id}",
        )
