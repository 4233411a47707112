"""Workspace access manager.

Owns every state transition over workspace access grants and the lifecycle
of workspaces themselves:

- grant / revoke / update_level / list_users on (workspace, user) grants,
  with at most one active grant per pair;
- bootstrap of the three canonical workspaces for a first-time owner;
- create_workspace with pairwise-disjoint read/write/admin lists;
- delete_workspace as an explicit, ordered cascade.

Revoke is a hard delete. ``is_active`` stays on the row as a read filter so
a suspended grant (is_active=False) is invisible without being removed; a
later grant for the same pair reactivates it. The owner never holds a grant.

Concurrency: the storage layer carries ``uq_workspace_access_user`` and the
partial ``uq_workspace_owner_type`` index. A grant that loses a race surfaces
as AccessConflictError; a bootstrap that loses a race returns the winner's
workspaces as a no-op.
"""

import logging
from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from src.config.defaults import BOOTSTRAP_WORKSPACES
from src.db.tables import WorkspaceRow
from src.models.common import AccessLevel, WorkspaceType, as_utc, new_uuid7
from src.models.workspace import Workspace, WorkspaceCreateRequest, WorkspaceView
from src.repositories.assignments import AssignmentRepository, TaskRepository
from src.repositories.workspace import WorkspaceAccessRepository, WorkspaceRepository
from src.workspaces.errors import (
    AccessConflictError,
    AccessListValidationError,
    ResourceNotFoundError,
)

logger = logging.getLogger(__name__)


def workspace_from_row(row: WorkspaceRow) -> Workspace:
    return Workspace(
        workspace_id=row.workspace_id,
        name=row.name,
        description=row.description or "",
        workspace_type=WorkspaceType(row.workspace_type),
        owner_user_id=row.owner_user_id,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


@dataclass(frozen=True)
class BootstrapResult:
    """Outcome of ``bootstrap``. ``created`` is False on the no-op path."""

    created: bool
    workspaces: list[Workspace] = field(default_factory=list)


class WorkspaceAccessManager:
    def __init__(
        self,
        workspaces: WorkspaceRepository,
        access: WorkspaceAccessRepository,
        assignments: AssignmentRepository,
        tasks: TaskRepository,
    ) -> None:
        self._workspaces = workspaces
        self._access = access
        self._assignments = assignments
        self._tasks = tasks

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def _require_workspace(self, workspace_id: UUID) -> WorkspaceRow:
        row = await self._workspaces.get(workspace_id)
        if row is None:
            logger.error("Workspace not found: %s", workspace_id)
            raise ResourceNotFoundError(f"Workspace not found with ID: {workspace_id}")
        return row

    async def _ensure_exists(self, workspace_id: UUID) -> None:
        if not await self._workspaces.exists(workspace_id):
            logger.error("Workspace not found: %s", workspace_id)
            raise ResourceNotFoundError(f"Workspace not found with ID: {workspace_id}")

    async def get_workspace(self, workspace_id: UUID) -> Workspace:
        return workspace_from_row(await self._require_workspace(workspace_id))

    async def list_owned(self, owner_id: UUID) -> list[Workspace]:
        rows = await self._workspaces.list_by_owner(owner_id)
        return [workspace_from_row(r) for r in rows]

    async def list_shared(self, user_id: UUID) -> list[Workspace]:
        """Workspaces where ``user_id`` holds an active grant."""
        grants = await self._access.list_active_by_user(user_id)
        rows = await self._workspaces.list_by_ids([g.workspace_id for g in grants])
        return [workspace_from_row(r) for r in rows]

    async def describe(self, workspace: Workspace) -> WorkspaceView:
        grants = await self._access.list_active_by_workspace(workspace.workspace_id)
        count = await self._access.count_active_by_workspace(workspace.workspace_id)
        return WorkspaceView(
            **workspace.model_dump(),
            access_user_ids=[g.user_id for g in grants],
            user_access_count=count,
        )

    # ------------------------------------------------------------------
    # Grants
    # ------------------------------------------------------------------

    async def grant(self, workspace_id: UUID, user_id: UUID,
                    level: AccessLevel) -> None:
        logger.info(
            "Granting %s on workspace %s to user %s", level.value, workspace_id, user_id,
        )
        row = await self._require_workspace(workspace_id)
        if row.owner_user_id == user_id:
            logger.warning(
                "User %s owns workspace %s; grant refused", user_id, workspace_id,
            )
            raise AccessConflictError("Workspace owner already has full access")

        existing = await self._access.find(workspace_id, user_id)
        if existing is not None and existing.is_active:
            logger.warning(
                "User %s already has access to workspace %s", user_id, workspace_id,
            )
            raise AccessConflictError("User already has access to this workspace")
        if existing is not None:
            await self._access.reactivate(existing, level.value)
            logger.info(
                "Reactivated %s on workspace %s for user %s",
                level.value, workspace_id, user_id,
            )
            return

        try:
            await self._access.create(
                workspace_id=workspace_id, user_id=user_id, access_level=level.value,
            )
        except IntegrityError as exc:
            logger.warning(
                "Concurrent grant for user %s on workspace %s", user_id, workspace_id,
            )
            raise AccessConflictError("User already has access to this workspace") from exc

        logger.info("Granted %s on workspace %s to user %s", level.value, workspace_id, user_id)

    async def revoke(self, workspace_id: UUID, user_id: UUID) -> None:
        logger.info("Revoking access of user %s on workspace %s", user_id, workspace_id)
        await self._ensure_exists(workspace_id)
        removed = await self._access.delete_by_workspace_and_user(workspace_id, user_id)
        if not removed:
            logger.warning(
                "No grant for user %s on workspace %s; nothing revoked", user_id, workspace_id,
            )

    async def update_level(self, workspace_id: UUID, user_id: UUID,
                           level: AccessLevel) -> None:
        existing = await self._access.get_active(workspace_id, user_id)
        if existing is None:
            logger.error(
                "User access not found: user %s, workspace %s", user_id, workspace_id,
            )
            raise ResourceNotFoundError("User access not found for workspace")

        old_level = existing.access_level
        await self._access.update_level(workspace_id, user_id, level.value)
        logger.info(
            "Updated access of user %s on workspace %s from %s to %s",
            user_id, workspace_id, old_level, level.value,
        )

    async def list_users(self, workspace_id: UUID) -> list[UUID]:
        await self._ensure_exists(workspace_id)
        grants = await self._access.list_active_by_workspace(workspace_id)
        return [g.user_id for g in grants]

    # ------------------------------------------------------------------
    # Workspace lifecycle
    # ------------------------------------------------------------------

    async def bootstrap(self, owner_id: UUID) -> BootstrapResult:
        """Create DEFAULT, ROADMAP and GROUP_PROJECT workspaces once per owner.

        Short-circuits with ``created=False`` when the owner already has any
        workspace, so repeated calls perform no writes.
        """
        existing = await self.list_owned(owner_id)
        if existing:
            logger.warning(
                "User %s already has workspaces; bootstrap skipped", owner_id,
            )
            return BootstrapResult(created=False, workspaces=existing)

        specs = [
            (name, description, workspace_type.value)
            for name, description, workspace_type in BOOTSTRAP_WORKSPACES
        ]
        try:
            rows = await self._workspaces.create_many(owner_user_id=owner_id, specs=specs)
        except IntegrityError:
            logger.warning(
                "Concurrent bootstrap for user %s; using existing workspaces", owner_id,
            )
            return BootstrapResult(created=False, workspaces=await self.list_owned(owner_id))

        logger.info("Created %d default workspaces for user %s", len(rows), owner_id)
        return BootstrapResult(created=True, workspaces=[workspace_from_row(r) for r in rows])

    async def create_workspace(self, request: WorkspaceCreateRequest) -> Workspace:
        if request.owner_user_id is None:
            raise ValueError("owner_user_id is required to create a workspace")
        owner_id = request.owner_user_id
        logger.info("Creating workspace %r for user %s", request.name, owner_id)

        errors = request.validate_user_access()
        if errors:
            logger.error("Invalid access lists for workspace %r: %s", request.name, errors)
            raise AccessListValidationError(errors)

        row = await self._workspaces.create(
            workspace_id=new_uuid7(),
            name=request.name,
            description=request.description,
            workspace_type=WorkspaceType.CUSTOM.value,
            owner_user_id=owner_id,
        )

        grants: list[tuple[UUID, str]] = []
        for level, user_ids in request.access_lists():
            for user_id in dict.fromkeys(user_ids):
                if user_id == owner_id:
                    continue
                grants.append((user_id, level.value))
        if grants:
            await self._access.create_many(workspace_id=row.workspace_id, grants=grants)

        logger.info(
            "Created workspace %s with %d access grants", row.workspace_id, len(grants),
        )
        return workspace_from_row(row)

    async def delete_workspace(self, workspace_id: UUID) -> None:
        """Delete tasks, assignments, grants, then the workspace itself.

        Each step is a separate statement and is safe to re-run.
        """
        row = await self._require_workspace(workspace_id)
        logger.info("Deleting workspace %s (%s)", workspace_id, row.name)

        assignments = await self._assignments.list_by_workspace(workspace_id)
        await self._tasks.delete_by_assignments([a.assignment_id for a in assignments])
        await self._assignments.delete_by_workspace(workspace_id)
        await self._access.delete_by_workspace(workspace_id)
        await self._workspaces.delete(workspace_id)
        logger.info("Workspace deleted: %s", workspace_id)
