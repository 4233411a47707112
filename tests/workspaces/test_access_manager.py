"""Tests for WorkspaceAccessManager: grants, bootstrap, create, and delete."""

from unittest.mock import AsyncMock
from uuid import UUID

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from uuid_extensions import uuid7

from src.config.defaults import (
    DEFAULT_WORKSPACE_NAME,
    PROJECT_WORKSPACE_NAME,
    ROADMAP_WORKSPACE_NAME,
)
from src.models.assignment import Assignment, Task
from src.models.common import AccessLevel, WorkspaceType
from src.models.workspace import WorkspaceCreateRequest
from src.repositories.assignments import AssignmentRepository, TaskRepository
from src.repositories.workspace import WorkspaceAccessRepository, WorkspaceRepository
from src.workspaces.access import WorkspaceAccessManager
from src.workspaces.errors import (
    AccessConflictError,
    AccessListValidationError,
    ResourceNotFoundError,
)


async def _workspace(manager: WorkspaceAccessManager, owner_id: UUID, **lists) -> UUID:
    request = WorkspaceCreateRequest(name="Team", owner_user_id=owner_id, **lists)
    workspace = await manager.create_workspace(request)
    return workspace.workspace_id


class TestGrant:
    @pytest.mark.anyio
    async def test_grant_list_revoke(self, manager, owner_id) -> None:
        ws_id = await _workspace(manager, owner_id)
        user = uuid7()

        await manager.grant(ws_id, user, AccessLevel.WRITE)
        assert await manager.list_users(ws_id) == [user]

        await manager.revoke(ws_id, user)
        assert await manager.list_users(ws_id) == []

    @pytest.mark.anyio
    async def test_duplicate_grant_conflicts(self, manager, owner_id) -> None:
        ws_id = await _workspace(manager, owner_id)
        user = uuid7()
        await manager.grant(ws_id, user, AccessLevel.READ)

        with pytest.raises(AccessConflictError):
            await manager.grant(ws_id, user, AccessLevel.ADMIN)
        assert await manager.list_users(ws_id) == [user]

    @pytest.mark.anyio
    async def test_grant_missing_workspace(self, manager) -> None:
        with pytest.raises(ResourceNotFoundError, match="Workspace not found"):
            await manager.grant(uuid7(), uuid7(), AccessLevel.READ)

    @pytest.mark.anyio
    async def test_regrant_after_revoke(self, manager, owner_id) -> None:
        ws_id = await _workspace(manager, owner_id)
        user = uuid7()
        await manager.grant(ws_id, user, AccessLevel.READ)
        await manager.revoke(ws_id, user)
        await manager.grant(ws_id, user, AccessLevel.ADMIN)
        assert await manager.list_users(ws_id) == [user]

    @pytest.mark.anyio
    async def test_owner_cannot_be_granted(self, manager, owner_id) -> None:
        ws_id = await _workspace(manager, owner_id)

        with pytest.raises(AccessConflictError, match="owner"):
            await manager.grant(ws_id, owner_id, AccessLevel.READ)
        assert await manager.list_users(ws_id) == []

    @pytest.mark.anyio
    async def test_grant_reactivates_suspended_record(
        self, manager, owner_id, db_session: AsyncSession,
    ) -> None:
        ws_id = await _workspace(manager, owner_id)
        user = uuid7()
        await manager.grant(ws_id, user, AccessLevel.READ)
        access = WorkspaceAccessRepository(db_session)
        row = await access.get_active(ws_id, user)
        row.is_active = False
        await db_session.flush()

        await manager.grant(ws_id, user, AccessLevel.ADMIN)

        assert await manager.list_users(ws_id) == [user]
        assert (await access.get_active(ws_id, user)).access_level == "ADMIN"

    @pytest.mark.anyio
    async def test_lost_race_surfaces_as_conflict(self) -> None:
        workspaces = AsyncMock(spec=WorkspaceRepository)
        access = AsyncMock(spec=WorkspaceAccessRepository)
        access.find.return_value = None
        access.create.side_effect = IntegrityError("INSERT", {}, Exception("unique"))
        manager = WorkspaceAccessManager(
            workspaces, access,
            AsyncMock(spec=AssignmentRepository), AsyncMock(spec=TaskRepository),
        )

        with pytest.raises(AccessConflictError):
            await manager.grant(uuid7(), uuid7(), AccessLevel.READ)


class TestRevoke:
    @pytest.mark.anyio
    async def test_revoke_without_grant_is_noop(self, manager, owner_id) -> None:
        ws_id = await _workspace(manager, owner_id)
        await manager.revoke(ws_id, uuid7())
        assert await manager.list_users(ws_id) == []

    @pytest.mark.anyio
    async def test_revoke_missing_workspace(self, manager) -> None:
        with pytest.raises(ResourceNotFoundError):
            await manager.revoke(uuid7(), uuid7())


class TestUpdateLevel:
    @pytest.mark.anyio
    async def test_update_existing(self, manager, owner_id, db_session: AsyncSession) -> None:
        ws_id = await _workspace(manager, owner_id)
        user = uuid7()
        await manager.grant(ws_id, user, AccessLevel.READ)

        await manager.update_level(ws_id, user, AccessLevel.ADMIN)

        row = await WorkspaceAccessRepository(db_session).get_active(ws_id, user)
        assert row is not None
        assert row.access_level == "ADMIN"

    @pytest.mark.anyio
    async def test_update_missing_grant_writes_nothing(self, manager, owner_id) -> None:
        ws_id = await _workspace(manager, owner_id)
        stranger = uuid7()

        with pytest.raises(ResourceNotFoundError, match="User access not found"):
            await manager.update_level(ws_id, stranger, AccessLevel.WRITE)
        assert await manager.list_users(ws_id) == []


class TestBootstrap:
    @pytest.mark.anyio
    async def test_creates_three_canonical_workspaces(self, manager, owner_id) -> None:
        result = await manager.bootstrap(owner_id)

        assert result.created is True
        assert [w.workspace_type for w in result.workspaces] == [
            WorkspaceType.DEFAULT, WorkspaceType.ROADMAP, WorkspaceType.GROUP_PROJECT,
        ]
        assert [w.name for w in result.workspaces] == [
            DEFAULT_WORKSPACE_NAME, ROADMAP_WORKSPACE_NAME, PROJECT_WORKSPACE_NAME,
        ]
        assert all(w.owner_user_id == owner_id for w in result.workspaces)

    @pytest.mark.anyio
    async def test_idempotent(self, manager, owner_id) -> None:
        await manager.bootstrap(owner_id)
        second = await manager.bootstrap(owner_id)

        assert second.created is False
        assert len(await manager.list_owned(owner_id)) == 3

    @pytest.mark.anyio
    async def test_skipped_when_owner_has_custom_workspace(self, manager, owner_id) -> None:
        await _workspace(manager, owner_id)
        result = await manager.bootstrap(owner_id)
        assert result.created is False
        assert len(result.workspaces) == 1

    @pytest.mark.anyio
    async def test_lost_race_returns_existing(self) -> None:
        workspaces = AsyncMock(spec=WorkspaceRepository)
        workspaces.list_by_owner.return_value = []
        workspaces.create_many.side_effect = IntegrityError("INSERT", {}, Exception("unique"))
        manager = WorkspaceAccessManager(
            workspaces, AsyncMock(spec=WorkspaceAccessRepository),
            AsyncMock(spec=AssignmentRepository), AsyncMock(spec=TaskRepository),
        )

        result = await manager.bootstrap(uuid7())

        assert result.created is False
        assert workspaces.list_by_owner.await_count == 2


class TestCreateWorkspace:
    @pytest.mark.anyio
    async def test_creates_custom_with_grants(self, manager, owner_id) -> None:
        reader, writer, admin = uuid7(), uuid7(), uuid7()
        request = WorkspaceCreateRequest(
            name="Team", description="shared", owner_user_id=owner_id,
            read_access_user_ids=[reader],
            write_access_user_ids=[writer],
            admin_access_user_ids=[admin],
        )

        workspace = await manager.create_workspace(request)

        assert workspace.workspace_type == WorkspaceType.CUSTOM
        assert workspace.owner_user_id == owner_id
        assert set(await manager.list_users(workspace.workspace_id)) == {reader, writer, admin}

    @pytest.mark.anyio
    async def test_cross_list_duplicate_rejected_without_writes(
        self, manager, owner_id,
    ) -> None:
        dup = uuid7()
        request = WorkspaceCreateRequest(
            name="Team", owner_user_id=owner_id,
            read_access_user_ids=[dup], admin_access_user_ids=[dup],
        )

        with pytest.raises(AccessListValidationError) as exc_info:
            await manager.create_workspace(request)

        assert len(exc_info.value.errors) == 1
        assert str(dup) in exc_info.value.errors[0]
        assert await manager.list_owned(owner_id) == []
        assert await manager.list_shared(dup) == []

    @pytest.mark.anyio
    async def test_owner_in_lists_is_skipped(self, manager, owner_id) -> None:
        other = uuid7()
        ws_id = await _workspace(
            manager, owner_id, write_access_user_ids=[owner_id, other],
        )
        assert await manager.list_users(ws_id) == [other]

    @pytest.mark.anyio
    async def test_repeat_within_one_list_deduped(self, manager, owner_id) -> None:
        user = uuid7()
        ws_id = await _workspace(manager, owner_id, read_access_user_ids=[user, user])
        assert await manager.list_users(ws_id) == [user]

    @pytest.mark.anyio
    async def test_owner_required(self, manager) -> None:
        with pytest.raises(ValueError, match="owner_user_id"):
            await manager.create_workspace(WorkspaceCreateRequest(name="Orphan"))


class TestDescribe:
    @pytest.mark.anyio
    async def test_view_counts_active_grants(self, manager, owner_id) -> None:
        users = [uuid7(), uuid7()]
        ws_id = await _workspace(manager, owner_id, read_access_user_ids=users)

        view = await manager.describe(await manager.get_workspace(ws_id))

        assert view.user_access_count == 2
        assert set(view.access_user_ids) == set(users)


class TestDeleteWorkspace:
    @pytest.mark.anyio
    async def test_cascade(self, manager, owner_id, db_session: AsyncSession) -> None:
        user = uuid7()
        ws_id = await _workspace(manager, owner_id, read_access_user_ids=[user])
        assignment = Assignment(
            workspace_id=ws_id, title="Plan", tasks=[Task(title="step")],
        )
        assignment = assignment.model_copy(update={
            "tasks": [t.model_copy(update={"assignment_id": assignment.assignment_id})
                      for t in assignment.tasks],
        })
        assignments = AssignmentRepository(db_session)
        tasks = TaskRepository(db_session)
        await assignments.create_with_tasks(assignment)

        await manager.delete_workspace(ws_id)

        assert await WorkspaceRepository(db_session).get(ws_id) is None
        assert await assignments.list_by_workspace(ws_id) == []
        assert await tasks.list_by_assignment(assignment.assignment_id) == []
        assert await manager.list_shared(user) == []

    @pytest.mark.anyio
    async def test_delete_missing(self, manager) -> None:
        with pytest.raises(ResourceNotFoundError):
            await manager.delete_workspace(uuid7())
