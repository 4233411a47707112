"""Workspace and workspace-access repositories."""

from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.tables import WorkspaceAccessRow, WorkspaceRow
from src.models.common import new_uuid7, utc_now


class WorkspaceRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, workspace_id: UUID, name: str,
                     description: str, workspace_type: str,
                     owner_user_id: UUID) -> WorkspaceRow:
        now = utc_now()
        row = WorkspaceRow(
            workspace_id=workspace_id, name=name, description=description,
            workspace_type=workspace_type, owner_user_id=owner_user_id,
            created_at=now, updated_at=now,
        )
        self._session.add(row)
        await self._session.flush()
        return row

    async def create_many(self, *, owner_user_id: UUID,
                          specs: list[tuple[str, str, str]]) -> list[WorkspaceRow]:
        """Insert (name, description, workspace_type) rows in one SAVEPOINT.

        A uniqueness violation rolls the SAVEPOINT back and propagates as
        ``IntegrityError``; the outer transaction stays usable.
        """
        now = utc_now()
        rows = [
            WorkspaceRow(
                workspace_id=new_uuid7(), name=name, description=description,
                workspace_type=workspace_type, owner_user_id=owner_user_id,
                created_at=now, updated_at=now,
            )
            for name, description, workspace_type in specs
        ]
        async with self._session.begin_nested():
            self._session.add_all(rows)
            await self._session.flush()
        return rows

    async def get(self, workspace_id: UUID) -> WorkspaceRow | None:
        return await self._session.get(WorkspaceRow, workspace_id)

    async def exists(self, workspace_id: UUID) -> bool:
        result = await self._session.execute(
            select(WorkspaceRow.workspace_id).where(
                WorkspaceRow.workspace_id == workspace_id
            )
        )
        return result.first() is not None

    async def list_by_owner(self, owner_user_id: UUID) -> list[WorkspaceRow]:
        result = await self._session.execute(
            select(WorkspaceRow)
            .where(WorkspaceRow.owner_user_id == owner_user_id)
            .order_by(WorkspaceRow.created_at, WorkspaceRow.workspace_id)
        )
        return list(result.scalars().all())

    async def list_by_ids(self, workspace_ids: list[UUID]) -> list[WorkspaceRow]:
        if not workspace_ids:
            return []
        result = await self._session.execute(
            select(WorkspaceRow)
            .where(WorkspaceRow.workspace_id.in_(workspace_ids))
            .order_by(WorkspaceRow.created_at, WorkspaceRow.workspace_id)
        )
        return list(result.scalars().all())

    async def delete(self, workspace_id: UUID) -> None:
        await self._session.execute(
            delete(WorkspaceRow).where(WorkspaceRow.workspace_id == workspace_id)
        )
        await self._session.flush()


class WorkspaceAccessRepository:
    """Grants are hard-deleted on revoke; ``is_active`` is a read filter."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, workspace_id: UUID, user_id: UUID,
                     access_level: str) -> WorkspaceAccessRow:
        rows = await self.create_many(
            workspace_id=workspace_id, grants=[(user_id, access_level)],
        )
        return rows[0]

    async def create_many(self, *, workspace_id: UUID,
                          grants: list[tuple[UUID, str]]) -> list[WorkspaceAccessRow]:
        now = utc_now()
        rows = [
            WorkspaceAccessRow(
                access_id=new_uuid7(), workspace_id=workspace_id,
                user_id=user_id, access_level=access_level, is_active=True,
                created_at=now, updated_at=now,
            )
            for user_id, access_level in grants
        ]
        async with self._session.begin_nested():
            self._session.add_all(rows)
            await self._session.flush()
        return rows

    async def find(self, workspace_id: UUID,
                   user_id: UUID) -> WorkspaceAccessRow | None:
        """The record for the pair, active or not."""
        result = await self._session.execute(
            select(WorkspaceAccessRow).where(
                WorkspaceAccessRow.workspace_id == workspace_id,
                WorkspaceAccessRow.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def reactivate(self, row: WorkspaceAccessRow,
                         access_level: str) -> WorkspaceAccessRow:
        row.is_active = True
        row.access_level = access_level
        row.updated_at = utc_now()
        await self._session.flush()
        return row

    async def get_active(self, workspace_id: UUID,
                         user_id: UUID) -> WorkspaceAccessRow | None:
        result = await self._session.execute(
            select(WorkspaceAccessRow).where(
                WorkspaceAccessRow.workspace_id == workspace_id,
                WorkspaceAccessRow.user_id == user_id,
                WorkspaceAccessRow.is_active.is_(True),
            )
        )
        return result.scalar_one_or_none()

    async def list_active_by_workspace(self, workspace_id: UUID) -> list[WorkspaceAccessRow]:
        result = await self._session.execute(
            select(WorkspaceAccessRow).where(
                WorkspaceAccessRow.workspace_id == workspace_id,
                WorkspaceAccessRow.is_active.is_(True),
            )
        )
        return list(result.scalars().all())

    async def list_active_by_user(self, user_id: UUID) -> list[WorkspaceAccessRow]:
        result = await self._session.execute(
            select(WorkspaceAccessRow).where(
                WorkspaceAccessRow.user_id == user_id,
                WorkspaceAccessRow.is_active.is_(True),
            )
        )
        return list(result.scalars().all())

    async def count_active_by_workspace(self, workspace_id: UUID) -> int:
        result = await self._session.execute(
            select(func.count()).select_from(WorkspaceAccessRow).where(
                WorkspaceAccessRow.workspace_id == workspace_id,
                WorkspaceAccessRow.is_active.is_(True),
            )
        )
        return int(result.scalar_one())

    async def update_level(self, workspace_id: UUID, user_id: UUID,
                           access_level: str) -> WorkspaceAccessRow | None:
        row = await self.get_active(workspace_id, user_id)
        if row is not None:
            row.access_level = access_level
            row.updated_at = utc_now()
            await self._session.flush()
        return row

    async def delete_by_workspace_and_user(self, workspace_id: UUID,
                                           user_id: UUID) -> int:
        result = await self._session.execute(
            delete(WorkspaceAccessRow).where(
                WorkspaceAccessRow.workspace_id == workspace_id,
                WorkspaceAccessRow.user_id == user_id,
            )
        )
        await self._session.flush()
        return result.rowcount or 0

    async def delete_by_workspace(self, workspace_id: UUID) -> int:
        result = await self._session.execute(
            delete(WorkspaceAccessRow).where(
                WorkspaceAccessRow.workspace_id == workspace_id
            )
        )
        await self._session.flush()
        return result.rowcount or 0
