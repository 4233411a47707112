"""Workspace models: ownership, access grants, and creation requests."""

from uuid import UUID

from pydantic import Field

from src.models.common import (
    AccessLevel,
    UTCTimestamp,
    UUIDv7,
    WorkspaceServiceBase,
    WorkspaceType,
    new_uuid7,
    utc_now,
)


class Workspace(WorkspaceServiceBase):
    """Organizational container scoping assignments and tasks to an owner.

    Ownership is implicit and supersedes any access grant. The workspace
    type is fixed at creation.
    """

    workspace_id: UUIDv7 = Field(default_factory=new_uuid7)
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(default="", max_length=1000)
    workspace_type: WorkspaceType = WorkspaceType.CUSTOM
    owner_user_id: UUID
    created_at: UTCTimestamp = Field(default_factory=utc_now)
    updated_at: UTCTimestamp = Field(default_factory=utc_now)


class WorkspaceView(Workspace):
    """Workspace plus its active grantees, as returned to callers."""

    access_user_ids: list[UUID] = Field(default_factory=list)
    user_access_count: int = 0


class WorkspaceCreateRequest(WorkspaceServiceBase):
    """Request to create a workspace with initial access lists.

    ``owner_user_id`` is filled from the caller identity, never the body.
    Workspaces created this way are always CUSTOM; the canonical types
    come from bootstrap only.
    """

    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(default="", max_length=1000)
    owner_user_id: UUID | None = None
    read_access_user_ids: list[UUID] = Field(default_factory=list)
    write_access_user_ids: list[UUID] = Field(default_factory=list)
    admin_access_user_ids: list[UUID] = Field(default_factory=list)

    def access_lists(self) -> list[tuple[AccessLevel, list[UUID]]]:
        return [
            (AccessLevel.READ, self.read_access_user_ids),
            (AccessLevel.WRITE, self.write_access_user_ids),
            (AccessLevel.ADMIN, self.admin_access_user_ids),
        ]

    def validate_user_access(self) -> list[str]:
        """Return one error per user id that appears in more than one list.

        Empty list means the three access lists are pairwise disjoint.
        """
        errors: list[str] = []
        seen_in: dict[UUID, AccessLevel] = {}
        for level, user_ids in self.access_lists():
            for user_id in dict.fromkeys(user_ids):
                first = seen_in.setdefault(user_id, level)
                if first != level:
                    errors.append(
                        f"User {user_id} appears in multiple access lists "
                        f"({first.value}, {level.value})"
                    )
        return errors
