"""Shared types, enums, and base models used across workspace domain models."""

from datetime import datetime, timezone
from enum import StrEnum
from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel, Field
from uuid_extensions import uuid7


def utc_now() -> datetime:
    """Return the current UTC timestamp (timezone-aware)."""
    return datetime.now(tz=timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """Read a stored timestamp as UTC; naive values are UTC already."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def new_uuid7() -> UUID:
    """Generate a new time-sortable UUID v7."""
    return uuid7()


# --- Reusable annotated types ---

UUIDv7 = Annotated[UUID, Field(description="Time-sortable UUID v7.")]
UTCTimestamp = Annotated[
    datetime, Field(description="UTC timezone-aware timestamp.")
]


# --- Shared enums ---


class WorkspaceType(StrEnum):
    """Workspace kinds. The first three are created by bootstrap."""

    DEFAULT = "DEFAULT"
    ROADMAP = "ROADMAP"
    GROUP_PROJECT = "GROUP_PROJECT"
    CUSTOM = "CUSTOM"


CANONICAL_WORKSPACE_TYPES: tuple[WorkspaceType, ...] = (
    WorkspaceType.DEFAULT,
    WorkspaceType.ROADMAP,
    WorkspaceType.GROUP_PROJECT,
)


class AccessLevel(StrEnum):
    """Per-user grant level on a workspace. Ownership supersedes all."""

    READ = "READ"
    WRITE = "WRITE"
    ADMIN = "ADMIN"


class AssignmentType(StrEnum):
    CUSTOM = "CUSTOM"
    ROADMAP = "ROADMAP"


class TaskStatus(StrEnum):
    """Task lifecycle states."""

    TODO = "TODO"
    ONGOING = "ONGOING"
    IN_REVIEW = "IN_REVIEW"
    COMPLETED = "COMPLETED"
    BLOCKED = "BLOCKED"
    CANCELLED = "CANCELLED"


# --- Base model ---


class WorkspaceServiceBase(BaseModel):
    """Base model with common configuration for all workspace Pydantic models."""

    model_config = {
        "populate_by_name": True,
        "ser_json_timedelta": "iso8601",
        "protected_namespaces": (),
    }


class OperationResult(WorkspaceServiceBase):
    """Structured outcome handed back to the HTTP boundary.

    ``location`` carries the resource path for created/affected entities.
    """

    message: str
    success: bool
    data: Any = None
    location: str | None = None

    @classmethod
    def ok(cls, message: str, data: Any = None,
           location: str | None = None) -> "OperationResult":
        return cls(message=message, success=True, data=data, location=location)

    @classmethod
    def failed(cls, message: str) -> "OperationResult":
        return cls(message=message, success=False)
