"""Shared pytest fixtures for the SwitchBoard Workspaces test suite.

Provides:
- db_engine: in-memory SQLite async engine with all tables
- db_session: async session in a rolled-back outer transaction
- client: AsyncClient with dependency overrides for DB-backed testing
- owner_id / owner_headers: a caller identity and its X-User-Id header
- manager: WorkspaceAccessManager over the test session
"""

from uuid import UUID

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool
from uuid_extensions import uuid7

from src.db.session import Base, get_async_session
import src.db.tables  # noqa: F401  register ORM tables on Base.metadata
from src.repositories.assignments import AssignmentRepository, TaskRepository
from src.repositories.workspace import WorkspaceAccessRepository, WorkspaceRepository
from src.workspaces.access import WorkspaceAccessManager


@pytest.fixture
def anyio_backend() -> str:
    """Run async tests on asyncio (SQLAlchemy's async engine requires it)."""
    return "asyncio"


@pytest.fixture
async def db_engine():
    """Create an in-memory SQLite async engine with all tables."""
    eng = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
async def db_session(db_engine):
    """Provide a session bound to one outer transaction.

    The outer transaction is never committed; it rolls back at teardown.
    Repositories open their own SAVEPOINTs for batch writes, and the API
    override below yields this session without committing.
    """
    async with db_engine.connect() as conn:
        trans = await conn.begin()
        session = AsyncSession(bind=conn, expire_on_commit=False)

        yield session

        await session.close()
        await trans.rollback()


@pytest.fixture
async def client(db_session):
    """AsyncClient with get_async_session overridden to use the test session."""
    from src.api.main import app

    async def _override_session():
        yield db_session

    app.dependency_overrides[get_async_session] = _override_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Domain fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def owner_id() -> UUID:
    return uuid7()


@pytest.fixture
def owner_headers(owner_id: UUID) -> dict[str, str]:
    """X-User-Id header identifying ``owner_id`` to the API."""
    return {"X-User-Id": str(owner_id)}


@pytest.fixture
def manager(db_session: AsyncSession) -> WorkspaceAccessManager:
    return WorkspaceAccessManager(
        WorkspaceRepository(db_session),
        WorkspaceAccessRepository(db_session),
        AssignmentRepository(db_session),
        TaskRepository(db_session),
    )
