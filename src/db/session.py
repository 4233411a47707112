"""SQLAlchemy async session setup for SwitchBoard Workspaces.

Provides:
- Base: DeclarativeBase for all ORM models
- engine: async engine configured from settings
- async_session_factory: session maker bound to engine
- get_async_session: FastAPI dependency with Unit-of-Work commit/rollback
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from src.config.settings import LogLevel, get_settings


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""

    pass


_settings = get_settings()

# SQL echo follows LOG_LEVEL=DEBUG rather than the environment name.
engine = create_async_engine(
    _settings.DATABASE_URL,
    echo=_settings.LOG_LEVEL == LogLevel.DEBUG,
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield one session per request.

    Repositories only add, flush, and execute; they never commit. The
    request's writes commit together once the endpoint returns, and any
    exception rolls all of them back.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
