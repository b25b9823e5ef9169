"""Async database engine and sessions (SQLAlchemy 2.0)."""
from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from repurposer.config import get_settings

settings = get_settings()

# Same URL as Alembic (postgresql+asyncpg://...); tests point it at sqlite+aiosqlite.
engine = create_async_engine(
    settings.database_url,
    echo=settings.app_env == "local",
    future=True,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    """Declarative base for all models."""

    pass


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Dependency returning the session factory.
    The generation fan-out opens one session per platform, so it needs the factory, not a session.
    """
    return async_session_factory


async def get_db(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> AsyncGenerator[AsyncSession, None]:
    """Dependency that yields a request-scoped session; commit on success, rollback on error."""
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
