"""
Database Session Management

Process-wide async engine on the SQLite file from settings. Every unit of
work (one reset, one territory of the daily pass) opens its own session
through get_session() and is committed as a whole.
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    AsyncEngine,
    create_async_engine,
    async_sessionmaker,
)
from loguru import logger

from config import settings
from .models import Base


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_database_url() -> str:
    """aiosqlite URL of settings.DATABASE_PATH."""
    return f"sqlite+aiosqlite:///{settings.DATABASE_PATH}"


async def init_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """
    Create the global engine and session factory, once.

    Args:
        database_url: Override for the configured SQLite file
    """
    global _engine, _session_factory

    if _engine is not None:
        return _engine

    database_url = database_url or get_database_url()
    logger.info(f"Initializing database engine: {database_url}")

    _engine = create_async_engine(
        database_url,
        echo=settings.LOG_LEVEL == "DEBUG",
        connect_args={"check_same_thread": False},
    )

    # Objects stay readable after commit: results outlive their session
    _session_factory = async_sessionmaker(
        bind=_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    return _engine


async def close_engine() -> None:
    """Dispose the global engine; the next get_session() re-creates it."""
    global _engine, _session_factory

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None
        logger.info("Database engine closed")


async def create_tables() -> None:
    """
    Create missing tables from the ORM metadata.

    Development shortcut; deployed databases go through Alembic.
    """
    engine = await init_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")


async def drop_tables() -> None:
    """Drop every engine table. All data is lost."""
    engine = await init_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.warning("Database tables dropped")


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Session scope: commit on success, rollback on exception.

    Usage:
        async with get_session() as session:
            repo = TerritoryRepository(session)
    """
    if _session_factory is None:
        await init_engine()

    session = _session_factory()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()
