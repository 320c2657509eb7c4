# ABOUTME: Async database engine and session management for SQLAlchemy.
# ABOUTME: Provides engine/session factories and a commit-or-rollback session context manager.

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from joydao_site.db.models import Base

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

    from joydao_site.config import Settings


def create_engine(settings: "Settings") -> "AsyncEngine":
    """Create the async engine for ``settings.database_url``.

    SQLite URLs skip pool sizing; in-memory SQLite shares one connection.
    """
    url = settings.database_url
    echo = settings.log_level == "DEBUG"
    if url.startswith("sqlite"):
        if ":memory:" in url:
            return create_async_engine(
                url,
                echo=echo,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        return create_async_engine(url, echo=echo)
    return create_async_engine(
        url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_pool_max_overflow,
        pool_pre_ping=True,
        echo=echo,
    )


def create_session_factory(engine: "AsyncEngine") -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to ``engine``."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@asynccontextmanager
async def get_session(
    factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Context manager for database sessions with automatic commit/rollback.

    Usage:
        async with get_session(factory) as session:
            result = await session.execute(query)
    """
    session = factory()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def ping(engine: "AsyncEngine") -> None:
    """Open a connection and run a trivial query."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def init_db(engine: "AsyncEngine") -> None:
    """Initialize database tables (creates all tables if they don't exist).

    Note: In production, use Alembic migrations instead.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db(engine: "AsyncEngine") -> None:
    """Close the database engine and release connections."""
    await engine.dispose()
