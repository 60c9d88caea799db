"""
Async database engine and session factory.

Uses SQLAlchemy 2.x async engine with asyncpg driver for PostgreSQL.
Provides module-level engine and session factory singletons plus an async
context manager yielding sessions. Connections are not pooled: every command
runs once and exits.

CHANGELOG:
- 2026-10-16: Add dispose_engine() for command shutdown
- 2026-10-16: Initial creation

TODO:
- None
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from powerlog.src.config import get_settings

# Module-level singletons, initialized lazily via init_engine().
async_engine: AsyncEngine | None = None
async_session_factory: async_sessionmaker[AsyncSession] | None = None


def create_engine(url: str | None = None) -> AsyncEngine:
    """Create an async SQLAlchemy engine.

    Args:
        url: Optional database URL. Defaults to ``DATABASE_URL`` from config.

    Returns:
        AsyncEngine: Async engine for PostgreSQL via asyncpg.
    """
    if url is None:
        url = get_settings().DATABASE_URL
    return create_async_engine(url, echo=False, poolclass=NullPool)


def create_session_factory(engine: AsyncEngine | None = None) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory.

    Args:
        engine: Optional async engine. If not provided, creates one from config.

    Returns:
        async_sessionmaker: Factory for creating AsyncSession instances.
    """
    if engine is None:
        engine = create_engine()
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


def init_engine() -> AsyncEngine:
    """Initialize the module-level async engine and session factory.

    Safe to call multiple times; subsequent calls return the existing engine.

    Returns:
        AsyncEngine: The module-level engine.
    """
    global async_engine, async_session_factory  # noqa: PLW0603
    if async_engine is None:
        async_engine = create_engine()
        async_session_factory = create_session_factory(async_engine)
    return async_engine


async def dispose_engine() -> None:
    """Dispose the module-level engine, if any, and clear the singletons."""
    global async_engine, async_session_factory  # noqa: PLW0603
    if async_engine is not None:
        await async_engine.dispose()
    async_engine = None
    async_session_factory = None


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session.

    Initializes the engine on first call if not already done.
    The session is closed when the block exits.

    Yields:
        AsyncSession: An async SQLAlchemy session.
    """
    init_engine()
    assert async_session_factory is not None, "Session factory not initialized"
    async with async_session_factory() as session:
        yield session
