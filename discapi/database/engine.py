"""Async SQLAlchemy engine and session management.

Works with SQLite (aiosqlite) for development and tests, and PostgreSQL
(asyncpg) in deployment.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from discapi.logging_config import get_logger

from .models import Base

logger = get_logger(name=__name__)

_engine: AsyncEngine | None = None
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def _set_sqlite_pragmas(dbapi_connection: Any, connection_record: Any) -> None:
    """Set SQLite pragmas on each new connection.

    Args:
        dbapi_connection: The raw DBAPI connection.
        connection_record: The connection record (unused but required by event signature).
    """
    cursor = dbapi_connection.cursor()
    # ON DELETE CASCADE / SET NULL need foreign keys enforced
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.execute("PRAGMA busy_timeout = 30000")
    cursor.close()


def init_engine(
    database_url: str,
    pool_size: int = 5,
    max_overflow: int = 10,
) -> AsyncEngine:
    """Create the global async engine and session factory."""
    global _engine, _async_session_factory

    is_sqlite = database_url.startswith("sqlite")
    if is_sqlite:
        _engine = create_async_engine(database_url, echo=False)
        event.listen(_engine.sync_engine, "connect", _set_sqlite_pragmas)
    else:
        _engine = create_async_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            echo=False,
        )
    _async_session_factory = async_sessionmaker(
        bind=_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    logger.info("Database async engine initialized ({})", _engine.dialect.name)
    return _engine


def get_engine() -> AsyncEngine:
    """Get the global async engine. Raises if not initialized."""
    if _engine is None:
        raise RuntimeError(
            "Database engine not initialized. Call init_engine() first."
        )
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the global async session factory."""
    if _async_session_factory is None:
        raise RuntimeError(
            "Session factory not initialized. Call init_engine() first."
        )
    return _async_session_factory


async def create_tables() -> None:
    """Create the catalog tables if they don't exist."""
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Catalog tables ready")


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that yields an async DB session.

    Usage::

        @router.get("/example")
        async def example(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    factory = get_session_factory()
    async with factory() as session:
        yield session


@asynccontextmanager
async def get_db_session_context() -> AsyncGenerator[AsyncSession, None]:
    """Standalone async context manager for DB sessions (non-FastAPI use).

    Usage::

        async with get_db_session_context() as session:
            session.add(Singer(name="Nina", last_name="Simone"))
            await session.commit()
    """
    factory = get_session_factory()
    async with factory() as session:
        yield session


async def dispose_engine() -> None:
    """Dispose the async engine and release all connections."""
    global _engine, _async_session_factory
    if _engine is not None:
        await _engine.dispose()
        logger.info("Database engine disposed")
    _engine = None
    _async_session_factory = None
