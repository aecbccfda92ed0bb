"""Database engine and session management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from keyguard.core.config import get_settings
from keyguard.core.logging import get_logger

logger = get_logger("database")

# Process-wide engine; rebuilt after close_db()
_engine: AsyncEngine | None = None
_async_session_maker: async_sessionmaker[AsyncSession] | None = None


def _enable_sqlite_wal(dbapi_connection: Any, connection_record: Any) -> None:
    # Concurrent scans write progress while the API reads it
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA busy_timeout=5000")
    cursor.close()


def get_engine() -> AsyncEngine:
    """Get or create the async database engine."""
    global _engine
    if _engine is None:
        settings = get_settings()
        url = make_url(settings.database_url)
        _engine = create_async_engine(url, echo=settings.database_echo)

        if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
            event.listen(_engine.sync_engine, "connect", _enable_sqlite_wal)

        logger.debug("engine_created", backend=url.get_backend_name(), database=url.database)
    return _engine


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """Get or create the async session maker."""
    global _async_session_maker
    if _async_session_maker is None:
        _async_session_maker = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _async_session_maker


async def init_db() -> None:
    """Create the scan and progress tables if they do not exist."""
    # Table models register themselves on SQLModel.metadata at import
    from keyguard.database import models  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def check_db() -> bool:
    """Return whether the database answers a trivial query."""
    try:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning("database_unreachable", error=str(e))
        return False
    return True


async def close_db() -> None:
    """Dispose of the engine; the next session opens a new one."""
    global _engine, _async_session_maker
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _async_session_maker = None


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Session that commits on success and rolls back on error."""
    async with get_session_maker()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
