"""Database connection helpers."""

from typing import Any

from sqlalchemy import event
from sqlalchemy.engine.interfaces import DBAPIConnection
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import ConnectionPoolEntry

from src.helpers.config import get_database_url


Base = declarative_base()


def _set_sqlite_pragmas(
    dbapi_connection: DBAPIConnection, connection_record: ConnectionPoolEntry
) -> None:
    """Enable WAL so readers never block on the single writer."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.close()


def create_engine(database_url: str | None = None, **kwargs: Any) -> AsyncEngine:
    """Create an async engine for the batch store.

    Args:
        database_url: SQLAlchemy URL (defaults to DATABASE_URL / DB_FILENAME)
        **kwargs: Extra create_async_engine kwargs

    Returns:
        AsyncEngine: Engine with WAL journaling enabled on SQLite

    Example:
        ```python
        from src.helpers.db import create_engine, create_session_factory

        engine = create_engine("sqlite+aiosqlite:///batches.db")
        session_factory = create_session_factory(engine)
        ```
    """
    url = get_database_url(database_url)
    engine = create_async_engine(url, echo=False, **kwargs)

    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _set_sqlite_pragmas)

    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to an engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create all tables and indexes registered on Base if they don't exist."""
    # Import models so they register on Base.metadata
    import src.data.batches.db  # noqa: F401
    import src.data.status.db  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


__all__ = [
    "Base",
    "create_engine",
    "create_session_factory",
    "create_tables",
]
