"""Pytest configuration and shared fixtures for store-backed tests."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from src.data.batches.repository import BatchRepository
from src.data.status.store import CheckpointStore
from src.helpers.db import create_engine, create_session_factory


@pytest_asyncio.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """File-backed SQLite engine with the schema and status row in place."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'batches.db'}")
    await CheckpointStore(engine, create_session_factory(engine)).initialize()
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(engine)


@pytest.fixture
def repository(
    session_factory: async_sessionmaker[AsyncSession],
) -> BatchRepository:
    return BatchRepository(session_factory)


@pytest.fixture
def checkpoint_store(
    engine: AsyncEngine, session_factory: async_sessionmaker[AsyncSession]
) -> CheckpointStore:
    return CheckpointStore(engine, session_factory)
