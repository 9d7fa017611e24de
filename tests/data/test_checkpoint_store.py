"""Tests for the status checkpoint store."""

import pytest

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from src.data.status.db import StatusDB
from src.data.status.models import Checkpoint
from src.data.status.store import CheckpointStore


class TestCheckpointStore:
    """Tests for CheckpointStore."""

    @pytest.mark.asyncio
    async def test_initialized_with_zeros(
        self, checkpoint_store: CheckpointStore
    ) -> None:
        assert await checkpoint_store.read() == Checkpoint()
        assert await checkpoint_store.read_l1_progress() == 0

    @pytest.mark.asyncio
    async def test_initialize_is_idempotent(
        self,
        checkpoint_store: CheckpointStore,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        await checkpoint_store.update(indexed_l1_block=100)

        await checkpoint_store.initialize()
        await checkpoint_store.initialize()

        async with session_factory() as session:
            count = (await session.execute(select(func.count(StatusDB.id)))).scalar_one()
        assert count == 1
        assert await checkpoint_store.read_l1_progress() == 100

    @pytest.mark.asyncio
    async def test_partial_update_leaves_other_fields(
        self, checkpoint_store: CheckpointStore
    ) -> None:
        await checkpoint_store.update(
            indexed_l1_block=10, proposed_batch_id=5, proposed_block_id=50
        )

        assert await checkpoint_store.update(indexed_l1_block=20) is True

        assert await checkpoint_store.read() == Checkpoint(
            indexed_l1_block=20, proposed_batch_id=5, proposed_block_id=50
        )

    @pytest.mark.asyncio
    async def test_values_never_decrease(
        self, checkpoint_store: CheckpointStore
    ) -> None:
        await checkpoint_store.update(
            indexed_l1_block=100,
            proposed_batch_id=9,
            proposed_block_id=90,
            proved_batch_id=8,
            proved_block_id=80,
        )

        await checkpoint_store.update(
            indexed_l1_block=50,
            proposed_batch_id=3,
            proposed_block_id=30,
            proved_batch_id=2,
            proved_block_id=20,
        )

        assert await checkpoint_store.read() == Checkpoint(
            indexed_l1_block=100,
            proposed_batch_id=9,
            proposed_block_id=90,
            proved_batch_id=8,
            proved_block_id=80,
        )

    @pytest.mark.asyncio
    async def test_zero_is_a_value_not_absence(
        self, checkpoint_store: CheckpointStore
    ) -> None:
        """Test that batch 0 is accepted as an observation."""
        assert await checkpoint_store.update(
            proposed_batch_id=0, proposed_block_id=0
        )
        assert await checkpoint_store.read() == Checkpoint()

    @pytest.mark.asyncio
    async def test_update_creates_missing_row(self, engine: AsyncEngine) -> None:
        async with engine.begin() as conn:
            await conn.execute(StatusDB.__table__.delete())

        store = CheckpointStore(engine, async_sessionmaker(engine, expire_on_commit=False))
        assert await store.read() == Checkpoint()

        await store.update(proved_batch_id=4)

        assert (await store.read()).proved_batch_id == 4

    @pytest.mark.asyncio
    async def test_singleton_constraint(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        async with session_factory() as session:
            session.add(StatusDB(id=1, **Checkpoint().model_dump()))
            with pytest.raises(IntegrityError):
                await session.commit()

    @pytest.mark.asyncio
    async def test_update_failure_returns_false(
        self,
        engine: AsyncEngine,
        checkpoint_store: CheckpointStore,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Test that a store error is logged and reported instead of raised."""
        async with engine.begin() as conn:
            await conn.run_sync(StatusDB.__table__.drop)

        assert await checkpoint_store.update(indexed_l1_block=100) is False
        assert "Failed to update status" in caplog.text
