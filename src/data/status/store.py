"""Durable checkpoint of indexing progress."""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from src.data.status.db import StatusDB
from src.data.status.models import Checkpoint
from src.helpers.constants import STATUS_ROW_ID
from src.helpers.db import create_tables
from src.helpers.logging import get_logger


logger = get_logger(__name__)

CHECKPOINT_FIELDS = tuple(Checkpoint.model_fields)


class CheckpointStore:
    """Singleton status row holding indexing progress.

    Updates are partial merges: ``None`` means "nothing observed" and leaves
    the stored value as it is, so a genuine zero (genesis block, batch 0) is
    still recorded. Stored values never decrease.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        """Initialize the store.

        Args:
            engine: Engine used to create the schema
            session_factory: Factory for sessions on the same store
        """
        self.engine = engine
        self.session_factory = session_factory

    async def initialize(self) -> None:
        """Create the schema and seed the status row if missing.

        Safe to call on every start.
        """
        await create_tables(self.engine)

        async with self.session_factory() as session:
            if await session.get(StatusDB, STATUS_ROW_ID) is None:
                session.add(
                    StatusDB(id=STATUS_ROW_ID, **Checkpoint().model_dump())
                )
                await session.commit()
                logger.info("Initialized empty indexing status")

    async def read(self) -> Checkpoint:
        """Read the full checkpoint (all zeros if uninitialized)."""
        async with self.session_factory() as session:
            row = await session.get(StatusDB, STATUS_ROW_ID)
            if row is None:
                return Checkpoint()
            return Checkpoint.model_validate(row)

    async def read_l1_progress(self) -> int:
        """Read the last fully indexed base chain block (0 if uninitialized)."""
        checkpoint = await self.read()
        return checkpoint.indexed_l1_block

    async def update(
        self,
        indexed_l1_block: int | None = None,
        proposed_batch_id: int | None = None,
        proposed_block_id: int | None = None,
        proved_batch_id: int | None = None,
        proved_block_id: int | None = None,
    ) -> bool:
        """Merge newly observed progress into the stored checkpoint.

        Args:
            indexed_l1_block: Last fully indexed base chain block
            proposed_batch_id: Highest proposed batch id observed
            proposed_block_id: Highest proposed L2 block id observed
            proved_batch_id: Highest proved batch id observed
            proved_block_id: Highest proved L2 block id observed

        Returns:
            True on success, False if the store could not be written
        """
        observed = {
            "indexed_l1_block": indexed_l1_block,
            "proposed_batch_id": proposed_batch_id,
            "proposed_block_id": proposed_block_id,
            "proved_batch_id": proved_batch_id,
            "proved_block_id": proved_block_id,
        }

        try:
            async with self.session_factory() as session:
                row = await session.get(StatusDB, STATUS_ROW_ID)
                if row is None:
                    row = StatusDB(id=STATUS_ROW_ID, **Checkpoint().model_dump())
                    session.add(row)

                for field in CHECKPOINT_FIELDS:
                    value = observed[field]
                    if value is not None and value > getattr(row, field):
                        setattr(row, field, value)

                await session.commit()
        except SQLAlchemyError:
            logger.exception("Failed to update status")
            return False

        return True


__all__ = ["CheckpointStore"]
