"""Insert-once / update-append access to the batch table."""

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.data.batches.db import BatchDB
from src.data.batches.models import Batch, ProofUpdate
from src.helpers.logging import get_logger


logger = get_logger(__name__)


class BatchRepository:
    """Durable store of one row per proposed batch.

    Rows are created once with the proposal fields and later receive the
    proof fields. Re-inserting an existing batch id is tolerated so a block
    range can be scanned again after a restart.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize the repository.

        Args:
            session_factory: Factory for sessions on the batch store
        """
        self.session_factory = session_factory

    async def insert(self, batch: Batch) -> bool:
        """Insert a new batch row.

        Args:
            batch: Batch with proposal fields set and proof fields empty

        Returns:
            True if inserted, False if the batch id already existed
        """
        async with self.session_factory() as session:
            session.add(BatchDB(**batch.model_dump()))
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                logger.error("Duplicate batch_id %s, insert skipped", batch.batch_id)
                return False

        logger.debug("Batch inserted: batch_id %s", batch.batch_id)
        return True

    async def get(self, batch_id: int) -> Batch | None:
        """Get a batch by id.

        Args:
            batch_id: Batch id

        Returns:
            The batch, or None if it was never inserted
        """
        async with self.session_factory() as session:
            row = await session.get(BatchDB, batch_id)
            if row is None:
                return None
            return Batch.model_validate(row)

    async def update_proof_fields(self, batch_id: int, proof: ProofUpdate) -> bool:
        """Overwrite the proof-derived fields of an existing batch.

        Args:
            batch_id: Batch id
            proof: Proof fields to store

        Returns:
            True if a row was updated, False if the batch id is unknown
        """
        async with self.session_factory() as session:
            stmt = (
                update(BatchDB)
                .where(BatchDB.batch_id == batch_id)
                .values(**proof.model_dump())
            )
            result = await session.execute(stmt)
            await session.commit()

        if result.rowcount == 0:
            logger.error("Cannot store proof for unknown batch_id %s", batch_id)
            return False

        logger.debug("Batch proof stored: batch_id %s", batch_id)
        return True


__all__ = ["BatchRepository"]
