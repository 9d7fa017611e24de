"""Read-only queries over the batch store for reporting and accounting."""

from sqlalchemy import ColumnElement, Select, and_, func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from src.data.batches.db import BatchDB
from src.data.batches.models import Batch
from src.data.status.db import StatusDB
from src.data.status.models import Checkpoint
from src.helpers.constants import STATUS_ROW_ID
from src.helpers.db import create_engine, create_session_factory
from src.helpers.parsers import normalize_address
from src.query.accounting import (
    AccountingOperation,
    AccountingResult,
    build_accounting_list,
)
from src.query.errors import QueryValidationError


def _checksum(address: str) -> str:
    """Match caller addresses against the checksummed values in the store."""
    try:
        return normalize_address(address)
    except ValueError as e:
        msg = f"Invalid address: {address}"
        raise QueryValidationError(msg) from e


class BatchQueryService:
    """Query surface over the indexer's store.

    Opens its own engine and never writes. With SQLite in WAL mode reads do
    not wait on the indexer's open transactions.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ) -> None:
        self.engine = engine
        self.session_factory = session_factory or create_session_factory(engine)

    @classmethod
    def from_url(cls, database_url: str | None = None) -> "BatchQueryService":
        """Create a service with a dedicated engine."""
        return cls(create_engine(database_url))

    async def close(self) -> None:
        await self.engine.dispose()

    async def status(self) -> Checkpoint:
        """Current indexing progress."""
        async with self.session_factory() as session:
            row = await session.get(StatusDB, STATUS_ROW_ID)
            if row is None:
                return Checkpoint()
            return Checkpoint.model_validate(row)

    async def batch_by_id(self, batch_id: int) -> Batch | None:
        async with self.session_factory() as session:
            row = await session.get(BatchDB, batch_id)
            return Batch.model_validate(row) if row is not None else None

    async def latest_batch_before_timestamp(self, timestamp: int) -> int | None:
        """Highest batch id proposed at or before ``timestamp`` (inclusive)."""
        async with self.session_factory() as session:
            stmt = select(func.max(BatchDB.batch_id)).where(
                BatchDB.proposed_at <= timestamp
            )
            return (await session.execute(stmt)).scalar_one_or_none()

    async def sent_by_others(
        self,
        proposer: str | None = None,
        sender: str | None = None,
        start: int | None = None,
        end: int | None = None,
    ) -> list[Batch]:
        """Batches landed on L1 by someone other than the coinbase owner."""
        return await self._filter_batches(
            BatchDB.is_sent_by_proposer.is_(False), proposer, sender, start, end
        )

    async def proved_by_others(
        self,
        proposer: str | None = None,
        start: int | None = None,
        end: int | None = None,
    ) -> list[Batch]:
        """Batches whose proof was attributed to someone other than the proposer."""
        return await self._filter_batches(
            BatchDB.is_proved_by_proposer.is_(False), proposer, None, start, end
        )

    async def unprofitable(
        self,
        proposer: str | None = None,
        start: int | None = None,
        end: int | None = None,
    ) -> list[Batch]:
        """Proved batches whose L2 fees did not cover the L1 costs."""
        return await self._filter_batches(
            BatchDB.is_profitable.is_(False), proposer, None, start, end
        )

    async def _filter_batches(
        self,
        base_condition: ColumnElement[bool],
        proposer: str | None,
        sender: str | None,
        start: int | None,
        end: int | None,
    ) -> list[Batch]:
        """Select batches matching a flag plus optional filters.

        ``start`` and ``end`` bound ``proposed_at`` inclusively.
        """
        if start is not None and end is not None and start > end:
            msg = "start must not be greater than end"
            raise QueryValidationError(msg)

        conditions = [base_condition]
        if proposer is not None:
            conditions.append(BatchDB.proposer == _checksum(proposer))
        if sender is not None:
            conditions.append(BatchDB.sender == _checksum(sender))
        if start is not None:
            conditions.append(BatchDB.proposed_at >= start)
        if end is not None:
            conditions.append(BatchDB.proposed_at <= end)

        stmt = select(BatchDB).where(and_(*conditions)).order_by(BatchDB.batch_id)
        return await self._fetch_batches(stmt)

    async def _fetch_batches(self, stmt: Select[tuple[BatchDB]]) -> list[Batch]:
        async with self.session_factory() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [Batch.model_validate(row) for row in rows]

    async def accounting(
        self,
        address: str,
        from_batch: int,
        to_batch: int,
        *,
        check_integrity: bool = False,
    ) -> AccountingResult:
        """Proposal fees owed between ``address`` and its counterparties.

        Args:
            address: Address to account for
            from_batch: First batch id (inclusive)
            to_batch: Last batch id (inclusive)
            check_integrity: Require every batch id in the range to be indexed

        Returns:
            Debit and credit lists

        Raises:
            QueryValidationError: If the address is malformed or the range is
                inverted or incomplete
        """
        if from_batch > to_batch:
            msg = "from must not be greater than to"
            raise QueryValidationError(msg)

        address = _checksum(address)

        if check_integrity:
            await self._check_range_integrity(from_batch, to_batch)

        in_range = BatchDB.batch_id.between(from_batch, to_batch)
        debit = await self._fetch_batches(
            select(BatchDB)
            .where(in_range, BatchDB.proposer == address, BatchDB.coinbase != address)
            .order_by(BatchDB.batch_id)
        )
        credit = await self._fetch_batches(
            select(BatchDB)
            .where(in_range, BatchDB.proposer != address, BatchDB.coinbase == address)
            .order_by(BatchDB.batch_id)
        )

        return AccountingResult(
            debit=build_accounting_list(AccountingOperation.DEBIT, debit),
            credit=build_accounting_list(AccountingOperation.CREDIT, credit),
        )

    async def _check_range_integrity(self, from_batch: int, to_batch: int) -> None:
        async with self.session_factory() as session:
            stmt = select(func.count(BatchDB.batch_id)).where(
                BatchDB.batch_id.between(from_batch, to_batch)
            )
            batch_count = (await session.execute(stmt)).scalar_one()

        if batch_count == 0:
            msg = "Integrity error: No batches found in range"
            raise QueryValidationError(msg)
        if batch_count != to_batch - from_batch + 1:
            msg = "Integrity error: Not all batches found in range"
            raise QueryValidationError(msg)


__all__ = ["BatchQueryService"]
