"""Index BatchesProved events onto existing batch rows."""

import httpx

from src.data.batches.models import Batch, ProofUpdate
from src.data.batches.repository import BatchRepository
from src.helpers.logging import get_logger
from src.helpers.parsers import parse_wei
from src.helpers.rpc import RPCClient
from src.helpers.rpc_models import LogFilter, TransactionReceipt
from src.indexer.errors import IndexerFatalError, UnrepresentableValueError
from src.indexer.events import BATCHES_PROVED_TOPIC, decode_batches_proved
from src.indexer.fees import (
    attribute_prover,
    is_profitable,
    l2_fee_earned,
    split_proof_fee,
    transaction_fee,
)
from src.indexer.models import BatchesProvedEvent, RangeMaxima, observe


logger = get_logger(__name__)


class ProofProcessor:
    """Completes batch rows with proof cost, L2 earnings and attribution.

    Must run after the ProposalProcessor over the same range so every proof
    can find the batches proposed in this or an earlier window.
    """

    def __init__(
        self,
        l1_rpc: RPCClient,
        l2_rpc: RPCClient,
        http_client: httpx.AsyncClient,
        repository: BatchRepository,
        inbox_address: str,
        proving_window: int,
    ) -> None:
        self.l1_rpc = l1_rpc
        self.l2_rpc = l2_rpc
        self.http_client = http_client
        self.repository = repository
        self.inbox_address = inbox_address
        self.proving_window = proving_window

    async def process(self, from_block: int, to_block: int) -> RangeMaxima | None:
        """Index proofs in the inclusive range [from_block, to_block].

        Args:
            from_block: First base chain block
            to_block: Last base chain block

        Returns:
            Highest proved batch id and last block id among known batches,
            or None if nothing was proved

        Raises:
            IndexerFatalError: If a log cannot be decoded, a receipt or block
                is missing, or an amount cannot be stored
        """
        logs = await self.l1_rpc.get_logs(
            self.http_client,
            LogFilter(
                address=self.inbox_address,
                topics=[BATCHES_PROVED_TOPIC],
                from_block=from_block,
                to_block=to_block,
            ),
        )
        logger.debug("Found %s BatchesProved events", len(logs))

        maxima: RangeMaxima | None = None
        for log in logs:
            event = decode_batches_proved(log)
            for batch in await self._process_event(event):
                maxima = observe(maxima, batch.batch_id, batch.last_block_id)

        return maxima

    async def _process_event(self, event: BatchesProvedEvent) -> list[Batch]:
        """Apply one proof transaction to the batches it proves.

        Returns:
            The known batches that were updated
        """
        if not event.batch_ids:
            logger.warning("BatchesProved in tx %s lists no batches", event.tx_hash)
            return []

        receipt = await self.l1_rpc.get_transaction_receipt(
            self.http_client, event.tx_hash
        )
        if receipt is None:
            msg = f"proveBatches transaction receipt not found for {event.tx_hash}"
            raise IndexerFatalError(msg)

        prove_fee = split_proof_fee(transaction_fee(receipt), len(event.batch_ids))
        proof_timestamp = await self._proof_timestamp(receipt)
        logger.debug("Proved %s batches in tx %s", len(event.batch_ids), event.tx_hash)

        updated: list[Batch] = []
        for batch_id in event.batch_ids:
            batch = await self.repository.get(batch_id)
            if batch is None:
                logger.error("Batch with id %s not found", batch_id)
                continue

            prover = attribute_prover(
                proof_timestamp=proof_timestamp,
                proposed_at=batch.proposed_at,
                proving_window=self.proving_window,
                proof_sender=receipt.sender,
                proposer=batch.proposer,
            )
            earned = await self._l2_fee_earned(batch)

            await self.repository.update_proof_fields(
                batch_id,
                ProofUpdate(
                    l2_fee_earned=str(earned),
                    prover=prover,
                    prove_tx=event.tx_hash,
                    prove_fee=str(prove_fee),
                    is_profitable=is_profitable(
                        earned, prove_fee, parse_wei(batch.propose_fee)
                    ),
                    is_proved_by_proposer=prover == batch.proposer,
                ),
            )
            updated.append(batch)

        return updated

    async def _proof_timestamp(self, receipt: TransactionReceipt) -> int:
        """Timestamp of the base chain block that included the proof."""
        block = await self.l1_rpc.get_block_by_number(
            self.http_client, receipt.block_number
        )
        if block is None:
            msg = f"Prove block {receipt.block_number} not found"
            raise IndexerFatalError(msg)
        return block.timestamp

    async def _l2_fee_earned(self, batch: Batch) -> int:
        """Coinbase balance gained across the batch's own L2 block span."""
        start_block = batch.last_block_id - batch.block_count
        if start_block < 0:
            msg = (
                f"Batch {batch.batch_id} spans {batch.block_count} blocks "
                f"before block {batch.last_block_id}"
            )
            raise UnrepresentableValueError(msg)

        balance_before = await self.l2_rpc.get_balance(
            self.http_client, batch.coinbase, start_block
        )
        balance_after = await self.l2_rpc.get_balance(
            self.http_client, batch.coinbase, batch.last_block_id
        )
        return l2_fee_earned(balance_before, balance_after)


__all__ = ["ProofProcessor"]
