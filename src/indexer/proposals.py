"""Index BatchProposed events into new batch rows."""

import httpx

from src.data.batches.models import Batch
from src.data.batches.repository import BatchRepository
from src.helpers.logging import get_logger
from src.helpers.rpc import RPCClient
from src.helpers.rpc_models import LogFilter
from src.indexer.errors import IndexerFatalError
from src.indexer.events import BATCH_PROPOSED_TOPIC, decode_batch_proposed
from src.indexer.fees import transaction_fee
from src.indexer.models import RangeMaxima, observe


logger = get_logger(__name__)


class ProposalProcessor:
    """Creates a batch row for every proposal in a base chain block range."""

    def __init__(
        self,
        l1_rpc: RPCClient,
        http_client: httpx.AsyncClient,
        repository: BatchRepository,
        inbox_address: str,
    ) -> None:
        self.l1_rpc = l1_rpc
        self.http_client = http_client
        self.repository = repository
        self.inbox_address = inbox_address

    async def process(self, from_block: int, to_block: int) -> RangeMaxima | None:
        """Index proposals in the inclusive range [from_block, to_block].

        Args:
            from_block: First base chain block
            to_block: Last base chain block

        Returns:
            Highest batch id and last block id seen, or None if no proposals

        Raises:
            IndexerFatalError: If a log cannot be decoded or a receipt is missing
        """
        logs = await self.l1_rpc.get_logs(
            self.http_client,
            LogFilter(
                address=self.inbox_address,
                topics=[BATCH_PROPOSED_TOPIC],
                from_block=from_block,
                to_block=to_block,
            ),
        )
        logger.debug("Found %s BatchProposed events", len(logs))

        maxima: RangeMaxima | None = None
        for log in logs:
            event = decode_batch_proposed(log)

            receipt = await self.l1_rpc.get_transaction_receipt(
                self.http_client, event.tx_hash
            )
            if receipt is None:
                msg = f"Transaction receipt not found for {event.tx_hash}"
                raise IndexerFatalError(msg)

            batch = Batch(
                batch_id=event.batch_id,
                sender=receipt.sender,
                proposer=event.proposer,
                coinbase=event.coinbase,
                propose_tx=event.tx_hash,
                proposed_at=event.proposed_at,
                last_block_id=event.last_block_id,
                block_count=event.block_count,
                propose_fee=str(transaction_fee(receipt)),
                is_sent_by_proposer=receipt.sender == event.coinbase,
            )
            await self.repository.insert(batch)

            maxima = observe(maxima, event.batch_id, event.last_block_id)

        return maxima


__all__ = ["ProposalProcessor"]
