"""Polling loop that walks the base chain and indexes batch events.

Each step covers one window of `indexing_step` blocks: proposals first, then
proofs, then the checkpoint. Progress lives in `indexed_l1_block` and is
written to the status table after every completed window, so a restart
repeats at most the window that was in flight. Repeating a window is safe:
proposal inserts skip known ids and proof updates overwrite with the same
values.
"""

import signal

import asyncio

import httpx

from src.data.batches.repository import BatchRepository
from src.data.status.store import CheckpointStore
from src.helpers.config import IndexerConfig
from src.helpers.logging import get_logger
from src.helpers.rpc import RPCClient, RPCError
from src.indexer.errors import IndexerFatalError
from src.indexer.events import PACAYA_CONFIG_CALLDATA, decode_proving_window
from src.indexer.proofs import ProofProcessor
from src.indexer.proposals import ProposalProcessor


logger = get_logger(__name__)


def poll_delay(
    head: int, indexed_l1_block: int, indexing_step: int, sleep_duration_sec: int
) -> int:
    """Seconds to wait before the next step.

    While a full window is already available past the progress, poll again
    after one base interval. Otherwise wait long enough for a window's worth
    of blocks to appear.
    """
    if head > indexed_l1_block + indexing_step:
        return sleep_duration_sec
    return indexing_step * sleep_duration_sec


async def fetch_proving_window(
    l1_rpc: RPCClient, http_client: httpx.AsyncClient, inbox_address: str
) -> int:
    """Read the proving window (seconds) from the inbox's pacayaConfig()."""
    return_data = await l1_rpc.eth_call(
        http_client, inbox_address, PACAYA_CONFIG_CALLDATA
    )
    return decode_proving_window(return_data)


class BatchIndexer:
    """Single-writer indexing loop over the base chain."""

    def __init__(
        self,
        config: IndexerConfig,
        l1_rpc: RPCClient,
        l2_rpc: RPCClient,
        http_client: httpx.AsyncClient,
        repository: BatchRepository,
        checkpoint_store: CheckpointStore,
        proving_window: int,
    ) -> None:
        """Initialize the indexer.

        Args:
            config: Indexer settings
            l1_rpc: Base chain RPC client
            l2_rpc: L2 RPC client (must serve historical balances)
            http_client: HTTP client shared by both RPC clients
            repository: Batch repository
            checkpoint_store: Status checkpoint store
            proving_window: Proving window in seconds
        """
        self.config = config
        self.l1_rpc = l1_rpc
        self.http_client = http_client
        self.checkpoint_store = checkpoint_store
        self.indexing_step = config.indexing_step
        self.sleep_duration_sec = config.sleep_duration_sec

        self.proposals = ProposalProcessor(
            l1_rpc, http_client, repository, config.inbox_address
        )
        self.proofs = ProofProcessor(
            l1_rpc,
            l2_rpc,
            http_client,
            repository,
            config.inbox_address,
            proving_window,
        )

        self.indexed_l1_block = 0
        self.should_shutdown = False
        self._stop = asyncio.Event()

    async def load_progress(self) -> int:
        """Restore progress from the checkpoint.

        Indexing never starts before the configured start block.

        Returns:
            Last fully indexed base chain block
        """
        stored = await self.checkpoint_store.read_l1_progress()
        self.indexed_l1_block = max(stored, self.config.l1_start_block - 1)
        logger.info("Resuming after L1 block %s", self.indexed_l1_block)
        return self.indexed_l1_block

    async def _head(self) -> int:
        try:
            return await self.l1_rpc.get_block_number(self.http_client)
        except (httpx.HTTPError, RPCError) as e:
            msg = f"Failed to get current block number: {e}"
            raise IndexerFatalError(msg) from e

    async def step(self) -> int:
        """Run one iteration of the loop.

        Returns:
            Seconds to sleep before the next iteration

        Raises:
            IndexerFatalError: On provider failures or inconsistent chain data
        """
        head = await self._head()
        from_block = self.indexed_l1_block + 1
        to_block = self.indexed_l1_block + self.indexing_step

        if head > to_block:
            logger.info("Indexing from block %s to block %s", from_block, to_block)
            try:
                proposed = await self.proposals.process(from_block, to_block)
                proved = await self.proofs.process(from_block, to_block)
            except (httpx.HTTPError, RPCError) as e:
                msg = f"Failed to index blocks {from_block}-{to_block}: {e}"
                raise IndexerFatalError(msg) from e

            self.indexed_l1_block = to_block

            saved = await self.checkpoint_store.update(
                indexed_l1_block=self.indexed_l1_block,
                proposed_batch_id=proposed.batch_id if proposed else None,
                proposed_block_id=proposed.block_id if proposed else None,
                proved_batch_id=proved.batch_id if proved else None,
                proved_block_id=proved.block_id if proved else None,
            )
            if not saved:
                logger.warning(
                    "Checkpoint not saved, continuing after L1 block %s",
                    self.indexed_l1_block,
                )

        head = await self._head()
        return poll_delay(
            head, self.indexed_l1_block, self.indexing_step, self.sleep_duration_sec
        )

    def shutdown(self) -> None:
        """Stop the loop after the current step, cutting any pending wait short."""
        logger.info("Shutdown signal received, stopping...")
        self.should_shutdown = True
        self._stop.set()

    async def _wait(self, delay: int) -> None:
        """Sleep for ``delay`` seconds or until shutdown is requested."""
        try:
            await asyncio.wait_for(self._stop.wait(), timeout=delay)
        except TimeoutError:
            return

    async def run(self) -> None:
        """Run the indexing loop until shutdown or a fatal error."""
        loop = asyncio.get_running_loop()
        signals = (signal.SIGINT, signal.SIGTERM)
        for sig in signals:
            loop.add_signal_handler(sig, self.shutdown)

        try:
            await self.load_progress()

            while not self.should_shutdown:
                delay = await self.step()
                if not self.should_shutdown:
                    await self._wait(delay)
        finally:
            for sig in signals:
                loop.remove_signal_handler(sig)

        logger.info("Indexer stopped at L1 block %s", self.indexed_l1_block)


__all__ = [
    "BatchIndexer",
    "fetch_proving_window",
    "poll_delay",
]
