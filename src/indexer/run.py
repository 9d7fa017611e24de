"""Batch indexer entry point.

Usage:
    python -m src.indexer.run
"""

import sys

import asyncio

from src.data.batches.repository import BatchRepository
from src.data.status.store import CheckpointStore
from src.helpers.config import IndexerConfig, load_indexer_config
from src.helpers.db import create_engine, create_session_factory
from src.helpers.http import create_http_client
from src.helpers.logging import get_logger
from src.helpers.rpc import RPCClient
from src.indexer.errors import IndexerFatalError
from src.indexer.orchestrator import BatchIndexer, fetch_proving_window


logger = get_logger(__name__)


async def run_indexer(config: IndexerConfig) -> None:
    """Wire the store and RPC clients together and run the loop."""
    logger.info(
        "Config: L1_RPC_URL=%s L2_RPC_URL=%s TAIKO_INBOX_ADDRESS=%s "
        "L1_START_BLOCK=%s INDEXING_STEP=%s SLEEP_DURATION_SEC=%s "
        "MAX_L1_FORK_DEPTH=%s",
        config.l1_rpc_url,
        config.l2_rpc_url,
        config.inbox_address,
        config.l1_start_block,
        config.indexing_step,
        config.sleep_duration_sec,
        config.max_l1_fork_depth,
    )

    engine = create_engine(config.database_url)
    session_factory = create_session_factory(engine)
    checkpoint_store = CheckpointStore(engine, session_factory)
    await checkpoint_store.initialize()

    l1_rpc = RPCClient(config.l1_rpc_url)
    l2_rpc = RPCClient(config.l2_rpc_url)

    try:
        async with create_http_client() as http_client:
            proving_window = config.proving_window
            if proving_window is None:
                proving_window = await fetch_proving_window(
                    l1_rpc, http_client, config.inbox_address
                )
            logger.info("Proving window: %s", proving_window)

            indexer = BatchIndexer(
                config=config,
                l1_rpc=l1_rpc,
                l2_rpc=l2_rpc,
                http_client=http_client,
                repository=BatchRepository(session_factory),
                checkpoint_store=checkpoint_store,
                proving_window=proving_window,
            )
            await indexer.run()
    finally:
        await engine.dispose()


async def main() -> None:
    """Main entry point."""
    try:
        config = load_indexer_config()
        await run_indexer(config)
    except IndexerFatalError:
        logger.exception("Fatal indexing error, restart resumes from the checkpoint")
        sys.exit(1)
    except Exception:
        logger.exception("Fatal error")
        sys.exit(1)


def cli() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    cli()
