"""Shared builders for test data."""

from eth_abi import encode

from src.data.batches.models import Batch
from src.helpers.rpc_models import LogEntry, TransactionReceipt
from src.indexer.events import (
    BATCH_PROPOSED_TOPIC,
    BATCH_PROPOSED_TYPES,
    BATCHES_PROVED_TOPIC,
    BATCHES_PROVED_TYPES,
)


INBOX = "0x06a9Ab27c7e2255df1815E6CC0168d7755Feb19a"
VERIFIER = "0x4444444444444444444444444444444444444444"
PROPOSER = "0x1111111111111111111111111111111111111111"
COINBASE = "0x2222222222222222222222222222222222222222"
OTHER = "0x3333333333333333333333333333333333333333"

ONE_ETH = 10**18


def make_batch(batch_id: int, **overrides: object) -> Batch:
    """Build a freshly proposed, not yet proved batch."""
    fields: dict[str, object] = {
        "batch_id": batch_id,
        "sender": PROPOSER,
        "proposer": PROPOSER,
        "coinbase": PROPOSER,
        "propose_tx": f"0x{batch_id:064x}",
        "proposed_at": 1_700_000_000 + batch_id * 12,
        "last_block_id": batch_id * 10 + 10,
        "block_count": 10,
        "propose_fee": "1000000000000000",
        "is_sent_by_proposer": True,
    }
    fields.update(overrides)
    return Batch.model_validate(fields)


def batch_proposed_log(
    batch_id: int,
    proposer: str = PROPOSER,
    coinbase: str = PROPOSER,
    last_block_id: int = 1000,
    block_count: int = 100,
    proposed_at: int = 1_700_000_000,
    tx_hash: str = "0x" + "ab" * 32,
    block_number: int = 101,
    log_index: int = 0,
) -> LogEntry:
    """ABI-encode a BatchProposed log as eth_getLogs would return it."""
    info = (
        b"\x00" * 32,
        [(0, 0, []) for _ in range(block_count)],
        [],
        b"\x00" * 32,
        coinbase,
        block_number - 1,
        block_number - 1,
        0,
        0,
        240_000_000,
        last_block_id,
        proposed_at,
        block_number - 2,
        b"\x11" * 32,
        (8, 75, 5_000_000, 1, 1_000_000_000),
    )
    meta = (b"\x22" * 32, proposer, batch_id, proposed_at)
    data = encode(BATCH_PROPOSED_TYPES, [info, meta, b""])
    return LogEntry(
        address=INBOX,
        topics=[BATCH_PROPOSED_TOPIC],
        data="0x" + data.hex(),
        block_number=block_number,
        transaction_hash=tx_hash,
        log_index=log_index,
    )


def batches_proved_log(
    batch_ids: list[int],
    tx_hash: str = "0x" + "cd" * 32,
    block_number: int = 105,
    log_index: int = 1,
) -> LogEntry:
    """ABI-encode a BatchesProved log as eth_getLogs would return it."""
    transitions = [(b"\x00" * 32, b"\x01" * 32, b"\x02" * 32) for _ in batch_ids]
    data = encode(BATCHES_PROVED_TYPES, [VERIFIER, batch_ids, transitions])
    return LogEntry(
        address=INBOX,
        topics=[BATCHES_PROVED_TOPIC],
        data="0x" + data.hex(),
        block_number=block_number,
        transaction_hash=tx_hash,
        log_index=log_index,
    )


def receipt(
    tx_hash: str,
    sender: str,
    gas_used: int = 100_000,
    effective_gas_price: int = 10**9,
    block_number: int = 101,
) -> TransactionReceipt:
    return TransactionReceipt(
        transactionHash=tx_hash,
        blockNumber=block_number,
        sender=sender,
        gasUsed=gas_used,
        effectiveGasPrice=effective_gas_price,
    )
