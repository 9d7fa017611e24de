"""ABI definitions and decoding for the inbox contract events.

All parameters of both events are non-indexed, so everything but the event
signature lives in the log's data field.
"""

from typing import Any

from eth_abi import decode
from eth_abi.exceptions import DecodingError
from eth_utils import keccak

from src.helpers.constants import MAX_STORED_INT
from src.helpers.parsers import normalize_address
from src.helpers.rpc_models import LogEntry
from src.indexer.errors import EventDecodeError, UnrepresentableValueError
from src.indexer.models import BatchesProvedEvent, BatchProposedEvent


BASE_FEE_CONFIG = "(uint8,uint8,uint32,uint64,uint32)"
BLOCK_PARAMS = "(uint16,uint8,bytes32[])"
BATCH_INFO = (
    "(bytes32,"  # txsHash
    f"{BLOCK_PARAMS}[],"  # blocks
    "bytes32[],"  # blobHashes
    "bytes32,"  # extraData
    "address,"  # coinbase
    "uint64,"  # proposedIn
    "uint64,"  # blobCreatedIn
    "uint32,"  # blobByteOffset
    "uint32,"  # blobByteSize
    "uint32,"  # gasLimit
    "uint64,"  # lastBlockId
    "uint64,"  # lastBlockTimestamp
    "uint64,"  # anchorBlockId
    "bytes32,"  # anchorBlockHash
    f"{BASE_FEE_CONFIG})"
)
BATCH_METADATA = "(bytes32,address,uint64,uint64)"  # infoHash, proposer, batchId, proposedAt
TRANSITION = "(bytes32,bytes32,bytes32)"  # parentHash, blockHash, stateRoot

BATCH_PROPOSED_TYPES = [BATCH_INFO, BATCH_METADATA, "bytes"]
BATCHES_PROVED_TYPES = ["address", "uint64[]", f"{TRANSITION}[]"]

# Field positions inside the decoded tuples
INFO_BLOCKS = 1
INFO_COINBASE = 4
INFO_LAST_BLOCK_ID = 10
META_PROPOSER = 1
META_BATCH_ID = 2
META_PROPOSED_AT = 3

# pacayaConfig() returns a static struct; provingWindow follows nine scalar
# fields and the five-field BaseFeeConfig
PROVING_WINDOW_WORD = 14


def event_topic(name: str, types: list[str]) -> str:
    """Compute topic0 for an event signature.

    Example:
        >>> event_topic("Transfer", ["address", "address", "uint256"])
        '0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef'
    """
    return "0x" + keccak(text=f"{name}({','.join(types)})").hex()


def function_selector(signature: str) -> str:
    """Compute the 4-byte selector for a function signature as hex calldata."""
    return "0x" + keccak(text=signature)[:4].hex()


BATCH_PROPOSED_TOPIC = event_topic("BatchProposed", BATCH_PROPOSED_TYPES)
BATCHES_PROVED_TOPIC = event_topic("BatchesProved", BATCHES_PROVED_TYPES)
PACAYA_CONFIG_CALLDATA = function_selector("pacayaConfig()")


def to_stored_int(name: str, value: int) -> int:
    """Check that an unsigned chain value fits a signed 64-bit column.

    Raises:
        UnrepresentableValueError: If the value is negative or too large
    """
    if value < 0 or value > MAX_STORED_INT:
        msg = f"{name}={value} does not fit the stored integer range"
        raise UnrepresentableValueError(msg)
    return value


def _decode_log(log: LogEntry, topic: str, types: list[str], name: str) -> Any:
    """Check the signature of a log and ABI-decode its data."""
    if not log.topics or log.topics[0].lower() != topic:
        msg = f"Log {log.transaction_hash}:{log.log_index} is not a {name} event"
        raise EventDecodeError(msg)
    if log.transaction_hash is None:
        msg = f"{name} log at block {log.block_number} has no transaction hash"
        raise EventDecodeError(msg)

    try:
        data = bytes.fromhex(log.data.removeprefix("0x"))
        return decode(types, data)
    except (DecodingError, ValueError) as e:
        msg = f"Cannot decode {name} log in tx {log.transaction_hash}: {e}"
        raise EventDecodeError(msg) from e


def decode_batch_proposed(log: LogEntry) -> BatchProposedEvent:
    """Decode a BatchProposed log.

    Args:
        log: Raw log from eth_getLogs

    Returns:
        Decoded event with the fields needed to create a batch row

    Raises:
        EventDecodeError: If the log is not a well-formed BatchProposed event
        UnrepresentableValueError: If an id does not fit the store
    """
    info, meta, _tx_list = _decode_log(
        log, BATCH_PROPOSED_TOPIC, BATCH_PROPOSED_TYPES, "BatchProposed"
    )

    return BatchProposedEvent(
        batch_id=to_stored_int("batch_id", meta[META_BATCH_ID]),
        proposer=normalize_address(meta[META_PROPOSER]),
        coinbase=normalize_address(info[INFO_COINBASE]),
        last_block_id=to_stored_int("last_block_id", info[INFO_LAST_BLOCK_ID]),
        block_count=len(info[INFO_BLOCKS]),
        proposed_at=to_stored_int("proposed_at", meta[META_PROPOSED_AT]),
        tx_hash=log.transaction_hash,
        block_number=log.block_number,
        log_index=log.log_index,
    )


def decode_batches_proved(log: LogEntry) -> BatchesProvedEvent:
    """Decode a BatchesProved log.

    Args:
        log: Raw log from eth_getLogs

    Returns:
        Decoded event listing every batch id proved by the transaction

    Raises:
        EventDecodeError: If the log is not a well-formed BatchesProved event
        UnrepresentableValueError: If an id does not fit the store
    """
    verifier, batch_ids, _transitions = _decode_log(
        log, BATCHES_PROVED_TOPIC, BATCHES_PROVED_TYPES, "BatchesProved"
    )

    return BatchesProvedEvent(
        verifier=normalize_address(verifier),
        batch_ids=[to_stored_int("batch_id", batch_id) for batch_id in batch_ids],
        tx_hash=log.transaction_hash,
        block_number=log.block_number,
        log_index=log.log_index,
    )


def decode_proving_window(return_data: str) -> int:
    """Extract provingWindow from the pacayaConfig() return data.

    Raises:
        EventDecodeError: If the return data is too short
    """
    raw = bytes.fromhex(return_data.removeprefix("0x"))
    words = PROVING_WINDOW_WORD + 1
    if len(raw) < words * 32:
        msg = f"pacayaConfig() returned {len(raw)} bytes, expected at least {words * 32}"
        raise EventDecodeError(msg)
    return decode(["uint256"] * words, raw[: words * 32])[PROVING_WINDOW_WORD]


__all__ = [
    "BATCHES_PROVED_TOPIC",
    "BATCHES_PROVED_TYPES",
    "BATCH_PROPOSED_TOPIC",
    "BATCH_PROPOSED_TYPES",
    "PACAYA_CONFIG_CALLDATA",
    "decode_batch_proposed",
    "decode_batches_proved",
    "decode_proving_window",
    "event_topic",
    "to_stored_int",
]
