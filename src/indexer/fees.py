"""Fee, profitability and prover attribution calculations.

Amounts are wei as Python ints; nothing here goes through floats.
"""

from src.helpers.rpc_models import TransactionReceipt
from src.indexer.errors import UnrepresentableValueError


def transaction_fee(receipt: TransactionReceipt) -> int:
    """Total base chain cost of a transaction (execution plus blob gas).

    Args:
        receipt: Transaction receipt

    Returns:
        gas_used * effective_gas_price + blob_gas_used * blob_gas_price

    Example:
        >>> receipt = TransactionReceipt(
        ...     transactionHash="0x01", blockNumber=1, sender="0x" + "00" * 20,
        ...     gasUsed=21000, effectiveGasPrice=10, blobGasUsed=131072,
        ...     blobGasPrice=2,
        ... )
        >>> transaction_fee(receipt)
        472144
    """
    execution_fee = receipt.gas_used * receipt.effective_gas_price
    blob_fee = (receipt.blob_gas_used or 0) * (receipt.blob_gas_price or 0)
    return execution_fee + blob_fee


def split_proof_fee(total_fee: int, batch_count: int) -> int:
    """Share of a proof transaction's fee charged to each proved batch.

    Integer division; the remainder is not attributed to any batch.

    Raises:
        ValueError: If batch_count is not positive
    """
    if batch_count <= 0:
        msg = f"Cannot split a proof fee across {batch_count} batches"
        raise ValueError(msg)
    return total_fee // batch_count


def l2_fee_earned(balance_before: int, balance_after: int) -> int:
    """Coinbase balance increase over a batch's block span.

    Raises:
        UnrepresentableValueError: If the balance decreased
    """
    earned = balance_after - balance_before
    if earned < 0:
        msg = (
            f"Coinbase balance decreased over the batch span "
            f"({balance_before} -> {balance_after})"
        )
        raise UnrepresentableValueError(msg)
    return earned


def is_profitable(l2_fee: int, prove_fee: int, propose_fee: int) -> bool:
    """A batch is profitable when L2 fees exceed both base chain costs."""
    return l2_fee > prove_fee + propose_fee


def attribute_prover(
    proof_timestamp: int,
    proposed_at: int,
    proving_window: int,
    proof_sender: str,
    proposer: str,
) -> str:
    """Decide who proved a batch.

    Inside the proving window (boundary included) the proposer is assumed to
    have proved its own batch; after it the proof transaction's sender is.

    Args:
        proof_timestamp: Timestamp of the base chain block holding the proof
        proposed_at: Proposal timestamp of the batch
        proving_window: Proving window in seconds
        proof_sender: Sender of the proof transaction
        proposer: Declared proposer of the batch

    Returns:
        Address credited with the proof
    """
    if proof_timestamp > proposed_at + proving_window:
        return proof_sender
    return proposer


__all__ = [
    "attribute_prover",
    "is_profitable",
    "l2_fee_earned",
    "split_proof_fee",
    "transaction_fee",
]
