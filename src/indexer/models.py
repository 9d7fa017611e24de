"""Pydantic models for decoded inbox events and per-range results."""

from pydantic import BaseModel, Field


class BatchProposedEvent(BaseModel):
    """Decoded BatchProposed log."""

    batch_id: int
    proposer: str
    coinbase: str
    last_block_id: int
    block_count: int
    proposed_at: int
    tx_hash: str
    block_number: int
    log_index: int


class BatchesProvedEvent(BaseModel):
    """Decoded BatchesProved log - every batch proved by one transaction."""

    verifier: str
    batch_ids: list[int] = Field(default_factory=list)
    tx_hash: str
    block_number: int
    log_index: int


class RangeMaxima(BaseModel):
    """Highest batch id and L2 block id observed while scanning a range."""

    batch_id: int
    block_id: int

    def merge(self, batch_id: int, block_id: int) -> "RangeMaxima":
        """Return maxima including another observation."""
        return RangeMaxima(
            batch_id=max(self.batch_id, batch_id),
            block_id=max(self.block_id, block_id),
        )


def observe(
    maxima: RangeMaxima | None, batch_id: int, block_id: int
) -> RangeMaxima:
    """Fold an observation into possibly-empty maxima."""
    if maxima is None:
        return RangeMaxima(batch_id=batch_id, block_id=block_id)
    return maxima.merge(batch_id, block_id)


__all__ = [
    "BatchProposedEvent",
    "BatchesProvedEvent",
    "RangeMaxima",
    "observe",
]
