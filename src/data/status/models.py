"""Pydantic models for indexing status."""

from pydantic import BaseModel, ConfigDict


class Checkpoint(BaseModel):
    """Durable indexing progress."""

    indexed_l1_block: int = 0
    proposed_batch_id: int = 0
    proposed_block_id: int = 0
    proved_batch_id: int = 0
    proved_block_id: int = 0

    model_config = ConfigDict(from_attributes=True)


__all__ = ["Checkpoint"]
