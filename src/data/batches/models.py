"""Pydantic models for rollup batches."""

from pydantic import BaseModel, ConfigDict, Field


class Batch(BaseModel):
    """One proposed batch and, once proved, its proof economics."""

    batch_id: int = Field(..., ge=0, description="Batch id assigned by the inbox")
    sender: str = Field(..., description="Base chain sender of the proposal tx")
    proposer: str = Field(..., description="Declared batch proposer")
    coinbase: str = Field(..., description="L2 fee recipient")
    propose_tx: str = Field(..., description="Proposal transaction hash")
    proposed_at: int = Field(..., ge=0, description="Proposal timestamp (unix)")
    last_block_id: int = Field(..., ge=0, description="Last L2 block in the batch")
    block_count: int = Field(..., ge=0, description="Number of L2 blocks")
    propose_fee: str = Field(..., description="Proposal fee in wei")
    l2_fee_earned: str | None = Field(default=None, description="L2 fees in wei")
    prover: str | None = Field(default=None, description="Attributed prover")
    prove_tx: str | None = Field(default=None, description="Proof transaction hash")
    prove_fee: str | None = Field(default=None, description="Proof fee share in wei")
    is_sent_by_proposer: bool = Field(
        ..., description="Proposal tx sender equals the coinbase"
    )
    is_profitable: bool | None = None
    is_proved_by_proposer: bool | None = None

    model_config = ConfigDict(from_attributes=True)


class ProofUpdate(BaseModel):
    """Proof-derived fields written onto an existing batch."""

    l2_fee_earned: str
    prover: str
    prove_tx: str
    prove_fee: str
    is_profitable: bool
    is_proved_by_proposer: bool


__all__ = [
    "Batch",
    "ProofUpdate",
]
