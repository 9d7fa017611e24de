"""Database models for batches."""

from sqlalchemy import BigInteger, Boolean, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.helpers.db import Base


# INTEGER on SQLite (64-bit there), BIGINT elsewhere
StoredInt = BigInteger().with_variant(Integer(), "sqlite")


class BatchDB(Base):
    """Rollup batch database model."""

    __tablename__ = "batch"
    __table_args__ = (
        Index("idx_batch_proposed_at", "proposed_at"),
        Index("idx_batch_proposer", "proposer"),
        Index("idx_batch_profitable", "is_profitable"),
        Index("idx_batch_sender", "is_sent_by_proposer"),
        Index("idx_batch_proving_window", "is_proved_by_proposer"),
    )

    batch_id: Mapped[int] = mapped_column(
        StoredInt, primary_key=True, autoincrement=False
    )
    sender: Mapped[str] = mapped_column(Text, nullable=False)
    proposer: Mapped[str] = mapped_column(Text, nullable=False)
    coinbase: Mapped[str] = mapped_column(Text, nullable=False)
    propose_tx: Mapped[str] = mapped_column(Text, nullable=False)
    proposed_at: Mapped[int] = mapped_column(StoredInt, nullable=False)
    last_block_id: Mapped[int] = mapped_column(StoredInt, nullable=False)
    block_count: Mapped[int] = mapped_column(StoredInt, nullable=False)
    propose_fee: Mapped[str] = mapped_column(Text, nullable=False)
    l2_fee_earned: Mapped[str | None] = mapped_column(Text, nullable=True)
    prover: Mapped[str | None] = mapped_column(Text, nullable=True)
    prove_tx: Mapped[str | None] = mapped_column(Text, nullable=True)
    prove_fee: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_sent_by_proposer: Mapped[bool] = mapped_column(Boolean, nullable=False)
    is_profitable: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    is_proved_by_proposer: Mapped[bool | None] = mapped_column(
        Boolean, nullable=True
    )
