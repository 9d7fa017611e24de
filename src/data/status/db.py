"""Database models for indexing status."""

from sqlalchemy import CheckConstraint, Integer
from sqlalchemy.orm import Mapped, mapped_column

from src.data.batches.db import StoredInt
from src.helpers.db import Base


class StatusDB(Base):
    """Indexing checkpoint - a single row with id 0."""

    __tablename__ = "status"
    __table_args__ = (CheckConstraint("id = 0", name="status_singleton"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    indexed_l1_block: Mapped[int] = mapped_column(StoredInt, nullable=False)
    proposed_batch_id: Mapped[int] = mapped_column(StoredInt, nullable=False)
    proposed_block_id: Mapped[int] = mapped_column(StoredInt, nullable=False)
    proved_batch_id: Mapped[int] = mapped_column(StoredInt, nullable=False)
    proved_block_id: Mapped[int] = mapped_column(StoredInt, nullable=False)
