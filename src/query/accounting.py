"""Debit/credit aggregation of proposal fees between counterparties.

Debit: batches an address proposed for someone else's coinbase (fees it
paid on their behalf), keyed by that coinbase. Credit: batches others
proposed for the address's coinbase, keyed by proposer.
"""

from enum import StrEnum

from pydantic import BaseModel, Field

from src.data.batches.models import Batch
from src.helpers.parsers import parse_wei, wei_to_eth_string
from src.query.errors import QueryValidationError


class AccountingOperation(StrEnum):
    """Direction of an accounting list."""

    DEBIT = "debit"
    CREDIT = "credit"


class AddressInfo(BaseModel):
    """Fees summed for one counterparty."""

    address: str
    total_fee_wei: int = 0
    batches: list[Batch] = Field(default_factory=list)

    @property
    def total_fee(self) -> str:
        return wei_to_eth_string(self.total_fee_wei)


class AccountingList(BaseModel):
    """Fees summed per counterparty in one direction."""

    operation: AccountingOperation
    total_fee_wei: int = 0
    addresses: dict[str, AddressInfo] = Field(default_factory=dict)

    @property
    def total_fee(self) -> str:
        return wei_to_eth_string(self.total_fee_wei)

    def add_batch(self, batch: Batch) -> None:
        """Accumulate a batch's proposal fee under its counterparty.

        Raises:
            QueryValidationError: If the stored fee is not a wei amount
        """
        try:
            fee = parse_wei(batch.propose_fee)
        except ValueError as e:
            msg = f"Cannot parse propose fee of batch {batch.batch_id}: {e}"
            raise QueryValidationError(msg) from e

        key = (
            batch.coinbase
            if self.operation is AccountingOperation.DEBIT
            else batch.proposer
        )
        info = self.addresses.setdefault(key, AddressInfo(address=key))
        info.total_fee_wei += fee
        info.batches.append(batch)
        self.total_fee_wei += fee


class AccountingResult(BaseModel):
    """Both directions of the accounting for one address and batch range."""

    debit: AccountingList
    credit: AccountingList


def build_accounting_list(
    operation: AccountingOperation, batches: list[Batch]
) -> AccountingList:
    """Aggregate batches into an accounting list."""
    accounting = AccountingList(operation=operation)
    for batch in batches:
        accounting.add_batch(batch)
    return accounting


__all__ = [
    "AccountingList",
    "AccountingOperation",
    "AccountingResult",
    "AddressInfo",
    "build_accounting_list",
]
