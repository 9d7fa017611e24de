"""Pydantic models for JSON-RPC requests and responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.helpers.parsers import normalize_address, parse_hex_int


def _hex_quantity(value: Any) -> Any:
    """Decode a hex-encoded JSON-RPC quantity, leaving other values alone."""
    if isinstance(value, str):
        return parse_hex_int(value)
    return value


class JsonRpcRequest(BaseModel):
    """JSON-RPC 2.0 request model."""

    jsonrpc: str = Field(default="2.0", description="JSON-RPC version")
    method: str = Field(..., description="Method name to call")
    params: list[Any] = Field(
        default_factory=list, description="Method parameters"
    )
    id: int | str = Field(..., description="Request ID")


class LogFilter(BaseModel):
    """Filter object for eth_getLogs."""

    address: str
    topics: list[str | None]
    from_block: int = Field(..., alias="fromBlock")
    to_block: int = Field(..., alias="toBlock")

    model_config = ConfigDict(populate_by_name=True)

    def to_params(self) -> dict[str, Any]:
        """Serialize to the hex-encoded JSON-RPC filter object."""
        return {
            "address": self.address,
            "topics": self.topics,
            "fromBlock": hex(self.from_block),
            "toBlock": hex(self.to_block),
        }


class LogEntry(BaseModel):
    """Event log returned by eth_getLogs."""

    address: str
    topics: list[str]
    data: str
    block_number: int = Field(..., alias="blockNumber")
    transaction_hash: str | None = Field(default=None, alias="transactionHash")
    log_index: int = Field(..., alias="logIndex")
    removed: bool = False

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("block_number", "log_index", mode="before")
    @classmethod
    def _decode_quantities(cls, value: Any) -> Any:
        return _hex_quantity(value)


class TransactionReceipt(BaseModel):
    """Transaction receipt returned by eth_getTransactionReceipt."""

    transaction_hash: str = Field(..., alias="transactionHash")
    block_number: int = Field(..., alias="blockNumber")
    sender: str = Field(..., alias="from")
    gas_used: int = Field(..., alias="gasUsed")
    effective_gas_price: int = Field(..., alias="effectiveGasPrice")
    # Only present for blob-carrying (type 3) transactions
    blob_gas_used: int | None = Field(default=None, alias="blobGasUsed")
    blob_gas_price: int | None = Field(default=None, alias="blobGasPrice")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator(
        "block_number",
        "gas_used",
        "effective_gas_price",
        "blob_gas_used",
        "blob_gas_price",
        mode="before",
    )
    @classmethod
    def _decode_quantities(cls, value: Any) -> Any:
        return _hex_quantity(value)

    @field_validator("sender")
    @classmethod
    def _checksum_sender(cls, value: str) -> str:
        return normalize_address(value)


class BlockHeader(BaseModel):
    """Block returned by eth_getBlockByNumber without transactions."""

    number: int
    hash: str
    timestamp: int

    model_config = ConfigDict(extra="ignore")

    @field_validator("number", "timestamp", mode="before")
    @classmethod
    def _decode_quantities(cls, value: Any) -> Any:
        return _hex_quantity(value)


__all__ = [
    "BlockHeader",
    "JsonRpcRequest",
    "LogEntry",
    "LogFilter",
    "TransactionReceipt",
]
