"""Ethereum JSON-RPC client utilities."""

from typing import Any

import httpx

from src.helpers.parsers import parse_hex_int
from src.helpers.rpc_models import (
    BlockHeader,
    JsonRpcRequest,
    LogEntry,
    LogFilter,
    TransactionReceipt,
)


class RPCError(ValueError):
    """Error object returned by a JSON-RPC endpoint."""

    def __init__(self, method: str, error: Any) -> None:
        self.method = method
        self.error = error
        super().__init__(f"RPC error: {error}")


class RPCClient:
    """Ethereum JSON-RPC client."""

    def __init__(self, rpc_url: str, timeout: float = 30.0) -> None:
        """Initialize RPC client.

        Args:
            rpc_url: Ethereum JSON-RPC endpoint URL
            timeout: Default timeout for requests in seconds

        Raises:
            ValueError: If rpc_url is empty or None
        """
        if not rpc_url:
            msg = "RPC URL cannot be empty"
            raise ValueError(msg)

        self.rpc_url = rpc_url
        self.timeout = timeout

    async def call(
        self,
        client: httpx.AsyncClient,
        method: str,
        params: list[Any] | None = None,
        *,
        timeout: float | None = None,
    ) -> Any:
        """Make a single JSON-RPC call.

        Args:
            client: HTTP client instance
            method: RPC method name (e.g., "eth_blockNumber")
            params: Method parameters list
            timeout: Optional timeout override

        Returns:
            RPC result value

        Raises:
            httpx.HTTPError: If the HTTP request fails
            RPCError: If the RPC response contains an error
        """
        payload = JsonRpcRequest(method=method, params=params or [], id=1)

        response = await client.post(
            self.rpc_url, json=payload.model_dump(), timeout=timeout or self.timeout
        )
        response.raise_for_status()
        result = response.json()

        if "error" in result:
            raise RPCError(method, result["error"])

        return result.get("result")

    async def get_block_number(self, client: httpx.AsyncClient) -> int:
        """Get the latest block number.

        Args:
            client: HTTP client instance

        Returns:
            Latest block number

        Raises:
            RPCError: If the node returns no block number
        """
        result = await self.call(client, "eth_blockNumber", [])
        if result is None:
            raise RPCError("eth_blockNumber", "null result")
        return parse_hex_int(result)

    async def get_logs(
        self, client: httpx.AsyncClient, log_filter: LogFilter
    ) -> list[LogEntry]:
        """Get logs matching a filter, sorted in chain order.

        Args:
            client: HTTP client instance
            log_filter: Address, topics and inclusive block range

        Returns:
            Logs ordered by (block number, log index), without logs the node
            flags as removed by a reorg
        """
        result = await self.call(client, "eth_getLogs", [log_filter.to_params()])
        logs = [LogEntry.model_validate(entry) for entry in result or []]
        logs = [log for log in logs if not log.removed]
        return sorted(logs, key=lambda log: (log.block_number, log.log_index))

    async def get_transaction_receipt(
        self, client: httpx.AsyncClient, tx_hash: str
    ) -> TransactionReceipt | None:
        """Get a transaction receipt.

        Args:
            client: HTTP client instance
            tx_hash: Transaction hash

        Returns:
            Receipt, or None if the node does not know the transaction
        """
        result = await self.call(client, "eth_getTransactionReceipt", [tx_hash])
        if result is None:
            return None
        return TransactionReceipt.model_validate(result)

    async def get_block_by_number(
        self, client: httpx.AsyncClient, block_number: int
    ) -> BlockHeader | None:
        """Get a block header (without transactions).

        Args:
            client: HTTP client instance
            block_number: Block number

        Returns:
            Block header, or None if the block is unknown
        """
        result = await self.call(
            client, "eth_getBlockByNumber", [hex(block_number), False]
        )
        if result is None:
            return None
        return BlockHeader.model_validate(result)

    async def get_balance(
        self,
        client: httpx.AsyncClient,
        address: str,
        block_number: int | str = "latest",
    ) -> int:
        """Get ETH balance for an address at a specific block.

        Historical heights require an archive node on the other end.

        Args:
            client: HTTP client instance
            address: Ethereum address
            block_number: Block number (int) or "latest"

        Returns:
            Balance in wei

        Raises:
            RPCError: If the node cannot serve the balance at that height
        """
        block_param = (
            hex(block_number) if isinstance(block_number, int) else block_number
        )
        result = await self.call(client, "eth_getBalance", [address, block_param])
        if result is None:
            raise RPCError("eth_getBalance", "null result")
        return parse_hex_int(result)

    async def eth_call(
        self,
        client: httpx.AsyncClient,
        to: str,
        data: str,
        block_number: int | str = "latest",
    ) -> str:
        """Execute a read-only contract call.

        Args:
            client: HTTP client instance
            to: Contract address
            data: ABI-encoded calldata as hex string
            block_number: Block number (int) or "latest"

        Returns:
            Hex-encoded return data
        """
        block_param = (
            hex(block_number) if isinstance(block_number, int) else block_number
        )
        result = await self.call(
            client, "eth_call", [{"to": to, "data": data}, block_param]
        )
        return result or "0x"


__all__ = [
    "RPCClient",
    "RPCError",
]
