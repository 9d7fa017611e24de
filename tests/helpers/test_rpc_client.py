"""Tests for RPC client."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from typing import Any

import httpx

from src.helpers.rpc import RPCClient, RPCError
from src.helpers.rpc_models import LogFilter


def mock_http_client(result: Any) -> AsyncMock:
    """HTTP client mock whose post returns a JSON-RPC result."""
    http_client = AsyncMock(spec=httpx.AsyncClient)
    response = MagicMock()
    response.json.return_value = {"jsonrpc": "2.0", "id": 1, "result": result}
    http_client.post.return_value = response
    return http_client


def sent_payload(http_client: AsyncMock) -> dict[str, Any]:
    return http_client.post.call_args.kwargs["json"]


class TestRPCClient:
    """Tests for RPCClient class."""

    def test_init_with_valid_url(self) -> None:
        """Test RPCClient initialization with valid URL."""
        client = RPCClient("https://l1.example")

        assert client.rpc_url == "https://l1.example"
        assert client.timeout == 30.0

    def test_init_with_empty_url_raises(self) -> None:
        """Test that empty URL raises ValueError."""
        with pytest.raises(ValueError, match="RPC URL cannot be empty"):
            RPCClient("")

    @pytest.mark.asyncio
    async def test_call_single_method(self) -> None:
        """Test making a single RPC call."""
        client = RPCClient("https://test.rpc")
        http_client = mock_http_client("0x1000")

        result = await client.call(http_client, "eth_blockNumber")

        assert result == "0x1000"
        payload = sent_payload(http_client)
        assert payload["jsonrpc"] == "2.0"
        assert payload["method"] == "eth_blockNumber"
        assert payload["params"] == []

    @pytest.mark.asyncio
    async def test_call_with_custom_timeout(self) -> None:
        """Test RPC call with custom timeout."""
        client = RPCClient("https://test.rpc", timeout=30.0)
        http_client = mock_http_client("0x1")

        await client.call(http_client, "eth_blockNumber", timeout=5.0)

        assert http_client.post.call_args.kwargs["timeout"] == 5.0

    @pytest.mark.asyncio
    async def test_call_with_rpc_error(self) -> None:
        """Test RPC call that returns an error object."""
        client = RPCClient("https://test.rpc")
        http_client = AsyncMock(spec=httpx.AsyncClient)
        response = MagicMock()
        response.json.return_value = {
            "jsonrpc": "2.0",
            "id": 1,
            "error": {"code": -32000, "message": "header not found"},
        }
        http_client.post.return_value = response

        with pytest.raises(RPCError, match="header not found") as exc_info:
            await client.call(http_client, "eth_getBalance", ["0x0", "0x1"])

        assert exc_info.value.method == "eth_getBalance"

    @pytest.mark.asyncio
    async def test_call_propagates_transport_errors(self) -> None:
        """Test that HTTP failures are not swallowed."""
        client = RPCClient("https://test.rpc")
        http_client = AsyncMock(spec=httpx.AsyncClient)
        http_client.post.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(httpx.ConnectError):
            await client.get_block_number(http_client)

    @pytest.mark.asyncio
    async def test_get_block_number(self) -> None:
        client = RPCClient("https://test.rpc")

        assert await client.get_block_number(mock_http_client("0x1234")) == 0x1234

    @pytest.mark.asyncio
    async def test_get_balance_at_height(self) -> None:
        """Test historical balance lookup encodes the height as hex."""
        client = RPCClient("https://test.rpc")
        http_client = mock_http_client(hex(5 * 10**18))

        balance = await client.get_balance(http_client, "0xabc", 1000)

        assert balance == 5 * 10**18
        assert sent_payload(http_client)["params"] == ["0xabc", "0x3e8"]

    @pytest.mark.asyncio
    async def test_get_logs_sorted_in_chain_order(self) -> None:
        """Test that logs come back ordered by block then log index."""
        client = RPCClient("https://test.rpc")
        http_client = mock_http_client(
            [
                {
                    "address": "0xinbox",
                    "topics": ["0xaa"],
                    "data": "0x",
                    "blockNumber": "0x2",
                    "transactionHash": "0x02",
                    "logIndex": "0x0",
                },
                {
                    "address": "0xinbox",
                    "topics": ["0xaa"],
                    "data": "0x",
                    "blockNumber": "0x1",
                    "transactionHash": "0x01",
                    "logIndex": "0x5",
                },
                {
                    "address": "0xinbox",
                    "topics": ["0xaa"],
                    "data": "0x",
                    "blockNumber": "0x1",
                    "transactionHash": "0x01",
                    "logIndex": "0x1",
                },
            ]
        )

        logs = await client.get_logs(
            http_client,
            LogFilter(address="0xinbox", topics=["0xaa"], from_block=1, to_block=10),
        )

        assert [(log.block_number, log.log_index) for log in logs] == [
            (1, 1),
            (1, 5),
            (2, 0),
        ]
        assert sent_payload(http_client)["params"] == [
            {
                "address": "0xinbox",
                "topics": ["0xaa"],
                "fromBlock": "0x1",
                "toBlock": "0xa",
            }
        ]

    @pytest.mark.asyncio
    async def test_get_logs_drops_removed(self) -> None:
        """Test that logs reverted by a reorg are not returned."""
        client = RPCClient("https://test.rpc")
        http_client = mock_http_client(
            [
                {
                    "address": "0xinbox",
                    "topics": ["0xaa"],
                    "data": "0x",
                    "blockNumber": "0x1",
                    "transactionHash": "0x01",
                    "logIndex": "0x0",
                    "removed": True,
                },
                {
                    "address": "0xinbox",
                    "topics": ["0xaa"],
                    "data": "0x",
                    "blockNumber": "0x1",
                    "transactionHash": "0x02",
                    "logIndex": "0x1",
                    "removed": False,
                },
            ]
        )
        log_filter = LogFilter(address="0xinbox", topics=[], from_block=1, to_block=1)

        logs = await client.get_logs(http_client, log_filter)

        assert [log.transaction_hash for log in logs] == ["0x02"]

    @pytest.mark.asyncio
    async def test_get_logs_empty(self) -> None:
        client = RPCClient("https://test.rpc")
        log_filter = LogFilter(address="0xinbox", topics=[], from_block=1, to_block=1)

        assert await client.get_logs(mock_http_client([]), log_filter) == []

    @pytest.mark.asyncio
    async def test_get_transaction_receipt(self) -> None:
        client = RPCClient("https://test.rpc")
        http_client = mock_http_client(
            {
                "transactionHash": "0x01",
                "blockNumber": "0x10",
                "from": "0x52908400098527886e0f7030069857d2e4169ee7",
                "gasUsed": "0x5208",
                "effectiveGasPrice": "0x3b9aca00",
            }
        )

        receipt = await client.get_transaction_receipt(http_client, "0x01")

        assert receipt is not None
        assert receipt.block_number == 16
        assert receipt.sender == "0x52908400098527886E0F7030069857D2E4169EE7"
        assert receipt.gas_used == 21000
        assert receipt.blob_gas_used is None

    @pytest.mark.asyncio
    async def test_get_transaction_receipt_missing(self) -> None:
        client = RPCClient("https://test.rpc")

        assert await client.get_transaction_receipt(mock_http_client(None), "0x01") is None

    @pytest.mark.asyncio
    async def test_get_block_by_number(self) -> None:
        client = RPCClient("https://test.rpc")
        http_client = mock_http_client(
            {"number": "0x64", "hash": "0xhash", "timestamp": "0x65f0a000"}
        )

        block = await client.get_block_by_number(http_client, 100)

        assert block is not None
        assert block.timestamp == 0x65F0A000
        assert sent_payload(http_client)["params"] == ["0x64", False]

    @pytest.mark.asyncio
    async def test_eth_call(self) -> None:
        client = RPCClient("https://test.rpc")
        http_client = mock_http_client("0x" + "00" * 32)

        result = await client.eth_call(http_client, "0xinbox", "0x12345678")

        assert result == "0x" + "00" * 32
        assert sent_payload(http_client)["params"] == [
            {"to": "0xinbox", "data": "0x12345678"},
            "latest",
        ]
