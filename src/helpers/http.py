"""HTTP client utilities and helpers."""

from typing import Any

import httpx

from src.helpers.constants import (
    DEFAULT_TIMEOUT,
    MAX_CONNECTIONS,
    MAX_KEEPALIVE_CONNECTIONS,
)


def create_http_client(
    timeout: float = DEFAULT_TIMEOUT, **kwargs: Any
) -> httpx.AsyncClient:
    """Create a configured httpx AsyncClient.

    The client's timeout is the only timeout applied to RPC calls.

    Args:
        timeout: Default timeout in seconds (default: DEFAULT_TIMEOUT)
        **kwargs: Additional httpx.AsyncClient kwargs

    Returns:
        Configured AsyncClient instance

    Example:
        ```python
        from src.helpers.http import create_http_client

        async with create_http_client(timeout=60.0) as client:
            head = await rpc.get_block_number(client)
        ```
    """
    kwargs.setdefault(
        "limits",
        httpx.Limits(
            max_keepalive_connections=MAX_KEEPALIVE_CONNECTIONS,
            max_connections=MAX_CONNECTIONS,
        ),
    )
    return httpx.AsyncClient(timeout=timeout, **kwargs)


__all__ = ["create_http_client"]
