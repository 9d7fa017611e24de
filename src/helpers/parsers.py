"""Parsing utilities for common data transformations."""

from eth_utils import to_checksum_address


WEI_DECIMALS = 18


def parse_hex_int(hex_value: str | None, default: int = 0) -> int:
    """Parse hex string to integer.

    Args:
        hex_value: Hex-encoded string or None
        default: Default value if hex_value is None

    Returns:
        int: Parsed integer value

    Example:
        >>> parse_hex_int("0xff")
        255
        >>> parse_hex_int(None, 0)
        0
    """
    if hex_value is None:
        return default
    return int(hex_value, 16)


def normalize_address(address: str) -> str:
    """Normalize an address to its EIP-55 checksum form.

    Example:
        >>> normalize_address("0x52908400098527886e0f7030069857d2e4169ee7")
        '0x52908400098527886E0F7030069857D2E4169EE7'
    """
    return to_checksum_address(address)


def wei_to_eth_string(wei: int) -> str:
    """Render a wei amount as an ETH string with all 18 fractional digits.

    Only integer arithmetic is used so no precision is lost.

    Args:
        wei: Non-negative amount in wei

    Returns:
        str: Amount formatted as ``"<int>.<18 digits> ETH"``

    Example:
        >>> wei_to_eth_string(3_000_000_000_000_000_000)
        '3.000000000000000000 ETH'
        >>> wei_to_eth_string(1)
        '0.000000000000000001 ETH'
    """
    if wei < 0:
        msg = f"Cannot format negative wei amount: {wei}"
        raise ValueError(msg)
    integer_part, fractional_part = divmod(wei, 10**WEI_DECIMALS)
    return f"{integer_part}.{fractional_part:0{WEI_DECIMALS}d} ETH"


def parse_wei(value: str) -> int:
    """Parse a wei amount stored as a decimal string.

    Raises:
        ValueError: If the string is not a non-negative decimal integer
    """
    if not value.isdigit():
        msg = f"Invalid wei amount: {value!r}"
        raise ValueError(msg)
    return int(value)


__all__ = [
    "WEI_DECIMALS",
    "normalize_address",
    "parse_hex_int",
    "parse_wei",
    "wei_to_eth_string",
]
