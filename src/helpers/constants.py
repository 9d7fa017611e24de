"""Common configuration constants used across the application."""

# HTTP and Network Constants
DEFAULT_TIMEOUT = 30.0
"""Default HTTP request timeout in seconds"""

# HTTP Connection Pooling
MAX_KEEPALIVE_CONNECTIONS = 5
"""Maximum number of keepalive connections in pool"""

MAX_CONNECTIONS = 10
"""Maximum total number of connections"""

# Storage Limits
MAX_STORED_INT = 2**63 - 1
"""Largest value an INTEGER column holds (signed 64-bit)"""

# Status Table
STATUS_ROW_ID = 0
"""Primary key of the singleton status row"""


__all__ = [
    "DEFAULT_TIMEOUT",
    "MAX_CONNECTIONS",
    "MAX_KEEPALIVE_CONNECTIONS",
    "MAX_STORED_INT",
    "STATUS_ROW_ID",
]
