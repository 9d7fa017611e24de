"""Configuration management and environment variable utilities."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field


# Load environment variables from .env file
load_dotenv()


def get_required_env(key: str) -> str:
    """Get a required environment variable.

    Args:
        key: Environment variable name

    Returns:
        Environment variable value

    Raises:
        ValueError: If the environment variable is not set

    Example:
        ```python
        from src.helpers.config import get_required_env

        rpc_url = get_required_env("L1_RPC_URL")
        ```
    """
    value = os.getenv(key)
    if not value:
        msg = f"{key} environment variable is not set"
        raise ValueError(msg)
    return value


def get_optional_env(key: str, default: str | None = None) -> str | None:
    """Get an optional environment variable with a default value.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        Environment variable value or default
    """
    return os.getenv(key, default)


def get_positive_int_env(key: str, default: str | None = None) -> int:
    """Get an environment variable that must hold a positive integer.

    Args:
        key: Environment variable name
        default: Default value if not set (``None`` makes the variable required)

    Returns:
        Parsed integer value

    Raises:
        ValueError: If the variable is missing, not a number, or not positive
    """
    raw = os.getenv(key) or default
    if raw is None:
        msg = f"{key} environment variable is not set"
        raise ValueError(msg)

    try:
        value = int(raw)
    except ValueError:
        msg = f"{key} must be a number, got {raw!r}"
        raise ValueError(msg) from None

    if value <= 0:
        msg = f"{key} must be a positive number"
        raise ValueError(msg)
    return value


def get_database_url(database_url: str | None = None) -> str:
    """Get the SQLAlchemy database URL from parameter or environment.

    ``DATABASE_URL`` wins when set. Otherwise the SQLite file named by
    ``DB_FILENAME`` is opened through the aiosqlite driver.

    Args:
        database_url: Optional URL to use directly

    Returns:
        SQLAlchemy async database URL

    Raises:
        ValueError: If neither DATABASE_URL nor DB_FILENAME is set

    Example:
        ```python
        from src.helpers.config import get_database_url

        # DB_FILENAME=batches.db
        get_database_url()  # "sqlite+aiosqlite:///batches.db"
        ```
    """
    if database_url:
        return database_url

    env_url = os.getenv("DATABASE_URL")
    if env_url:
        return env_url

    db_filename = os.getenv("DB_FILENAME")
    if not db_filename:
        msg = "DATABASE_URL or DB_FILENAME must be set in environment variables"
        raise ValueError(msg)

    return f"sqlite+aiosqlite:///{db_filename}"


class IndexerConfig(BaseModel):
    """Settings consumed by the batch indexer."""

    database_url: str = Field(..., description="SQLAlchemy async database URL")
    l1_rpc_url: str = Field(..., description="Base chain JSON-RPC endpoint")
    l2_rpc_url: str = Field(..., description="L2 JSON-RPC endpoint")
    inbox_address: str = Field(..., description="Tracked inbox contract address")
    l1_start_block: int = Field(..., gt=0, description="First base chain block to index")
    indexing_step: int = Field(default=10, gt=0, description="Blocks per window")
    sleep_duration_sec: int = Field(
        default=12, gt=0, description="Base poll interval in seconds"
    )
    max_l1_fork_depth: int = Field(
        default=10, gt=0, description="Tolerated fork depth, currently not enforced"
    )
    proving_window: int | None = Field(
        default=None,
        ge=0,
        description="Proving window in seconds, read from the contract when unset",
    )


def load_indexer_config() -> IndexerConfig:
    """Build the indexer configuration from environment variables.

    Returns:
        Validated IndexerConfig

    Raises:
        ValueError: If a required variable is missing or a value is invalid
    """
    proving_window = get_optional_env("PROVING_WINDOW")

    return IndexerConfig(
        database_url=get_database_url(),
        l1_rpc_url=get_required_env("L1_RPC_URL"),
        l2_rpc_url=get_required_env("L2_RPC_URL"),
        inbox_address=get_required_env("TAIKO_INBOX_ADDRESS"),
        l1_start_block=get_positive_int_env("L1_START_BLOCK"),
        indexing_step=get_positive_int_env("INDEXING_STEP", "10"),
        sleep_duration_sec=get_positive_int_env("SLEEP_DURATION_SEC", "12"),
        max_l1_fork_depth=get_positive_int_env("MAX_L1_FORK_DEPTH", "10"),
        proving_window=int(proving_window) if proving_window else None,
    )


__all__ = [
    "IndexerConfig",
    "get_database_url",
    "get_optional_env",
    "get_positive_int_env",
    "get_required_env",
    "load_indexer_config",
]
