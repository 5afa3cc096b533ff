"""
Connection Configuration.

Settings applied to every SQLite connection opened by a database handle.
All values configurable via NOSQLITE_* environment variables.
"""

import math
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


DEFAULT_TIMEOUT = 30.0          # Seconds to wait on a locked database
DEFAULT_ENABLE_WAL = False      # Keep SQLite's default rollback journal
DEFAULT_BATCH_SIZE = 100        # Rows per fetchmany() in streaming scans


def _env_int(key: str, default: int, minimum: Optional[int] = None) -> int:
    """Read integer from environment variable; values below *minimum* fall back to default."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        number = int(value)
    except ValueError:
        return default
    if minimum is not None and number < minimum:
        return default
    return number


def _env_float(key: str, default: float) -> float:
    """Read float from environment variable; non-finite values fall back to default."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        number = float(value)
    except ValueError:
        return default
    return number if math.isfinite(number) else default


def _env_bool(key: str, default: bool) -> bool:
    """Read boolean from environment variable."""
    value = os.getenv(key, "").lower()
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    return default


@dataclass
class ConnectionConfig:
    """
    Connection settings for a NoSQLite database handle.

    Environment Variables:
        NOSQLITE_TIMEOUT: Busy timeout in seconds (default: 30)
        NOSQLITE_WAL: If "true", switch the file to WAL journal mode (default: false)
        NOSQLITE_BATCH_SIZE: Rows fetched per round trip by Store.rows() (default: 100)
    """

    timeout: float = field(default_factory=lambda: _env_float(
        "NOSQLITE_TIMEOUT", DEFAULT_TIMEOUT
    ))
    enable_wal: bool = field(default_factory=lambda: _env_bool(
        "NOSQLITE_WAL", DEFAULT_ENABLE_WAL
    ))
    batch_size: int = field(default_factory=lambda: _env_int(
        "NOSQLITE_BATCH_SIZE", DEFAULT_BATCH_SIZE, minimum=1
    ))

    @property
    def busy_timeout_ms(self) -> int:
        """Timeout in milliseconds, as expected by PRAGMA busy_timeout."""
        return int(self.timeout * 1000)

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary."""
        return {
            "timeout": self.timeout,
            "enable_wal": self.enable_wal,
            "batch_size": self.batch_size,
        }


# Global instance for convenience
_default_config: Optional[ConnectionConfig] = None


def get_config() -> ConnectionConfig:
    """Get the global connection configuration."""
    global _default_config
    if _default_config is None:
        _default_config = ConnectionConfig()
    return _default_config


def reset_config() -> None:
    """Reset global config (useful after env var changes or for testing)."""
    global _default_config
    _default_config = None
