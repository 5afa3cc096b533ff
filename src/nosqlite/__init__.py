"""
NoSQLite - key-value stores on top of SQLite tables.

Each named store is a two-column table ("key", "value") with an in-process
cache in front of it.
"""

__version__ = "1.0.0"

from nosqlite.config import ConnectionConfig, get_config, reset_config
from nosqlite.database import NoSQLite
from nosqlite.exceptions import (
    DatabaseClosedError,
    DatabaseError,
    DatabaseOpenError,
    DateParseError,
    InvalidStoreNameError,
    InvalidValueError,
    NoSQLiteError,
    TypeArgumentError,
)
from nosqlite.schemas import StoreRow
from nosqlite.store import CacheState, CursorState, Store

__all__ = [
    "__version__",
    "NoSQLite",
    "Store",
    "StoreRow",
    "CacheState",
    "CursorState",
    "ConnectionConfig",
    "get_config",
    "reset_config",
    "NoSQLiteError",
    "TypeArgumentError",
    "InvalidValueError",
    "DateParseError",
    "InvalidStoreNameError",
    "DatabaseOpenError",
    "DatabaseClosedError",
    "DatabaseError",
]
