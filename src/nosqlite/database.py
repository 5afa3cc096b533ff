"""
NoSQLite Database Handle

Owns one SQLite connection and manufactures Store objects over it.
"""

import sqlite3
from pathlib import Path
from typing import Optional, Union

from nosqlite.config import ConnectionConfig, get_config
from nosqlite.exceptions import DatabaseClosedError, DatabaseOpenError
from nosqlite.logging_config import logger
from nosqlite.store import Store

MEMORY_PATH = ":memory:"


class NoSQLite:
    """
    Handle for one SQLite database file.

    The connection runs in autocommit mode: every statement issued by a Store
    is committed on its own. The handle keeps no per-store state; each
    get_store() call returns a new, independent Store.

    Usage:
        with NoSQLite("data/app.db") as db:
            settings = db.get_store("settings")
            settings.set("theme", "dark")

    Args:
        path: Database file (created if missing) or ":memory:"
        config: Connection settings, defaults to get_config()
    """

    def __init__(self, path: Union[str, Path], config: Optional[ConnectionConfig] = None):
        self.config = config or get_config()
        self._connection: Optional[sqlite3.Connection] = None

        if str(path) == MEMORY_PATH:
            self.path = MEMORY_PATH
        else:
            db_path = Path(path).expanduser()
            try:
                db_path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise DatabaseOpenError(str(db_path), str(e)) from e
            self.path = str(db_path)

        self._connection = self._connect()
        logger.debug(f"Opened database {self.path}")

    def _connect(self) -> sqlite3.Connection:
        """
        Open the connection and force SQLite to read the file header.

        sqlite3.connect() is lazy about validating the file, so a corrupt or
        unreadable database would otherwise only fail on the first query.
        """
        conn = None
        try:
            conn = sqlite3.connect(
                self.path,
                timeout=self.config.timeout,
                isolation_level=None,
            )
            conn.execute("PRAGMA schema_version").fetchone()
            conn.execute(f"PRAGMA busy_timeout = {self.config.busy_timeout_ms}")
            if self.config.enable_wal:
                conn.execute("PRAGMA journal_mode = WAL")
        except sqlite3.Error as e:
            if conn is not None:
                conn.close()
            raise DatabaseOpenError(self.path, str(e)) from e
        return conn

    @classmethod
    def open(cls, path: Union[str, Path], config: Optional[ConnectionConfig] = None) -> "NoSQLite":
        """Open or create the database at *path*."""
        return cls(path, config)

    @property
    def connection(self) -> sqlite3.Connection:
        if self._connection is None:
            raise DatabaseClosedError(f"Database {self.path} is closed")
        return self._connection

    @property
    def closed(self) -> bool:
        return self._connection is None

    def get_store(self, name: str) -> Store:
        """
        Return a new Store for table *name*, creating the table if absent.

        Raises:
            InvalidStoreNameError: if *name* is not a safe SQL identifier
        """
        return Store(self, name)

    def close(self):
        """Close the connection. Safe to call more than once."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            logger.debug(f"Closed database {self.path}")

    def __enter__(self) -> "NoSQLite":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"NoSQLite(path={self.path!r}, {state})"
