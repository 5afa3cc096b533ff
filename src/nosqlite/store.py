"""
NoSQLite Store

Key-value access to one table, with an in-process cache over the rows.
"""

import re
import sqlite3
from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING, Dict, Iterator, Optional, Tuple, Union

from nosqlite import values
from nosqlite.exceptions import InvalidStoreNameError, TypeArgumentError
from nosqlite.logging_config import logger
from nosqlite.schemas import StoreRow

if TYPE_CHECKING:
    from nosqlite.database import NoSQLite

KEY_COLUMN = "key"
VALUE_COLUMN = "value"

# Store names are interpolated into SQL, never bound
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class CacheState(Enum):
    """PARTIAL: cache holds some rows. COMPLETE: cache mirrors the whole table."""
    PARTIAL = "partial"
    COMPLETE = "complete"


class CursorState(Enum):
    UNSTARTED = "unstarted"
    ITERATING = "iterating"
    EXHAUSTED = "exhausted"


def validate_store_name(name: object) -> str:
    """Return *name* if it is safe to interpolate as a table name."""
    if not isinstance(name, str) or not _IDENTIFIER_RE.match(name):
        raise InvalidStoreNameError(name)
    return name


def _require_key(key: object) -> None:
    """Keys are always str; checked before any statement runs."""
    if not isinstance(key, str):
        raise TypeArgumentError("key", "string", key)


class Store:
    """
    One named key-value store backed by a two-column SQLite table.

    Reads go through a cache that is only ever trusted as complete after
    get_all() has scanned the table. Writes go to the table first and are
    mirrored into the cache once the statement succeeds.

    The cache belongs to this instance. Two Store objects over the same table
    do not see each other's cached rows.

    Args:
        database: Open NoSQLite handle
        name: Table name (letters, digits, underscores)
    """

    def __init__(self, database: "NoSQLite", name: str):
        self._database = database
        self._name = validate_store_name(name)
        self._table = f'"{self._name}"'

        self._data: Dict[str, str] = {}
        self._cache_state = CacheState.PARTIAL

        self._cursor: Optional[sqlite3.Cursor] = None
        self._current: Optional[Tuple[str, Optional[str]]] = None
        self._cursor_state = CursorState.UNSTARTED

        self._create_table()

    def _create_table(self):
        """Create storage table in database if not exists."""
        self._conn.execute(
            f'CREATE TABLE IF NOT EXISTS {self._table} '
            f'("{KEY_COLUMN}" TEXT PRIMARY KEY, "{VALUE_COLUMN}" TEXT)'
        )
        logger.debug(f"Ensured table {self._table}")

    @property
    def _conn(self) -> sqlite3.Connection:
        return self._database.connection

    @property
    def name(self) -> str:
        return self._name

    @property
    def cache_state(self) -> CacheState:
        return self._cache_state

    @property
    def loaded(self) -> bool:
        """True once get_all() has pulled every row into the cache."""
        return self._cache_state is CacheState.COMPLETE

    @property
    def cursor_state(self) -> CursorState:
        return self._cursor_state

    # ========== READS ==========

    def get(self, key: str) -> Optional[str]:
        """
        Value for *key*, or None if it does not exist.

        Served from cache when possible. A fully loaded store answers misses
        from the cache alone without querying the table.
        """
        _require_key(key)

        if key in self._data:
            return self._data[key]
        if self._cache_state is CacheState.COMPLETE:
            return None

        row = self._conn.execute(
            f'SELECT "{KEY_COLUMN}", "{VALUE_COLUMN}" FROM {self._table} '
            f'WHERE "{KEY_COLUMN}" = ?',
            (key,),
        ).fetchone()
        if row is None:
            return None

        self._data[row[0]] = row[1]
        return row[1]

    def get_all(self) -> Dict[str, str]:
        """
        Every key/value pair in the store.

        The first call scans the table and marks the cache complete; later
        calls are answered from the cache. Returns a copy.
        """
        if self._cache_state is CacheState.PARTIAL:
            cursor = self._conn.execute(
                f'SELECT "{KEY_COLUMN}", "{VALUE_COLUMN}" FROM {self._table}'
            )
            for row_key, row_value in cursor:
                self._data[row_key] = row_value
            self._cache_state = CacheState.COMPLETE
            logger.debug(f"Loaded {len(self._data)} rows from {self._table}")

        return dict(self._data)

    def get_string(self, key: str) -> Optional[str]:
        return self.get(key)

    def get_int(self, key: str) -> Optional[int]:
        text = self.get(key)
        return None if text is None else values.decode_int(text)

    def get_float(self, key: str) -> Optional[float]:
        text = self.get(key)
        return None if text is None else values.decode_float(text)

    def get_double(self, key: str) -> Optional[float]:
        return self.get_float(key)

    def get_boolean(self, key: str) -> bool:
        """False for a missing key, "" or "0"; True for any other value."""
        return values.decode_bool(self.get(key))

    def get_date(self, key: str) -> Optional[datetime]:
        text = self.get(key)
        return None if text is None else values.decode_date(text)

    # ========== WRITES ==========

    def set(self, key: str, value: values.Scalar) -> str:
        """
        Store any scalar under *key* in its canonical string form.

        Raises:
            InvalidValueError: for None, containers and other non-scalars
            TypeArgumentError: if key is not a string

        Returns:
            The stored string
        """
        return self._set(key, values.encode(value))

    def set_string(self, key: str, value: str) -> str:
        if not isinstance(value, str):
            raise TypeArgumentError("value", "string", value)
        return self._set(key, value)

    def set_int(self, key: str, value: int) -> str:
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeArgumentError("value", "integer", value)
        return self._set(key, values.encode_int(value))

    def set_float(self, key: str, value: float) -> str:
        if not isinstance(value, float):
            raise TypeArgumentError("value", "float", value)
        return self._set(key, values.encode_float(value))

    def set_double(self, key: str, value: float) -> str:
        """Python floats are already double precision; same as set_float()."""
        return self.set_float(key, value)

    def set_boolean(self, key: str, value: bool) -> str:
        """Stored as "1" or "0"."""
        if not isinstance(value, bool):
            raise TypeArgumentError("value", "boolean", value)
        return self.set_int(key, 1 if value else 0)

    def set_date(self, key: str, value: Union[str, datetime, date]) -> str:
        """
        Store a date/time as "YYYY-MM-DD HH:MM:SS".

        Strings are parsed with values.parse_date(), which accepts ISO 8601,
        common slash/dot/month-name layouts, "@<unix seconds>" and the
        keywords now/today/yesterday/tomorrow.

        Raises:
            DateParseError: if a string value cannot be parsed
            TypeArgumentError: if value is not a string, date or datetime
        """
        if isinstance(value, str):
            value = values.parse_date(value)
        elif not isinstance(value, (datetime, date)):
            raise TypeArgumentError("value", "date string or datetime", value)
        return self._set(key, values.encode_date(value))

    def increment(self, key: str, amount: int = 1):
        """
        Add *amount* to the integer stored under *key*.

        Missing or non-numeric values count as zero. Read and write are two
        separate statements, so concurrent incrementers can lose updates.
        """
        if not isinstance(amount, int) or isinstance(amount, bool):
            raise TypeArgumentError("amount", "integer", amount)

        current = values.to_integer(self.get(key))
        if current is None:
            self.set_int(key, amount)
        else:
            self.set_int(key, current + amount)

    def _set(self, key: str, value: str) -> str:
        """
        Upsert *value* under *key* and mirror it into the cache.

        Uses ON CONFLICT so a row that exists in the table but was never read
        into this cache is updated instead of violating the primary key.
        """
        _require_key(key)

        self._conn.execute(
            f'INSERT INTO {self._table} ("{KEY_COLUMN}", "{VALUE_COLUMN}") VALUES (?, ?) '
            f'ON CONFLICT("{KEY_COLUMN}") DO UPDATE SET "{VALUE_COLUMN}" = excluded."{VALUE_COLUMN}"',
            (key, value),
        )
        self._data[key] = value
        return value

    def delete(self, key: str):
        """Delete *key*. Deleting a missing key is not an error."""
        _require_key(key)

        self._conn.execute(
            f'DELETE FROM {self._table} WHERE "{KEY_COLUMN}" = ?', (key,)
        )
        self._data.pop(key, None)

    def delete_all(self):
        """
        Delete every row and empty the cache.

        The cache state is left as is: an empty complete cache still mirrors
        the now empty table.
        """
        self._conn.execute(f"DELETE FROM {self._table}")
        self._data = {}
        logger.debug(f"Deleted all rows from {self._table}")

    # ========== SEQUENTIAL CURSOR ==========

    def rewind(self):
        """Start a fresh full-table scan positioned on the first row."""
        if self._cursor is not None:
            self._cursor.close()
        self._cursor = self._conn.execute(
            f'SELECT "{KEY_COLUMN}", "{VALUE_COLUMN}" FROM {self._table}'
        )
        self._cursor_state = CursorState.ITERATING
        self._advance()

    def next(self):
        """Move to the next row. Starts the scan if it was never started."""
        if self._cursor_state is CursorState.UNSTARTED:
            self.rewind()
        elif self._cursor_state is CursorState.ITERATING:
            self._advance()

    def valid(self) -> bool:
        return self._cursor_state is CursorState.ITERATING

    def current(self) -> Optional[str]:
        """Value at the cursor, or None when not valid."""
        if not self.valid():
            return None
        return self._current[1]

    def key(self) -> Optional[str]:
        """Key at the cursor, or None when not valid."""
        if not self.valid():
            return None
        return self._current[0]

    def _advance(self):
        row = self._cursor.fetchone()
        if row is None:
            self._cursor.close()
            self._cursor = None
            self._current = None
            self._cursor_state = CursorState.EXHAUSTED
        else:
            self._current = (row[0], row[1])

    def __iter__(self) -> Iterator[Tuple[str, Optional[str]]]:
        self.rewind()
        while self.valid():
            yield self.key(), self.current()
            self.next()

    def rows(self, batch_size: Optional[int] = None) -> Iterator[StoreRow]:
        """
        Stream every row as a StoreRow, batch_size rows per fetch.

        Uses its own cursor; neither the cache nor the rewind()/next() cursor
        is touched.
        """
        if batch_size is None:
            batch_size = self._database.config.batch_size
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        cursor = self._conn.execute(
            f'SELECT "{KEY_COLUMN}", "{VALUE_COLUMN}" FROM {self._table}'
        )
        try:
            while True:
                batch = cursor.fetchmany(batch_size)
                if not batch:
                    break
                for row_key, row_value in batch:
                    yield StoreRow(key=row_key, value=row_value)
        finally:
            cursor.close()

    # ========== COUNT ==========

    def count(self) -> int:
        """Live row count, always read from the table."""
        return self._conn.execute(f"SELECT COUNT(*) FROM {self._table}").fetchone()[0]

    def __len__(self) -> int:
        return self.count()

    def __repr__(self) -> str:
        return f"Store(name={self._name!r}, cache={self._cache_state.value})"
