# Custom exceptions for NoSQLite

import sqlite3

# Statement-level failures (locked database, constraint violation, disk I/O)
# are raised by sqlite3 and propagate unmodified.
DatabaseError = sqlite3.DatabaseError


class NoSQLiteError(Exception):
    """Base exception for all application-specific errors."""
    pass


class TypeArgumentError(NoSQLiteError, TypeError):
    """Raised when an argument has the wrong type for a typed operation."""

    def __init__(self, argument: str, expected: str, actual: object):
        self.argument = argument
        self.expected = expected
        self.actual = type(actual).__name__
        super().__init__(f"Expected {expected} as {argument}, got {self.actual}")


class InvalidValueError(NoSQLiteError, ValueError):
    """Raised when a value cannot be stored or decoded as a scalar."""
    pass


class DateParseError(NoSQLiteError, ValueError):
    """Raised when a date/time string cannot be parsed."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Unable to parse date/time: {value!r}")


class InvalidStoreNameError(NoSQLiteError, ValueError):
    """Raised when a store name is not a safe SQL identifier."""

    def __init__(self, name: object):
        self.name = name
        super().__init__(
            f"Invalid store name {name!r}: expected letters, digits and underscores, "
            f"not starting with a digit"
        )


class DatabaseOpenError(NoSQLiteError, OSError):
    """Raised when the database file cannot be created or opened."""

    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message
        super().__init__(f"Failed to open database {path}: {message}")


class DatabaseClosedError(NoSQLiteError):
    """Raised when a closed database handle is used."""
    pass
