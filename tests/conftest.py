"""
Pytest configuration for the NoSQLite test suite.

This conftest.py provides:
- Machine-mode logging (suppresses console output)
- Database fixtures backed by temporary files
"""

import os

import pytest

from nosqlite import NoSQLite
from nosqlite.config import reset_config
from nosqlite.logging_config import setup_logging


# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

def pytest_configure(config):
    """Keep loguru quiet during test runs."""
    os.environ.setdefault("NOSQLITE_MACHINE_MODE", "1")


# ============================================================================
# LOGGING FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def setup_test_logging():
    """
    Machine mode by default - suppress console logs for clean test output.
    """
    setup_logging(level="DEBUG", suppress_console=True, force=True)


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Drop NOSQLITE_* overrides and the cached global config around each test."""
    for key in list(os.environ):
        if key.startswith("NOSQLITE_") and key != "NOSQLITE_MACHINE_MODE":
            monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()


# ============================================================================
# DATABASE FIXTURES
# ============================================================================

@pytest.fixture
def db_path(tmp_path):
    """Path for a database file that does not exist yet."""
    return tmp_path / "store_test.db"


@pytest.fixture
def db(db_path):
    """Open NoSQLite handle on a temporary file, closed after the test."""
    database = NoSQLite(db_path)
    yield database
    database.close()


@pytest.fixture
def store(db):
    """The "test" store of the temporary database."""
    return db.get_store("test")
