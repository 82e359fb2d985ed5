"""Pytest configuration and fixtures for integration tests.

Each test gets its own SQLite file under tmp_path with the schema applied.
"""

from collections.abc import AsyncIterator

import pytest

from taskboard.core.db_client import close_connection, init_db
from taskboard.store.sqlite_store import SqliteTaskStore


@pytest.fixture
def db_path(tmp_path) -> str:
    return str(tmp_path / "taskboard-test.db")


@pytest.fixture
async def sqlite_store(db_path: str) -> AsyncIterator[SqliteTaskStore]:
    """SqliteTaskStore on a fresh, migrated database; the connection is closed afterwards."""
    await init_db(db_path=db_path)
    yield SqliteTaskStore(db_path=db_path)
    await close_connection(db_path=db_path)
