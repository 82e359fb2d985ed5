"""Dependency helpers shared across FastAPI routes."""

from functools import lru_cache

from taskboard.core.config import settings
from taskboard.store.base import TaskStore
from taskboard.store.sqlite_store import SqliteTaskStore


@lru_cache(maxsize=1)
def get_task_store() -> TaskStore:
    """Singleton TaskStore for the configured database."""
    return SqliteTaskStore(db_path=settings.database_path)
