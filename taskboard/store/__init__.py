"""Task persistence: the TaskStore port and its SQLite implementation."""

from taskboard.store.base import TaskStore
from taskboard.store.sqlite_store import SqliteTaskStore


__all__ = ["SqliteTaskStore", "TaskStore"]
