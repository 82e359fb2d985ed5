"""Repository interface the task service depends on.

The service only talks to a TaskStore, so the storage engine can be swapped
(SQLite in production, an in-memory store in unit tests) without touching
service logic.
"""

from datetime import datetime
from typing import Any, Protocol

from taskboard.domain.task import Task, TaskFilters, TaskStatus


TASKS_COLLECTION = "tasks"


class TaskStore(Protocol):
    """Persistence port for Task rows."""

    async def create(self, task: Task) -> Task:
        """Persist a fully populated task and return it as stored."""
        ...

    async def get(self, task_id: str) -> Task | None: ...

    async def list(self, filters: TaskFilters) -> list[Task]:
        """Return every task matching the filters, in the requested order."""
        ...

    async def update(self, task_id: str, changes: dict[str, Any]) -> Task | None:
        """Apply column changes (snake_case field names) and return the new row, or None if missing."""
        ...

    async def delete(self, task_id: str) -> bool:
        """Remove a task; False when no row had that id."""
        ...

    async def count(self, *, status: TaskStatus | None = None, due_before: datetime | None = None) -> int:
        """Count tasks, optionally restricted by status and a strict due-date upper bound."""
        ...
