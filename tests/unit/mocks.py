"""Pure Python in-memory TaskStore for unit testing."""

import copy
import uuid
from datetime import UTC, datetime
from typing import Any

from taskboard.core.errors import StoreError
from taskboard.domain.task import (
    PRIORITY_RANK,
    SortField,
    SortOrder,
    Task,
    TaskFilters,
    TaskPriority,
    TaskStatus,
)


def build_task(**overrides: Any) -> Task:
    """Build a valid Task, overriding any field by keyword."""
    now = datetime.now(UTC)
    fields: dict[str, Any] = {
        "id": str(uuid.uuid4()),
        "title": "Sample task",
        "description": None,
        "status": TaskStatus.PENDING,
        "priority": TaskPriority.MEDIUM,
        "due_date": None,
        "created_at": now,
        "updated_at": now,
    }
    fields.update(overrides)
    return Task(**fields)


def _sort_value(task: Task, sort_by: SortField) -> Any:
    match sort_by:
        case SortField.CREATED_AT:
            return task.created_at
        case SortField.UPDATED_AT:
            return task.updated_at
        case SortField.DUE_DATE:
            return task.due_date
        case SortField.PRIORITY:
            return PRIORITY_RANK[task.priority]
        case SortField.TITLE:
            return task.title.lower()


class InMemoryTaskStore:
    """In-memory implementation of the TaskStore protocol.

    Mirrors the SQLite store's ordering rules (tasks without a due date last,
    ties broken by id). Set ``fail_with`` to make every call raise.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}
        self.fail_with: Exception | None = None
        self.calls: list[str] = []

    def _enter(self, operation: str) -> None:
        self.calls.append(operation)
        if self.fail_with is not None:
            raise self.fail_with

    def fail(self, message: str = "disk I/O error at /var/lib/taskboard.db") -> None:
        self.fail_with = StoreError(message)

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks.values())

    async def create(self, task: Task) -> Task:
        self._enter("create")
        self._tasks[task.id] = copy.deepcopy(task)
        return copy.deepcopy(task)

    async def get(self, task_id: str) -> Task | None:
        self._enter("get")
        task = self._tasks.get(task_id)
        return copy.deepcopy(task) if task is not None else None

    async def list(self, filters: TaskFilters) -> list[Task]:
        self._enter("list")
        matching = [
            task
            for task in self._tasks.values()
            if (filters.status is None or task.status == filters.status)
            and (filters.priority is None or task.priority == filters.priority)
        ]
        reverse = filters.order == SortOrder.DESC
        # Stable sorts: id first so equal keys stay in id order
        matching.sort(key=lambda t: t.id)
        if filters.sort_by == SortField.DUE_DATE:
            dated = sorted((t for t in matching if t.due_date is not None), key=lambda t: t.due_date, reverse=reverse)
            ordered = dated + [t for t in matching if t.due_date is None]
        else:
            ordered = sorted(matching, key=lambda t: _sort_value(t, filters.sort_by), reverse=reverse)
        return [copy.deepcopy(t) for t in ordered]

    async def update(self, task_id: str, changes: dict[str, Any]) -> Task | None:
        self._enter("update")
        task = self._tasks.get(task_id)
        if task is None:
            return None
        updated = task.model_copy(update=changes)
        self._tasks[task_id] = updated
        return copy.deepcopy(updated)

    async def delete(self, task_id: str) -> bool:
        self._enter("delete")
        return self._tasks.pop(task_id, None) is not None

    async def count(self, *, status: TaskStatus | None = None, due_before: datetime | None = None) -> int:
        self._enter("count")
        return sum(
            1
            for task in self._tasks.values()
            if (status is None or task.status == status)
            and (due_before is None or (task.due_date is not None and task.due_date < due_before))
        )
