"""Task service for CRUD operations and statistics."""

import asyncio
import logging
import uuid
from datetime import UTC, datetime
from typing import Any

from taskboard.core.errors import NotFoundError, ValidationError
from taskboard.core.logging import span
from taskboard.domain.create_models import TaskCreate
from taskboard.domain.task import Task, TaskFilters, TaskStats, TaskStatus
from taskboard.domain.update_models import TaskUpdate
from taskboard.store.base import TaskStore


logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(UTC)


def validate_task_id(task_id: str) -> str:
    """Return the canonical form of a task id.

    Raises:
        ValidationError: If the id is not a UUID
    """
    try:
        return str(uuid.UUID(task_id))
    except (ValueError, AttributeError, TypeError) as e:
        raise ValidationError("Invalid task id") from e


async def list_tasks(*, store: TaskStore, filters: TaskFilters | None = None) -> list[Task]:
    """List tasks matching the filters, ordered by the requested sort.

    Args:
        store: Task persistence
        filters: Status/priority filters and sort; defaults to newest first

    Returns:
        Every matching task (no pagination). An empty list is a valid result.
    """
    with span("task_service.list_tasks"):
        return await store.list(filters or TaskFilters())


async def get_task(*, store: TaskStore, task_id: str) -> Task:
    """Get a task by id.

    Raises:
        ValidationError: If the id is malformed
        NotFoundError: If no task has this id
    """
    with span("task_service.get_task", task_id=task_id):
        task = await store.get(validate_task_id(task_id))
        if task is None:
            raise NotFoundError()
        return task


async def create_task(*, store: TaskStore, data: TaskCreate) -> Task:
    """Create a new task.

    Args:
        store: Task persistence
        data: Creation payload; title is already trimmed

    Returns:
        The stored task with server-assigned id and timestamps

    Raises:
        ValidationError: If the title is missing or blank
    """
    with span("task_service.create_task"):
        if not data.title:
            raise ValidationError("Title is required")

        now = _now()
        task = Task(
            id=str(uuid.uuid4()),
            title=data.title,
            description=data.description,
            status=TaskStatus.PENDING,
            priority=data.priority,
            due_date=data.due_date,
            created_at=now,
            updated_at=now,
        )
        created = await store.create(task)
        logger.info("Created task", extra={"task_id": created.id, "priority": created.priority.value})
        return created


def _validated_changes(data: TaskUpdate) -> dict[str, Any]:
    changes = data.changes()

    if "title" in changes and not changes["title"]:
        raise ValidationError("Title cannot be empty")
    for field_name in ("status", "priority"):
        if field_name in changes and changes[field_name] is None:
            raise ValidationError(f"{field_name.capitalize()} cannot be null")

    return changes


async def update_task(*, store: TaskStore, task_id: str, data: TaskUpdate) -> Task:
    """Apply a partial update to a task.

    Only fields present in ``data`` change. A present-but-empty description or
    due date clears the stored value.

    Raises:
        ValidationError: If the id is malformed or a provided field is invalid
        NotFoundError: If no task has this id
    """
    with span("task_service.update_task", task_id=task_id):
        canonical_id = validate_task_id(task_id)
        changes = _validated_changes(data)

        if await store.get(canonical_id) is None:
            raise NotFoundError()

        changes["updated_at"] = _now()
        updated = await store.update(canonical_id, changes)
        if updated is None:
            # Deleted between the existence check and the write
            raise NotFoundError()

        logger.info("Updated task", extra={"task_id": canonical_id, "fields": sorted(data.model_fields_set)})
        return updated


async def toggle_task(*, store: TaskStore, task_id: str) -> Task:
    """Flip a task between PENDING and COMPLETED.

    Anything that is not COMPLETED counts as PENDING, so it becomes COMPLETED.

    Raises:
        ValidationError: If the id is malformed
        NotFoundError: If no task has this id
    """
    with span("task_service.toggle_task", task_id=task_id):
        canonical_id = validate_task_id(task_id)
        existing = await store.get(canonical_id)
        if existing is None:
            raise NotFoundError()

        new_status = TaskStatus.PENDING if existing.status == TaskStatus.COMPLETED else TaskStatus.COMPLETED
        updated = await store.update(canonical_id, {"status": new_status, "updated_at": _now()})
        if updated is None:
            raise NotFoundError()

        logger.info("Toggled task %s to %s", canonical_id, new_status.value)
        return updated


async def delete_task(*, store: TaskStore, task_id: str) -> None:
    """Permanently delete a task.

    Raises:
        ValidationError: If the id is malformed
        NotFoundError: If no task has this id
    """
    with span("task_service.delete_task", task_id=task_id):
        canonical_id = validate_task_id(task_id)
        if not await store.delete(canonical_id):
            raise NotFoundError()
        logger.info("Deleted task %s", canonical_id)


async def get_stats(*, store: TaskStore, now: datetime | None = None) -> TaskStats:
    """Compute task statistics.

    The four counts run concurrently and independently, so a task written
    mid-computation may show up in some counts and not others.
    """
    with span("task_service.get_stats"):
        cutoff = now or _now()
        total, completed, pending, overdue = await asyncio.gather(
            store.count(),
            store.count(status=TaskStatus.COMPLETED),
            store.count(status=TaskStatus.PENDING),
            store.count(status=TaskStatus.PENDING, due_before=cutoff),
        )
        return TaskStats(total=total, completed=completed, pending=pending, overdue=overdue)
