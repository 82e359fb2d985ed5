"""Task REST endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from taskboard.core.errors import StoreError
from taskboard.domain.create_models import TaskCreate
from taskboard.domain.task import SortField, SortOrder, Task, TaskFilters, TaskPriority, TaskStats, TaskStatus
from taskboard.domain.update_models import TaskUpdate
from taskboard.interface.dependencies import get_task_store
from taskboard.services import task_service
from taskboard.store.base import TaskStore


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def _store_failure(operation: str, task_id: str | None, error: StoreError) -> HTTPException:
    """Log a store failure and build the 500 returned to the caller."""
    logger.error(
        "task_store_failure",
        extra={"operation": operation, "task_id": task_id, "error": str(error)},
    )
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to {operation}")


# Declared before /{task_id} routes so the literal path is matched first
@router.get("/stats/overview", response_model=TaskStats)
async def get_task_stats(store: TaskStore = Depends(get_task_store)) -> TaskStats:
    """Return total, completed, pending and overdue counts."""
    try:
        return await task_service.get_stats(store=store)
    except StoreError as e:
        raise _store_failure("fetch task statistics", None, e) from e


@router.get("", response_model=list[Task])
async def list_tasks(
    *,
    task_status: TaskStatus | None = Query(None, alias="status"),
    priority: TaskPriority | None = Query(None),
    sort_by: SortField = Query(SortField.CREATED_AT, alias="sortBy"),
    order: SortOrder = Query(SortOrder.DESC),
    store: TaskStore = Depends(get_task_store),
) -> list[Task]:
    """List tasks with optional status/priority filters and sorting."""
    filters = TaskFilters(status=task_status, priority=priority, sort_by=sort_by, order=order)
    try:
        return await task_service.list_tasks(store=store, filters=filters)
    except StoreError as e:
        raise _store_failure("fetch tasks", None, e) from e


@router.get("/{task_id}", response_model=Task)
async def get_task(task_id: str, store: TaskStore = Depends(get_task_store)) -> Task:
    """Fetch one task."""
    try:
        return await task_service.get_task(store=store, task_id=task_id)
    except StoreError as e:
        raise _store_failure("fetch task", task_id, e) from e


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
async def create_task(data: TaskCreate, store: TaskStore = Depends(get_task_store)) -> Task:
    """Create a task."""
    try:
        return await task_service.create_task(store=store, data=data)
    except StoreError as e:
        raise _store_failure("create task", None, e) from e


@router.put("/{task_id}", response_model=Task)
async def update_task(task_id: str, data: TaskUpdate, store: TaskStore = Depends(get_task_store)) -> Task:
    """Update the fields present in the body."""
    try:
        return await task_service.update_task(store=store, task_id=task_id, data=data)
    except StoreError as e:
        raise _store_failure("update task", task_id, e) from e


@router.patch("/{task_id}/toggle", response_model=Task)
async def toggle_task(task_id: str, store: TaskStore = Depends(get_task_store)) -> Task:
    """Flip a task between PENDING and COMPLETED."""
    try:
        return await task_service.toggle_task(store=store, task_id=task_id)
    except StoreError as e:
        raise _store_failure("toggle task status", task_id, e) from e


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: str, store: TaskStore = Depends(get_task_store)) -> Response:
    """Delete a task permanently."""
    try:
        await task_service.delete_task(store=store, task_id=task_id)
    except StoreError as e:
        raise _store_failure("delete task", task_id, e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
