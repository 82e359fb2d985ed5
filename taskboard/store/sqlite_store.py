"""TaskStore backed by SQLite through db_client."""

import logging
from datetime import datetime
from typing import Any

from taskboard.core import db_client
from taskboard.domain.task import PRIORITY_RANK, SortField, SortOrder, Task, TaskFilters, TaskStatus
from taskboard.store.base import TASKS_COLLECTION


logger = logging.getLogger(__name__)


_PRIORITY_RANK_SQL = (
    "CASE priority "
    + " ".join(f"WHEN '{priority.value}' THEN {rank}" for priority, rank in PRIORITY_RANK.items())
    + " END"
)

_SORT_EXPRESSIONS: dict[SortField, str] = {
    SortField.CREATED_AT: "created_at",
    SortField.UPDATED_AT: "updated_at",
    SortField.DUE_DATE: "due_date",
    SortField.PRIORITY: _PRIORITY_RANK_SQL,
    SortField.TITLE: "title COLLATE NOCASE",
}


def _order_by(filters: TaskFilters) -> str:
    direction = "ASC" if filters.order == SortOrder.ASC else "DESC"
    expression = _SORT_EXPRESSIONS[filters.sort_by]
    clauses = [f"{expression} {direction}", "id ASC"]
    if filters.sort_by == SortField.DUE_DATE:
        # Tasks without a deadline go last in either direction
        clauses.insert(0, "due_date IS NULL")
    return ", ".join(clauses)


def record_to_task(record: dict[str, Any]) -> Task:
    """Convert a tasks row into a Task."""
    return Task(
        id=record["id"],
        title=record["title"],
        description=record["description"],
        status=record["status"],
        priority=record["priority"],
        due_date=db_client.parse_timestamp(record["due_date"]),
        created_at=db_client.parse_timestamp(record["created_at"]),
        updated_at=db_client.parse_timestamp(record["updated_at"]),
    )


def task_to_record(task: Task) -> dict[str, Any]:
    return task.model_dump(mode="python", by_alias=False)


class SqliteTaskStore:
    """SQLite implementation of the TaskStore protocol."""

    def __init__(self, db_path: str | None = None) -> None:
        self.db_path = db_path

    async def create(self, task: Task) -> Task:
        record = await db_client.create_record(
            collection=TASKS_COLLECTION, data=task_to_record(task), db_path=self.db_path
        )
        return record_to_task(record)

    async def get(self, task_id: str) -> Task | None:
        try:
            record = await db_client.get_record(collection=TASKS_COLLECTION, record_id=task_id, db_path=self.db_path)
        except db_client.RecordNotFoundError:
            return None
        return record_to_task(record)

    async def list(self, filters: TaskFilters) -> list[Task]:
        conditions: list[str] = []
        params: list[Any] = []
        if filters.status is not None:
            conditions.append("status = ?")
            params.append(filters.status)
        if filters.priority is not None:
            conditions.append("priority = ?")
            params.append(filters.priority)

        where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        query = f"SELECT * FROM {TASKS_COLLECTION} {where_clause} ORDER BY {_order_by(filters)}"  # noqa: S608 - built from whitelisted fragments

        records = await db_client.fetch_all(query, params, db_path=self.db_path)
        logger.info("Listed tasks", extra={"count": len(records), "filters": filters.to_query_params()})
        return [record_to_task(record) for record in records]

    async def update(self, task_id: str, changes: dict[str, Any]) -> Task | None:
        try:
            record = await db_client.update_record(
                collection=TASKS_COLLECTION, record_id=task_id, data=changes, db_path=self.db_path
            )
        except db_client.RecordNotFoundError:
            return None
        return record_to_task(record)

    async def delete(self, task_id: str) -> bool:
        try:
            await db_client.delete_record(collection=TASKS_COLLECTION, record_id=task_id, db_path=self.db_path)
        except db_client.RecordNotFoundError:
            return False
        return True

    async def count(self, *, status: TaskStatus | None = None, due_before: datetime | None = None) -> int:
        conditions: list[str] = []
        params: list[Any] = []
        if status is not None:
            conditions.append("status = ?")
            params.append(status)
        if due_before is not None:
            conditions.append("due_date IS NOT NULL AND due_date < ?")
            params.append(due_before)

        where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        query = f"SELECT COUNT(*) FROM {TASKS_COLLECTION} {where_clause}"  # noqa: S608 - built from whitelisted fragments
        return int(await db_client.fetch_value(query, params, db_path=self.db_path) or 0)
