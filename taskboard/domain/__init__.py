"""Domain models and DTOs."""

from taskboard.domain.create_models import TaskCreate
from taskboard.domain.task import (
    SortField,
    SortOrder,
    Task,
    TaskFilters,
    TaskPriority,
    TaskStats,
    TaskStatus,
)
from taskboard.domain.update_models import TaskUpdate


__all__ = [
    "SortField",
    "SortOrder",
    "Task",
    "TaskCreate",
    "TaskFilters",
    "TaskPriority",
    "TaskStats",
    "TaskStatus",
    "TaskUpdate",
]
