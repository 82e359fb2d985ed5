"""Presentation helpers for the task pages.

Pure functions of their inputs: the templates call these to decide what a
card, the stats bar, the filter panel and the form look like. Nothing here
talks to the API.
"""

from collections.abc import Mapping
from datetime import date, datetime, timedelta
from enum import StrEnum
from urllib.parse import urlencode

from pydantic import BaseModel

from taskboard.core.config import constants
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


STATUS_OPTIONS: list[tuple[str, str]] = [
    ("", "All Status"),
    (TaskStatus.PENDING.value, "Pending"),
    (TaskStatus.COMPLETED.value, "Completed"),
]

PRIORITY_OPTIONS: list[tuple[str, str]] = [
    ("", "All Priorities"),
    (TaskPriority.LOW.value, "Low"),
    (TaskPriority.MEDIUM.value, "Medium"),
    (TaskPriority.HIGH.value, "High"),
]

SORT_OPTIONS: list[tuple[str, str]] = [
    (SortField.CREATED_AT.value, "Created Date"),
    (SortField.UPDATED_AT.value, "Updated Date"),
    (SortField.DUE_DATE.value, "Due Date"),
    (SortField.PRIORITY.value, "Priority"),
    (SortField.TITLE.value, "Title"),
]

PRIORITY_TONES: dict[TaskPriority, str] = {
    TaskPriority.LOW: "low",
    TaskPriority.MEDIUM: "medium",
    TaskPriority.HIGH: "high",
}


class DueState(StrEnum):
    """How a card shows its due date."""

    NONE = "none"
    NORMAL = "normal"
    DUE_SOON = "due-soon"
    OVERDUE = "overdue"


class StatItem(BaseModel):
    label: str
    value: int
    tone: str


class TaskForm(BaseModel):
    """Raw form fields as typed by the user."""

    title: str = ""
    description: str = ""
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: str = ""


def format_date(value: datetime) -> str:
    """Format like ``Jan 5, 2026``."""
    return f"{value:%b} {value.day}, {value.year}"


def due_state(task: Task, now: datetime) -> DueState:
    """Derive the due-date badge state at render time.

    Overdue means pending and due before the start of today; due soon means
    pending and due within the next 24 hours.
    """
    if task.due_date is None:
        return DueState.NONE
    if task.is_completed:
        return DueState.NORMAL

    start_of_today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if task.is_overdue(start_of_today):
        return DueState.OVERDUE
    if task.due_date < now + timedelta(hours=constants.DUE_SOON_HOURS):
        return DueState.DUE_SOON
    return DueState.NORMAL


def due_label(task: Task, now: datetime) -> str:
    if task.due_date is None:
        return ""
    prefix = "Overdue: " if due_state(task, now) == DueState.OVERDUE else "Due: "
    return f"{prefix}{format_date(task.due_date)}"


def stats_items(stats: TaskStats) -> list[StatItem]:
    return [
        StatItem(label="Total Tasks", value=stats.total, tone="total"),
        StatItem(label="Completed", value=stats.completed, tone="completed"),
        StatItem(label="Pending", value=stats.pending, tone="pending"),
        StatItem(label="Overdue", value=stats.overdue, tone="overdue"),
    ]


def toggled_order(order: SortOrder) -> SortOrder:
    return SortOrder.DESC if order == SortOrder.ASC else SortOrder.ASC


def empty_state_message(filters: TaskFilters) -> str:
    if filters.has_active_filters:
        return "No tasks match your current filters. Try adjusting your search criteria."
    return "Get started by creating your first task!"


def _enum_or_none(enum_type: type[StrEnum], raw: str | None) -> StrEnum | None:
    try:
        return enum_type(raw) if raw else None
    except ValueError:
        return None


def filters_from_query(params: Mapping[str, str]) -> TaskFilters:
    """Build filters from page query parameters, ignoring blank or unknown values."""
    return TaskFilters(
        status=_enum_or_none(TaskStatus, params.get("status")),
        priority=_enum_or_none(TaskPriority, params.get("priority")),
        sort_by=_enum_or_none(SortField, params.get("sortBy")) or SortField.CREATED_AT,
        order=_enum_or_none(SortOrder, params.get("order")) or SortOrder.DESC,
    )


def form_from_task(task: Task) -> TaskForm:
    """Pre-fill the edit form; the due date input only holds the date part."""
    return TaskForm(
        title=task.title,
        description=task.description or "",
        priority=task.priority,
        due_date=task.due_date.date().isoformat() if task.due_date else "",
    )


def validate_task_form(form: TaskForm, today: date | None = None) -> dict[str, str]:
    """Return field -> message for every problem; an empty dict means the form can be submitted."""
    errors: dict[str, str] = {}

    title = form.title.strip()
    if not title:
        errors["title"] = "Title is required"
    elif len(title) < constants.TITLE_MIN_LENGTH:
        errors["title"] = f"Title must be at least {constants.TITLE_MIN_LENGTH} characters"

    if form.due_date:
        try:
            due = date.fromisoformat(form.due_date)
        except ValueError:
            errors["due_date"] = "Invalid due date"
        else:
            if due < (today or date.today()):
                errors["due_date"] = "Due date cannot be in the past"

    return errors


def form_to_create(form: TaskForm) -> TaskCreate:
    payload: dict[str, object] = {"title": form.title, "priority": form.priority}
    if form.description.strip():
        payload["description"] = form.description
    if form.due_date:
        payload["due_date"] = form.due_date
    return TaskCreate(**payload)


def form_to_update(form: TaskForm) -> TaskUpdate:
    """Every form field is sent, so clearing description or due date in the form clears it on the task."""
    return TaskUpdate(
        title=form.title,
        description=form.description,
        priority=form.priority,
        due_date=form.due_date,
    )


def query_string(filters: TaskFilters, **overrides: str) -> str:
    """Encode filters as a page query string so links and redirects keep them."""
    params = filters.to_query_params()
    params.update(overrides)
    return urlencode(params)
