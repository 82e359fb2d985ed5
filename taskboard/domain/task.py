"""Task domain models and enums."""

from datetime import UTC, date, datetime, time
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TaskStatus(StrEnum):
    """Task completion state."""

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"


class TaskPriority(StrEnum):
    """Task priority, declared from lowest to highest."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class SortField(StrEnum):
    """Fields the task list can be ordered by."""

    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"
    DUE_DATE = "dueDate"
    PRIORITY = "priority"
    TITLE = "title"


class SortOrder(StrEnum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


PRIORITY_RANK: dict[TaskPriority, int] = {
    TaskPriority.LOW: 0,
    TaskPriority.MEDIUM: 1,
    TaskPriority.HIGH: 2,
}


class CamelModel(BaseModel):
    """Base model that speaks camelCase on the wire and snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Task(CamelModel):
    """Task data transfer object."""

    id: str = Field(..., description="Unique task ID (UUID4)")
    title: str = Field(..., description="Task title")
    description: str | None = Field(default=None, description="Optional free-form description")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="Completion state")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="Priority level")
    due_date: datetime | None = Field(default=None, description="Deadline, None when there is none")
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")
    updated_at: datetime = Field(..., description="Last mutation timestamp (UTC)")

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    def is_overdue(self, now: datetime) -> bool:
        """Whether the task counts towards the overdue statistic at ``now``."""
        return self.status == TaskStatus.PENDING and self.due_date is not None and self.due_date < now


class TaskStats(CamelModel):
    """Aggregate counts over the task table. Computed on demand, never stored."""

    total: int = 0
    completed: int = 0
    pending: int = 0
    overdue: int = 0


class TaskFilters(CamelModel):
    """Filter and sort configuration for listing tasks."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    sort_by: SortField = SortField.CREATED_AT
    order: SortOrder = SortOrder.DESC

    @property
    def has_active_filters(self) -> bool:
        return self.status is not None or self.priority is not None

    def to_query_params(self) -> dict[str, str]:
        """Query parameters for the list endpoint; absent filters are left out."""
        params: dict[str, str] = {}
        if self.status is not None:
            params["status"] = self.status.value
        if self.priority is not None:
            params["priority"] = self.priority.value
        params["sortBy"] = self.sort_by.value
        params["order"] = self.order.value
        return params


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_due_date(value: object) -> datetime | None:
    """Parse a due date from API input.

    Accepts None or an empty string (no deadline), a ``date`` or ISO date string
    (midnight UTC), or a ``datetime`` or ISO date-time string (naive values are UTC).

    Raises:
        ValueError: If the value cannot be interpreted as a date
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        try:
            return ensure_utc(value)
        except OverflowError as e:
            msg = f"Invalid due date: {value!r}"
            raise ValueError(msg) from e
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=UTC)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            if len(text) == 10:  # noqa: PLR2004 - YYYY-MM-DD
                return datetime.combine(date.fromisoformat(text), time.min, tzinfo=UTC)
            return ensure_utc(datetime.fromisoformat(text))
        except (ValueError, OverflowError) as e:
            msg = f"Invalid due date: {value}"
            raise ValueError(msg) from e
    msg = f"Invalid due date: {value!r}"
    raise ValueError(msg)
