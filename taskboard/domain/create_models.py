"""Pydantic models for creating task records."""

from datetime import datetime

from pydantic import Field, field_validator

from taskboard.domain.task import CamelModel, TaskPriority, parse_due_date


def normalize_description(value: str | None) -> str | None:
    """Trim a description, mapping empty text to None."""
    if value is None:
        return None
    return value.strip() or None


class TaskCreate(CamelModel):
    """Payload for creating a task.

    The title is only trimmed here; the service rejects a blank title so the
    error surfaces as a domain ValidationError rather than a schema error.
    """

    title: str | None = Field(default=None, description="Task title (required, non-blank)")
    description: str | None = Field(default=None, description="Optional description")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="Priority level")
    due_date: datetime | None = Field(default=None, description="Optional deadline")

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v: object) -> object:
        """Trim surrounding whitespace from the title."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("description", mode="before")
    @classmethod
    def clean_description(cls, v: object) -> object:
        """Map empty or whitespace-only descriptions to None."""
        if isinstance(v, str):
            return normalize_description(v)
        return v

    @field_validator("due_date", mode="before")
    @classmethod
    def coerce_due_date(cls, v: object) -> datetime | None:
        """Accept ISO dates and date-times; empty means no deadline."""
        return parse_due_date(v)
