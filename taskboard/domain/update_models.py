"""Update models for database operations."""

from datetime import datetime
from typing import Any

from pydantic import field_validator

from taskboard.domain.create_models import normalize_description
from taskboard.domain.task import CamelModel, TaskPriority, TaskStatus, parse_due_date


class TaskUpdate(CamelModel):
    """Partial update payload for a task.

    Every field is optional. Whether a field was sent at all is tracked by
    ``model_fields_set``: an absent field is left alone, while a field sent as
    null or empty text clears the stored value (description, due_date).
    """

    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: datetime | None = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("description", mode="before")
    @classmethod
    def clean_description(cls, v: object) -> object:
        if isinstance(v, str):
            return normalize_description(v)
        return v

    @field_validator("due_date", mode="before")
    @classmethod
    def coerce_due_date(cls, v: object) -> datetime | None:
        return parse_due_date(v)

    def changes(self) -> dict[str, Any]:
        """Return only the fields that were explicitly provided."""
        return {name: getattr(self, name) for name in self.model_fields_set}
