"""Task schemas with the validation rules of the task form."""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import Field, field_validator

from taskmanager.core.schemas import EntityIn, EntityOut

from .models import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH, TaskStatus


class TaskIn(EntityIn):
    """Input schema for creating or fully updating a task."""

    title: str = Field(max_length=TITLE_MAX_LENGTH, description="Short task title")
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH, description="Optional details")
    status: TaskStatus = Field(default=TaskStatus.TODO, description="Workflow state")
    due_date: date | None = Field(default=None, description="Optional due date (YYYY-MM-DD)")

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Title is required.")
        return value

    @field_validator("due_date", mode="before")
    @classmethod
    def empty_due_date_is_none(cls, value: Any) -> Any:
        """Forms submit an empty string for an unset date input."""
        if isinstance(value, str) and not value.strip():
            return None
        return value


class TaskOut(EntityOut):
    """Output schema for task entities."""

    title: str
    description: str | None = None
    status: TaskStatus
    due_date: date | None = None
