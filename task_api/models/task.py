"""Pydantic models for the task entity and its input shapes."""

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TaskStatus(str, Enum):
    """Task status enumeration."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


# Composite key of a stored task: partition key, then sort key.
KEY_ATTRIBUTES = ("task_id", "created_at")

# Attributes an update may set to null.
NULLABLE_FIELDS = frozenset({"due_date", "estimated_time"})

# A plain date is tried first so "2025-07-15" stays a date.
DueDate = Annotated[Union[date, datetime], Field(union_mode="left_to_right")]


def reject_nulls(model: BaseModel, allowed: frozenset[str] = frozenset()) -> None:
    """Raise when a field outside `allowed` was explicitly sent as null."""
    for name in sorted(model.model_fields_set):
        if getattr(model, name) is None and name not in allowed:
            raise ValueError(f"{name} must not be null")


class Task(BaseModel):
    """A stored task record."""

    task_id: str
    title: str
    description: str
    status: TaskStatus = TaskStatus.PENDING
    tags: list[str] = Field(default_factory=list)
    due_date: str | None = None
    estimated_time: int | None = None
    is_high_priority: bool = False
    created_at: str
    updated_at: str | None = None

    def to_item(self) -> dict[str, Any]:
        """Serialize as a store item, leaving out empty optional attributes."""
        return self.model_dump(mode="json", exclude_none=True)


class TaskCreate(BaseModel):
    """
    Request model for creating a task.

    Optional fields may be omitted but not sent as null; omitted ones get
    their defaults when the task is written.
    """

    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=3, max_length=100)
    description: str = Field(..., max_length=500)
    status: TaskStatus = TaskStatus.PENDING
    tags: list[str] | None = None
    due_date: DueDate | None = None
    estimated_time: int | None = Field(None, ge=0)
    is_high_priority: bool | None = None

    @model_validator(mode="after")
    def reject_null_fields(self) -> "TaskCreate":
        reject_nulls(self)
        return self

    def due_date_iso(self) -> str | None:
        """``due_date`` as an ISO-8601 string, in the same form updates store."""
        return self.model_dump(mode="json", include={"due_date"})["due_date"]


class TaskUpdate(BaseModel):
    """
    Request model for updating a task.

    Every field is optional and nothing is defaulted: a field the caller
    did not send is left unchanged, while a field sent with a falsy value
    (0, false, []) is written. Which fields were sent is tracked by
    pydantic in ``model_fields_set``; ``changes()`` exposes exactly those.
    """

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(None, min_length=3, max_length=100)
    description: str | None = Field(None, max_length=500)
    status: TaskStatus | None = None
    tags: list[str] | None = None
    due_date: DueDate | None = None
    estimated_time: int | None = Field(None, ge=0)
    is_high_priority: bool | None = None

    @model_validator(mode="after")
    def reject_null_for_required_attributes(self) -> "TaskUpdate":
        reject_nulls(self, allowed=NULLABLE_FIELDS)
        return self

    def changes(self) -> dict[str, Any]:
        """Supplied fields only, as store-ready JSON values."""
        return self.model_dump(mode="json", exclude_unset=True)


class TaskPath(BaseModel):
    """Path parameters of the item routes."""

    id: UUID

    @property
    def task_id(self) -> str:
        return str(self.id)
