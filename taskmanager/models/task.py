"""
Task models.

Defines the task status/priority enums, the task representation returned to
clients, and the input contracts for creating, updating and listing tasks.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from taskmanager.models.base import CamelModel

TITLE_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 1000
DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 1000


class TaskStatus(str, Enum):
    """
    Task status values.

    Transitions are unrestricted: any status may move to any other.
    """

    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"


class TaskPriority(str, Enum):
    """Task priority values."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Task(CamelModel):
    """
    Task as seen by its owner.

    Attributes:
        id: Unique identifier.
        title: Short summary (1-255 chars).
        description: Free text (0-1000 chars).
        status: Workflow status.
        priority: Priority level.
        owner_id: ID of the owning user.
        created_at: Creation timestamp.
        updated_at: Last modification timestamp.
    """

    id: UUID
    title: str
    description: str = ""
    status: TaskStatus
    priority: TaskPriority
    owner_id: UUID
    created_at: datetime
    updated_at: datetime


class TaskCreate(BaseModel):
    """Input for creating a task. Status is not accepted; new tasks start as todo."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    title: str = Field(
        ...,
        min_length=1,
        max_length=TITLE_MAX_LENGTH,
        description="Task title",
    )
    description: str = Field(
        default="",
        max_length=DESCRIPTION_MAX_LENGTH,
        description="Task description",
    )
    priority: TaskPriority = Field(
        default=TaskPriority.MEDIUM,
        description="Task priority",
    )


class TaskUpdate(BaseModel):
    """
    Partial update for a task.

    Only the fields in this model can be changed. Unknown keys are dropped,
    and explicit nulls are rejected.
    """

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    title: Optional[str] = Field(
        default=None,
        min_length=1,
        max_length=TITLE_MAX_LENGTH,
    )
    description: Optional[str] = Field(
        default=None,
        max_length=DESCRIPTION_MAX_LENGTH,
    )
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None

    @field_validator("title", "description", "status", "priority", mode="before")
    @classmethod
    def reject_null(cls, v: Any, info: ValidationInfo) -> Any:
        """A provided field must carry a value."""
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    def changes(self) -> dict[str, Any]:
        """Return only the fields the caller supplied."""
        return self.model_dump(exclude_unset=True)


class TaskFilters(BaseModel):
    """Equality filters and pagination for listing tasks."""

    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    offset: int = Field(default=0, ge=0)
