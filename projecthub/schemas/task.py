"""Task schemas."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from projecthub.models.enums import TaskPriority, TaskStatus


def _blank_assignee(value: object) -> object:
    # Clients send "" to mean unassigned
    if isinstance(value, str):
        value = value.strip()
        return int(value) if value.isdigit() else (value or None)
    return value


AssigneeId = Annotated[int | None, BeforeValidator(_blank_assignee)]


class TaskCreate(BaseModel):
    """Create a task in a project."""

    title: str = Field(..., min_length=1, max_length=500)
    description: str | None = Field(None, max_length=5000)
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    assigned_to: AssigneeId = None
    due_date: datetime | None = None


class TaskUpdate(BaseModel):
    """Update a task. Only fields present in the request are changed."""

    title: str | None = Field(None, min_length=1, max_length=500)
    description: str | None = Field(None, max_length=5000)
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    assigned_to: AssigneeId = None
    due_date: datetime | None = None


class AssigneeResponse(BaseModel):
    """Assigned user."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class TaskResponse(BaseModel):
    """Task response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    title: str
    description: str | None
    status: TaskStatus
    priority: TaskPriority
    assigned_to: int | None
    assignee: AssigneeResponse | None = None
    due_date: datetime | None
    completed: bool
    created_at: datetime
    updated_at: datetime
