"""Project schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from projecthub.models.enums import ProjectStatus


class ProjectCreate(BaseModel):
    """Create a new project."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    status: ProjectStatus | None = None
    start_date: date | None = None
    end_date: date | None = None
    members: list[int] | None = None
    tags: list[str] | None = None


class ProjectUpdate(BaseModel):
    """Update a project. Only fields present in the request are changed."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    status: ProjectStatus | None = None
    start_date: date | None = None
    end_date: date | None = None
    members: list[int] | None = None
    tags: list[str] | None = None


class ProjectResponse(BaseModel):
    """Project response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    status: ProjectStatus
    start_date: date | None
    end_date: date | None
    tags: list[str]
    members: list[int]
    owner_id: int
    created_at: datetime
    updated_at: datetime
