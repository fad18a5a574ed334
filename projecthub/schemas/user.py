"""User management schemas."""

from pydantic import BaseModel, ConfigDict, Field


class UserUpdate(BaseModel):
    """Update the current user's profile."""

    name: str | None = Field(None, max_length=120)
    email: str | None = Field(None, max_length=255)


class PasswordResetRequest(BaseModel):
    """Change the password of the current user."""

    model_config = ConfigDict(populate_by_name=True)

    current_password: str = Field(..., alias="currentPassword")
    new_password: str = Field(..., min_length=1, max_length=128, alias="newPassword")


class UserSummary(BaseModel):
    """User with project and task counts."""

    id: int
    name: str
    email: str
    projects_count: int
    tasks_count: int


class InviteRequest(BaseModel):
    """Invite someone by email."""

    email: str | None = None
    subject: str | None = Field(None, max_length=255)


class InviteResponse(BaseModel):
    success: bool
    data: dict | None = None
