"""Pydantic schemas for API requests and responses."""

from projecthub.schemas.activity import ActivityResponse
from projecthub.schemas.auth import (
    AuthResponse,
    GoogleLoginRequest,
    LoginRequest,
    MessageResponse,
    OtpSentResponse,
    SendOtpRequest,
    SignupRequest,
    UserResponse,
    VerifyOtpRequest,
)
from projecthub.schemas.metrics import MetricsResponse, ProjectCompletion
from projecthub.schemas.project import ProjectCreate, ProjectResponse, ProjectUpdate
from projecthub.schemas.task import AssigneeResponse, TaskCreate, TaskResponse, TaskUpdate
from projecthub.schemas.user import (
    InviteRequest,
    InviteResponse,
    PasswordResetRequest,
    UserSummary,
    UserUpdate,
)

__all__ = [
    "SendOtpRequest",
    "VerifyOtpRequest",
    "SignupRequest",
    "LoginRequest",
    "GoogleLoginRequest",
    "UserResponse",
    "AuthResponse",
    "OtpSentResponse",
    "MessageResponse",
    "ProjectCreate",
    "ProjectUpdate",
    "ProjectResponse",
    "TaskCreate",
    "TaskUpdate",
    "TaskResponse",
    "AssigneeResponse",
    "ActivityResponse",
    "MetricsResponse",
    "ProjectCompletion",
    "UserUpdate",
    "PasswordResetRequest",
    "UserSummary",
    "InviteRequest",
    "InviteResponse",
]
