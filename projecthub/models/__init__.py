"""SQLAlchemy models."""

from projecthub.models.activity import Activity
from projecthub.models.otp import OneTimePasscode
from projecthub.models.project import Project, ProjectMember
from projecthub.models.task import Task
from projecthub.models.user import User

__all__ = [
    "User",
    "OneTimePasscode",
    "Project",
    "ProjectMember",
    "Task",
    "Activity",
]
