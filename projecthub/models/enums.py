"""Enums for model fields."""

from enum import StrEnum


class AuthProvider(StrEnum):
    """How an account authenticates."""

    EMAIL = "email"
    GOOGLE = "google"


class ProjectStatus(StrEnum):
    """Lifecycle status of a project."""

    PLANNING = "Planning"
    IN_PROGRESS = "In Progress"
    ON_HOLD = "On Hold"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

    @property
    def is_active(self) -> bool:
        """Completed and cancelled projects no longer count as active."""
        return self not in (ProjectStatus.COMPLETED, ProjectStatus.CANCELLED)


class TaskStatus(StrEnum):
    """Workflow status of a task."""

    TODO = "todo"
    IN_PROGRESS = "in progress"
    DONE = "done"


class TaskPriority(StrEnum):
    """Priority levels for tasks."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ActivityType(StrEnum):
    """Kind of object an activity refers to."""

    PROJECT = "project"
    TASK = "task"


class ActivityAction(StrEnum):
    """What happened to the object."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
