"""Metrics schemas."""

from pydantic import BaseModel


class ProjectCompletion(BaseModel):
    """Completion percentage of one project."""

    id: int
    name: str
    completion_rate: float


class MetricsResponse(BaseModel):
    """Dashboard metrics for the current user."""

    total_projects: int
    active_projects: int
    active_tasks: int
    completed_tasks: int
    team_members: int
    overall_completion_rate: float
    projects_with_completion: list[ProjectCompletion]
