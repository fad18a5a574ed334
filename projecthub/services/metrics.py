"""Per-user project and task metrics."""

from typing import Any

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from projecthub.models.enums import ProjectStatus, TaskStatus
from projecthub.models.project import Project, ProjectMember
from projecthub.models.task import Task


def completion_rate(completed: int, total: int) -> float:
    """Percentage of completed tasks, one decimal; 0 when there are none."""
    if total == 0:
        return 0.0
    return round(completed / total * 100, 1)


class MetricsService:
    """Aggregates counts across the projects a user owns or belongs to."""

    def __init__(self, db: Session):
        self.db = db

    def _user_projects(self, user_id: int) -> list[Project]:
        member_project_ids = self.db.query(ProjectMember.project_id).filter(
            ProjectMember.user_id == user_id
        )
        return (
            self.db.query(Project)
            .filter(or_(Project.owner_id == user_id, Project.id.in_(member_project_ids)))
            .order_by(*Project.newest_first())
            .all()
        )

    def _task_counts(self, project_ids: list[int]) -> tuple[dict[int, int], dict[int, int]]:
        """Total and completed task counts keyed by project id."""
        if not project_ids:
            return {}, {}
        totals = dict(
            self.db.query(Task.project_id, func.count(Task.id))
            .filter(Task.project_id.in_(project_ids))
            .group_by(Task.project_id)
            .all()
        )
        completed = dict(
            self.db.query(Task.project_id, func.count(Task.id))
            .filter(Task.project_id.in_(project_ids), Task.status == TaskStatus.DONE)
            .group_by(Task.project_id)
            .all()
        )
        return totals, completed

    def _team_size(self, projects: list[Project]) -> int:
        people = {project.owner_id for project in projects}
        project_ids = [project.id for project in projects]
        if project_ids:
            members = (
                self.db.query(ProjectMember.user_id)
                .filter(ProjectMember.project_id.in_(project_ids))
                .distinct()
                .all()
            )
            people.update(user_id for (user_id,) in members)
        return len(people)

    def get_user_metrics(self, user_id: int) -> dict[str, Any]:
        """Build the dashboard metrics for a user.

        Returns:
            {
                "total_projects": int,
                "active_projects": int,       # not Completed/Cancelled
                "active_tasks": int,
                "completed_tasks": int,       # status "done"
                "team_members": int,          # distinct owners and members
                "overall_completion_rate": float,
                "projects_with_completion": [{"id", "name", "completion_rate"}],
            }
        """
        projects = self._user_projects(user_id)
        project_ids = [project.id for project in projects]
        totals, completed = self._task_counts(project_ids)

        total_tasks = sum(totals.values())
        completed_tasks = sum(completed.values())

        return {
            "total_projects": len(projects),
            "active_projects": sum(1 for p in projects if ProjectStatus(p.status).is_active),
            "active_tasks": total_tasks - completed_tasks,
            "completed_tasks": completed_tasks,
            "team_members": self._team_size(projects),
            "overall_completion_rate": completion_rate(completed_tasks, total_tasks),
            "projects_with_completion": [
                {
                    "id": project.id,
                    "name": project.name,
                    "completion_rate": completion_rate(
                        completed.get(project.id, 0), totals.get(project.id, 0)
                    ),
                }
                for project in projects
            ],
        }
