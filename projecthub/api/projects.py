"""Project API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from projecthub.api.dependencies import get_current_user
from projecthub.database import get_db
from projecthub.models.enums import ActivityAction, ActivityType, ProjectStatus
from projecthub.models.project import Project, ProjectMember
from projecthub.models.user import User
from projecthub.schemas.auth import MessageResponse
from projecthub.schemas.project import ProjectCreate, ProjectResponse, ProjectUpdate
from projecthub.services.activity import log_activity

router = APIRouter(prefix="/api/v1/projects", tags=["projects"])


def get_user_project(db: Session, project_id: int, user: User) -> Project:
    """Get a project that the user owns or is a member of."""
    project = db.query(Project).filter(Project.id == project_id).first()
    if project and (project.owner_id == user.id or user.id in project.members):
        return project

    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")


def resolve_member_ids(db: Session, member_ids: list[int] | None, owner_id: int) -> set[int]:
    """Validate requested members; the owner is always a member."""
    requested = set(member_ids or [])
    requested.add(owner_id)

    found = {uid for (uid,) in db.query(User.id).filter(User.id.in_(requested)).all()}
    missing = sorted(requested - found)
    if missing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown member ids: {missing}",
        )
    return requested


def _set_members(project: Project, member_ids: set[int]) -> None:
    current = {m.user_id: m for m in project.memberships}
    for user_id, membership in current.items():
        if user_id not in member_ids:
            project.memberships.remove(membership)
    for user_id in member_ids - current.keys():
        project.memberships.append(ProjectMember(user_id=user_id))


@router.get("", response_model=list[ProjectResponse])
def get_projects(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get all projects owned by or shared with the current user, newest first."""
    member_project_ids = db.query(ProjectMember.project_id).filter(
        ProjectMember.user_id == current_user.id
    )
    return (
        db.query(Project)
        .filter(or_(Project.owner_id == current_user.id, Project.id.in_(member_project_ids)))
        .order_by(*Project.newest_first())
        .all()
    )


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
def create_project(
    project_data: ProjectCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Create a new project owned by the current user."""
    member_ids = resolve_member_ids(db, project_data.members, current_user.id)

    project = Project(
        name=project_data.name,
        description=project_data.description or "",
        status=project_data.status or ProjectStatus.PLANNING,
        start_date=project_data.start_date,
        end_date=project_data.end_date,
        tags=project_data.tags or [],
        owner_id=current_user.id,
    )
    _set_members(project, member_ids)
    db.add(project)
    db.commit()
    db.refresh(project)

    log_activity(
        db,
        type=ActivityType.PROJECT,
        action=ActivityAction.CREATED,
        target_type="Project",
        target_name=project.name,
        actor=current_user,
    )
    return project


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project(
    project_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get a specific project."""
    return get_user_project(db, project_id, current_user)


@router.put("/{project_id}", response_model=ProjectResponse)
def update_project(
    project_id: int,
    project_data: ProjectUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Update the fields present in the request."""
    project = get_user_project(db, project_id, current_user)
    changes = project_data.model_dump(exclude_unset=True)

    if "members" in changes:
        _set_members(project, resolve_member_ids(db, changes.pop("members"), project.owner_id))
    if "name" in changes and changes["name"] is None:
        changes.pop("name")
    if "status" in changes and changes["status"] is None:
        changes.pop("status")
    if "description" in changes:
        changes["description"] = changes["description"] or ""
    if "tags" in changes:
        changes["tags"] = changes["tags"] or []

    for field, value in changes.items():
        setattr(project, field, value)

    db.commit()
    db.refresh(project)

    log_activity(
        db,
        type=ActivityType.PROJECT,
        action=ActivityAction.UPDATED,
        target_type="Project",
        target_name=project.name,
        actor=current_user,
    )
    return project


@router.delete("/{project_id}", response_model=MessageResponse)
def delete_project(
    project_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Delete a project and its tasks (owner only)."""
    project = get_user_project(db, project_id, current_user)

    if project.owner_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Unauthorized to delete this project",
        )

    name = project.name
    db.delete(project)
    db.commit()

    log_activity(
        db,
        type=ActivityType.PROJECT,
        action=ActivityAction.DELETED,
        target_type="Project",
        target_name=name,
        actor=current_user,
    )
    return MessageResponse(message="Project deleted successfully")
