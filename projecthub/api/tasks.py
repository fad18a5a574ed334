"""Task API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, joinedload

from projecthub.api.dependencies import get_current_user
from projecthub.api.projects import get_user_project
from projecthub.database import get_db
from projecthub.models.enums import ActivityAction, ActivityType, TaskStatus
from projecthub.models.task import Task
from projecthub.models.user import User
from projecthub.schemas.auth import MessageResponse
from projecthub.schemas.task import TaskCreate, TaskResponse, TaskUpdate
from projecthub.services.activity import log_activity

router = APIRouter(prefix="/api/v1/tasks", tags=["tasks"])


def get_task(db: Session, task_id: int, user: User) -> Task:
    """Get a task that belongs to a project the user has access to."""
    task = db.query(Task).filter(Task.id == task_id).first()
    if not task:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")

    # Verify user has access to the project
    get_user_project(db, task.project_id, user)

    return task


def check_assignee(db: Session, user_id: int | None) -> None:
    """Reject assignment to a user that does not exist."""
    if user_id is None:
        return
    if db.query(User.id).filter(User.id == user_id).first() is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Assigned user not found",
        )


@router.get("/project/{project_id}", response_model=list[TaskResponse])
def list_tasks(
    project_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get all tasks of a project, newest first."""
    get_user_project(db, project_id, current_user)

    return (
        db.query(Task)
        .options(joinedload(Task.assignee))
        .filter(Task.project_id == project_id)
        .order_by(*Task.newest_first())
        .all()
    )


@router.post(
    "/project/{project_id}", response_model=TaskResponse, status_code=status.HTTP_201_CREATED
)
def create_task(
    project_id: int,
    task_data: TaskCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Create a task in a project."""
    get_user_project(db, project_id, current_user)
    check_assignee(db, task_data.assigned_to)

    task = Task(
        project_id=project_id,
        title=task_data.title,
        description=task_data.description,
        status=task_data.status,
        priority=task_data.priority,
        assigned_to=task_data.assigned_to,
        due_date=task_data.due_date,
        completed=task_data.status == TaskStatus.DONE,
    )
    db.add(task)
    db.commit()
    db.refresh(task)

    log_activity(
        db,
        type=ActivityType.TASK,
        action=ActivityAction.CREATED,
        target_type="Task",
        target_name=task.title,
        actor=current_user,
    )
    return task


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: int,
    task_data: TaskUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Update the fields present in the request."""
    task = get_task(db, task_id, current_user)
    changes = task_data.model_dump(exclude_unset=True)

    # Required columns cannot be cleared
    for field in ("title", "status", "priority"):
        if field in changes and changes[field] is None:
            changes.pop(field)

    if "assigned_to" in changes:
        check_assignee(db, changes["assigned_to"])
    if "status" in changes:
        changes["completed"] = changes["status"] == TaskStatus.DONE

    for field, value in changes.items():
        setattr(task, field, value)

    db.commit()
    db.refresh(task)

    log_activity(
        db,
        type=ActivityType.TASK,
        action=ActivityAction.UPDATED,
        target_type="Task",
        target_name=task.title,
        actor=current_user,
    )
    return task


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(
    task_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Delete a task."""
    task = get_task(db, task_id, current_user)
    title = task.title

    db.delete(task)
    db.commit()

    log_activity(
        db,
        type=ActivityType.TASK,
        action=ActivityAction.DELETED,
        target_type="Task",
        target_name=title,
        actor=current_user,
    )
    return MessageResponse(message="Task deleted")
