"""User management API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from projecthub.api.dependencies import get_current_user, get_email_notifier, get_password_hasher
from projecthub.database import get_db
from projecthub.models.project import Project, ProjectMember
from projecthub.models.task import Task
from projecthub.models.user import User
from projecthub.schemas.auth import MessageResponse, UserResponse
from projecthub.schemas.user import (
    InviteRequest,
    InviteResponse,
    PasswordResetRequest,
    UserSummary,
    UserUpdate,
)
from projecthub.services.auth import get_user_by_email
from projecthub.services.email import DeliveryError, EmailNotifier
from projecthub.services.normalize import normalize_email, normalize_name
from projecthub.services.passwords import PasswordHasher

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("", response_model=list[UserSummary])
def get_all_users(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get every user with membership and assigned-task counts."""
    project_counts = dict(
        db.query(ProjectMember.user_id, func.count(ProjectMember.id))
        .group_by(ProjectMember.user_id)
        .all()
    )
    task_counts = dict(
        db.query(Task.assigned_to, func.count(Task.id))
        .filter(Task.assigned_to.is_not(None))
        .group_by(Task.assigned_to)
        .all()
    )

    users = db.query(User).order_by(User.id).all()
    return [
        UserSummary(
            id=user.id,
            name=user.name,
            email=user.email,
            projects_count=project_counts.get(user.id, 0),
            tasks_count=task_counts.get(user.id, 0),
        )
        for user in users
    ]


@router.put("/me", response_model=UserResponse)
def update_me(
    user_data: UserUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Update the current user's name and/or email."""
    if user_data.name is not None:
        name = normalize_name(user_data.name)
        if name is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Error updating profile"
            )
        current_user.name = name

    if user_data.email is not None:
        email = normalize_email(user_data.email)
        if email is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Error updating profile"
            )
        existing = get_user_by_email(db, email)
        if existing and existing.id != current_user.id:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already in use")
        current_user.email = email

    try:
        db.commit()
    except IntegrityError as e:
        # Another account took the email after the check above
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="Email already in use"
        ) from e
    db.refresh(current_user)
    return current_user


@router.delete("/me")
def delete_me(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Delete the current account along with the projects it owns."""
    user_id = current_user.id

    for project in db.query(Project).filter(Project.owner_id == user_id).all():
        db.delete(project)
    # Owned projects must be gone before the bulk statements below run
    db.flush()

    db.query(ProjectMember).filter(ProjectMember.user_id == user_id).delete(
        synchronize_session=False
    )
    db.query(Task).filter(Task.assigned_to == user_id).update(
        {Task.assigned_to: None}, synchronize_session=False
    )
    db.delete(current_user)
    db.commit()

    logger.info(f"Deleted user {user_id}")
    return {"success": True}


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(
    body: PasswordResetRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
):
    """Change the password after checking the current one."""
    if not hasher.verify(body.current_password, current_user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect",
        )

    current_user.password_hash = hasher.hash(body.new_password)
    db.commit()

    logger.info(f"Password changed for user {current_user.id}")
    return MessageResponse(message="Password updated successfully")


@router.post("/invite", response_model=InviteResponse)
def send_invite(
    body: InviteRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    notifier: Annotated[EmailNotifier, Depends(get_email_notifier)],
):
    """Email an invitation to join."""
    if not body.email:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email is required")
    email = normalize_email(body.email)
    if email is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid email")

    try:
        receipt = notifier.send_invite(email, body.subject)
    except DeliveryError as e:
        logger.warning(f"Invite from user {current_user.id} to {email} failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to send invite",
        ) from e

    return InviteResponse(success=True, data=receipt)
