"""Activity feed endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from projecthub.api.dependencies import get_current_user
from projecthub.database import get_db
from projecthub.models.user import User
from projecthub.schemas.activity import ActivityResponse
from projecthub.services.activity import get_recent_activities

router = APIRouter(prefix="/api/v1/activity", tags=["activity"])


@router.get("", response_model=list[ActivityResponse])
def get_activities(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get the latest 100 activities, newest first."""
    return get_recent_activities(db)
