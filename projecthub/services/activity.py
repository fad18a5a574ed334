"""Activity log recording."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from projecthub.models.activity import Activity
from projecthub.models.enums import ActivityAction, ActivityType
from projecthub.models.user import User

logger = logging.getLogger(__name__)

RECENT_ACTIVITY_LIMIT = 100


def log_activity(
    db: Session,
    type: ActivityType,
    action: ActivityAction,
    target_type: str,
    target_name: str,
    actor: User,
) -> Activity | None:
    """Record a project or task change.

    Called from API endpoints after the change itself has been committed.
    A failure here is logged and never fails the request.
    """
    try:
        activity = Activity(
            type=type,
            action=action,
            target_type=target_type,
            target_name=target_name,
            actor_id=actor.id,
            actor_name=actor.name,
        )
        db.add(activity)
        db.commit()
        return activity
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to log {type} {action} activity for '{target_name}': {e}")
        return None


def get_recent_activities(db: Session, limit: int = RECENT_ACTIVITY_LIMIT) -> list[Activity]:
    """Latest activities, newest first."""
    return (
        db.query(Activity)
        .order_by(Activity.timestamp.desc(), Activity.id.desc())
        .limit(limit)
        .all()
    )
