"""Celery tasks for task-due reminder emails."""

import logging
from datetime import UTC, datetime, time, timedelta

from sqlalchemy.orm import Session, joinedload

from projecthub.celery_app import app as celery_app
from projecthub.config import get_settings
from projecthub.database import SessionLocal
from projecthub.models.task import Task
from projecthub.services.email import DeliveryError, EmailNotifier

logger = logging.getLogger(__name__)


def tomorrow_window(now: datetime) -> tuple[datetime, datetime]:
    """Start and end (exclusive) of the UTC calendar day after `now`."""
    today = now.astimezone(UTC).date()
    start = datetime.combine(today + timedelta(days=1), time.min, tzinfo=UTC)
    return start, start + timedelta(days=1)


def find_tasks_due_tomorrow(db: Session, now: datetime) -> list[Task]:
    """Open tasks whose due date falls on the next UTC day."""
    start, end = tomorrow_window(now)
    return (
        db.query(Task)
        .options(joinedload(Task.assignee))
        .filter(
            Task.due_date >= start,
            Task.due_date < end,
            Task.completed.is_(False),
        )
        .order_by(Task.due_date)
        .all()
    )


@celery_app.task
def send_due_task_reminders() -> dict:
    """Email each assignee whose task is due tomorrow.

    Runs daily via celery-beat. A failed email is counted and does not stop
    the rest of the batch.

    Returns:
        dict with processing statistics
    """
    db: Session = SessionLocal()
    notifier = EmailNotifier(get_settings())

    try:
        tasks = find_tasks_due_tomorrow(db, datetime.now(UTC))
        stats = {"due": len(tasks), "sent": 0, "skipped": 0, "failed": 0}

        for task in tasks:
            assignee = task.assignee
            if not assignee or not assignee.email:
                stats["skipped"] += 1
                continue

            try:
                notifier.send_task_reminder(
                    email=assignee.email,
                    name=assignee.name,
                    task_title=task.title,
                    due_date=task.due_date,
                )
                stats["sent"] += 1
            except DeliveryError as e:
                logger.warning(f"Reminder for task {task.id} to {assignee.email} failed: {e}")
                stats["failed"] += 1

        logger.info(f"Reminder processing complete: {stats}")
        return stats

    except Exception as e:
        logger.error(f"Error sending task reminders: {e}", exc_info=True)
        db.rollback()
        return {"error": str(e)}

    finally:
        db.close()
