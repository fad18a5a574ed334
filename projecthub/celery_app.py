"""Celery application configuration."""

from celery import Celery
from celery.schedules import crontab

from projecthub.config import get_settings

settings = get_settings()

app = Celery(
    "projecthub",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["projecthub.tasks.reminders"],
)

# Celery configuration
app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=300,  # 5 minutes max per task
    task_soft_time_limit=240,  # 4 minutes soft limit
)

app.conf.beat_schedule = {
    "send-due-task-reminders": {
        "task": "projecthub.tasks.reminders.send_due_task_reminders",
        "schedule": crontab(hour=settings.reminder_hour_utc, minute=0),
    },
}
