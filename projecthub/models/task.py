"""Task model."""

from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from projecthub.database import Base
from projecthub.models.enums import TaskPriority, TaskStatus
from projecthub.models.mixins import TimestampMixin


class Task(Base, TimestampMixin):
    """Unit of work inside a project."""

    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    title = Column(String(500), nullable=False)
    description = Column(String, nullable=True)
    status = Column(
        Enum(TaskStatus, name="taskstatus", values_callable=lambda x: [e.value for e in x]),
        default=TaskStatus.TODO,
        nullable=False,
    )
    priority = Column(
        Enum(TaskPriority, name="taskpriority", values_callable=lambda x: [e.value for e in x]),
        default=TaskPriority.MEDIUM,
        nullable=False,
    )
    assigned_to = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    due_date = Column(DateTime(timezone=True), nullable=True, index=True)
    completed = Column(Boolean, default=False, nullable=False, index=True)

    # Relationships
    project = relationship("Project", back_populates="tasks")
    assignee = relationship("User", foreign_keys=[assigned_to], backref="assigned_tasks")
