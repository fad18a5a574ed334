"""Activity log model."""

from sqlalchemy import Column, DateTime, Enum, Integer, String, func

from projecthub.database import Base
from projecthub.models.enums import ActivityAction, ActivityType


class Activity(Base):
    """Audit trail entry for a project or task change."""

    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(
        Enum(ActivityType, name="activitytype", values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    action = Column(
        Enum(
            ActivityAction,
            name="activityaction",
            values_callable=lambda x: [e.value for e in x],
        ),
        nullable=False,
    )
    target_type = Column(String(50), nullable=False)  # 'Project' or 'Task'
    target_name = Column(String(500), nullable=False)
    # No foreign key: entries outlive deleted accounts
    actor_id = Column(Integer, nullable=False, index=True)
    actor_name = Column(String(120), nullable=False)
    timestamp = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )
