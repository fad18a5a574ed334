"""Activity schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from projecthub.models.enums import ActivityAction, ActivityType


class ActivityResponse(BaseModel):
    """Activity log entry."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    type: ActivityType
    action: ActivityAction
    target_type: str
    target_name: str
    actor_id: int
    actor_name: str
    timestamp: datetime
