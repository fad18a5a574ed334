"""Metrics endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends

from projecthub.api.dependencies import get_current_user, get_metrics_service
from projecthub.models.user import User
from projecthub.schemas.metrics import MetricsResponse
from projecthub.services.metrics import MetricsService

router = APIRouter(prefix="/api/v1/metrics", tags=["metrics"])


@router.get("", response_model=MetricsResponse)
def get_metrics(
    current_user: Annotated[User, Depends(get_current_user)],
    metrics_service: Annotated[MetricsService, Depends(get_metrics_service)],
):
    """Get project and task metrics for the current user."""
    return metrics_service.get_user_metrics(current_user.id)
