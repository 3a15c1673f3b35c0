from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from src.boatlog.auth import get_current_account
from src.boatlog.schemas.activity import ActivityListResponse
from src.boatlog.schemas.common import ErrorResponse
from src.boatlog.services import activity_service, boats_service

router = APIRouter(prefix="/api/activity", tags=["Activity"])


@router.get(
    "",
    response_model=ActivityListResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Recent activity across owned boats",
    description="Recent maintenance logs, health checks and document uploads, newest first (capped at 15 by default).",
    operation_id="list_activity",
)
def list_activity(request: Request, account: dict = Depends(get_current_account)) -> ActivityListResponse:
    """Activity feed for the caller's owned boats."""
    boats = boats_service.list_owned_boats(request, account["id"])
    return ActivityListResponse(activity=activity_service.list_account_activity(request, boats))
