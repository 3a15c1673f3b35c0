from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from src.boatlog.auth import get_current_account
from src.boatlog.schemas.alerts import AlertListResponse
from src.boatlog.schemas.common import ErrorResponse, utc_today
from src.boatlog.services import alerts_scanner, boats_service

router = APIRouter(prefix="/api/alerts", tags=["Alerts"])


@router.get(
    "",
    response_model=AlertListResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="List alerts across owned boats",
    description=(
        "Service-due and document-expiry alerts computed from current component and document state "
        "for every boat the caller owns. Sorted by severity, then due date."
    ),
    operation_id="list_alerts",
)
def list_alerts(request: Request, account: dict = Depends(get_current_account)) -> AlertListResponse:
    """Alert feed for the caller's owned boats; empty when the caller owns none."""
    boats = boats_service.list_owned_boats(request, account["id"])
    alerts = alerts_scanner.list_account_alerts(request, boats, utc_today())
    return AlertListResponse(alerts=alerts)
