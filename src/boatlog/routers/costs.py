from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from src.boatlog.auth import get_current_account
from src.boatlog.schemas.common import ErrorResponse, utc_today
from src.boatlog.schemas.costs import AccountCostsResponse
from src.boatlog.services import boats_service, costs_service

router = APIRouter(prefix="/api/costs", tags=["Costs"])


@router.get(
    "",
    response_model=AccountCostsResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Cost summary across owned boats",
    description="Totals for all time, this/last year and this/last month, spend by category and the last 12 months.",
    operation_id="cost_summary",
)
def cost_summary(request: Request, account: dict = Depends(get_current_account)) -> AccountCostsResponse:
    boats = boats_service.list_owned_boats(request, account["id"])
    return AccountCostsResponse(summary=costs_service.list_account_costs(request, boats, utc_today()))
