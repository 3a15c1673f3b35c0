from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Request

from src.boatlog.auth import get_current_account
from src.boatlog.schemas.alerts import ComponentActionResponse, DismissAlertRequest, QuickCompleteRequest
from src.boatlog.schemas.boats import ComponentOut, ComponentUpdate
from src.boatlog.schemas.common import ErrorResponse, utc_today
from src.boatlog.services import boats_service, component_actions

router = APIRouter(prefix="/api/components", tags=["Components"])


def _owned_component_or_404(request: Request, account: dict, component_id: str) -> dict:
    # Missing and not-owned collapse into the same answer.
    component = boats_service.get_owned_component(request, account["id"], component_id)
    if not component:
        raise HTTPException(status_code=404, detail="Component not found")
    return component


@router.patch(
    "/{component_id}",
    response_model=ComponentOut,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Update component",
    description="Partial update of a component's details or service schedule.",
    operation_id="update_component",
)
def update_component(
    request: Request,
    payload: ComponentUpdate,
    component_id: str = Path(..., description="Component id"),
    account: dict = Depends(get_current_account),
) -> ComponentOut:
    """Patch a component on an owned boat."""
    if "name" in payload.model_fields_set and not (payload.name or "").strip():
        raise HTTPException(status_code=400, detail="name must not be empty")
    component = _owned_component_or_404(request, account, component_id)
    return ComponentOut.model_validate(boats_service.update_component(request, component, payload))


@router.post(
    "/{component_id}/dismiss-alert",
    response_model=ComponentActionResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Dismiss a service alert",
    description=(
        "Push the component's next service date (today + interval) or hours (current + interval) forward. "
        "Without an interval the next-due value is cleared."
    ),
    operation_id="dismiss_component_alert",
)
def dismiss_alert(
    request: Request,
    payload: DismissAlertRequest,
    component_id: str = Path(..., description="Component id"),
    account: dict = Depends(get_current_account),
) -> ComponentActionResponse:
    """Dismiss a date or hours alert on an owned component."""
    component = _owned_component_or_404(request, account, component_id)
    updates = component_actions.dismiss_alert(request, component, payload.alert_type, utc_today())
    return ComponentActionResponse(success=True, updates=updates)


@router.post(
    "/{component_id}/quick-complete",
    response_model=ComponentActionResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Quick-complete a service",
    description=(
        "Record the service as done today: adds a log entry, sets last service date/hours, "
        "and reschedules every cadence that has an interval."
    ),
    operation_id="quick_complete_component",
)
def quick_complete(
    request: Request,
    component_id: str = Path(..., description="Component id"),
    payload: Optional[QuickCompleteRequest] = None,
    account: dict = Depends(get_current_account),
) -> ComponentActionResponse:
    """Quick-complete the scheduled service of an owned component."""
    component = _owned_component_or_404(request, account, component_id)
    service_name = payload.service_name if payload else None
    updates = component_actions.quick_complete(request, component, account["id"], utc_today(), service_name=service_name)
    return ComponentActionResponse(success=True, updates=updates)
