from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Path, Request, status

from src.boatlog.auth import get_current_account
from src.boatlog.schemas.alerts import AlertListResponse
from src.boatlog.schemas.boats import (
    BoatCreate,
    BoatListResponse,
    BoatOut,
    ComponentCreate,
    ComponentListResponse,
    ComponentOut,
    CrewCreate,
    CrewOut,
    DocumentCreate,
    DocumentListResponse,
    DocumentOut,
    HealthCheckCreate,
    HealthCheckListResponse,
    HealthCheckOut,
    LogEntryCreate,
    LogEntryListResponse,
    LogEntryOut,
    PartCreate,
    PartListResponse,
    PartOut,
    SafetyEquipmentCreate,
    SafetyEquipmentListResponse,
    SafetyEquipmentOut,
)
from src.boatlog.schemas.common import ErrorResponse, utc_today
from src.boatlog.schemas.costs import BoatCostsResponse, CostBoatRef
from src.boatlog.services import alerts_scanner, boats_service, costs_service
from src.boatlog.services.boats_service import InvalidReference

router = APIRouter(prefix="/api/boats", tags=["Boats"])

_NOT_FOUND = {404: {"model": ErrorResponse}}


def _owned_boat_or_404(request: Request, account: dict, boat_id: str) -> dict:
    boat = boats_service.get_owned_boat(request, account["id"], boat_id)
    if not boat:
        raise HTTPException(status_code=404, detail="Boat not found")
    return boat


def _accessible_boat_or_404(request: Request, account: dict, boat_id: str) -> dict:
    boat = boats_service.get_accessible_boat(request, account["id"], boat_id)
    if not boat:
        raise HTTPException(status_code=404, detail="Boat not found")
    return boat


def _require_text(value: str, field_name: str) -> None:
    if not value.strip():
        raise HTTPException(status_code=400, detail=f"{field_name} must not be empty")


# ---- Boats ----


@router.get(
    "",
    response_model=BoatListResponse,
    summary="List boats",
    description="Boats the caller owns or crews on.",
    operation_id="list_boats",
)
def list_boats(request: Request, account: dict = Depends(get_current_account)) -> BoatListResponse:
    """List accessible boats."""
    items = [BoatOut.model_validate(b) for b in boats_service.list_accessible_boats(request, account["id"])]
    return BoatListResponse(items=items, total=len(items))


@router.post(
    "",
    response_model=BoatOut,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
    summary="Create boat",
    operation_id="create_boat",
)
def create_boat(request: Request, payload: BoatCreate, account: dict = Depends(get_current_account)) -> BoatOut:
    """Create a boat owned by the caller."""
    _require_text(payload.name, "name")
    return BoatOut.model_validate(boats_service.create_boat(request, account["id"], payload))


@router.get(
    "/{boat_id}",
    response_model=BoatOut,
    responses=_NOT_FOUND,
    summary="Get boat",
    operation_id="get_boat",
)
def get_boat(
    request: Request,
    boat_id: str = Path(..., description="Boat id"),
    account: dict = Depends(get_current_account),
) -> BoatOut:
    """Fetch a boat the caller owns or crews on."""
    return BoatOut.model_validate(_accessible_boat_or_404(request, account, boat_id))


@router.delete(
    "/{boat_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=_NOT_FOUND,
    summary="Delete boat",
    description="Delete an owned boat with its components, documents, logs, checks, safety equipment and crew grants.",
    operation_id="delete_boat",
)
def delete_boat(
    request: Request,
    boat_id: str = Path(..., description="Boat id"),
    account: dict = Depends(get_current_account),
) -> None:
    """Delete an owned boat."""
    if not boats_service.delete_boat(request, account["id"], boat_id):
        raise HTTPException(status_code=404, detail="Boat not found")
    return None


@router.get(
    "/{boat_id}/alerts",
    response_model=AlertListResponse,
    responses=_NOT_FOUND,
    summary="List alerts for one boat",
    description="Component, document and safety equipment alerts for a boat the caller owns or crews on.",
    operation_id="list_boat_alerts",
)
def list_boat_alerts(
    request: Request,
    boat_id: str = Path(..., description="Boat id"),
    account: dict = Depends(get_current_account),
) -> AlertListResponse:
    """Per-boat alert feed."""
    boat = _accessible_boat_or_404(request, account, boat_id)
    return AlertListResponse(alerts=alerts_scanner.list_boat_alerts(request, boat, utc_today()))


@router.get(
    "/{boat_id}/costs",
    response_model=BoatCostsResponse,
    responses=_NOT_FOUND,
    summary="Cost breakdown for one boat",
    description="Spend summary, per-component totals (with cost per running hour) and the 10 latest expenses.",
    operation_id="boat_costs",
)
def boat_costs(
    request: Request,
    boat_id: str = Path(..., description="Boat id"),
    account: dict = Depends(get_current_account),
) -> BoatCostsResponse:
    """Cost breakdown for a boat the caller owns or crews on."""
    boat = _accessible_boat_or_404(request, account, boat_id)
    summary, by_component, recent = costs_service.boat_costs(request, boat, utc_today())
    return BoatCostsResponse(
        boat=CostBoatRef(id=boat["id"], name=boat.get("name") or ""),
        summary=summary,
        byComponent=by_component,
        recentExpenses=recent,
    )


# ---- Crew ----


@router.post(
    "/{boat_id}/crew",
    response_model=CrewOut,
    status_code=status.HTTP_201_CREATED,
    responses=_NOT_FOUND,
    summary="Add crew member",
    description="Grant an existing account crew access to an owned boat.",
    operation_id="add_crew",
)
def add_crew(
    request: Request,
    payload: CrewCreate,
    boat_id: str = Path(..., description="Boat id"),
    account: dict = Depends(get_current_account),
) -> CrewOut:
    """Grant crew access."""
    _owned_boat_or_404(request, account, boat_id)
    grant = boats_service.add_crew(request, boat_id, payload)
    if not grant:
        raise HTTPException(status_code=404, detail="User not found")
    return CrewOut.model_validate(grant)


# ---- Components ----


@router.get(
    "/{boat_id}/components",
    response_model=ComponentListResponse,
    responses=_NOT_FOUND,
    summary="List components",
    operation_id="list_components",
)
def list_components(
    request: Request,
    boat_id: str = Path(..., description="Boat id"),
    account: dict = Depends(get_current_account),
) -> ComponentListResponse:
    """List a boat's components."""
    _accessible_boat_or_404(request, account, boat_id)
    items = [ComponentOut.model_validate(c) for c in boats_service.list_components(request, boat_id)]
    return ComponentListResponse(items=items, total=len(items))


@router.post(
    "/{boat_id}/components",
    response_model=ComponentOut,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Create component",
    operation_id="create_component",
)
def create_component(
    request: Request,
    payload: ComponentCreate,
    boat_id: str = Path(..., description="Boat id"),
    account: dict = Depends(get_current_account),
) -> ComponentOut:
    """Add a component to an owned boat."""
    _require_text(payload.name, "name")
    _owned_boat_or_404(request, account, boat_id)
    return ComponentOut.model_validate(boats_service.create_component(request, boat_id, payload))


# ---- Documents ----


@router.get(
    "/{boat_id}/documents",
    response_model=DocumentListResponse,
    responses=_NOT_FOUND,
    summary="List documents",
    operation_id="list_documents",
)
def list_documents(
    request: Request,
    boat_id: str = Path(..., description="Boat id"),
    account: dict = Depends(get_current_account),
) -> DocumentListResponse:
    """List a boat's documents, newest upload first."""
    _accessible_boat_or_404(request, account, boat_id)
    items = [DocumentOut.model_validate(d) for d in boats_service.list_documents(request, boat_id)]
    return DocumentListResponse(items=items, total=len(items))


@router.post(
    "/{boat_id}/documents",
    response_model=DocumentOut,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Register document",
    description="Store document metadata (expiry date, reminder window). File bytes are uploaded elsewhere.",
    operation_id="create_document",
)
def create_document(
    request: Request,
    payload: DocumentCreate,
    boat_id: str = Path(..., description="Boat id"),
    account: dict = Depends(get_current_account),
) -> DocumentOut:
    """Register a document on an owned boat."""
    _require_text(payload.name, "name")
    _owned_boat_or_404(request, account, boat_id)
    return DocumentOut.model_validate(boats_service.create_document(request, account["id"], boat_id, payload))


# ---- Log entries ----


@router.get(
    "/{boat_id}/logs",
    response_model=LogEntryListResponse,
    responses=_NOT_FOUND,
    summary="List maintenance log",
    operation_id="list_log_entries",
)
def list_log_entries(
    request: Request,
    boat_id: str = Path(..., description="Boat id"),
    account: dict = Depends(get_current_account),
) -> LogEntryListResponse:
    """List a boat's log entries, newest first."""
    _accessible_boat_or_404(request, account, boat_id)
    items = [LogEntryOut.model_validate(e) for e in boats_service.list_log_entries(request, boat_id)]
    return LogEntryListResponse(items=items, total=len(items))


@router.post(
    "/{boat_id}/logs",
    response_model=LogEntryOut,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Add maintenance log entry",
    operation_id="create_log_entry",
)
def create_log_entry(
    request: Request,
    payload: LogEntryCreate,
    boat_id: str = Path(..., description="Boat id"),
    account: dict = Depends(get_current_account),
) -> LogEntryOut:
    """Append a log entry to a boat the caller owns or crews on."""
    _require_text(payload.maintenance_item, "maintenance_item")
    _accessible_boat_or_404(request, account, boat_id)
    try:
        entry = boats_service.create_log_entry(request, account["id"], boat_id, payload)
    except InvalidReference as e:
        raise HTTPException(status_code=400, detail=str(e))
    return LogEntryOut.model_validate(entry)


# ---- Health checks ----


@router.get(
    "/{boat_id}/health-checks",
    response_model=HealthCheckListResponse,
    responses=_NOT_FOUND,
    summary="List health checks",
    operation_id="list_health_checks",
)
def list_health_checks(
    request: Request,
    boat_id: str = Path(..., description="Boat id"),
    account: dict = Depends(get_current_account),
) -> HealthCheckListResponse:
    """List a boat's health checks, newest first."""
    _accessible_boat_or_404(request, account, boat_id)
    items = [HealthCheckOut.model_validate(c) for c in boats_service.list_health_checks(request, boat_id)]
    return HealthCheckListResponse(items=items, total=len(items))


@router.post(
    "/{boat_id}/health-checks",
    response_model=HealthCheckOut,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Record health check",
    operation_id="create_health_check",
)
def create_health_check(
    request: Request,
    payload: HealthCheckCreate,
    boat_id: str = Path(..., description="Boat id"),
    account: dict = Depends(get_current_account),
) -> HealthCheckOut:
    """Record a health check on a boat the caller owns or crews on."""
    _require_text(payload.title, "title")
    _accessible_boat_or_404(request, account, boat_id)
    try:
        check = boats_service.create_health_check(request, account["id"], boat_id, payload)
    except InvalidReference as e:
        raise HTTPException(status_code=400, detail=str(e))
    return HealthCheckOut.model_validate(check)


# ---- Safety equipment ----


@router.get(
    "/{boat_id}/safety-equipment",
    response_model=SafetyEquipmentListResponse,
    responses=_NOT_FOUND,
    summary="List safety equipment",
    operation_id="list_safety_equipment",
)
def list_safety_equipment(
    request: Request,
    boat_id: str = Path(..., description="Boat id"),
    account: dict = Depends(get_current_account),
) -> SafetyEquipmentListResponse:
    """List a boat's safety equipment."""
    _accessible_boat_or_404(request, account, boat_id)
    items = [SafetyEquipmentOut.model_validate(s) for s in boats_service.list_safety_equipment(request, boat_id)]
    return SafetyEquipmentListResponse(items=items, total=len(items))


@router.post(
    "/{boat_id}/safety-equipment",
    response_model=SafetyEquipmentOut,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Add safety equipment",
    operation_id="create_safety_equipment",
)
def create_safety_equipment(
    request: Request,
    payload: SafetyEquipmentCreate,
    boat_id: str = Path(..., description="Boat id"),
    account: dict = Depends(get_current_account),
) -> SafetyEquipmentOut:
    """Add safety equipment to an owned boat."""
    if payload.type == "other" and not (payload.type_other or "").strip():
        raise HTTPException(status_code=400, detail="type_other must not be empty when type is 'other'")
    _owned_boat_or_404(request, account, boat_id)
    return SafetyEquipmentOut.model_validate(
        boats_service.create_safety_equipment(request, account["id"], boat_id, payload)
    )


# ---- Parts ----


@router.get(
    "/{boat_id}/parts",
    response_model=PartListResponse,
    responses=_NOT_FOUND,
    summary="List parts",
    operation_id="list_parts",
)
def list_parts(
    request: Request,
    boat_id: str = Path(..., description="Boat id"),
    account: dict = Depends(get_current_account),
) -> PartListResponse:
    """List a boat's parts by name."""
    _accessible_boat_or_404(request, account, boat_id)
    items = [PartOut.model_validate(p) for p in boats_service.list_parts(request, boat_id)]
    return PartListResponse(items=items, total=len(items))


@router.post(
    "/{boat_id}/parts",
    response_model=PartOut,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Add part",
    operation_id="create_part",
)
def create_part(
    request: Request,
    payload: PartCreate,
    boat_id: str = Path(..., description="Boat id"),
    account: dict = Depends(get_current_account),
) -> PartOut:
    """Record a part on an owned boat."""
    _require_text(payload.name, "name")
    _owned_boat_or_404(request, account, boat_id)
    try:
        part = boats_service.create_part(request, account["id"], boat_id, payload)
    except InvalidReference as e:
        raise HTTPException(status_code=400, detail=str(e))
    return PartOut.model_validate(part)
