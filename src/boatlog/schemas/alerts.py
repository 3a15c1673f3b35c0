from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from src.boatlog.schemas.common import Severity


AlertType = Literal["maintenance_date", "maintenance_hours", "document_expiry"]
# Alert types that a component action (dismiss / quick-complete) can target.
ComponentAlertType = Literal["maintenance_date", "maintenance_hours"]


class AlertOut(BaseModel):
    """A due/expiring item computed from current component, document or safety equipment state."""

    id: str = Field(..., description="Deterministic alert id, e.g. 'comp-date-<componentId>'.")
    type: AlertType = Field(..., description="Which due axis produced the alert.")
    severity: Severity = Field(..., description="Severity tier.")
    title: str = Field(..., description="Short title for the alert.")
    description: str = Field(..., description="One-line description.")

    due_date: Optional[date] = Field(default=None, description="Due/expiry date (date-based alerts).", alias="dueDate")
    due_hours: Optional[float] = Field(default=None, description="Running-hours due point.", alias="dueHours")
    current_hours: Optional[float] = Field(default=None, description="Current running hours.", alias="currentHours")
    due_text: Optional[str] = Field(default=None, description="Human-readable distance to due.", alias="dueText")

    component_id: Optional[str] = Field(default=None, alias="componentId")
    component_name: Optional[str] = Field(default=None, alias="componentName")
    document_id: Optional[str] = Field(default=None, alias="documentId")
    boat_id: str = Field(..., alias="boatId")
    boat_name: Optional[str] = Field(default=None, alias="boatName")


class AlertListResponse(BaseModel):
    """Envelope for alert feeds."""

    alerts: List[AlertOut] = Field(..., description="Alerts sorted by severity, then due date.")


class DismissAlertRequest(BaseModel):
    """Request body for dismissing a component alert."""

    alert_type: ComponentAlertType = Field(..., description="Which cadence to push forward.", alias="alertType")


class QuickCompleteRequest(BaseModel):
    """Request body for recording a completed service from an alert."""

    alert_type: Optional[ComponentAlertType] = Field(
        default=None, description="Alert that triggered the action (informational).", alias="alertType"
    )
    service_name: Optional[str] = Field(
        default=None,
        description="Log entry title used when the component has no scheduled service name.",
        alias="serviceName",
    )


class ComponentActionResponse(BaseModel):
    """Result of a dismiss / quick-complete action."""

    success: bool = Field(True, description="Always true for a completed action.")
    updates: Dict[str, Any] = Field(..., description="Component fields written by the action.")
