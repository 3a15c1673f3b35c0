from __future__ import annotations

from datetime import date as date_type, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


HealthCheckType = Literal["oil_level", "fluid_level", "visual", "pressure", "other"]
SafetyEquipmentType = Literal[
    "fire_extinguisher",
    "engine_room_fire_system",
    "life_jacket",
    "life_raft",
    "flares",
    "epirb",
    "first_aid_kit",
    "life_ring",
    "fire_blanket",
    "other",
]


class AccountOut(BaseModel):
    """The caller's internal account record."""

    id: str = Field(..., description="Internal account id.")
    auth_id: str = Field(..., description="Identity-provider subject.")
    email: Optional[str] = Field(default=None)
    name: Optional[str] = Field(default=None)
    is_admin: bool = Field(False, description="Whether the caller is on the admin allowlist.")
    created_at: datetime


class BoatCreate(BaseModel):
    """Request model for creating a boat."""

    name: str = Field(..., description="Display name.")
    make: Optional[str] = Field(default=None)
    model: Optional[str] = Field(default=None)
    year: Optional[int] = Field(default=None, ge=1800, le=2200)
    home_port: Optional[str] = Field(default=None)


class BoatOut(BoatCreate):
    """Response model for a boat."""

    id: str
    owner_id: str
    created_at: datetime
    updated_at: datetime


class BoatListResponse(BaseModel):
    """Envelope for listing boats."""

    items: List[BoatOut]
    total: int = Field(..., ge=0)


class ComponentBase(BaseModel):
    """Editable component fields, including both service cadences."""

    name: str = Field(..., description="Display name, e.g. 'Port Engine'.")
    category: Optional[str] = Field(default=None, description="Grouping, e.g. 'propulsion'.")
    type: Optional[str] = Field(default=None, description="Component type, e.g. 'inboard_engine'.")

    current_hours: Optional[float] = Field(default=None, ge=0, description="Current running hours.")
    scheduled_service_name: Optional[str] = Field(default=None, description="e.g. 'Oil Change'.")

    service_interval_days: Optional[int] = Field(default=None, ge=1, description="Date cadence interval.")
    last_service_date: Optional[date_type] = Field(default=None)
    next_service_date: Optional[date_type] = Field(default=None)

    service_interval_hours: Optional[float] = Field(default=None, gt=0, description="Hours cadence interval.")
    last_service_hours: Optional[float] = Field(default=None, ge=0)
    next_service_hours: Optional[float] = Field(default=None, ge=0)


class ComponentCreate(ComponentBase):
    """Request model for creating a component."""


class ComponentUpdate(BaseModel):
    """Partial update for a component; explicitly sent nulls clear the field."""

    name: Optional[str] = None
    category: Optional[str] = None
    type: Optional[str] = None
    current_hours: Optional[float] = Field(default=None, ge=0)
    scheduled_service_name: Optional[str] = None
    service_interval_days: Optional[int] = Field(default=None, ge=1)
    last_service_date: Optional[date_type] = None
    next_service_date: Optional[date_type] = None
    service_interval_hours: Optional[float] = Field(default=None, gt=0)
    last_service_hours: Optional[float] = Field(default=None, ge=0)
    next_service_hours: Optional[float] = Field(default=None, ge=0)


class ComponentOut(ComponentBase):
    """Response model for a component."""

    id: str
    boat_id: str
    created_at: datetime
    updated_at: datetime


class ComponentListResponse(BaseModel):
    """Envelope for listing components."""

    items: List[ComponentOut]
    total: int = Field(..., ge=0)


class DocumentCreate(BaseModel):
    """Request model for registering a document's metadata (the file itself lives in blob storage)."""

    name: str
    category: str = Field("other", description="e.g. 'registration', 'insurance'.")
    file_url: Optional[str] = Field(default=None)
    expiry_date: Optional[date_type] = Field(default=None)
    reminder_days: Optional[int] = Field(
        default=None, ge=1, le=3650, description="Days before expiry to start alerting (default 30)."
    )
    notes: Optional[str] = None


class DocumentOut(DocumentCreate):
    """Response model for a document."""

    id: str
    boat_id: str
    uploaded_by: str
    uploaded_at: datetime


class DocumentListResponse(BaseModel):
    """Envelope for listing documents."""

    items: List[DocumentOut]
    total: int = Field(..., ge=0)


class LogEntryCreate(BaseModel):
    """Request model for a maintenance log entry."""

    maintenance_item: str = Field(..., description="What was done, e.g. 'Oil Change'.")
    date: Optional[date_type] = Field(default=None, description="Service date; defaults to today.")
    component_id: Optional[str] = None
    description: Optional[str] = None
    cost: Optional[float] = Field(default=None, ge=0)
    currency: Optional[str] = None
    hours_at_service: Optional[float] = Field(default=None, ge=0)


class LogEntryOut(BaseModel):
    """Response model for a log entry."""

    id: str
    boat_id: str
    component_id: Optional[str] = None
    maintenance_item: str
    date: date_type
    description: Optional[str] = None
    cost: Optional[float] = None
    currency: Optional[str] = None
    hours_at_service: Optional[float] = None
    created_by: str
    created_at: datetime


class LogEntryListResponse(BaseModel):
    """Envelope for listing log entries."""

    items: List[LogEntryOut]
    total: int = Field(..., ge=0)


class HealthCheckCreate(BaseModel):
    """Request model for a health check observation."""

    title: str
    check_type: HealthCheckType = "visual"
    date: Optional[date_type] = Field(default=None, description="Observation date; defaults to today.")
    component_id: Optional[str] = None
    quantity: Optional[str] = None
    notes: Optional[str] = None


class HealthCheckOut(BaseModel):
    """Response model for a health check."""

    id: str
    boat_id: str
    component_id: Optional[str] = None
    check_type: HealthCheckType
    title: str
    date: date_type
    quantity: Optional[str] = None
    notes: Optional[str] = None
    created_by: str
    created_at: datetime


class HealthCheckListResponse(BaseModel):
    """Envelope for listing health checks."""

    items: List[HealthCheckOut]
    total: int = Field(..., ge=0)


class SafetyEquipmentCreate(BaseModel):
    """Request model for a piece of safety equipment."""

    type: SafetyEquipmentType
    type_other: Optional[str] = Field(default=None, description="Custom name when type is 'other'.")
    quantity: int = Field(1, ge=1)
    expiry_date: Optional[date_type] = None
    next_service_date: Optional[date_type] = None
    notes: Optional[str] = None


class SafetyEquipmentOut(SafetyEquipmentCreate):
    """Response model for safety equipment."""

    id: str
    boat_id: str
    created_by: str
    created_at: datetime


class SafetyEquipmentListResponse(BaseModel):
    """Envelope for listing safety equipment."""

    items: List[SafetyEquipmentOut]
    total: int = Field(..., ge=0)


class CrewCreate(BaseModel):
    """Grant crew access on a boat to an existing account."""

    user_id: str = Field(..., description="Internal account id of the crew member.")
    role: str = Field("crew", description="Free-form crew role.")


class CrewOut(CrewCreate):
    """Response model for a crew access grant."""

    id: str
    boat_id: str
    created_at: datetime


class PartCreate(BaseModel):
    """Request model for recording a part carried or installed on a boat."""

    name: str = Field(..., description="e.g. 'Raw water impeller'.")
    component_id: Optional[str] = Field(default=None, description="Component the part belongs to, if any.")
    brand: Optional[str] = None
    part_number: Optional[str] = None
    size_specs: Optional[str] = Field(default=None, description="Free-form size/spec text, e.g. '12V 40A'.")
    supplier: Optional[str] = None
    install_date: Optional[date_type] = None
    notes: Optional[str] = None
    photo_url: Optional[str] = None


class PartUpdate(BaseModel):
    """Partial update for a part; explicitly sent nulls clear the field (name cannot be cleared)."""

    name: Optional[str] = None
    component_id: Optional[str] = None
    brand: Optional[str] = None
    part_number: Optional[str] = None
    size_specs: Optional[str] = None
    supplier: Optional[str] = None
    install_date: Optional[date_type] = None
    notes: Optional[str] = None
    photo_url: Optional[str] = None


class PartOut(PartCreate):
    """Response model for a part."""

    id: str
    boat_id: str
    component_name: Optional[str] = Field(default=None, description="Name of the linked component.")
    created_by: str
    created_at: datetime


class PartListResponse(BaseModel):
    """Envelope for listing parts."""

    items: List[PartOut]
    total: int = Field(..., ge=0)
