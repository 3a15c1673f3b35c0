from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional
from uuid import uuid4

from pydantic import BaseModel, Field


class Severity(str, Enum):
    """Severity tiers for due-item alerts, most pressing first."""

    overdue = "overdue"
    urgent = "urgent"
    upcoming = "upcoming"
    info = "info"


class HealthResponse(BaseModel):
    """Liveness check body."""

    status: str = Field(..., description="'ok' while the process is serving requests.")
    message: str
    timestamp: datetime = Field(..., description="Server time (UTC).")


class ErrorResponse(BaseModel):
    """Error body for raised HTTP errors and internal failures."""

    detail: str = Field(..., description="What went wrong, e.g. 'Component not found'.")
    code: Optional[str] = Field(default=None, description="Stable error code when one applies.")
    meta: Dict[str, Any] = Field(default_factory=dict)


# PUBLIC_INTERFACE
def utc_now() -> datetime:
    """Current time as an aware UTC datetime (stored for created_at/uploaded_at)."""
    return datetime.now(timezone.utc)


# PUBLIC_INTERFACE
def utc_today() -> date:
    """Return the current UTC calendar date (the 'today' used for due-date math)."""
    return utc_now().date()


# PUBLIC_INTERFACE
def new_id() -> str:
    """Return a new string identifier for stored documents."""
    return str(uuid4())
