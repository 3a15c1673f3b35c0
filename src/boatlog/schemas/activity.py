from __future__ import annotations

from datetime import date as date_type
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


ActivityType = Literal["maintenance", "health_check", "document"]


class ActivityItemOut(BaseModel):
    """One entry of the recent-activity feed (projection of a log entry, health check or document upload)."""

    id: str = Field(..., description="Prefixed source id, e.g. 'log-<id>'.")
    type: ActivityType = Field(..., description="Source category.")
    title: str = Field(..., description="Short title.")
    description: Optional[str] = Field(default=None, description="Optional detail line.")
    date: date_type = Field(..., description="Maintenance date, check date or upload date.")

    boat_id: str = Field(..., alias="boatId")
    boat_name: Optional[str] = Field(default=None, alias="boatName")
    component_id: Optional[str] = Field(default=None, alias="componentId")
    component_name: Optional[str] = Field(default=None, alias="componentName")
    cost: Optional[float] = Field(default=None, description="Cost of the logged work, if recorded.")
    currency: Optional[str] = Field(default=None, description="Currency code for cost.")


class ActivityListResponse(BaseModel):
    """Envelope for the activity feed."""

    activity: List[ActivityItemOut] = Field(..., description="Most recent first.")
