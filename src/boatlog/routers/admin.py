from __future__ import annotations

from typing import Dict

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from src.boatlog.auth import CallerIdentity, require_admin
from src.boatlog.schemas.common import ErrorResponse, utc_now
from src.boatlog.services import boats_service

router = APIRouter(prefix="/api/admin", tags=["Admin"])


class AdminStatsResponse(BaseModel):
    """Record counts across the store."""

    counts: Dict[str, int] = Field(..., description="Document count per collection.")
    timestamp: str = Field(..., description="UTC timestamp when the counts were taken (ISO string).")


@router.get(
    "/stats",
    response_model=AdminStatsResponse,
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
    summary="Admin stats",
    description="Collection counts. Only identity subjects listed in ADMIN_USER_IDS may call this.",
    operation_id="admin_stats",
)
def admin_stats(request: Request, _admin: CallerIdentity = Depends(require_admin)) -> AdminStatsResponse:
    """Return store-wide record counts."""
    return AdminStatsResponse(counts=boats_service.collection_counts(request), timestamp=utc_now().isoformat())
