from __future__ import annotations

from typing import List

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from src.boatlog.config import sanitize_mongo_uri
from src.boatlog.schemas.common import HealthResponse, utc_now
from src.boatlog.state import get_state

router = APIRouter(tags=["Health"])


class StoreHealthResponse(BaseModel):
    """Store reachability as seen by this process."""

    ok: bool = Field(..., description="True when a ping to MongoDB succeeded.")
    mongo_db_name: str = Field(..., description="Database holding boats, components and logs.")
    mongo_uri_sanitized: str = Field(..., description="Configured URI with the password replaced by ***.")
    collections: List[str] = Field(default_factory=list, description="Collections the API reads and writes.")
    timestamp: str = Field(..., description="When the ping ran (UTC, ISO string).")


@router.get(
    "/",
    response_model=HealthResponse,
    summary="Health check",
    description="Liveness check. Does not touch the store.",
    operation_id="health_check",
)
def health_check() -> HealthResponse:
    """Liveness check."""
    return HealthResponse(status="ok", message="Boat log API is running", timestamp=utc_now())


@router.get(
    "/api/health/mongo",
    response_model=StoreHealthResponse,
    summary="Store connectivity check",
    description="Pings MongoDB with the configured URI. Credentials are masked in the response.",
    operation_id="mongo_connectivity_check",
)
def mongo_connectivity_check(request: Request) -> StoreHealthResponse:
    state = get_state(request.app)
    ok = state.mongo.ping()
    names = sorted(c.name for c in vars(state.mongo.collections()).values()) if ok else []
    return StoreHealthResponse(
        ok=ok,
        mongo_db_name=state.mongo.app_db().name,
        mongo_uri_sanitized=sanitize_mongo_uri(state.config.mongo_uri),
        collections=names,
        timestamp=utc_now().isoformat(),
    )
