from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from src.boatlog.auth import CallerIdentity, get_caller, get_current_account, is_admin
from src.boatlog.schemas.boats import AccountOut
from src.boatlog.schemas.common import ErrorResponse
from src.boatlog.services import boats_service

router = APIRouter(prefix="/api/account", tags=["Account"])


def _to_out(account: dict, admin: bool) -> AccountOut:
    return AccountOut(
        id=account["id"],
        auth_id=account["auth_id"],
        email=account.get("email"),
        name=account.get("name"),
        is_admin=admin,
        created_at=account["created_at"],
    )


@router.put(
    "",
    response_model=AccountOut,
    responses={401: {"model": ErrorResponse}},
    summary="Sync account",
    description="Create the caller's account record on first sign-in, or refresh email/name from token claims.",
    operation_id="sync_account",
)
def sync_account(request: Request, caller: CallerIdentity = Depends(get_caller)) -> AccountOut:
    """Upsert the caller's account from verified token claims."""
    account = boats_service.upsert_account(request, caller.auth_id, caller.email, caller.name)
    return _to_out(account, is_admin(request, caller))


@router.get(
    "",
    response_model=AccountOut,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Get account",
    operation_id="get_account",
)
def get_account(
    request: Request,
    caller: CallerIdentity = Depends(get_caller),
    account: dict = Depends(get_current_account),
) -> AccountOut:
    """Return the caller's account record."""
    return _to_out(account, is_admin(request, caller))
