from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Path, Request, status

from src.boatlog.auth import get_current_account
from src.boatlog.schemas.boats import PartOut, PartUpdate
from src.boatlog.schemas.common import ErrorResponse
from src.boatlog.services import boats_service
from src.boatlog.services.boats_service import InvalidReference

router = APIRouter(prefix="/api/parts", tags=["Parts"])


def _owned_part_or_404(request: Request, account: dict, part_id: str) -> dict:
    part = boats_service.get_owned_part(request, account["id"], part_id)
    if not part:
        raise HTTPException(status_code=404, detail="Part not found")
    return part


@router.patch(
    "/{part_id}",
    response_model=PartOut,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Update part",
    description="Partial update. A blank name keeps the current one; other sent nulls clear the field.",
    operation_id="update_part",
)
def update_part(
    request: Request,
    payload: PartUpdate,
    part_id: str = Path(..., description="Part id"),
    account: dict = Depends(get_current_account),
) -> PartOut:
    part = _owned_part_or_404(request, account, part_id)
    try:
        updated = boats_service.update_part(request, part, payload)
    except InvalidReference as e:
        raise HTTPException(status_code=400, detail=str(e))
    return PartOut.model_validate(updated)


@router.delete(
    "/{part_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
    summary="Delete part",
    operation_id="delete_part",
)
def delete_part(
    request: Request,
    part_id: str = Path(..., description="Part id"),
    account: dict = Depends(get_current_account),
) -> None:
    """Delete a part on an owned boat."""
    boats_service.delete_part(request, _owned_part_or_404(request, account, part_id))
    return None
