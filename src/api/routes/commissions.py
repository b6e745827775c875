from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import authorize, get_db_session, http_error, require_access
from src.api.schemas.commissions import CommissionCreate, CommissionListItem, CommissionResponse
from src.api.schemas.common import SuccessResponse
from src.core.access import Requirement
from src.core.errors import ServiceError
from src.core.timeutils import parse_timestamp
from src.domain import CallerContext
from src.domain.services.commissions import CommissionService

router = APIRouter(prefix="/commissions", tags=["Commissions"])


@router.get("", response_model=list[CommissionListItem])
async def list_commissions(
    recruiter_id: str | None = Query(None, alias="recruiterId"),
    date_from: str | None = Query(None, alias="from"),
    date_to: str | None = Query(None, alias="to"),
    caller: CallerContext = Depends(require_access(Requirement.AUTHENTICATED)),
    session: AsyncSession = Depends(get_db_session),
) -> list[CommissionListItem]:
    """Commissions of a recruiter (defaults to the caller), newest logged date first."""
    target_id = recruiter_id or caller.id
    authorize(caller, Requirement.SELF_OR_STAFF, owner_id=target_id)

    lower = parse_timestamp(date_from) if date_from else None
    upper = parse_timestamp(date_to) if date_to else None
    if (date_from and lower is None) or (date_to and upper is None):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid date range")

    commissions = await CommissionService(session).list_commissions(
        recruiter_id=target_id,
        date_from=lower,
        date_to=upper,
    )
    return [CommissionListItem.model_validate(commission) for commission in commissions]


@router.post("", response_model=CommissionResponse, status_code=status.HTTP_201_CREATED)
async def create_commission(
    payload: CommissionCreate,
    caller: CallerContext = Depends(require_access(Requirement.STAFF)),
    session: AsyncSession = Depends(get_db_session),
) -> CommissionResponse:
    service = CommissionService(session)

    try:
        commission = await service.create_commission(
            actor_id=caller.id,
            recruiter_id=payload.recruiter_id,
            amount=payload.amount,
            logged_date=payload.logged_date,
            notes=payload.notes,
        )
    except ServiceError as exc:
        raise http_error(exc) from exc

    return CommissionResponse.model_validate(commission)


@router.delete("/{commission_id}", response_model=SuccessResponse)
async def delete_commission(
    commission_id: str,
    caller: CallerContext = Depends(require_access(Requirement.STAFF)),
    session: AsyncSession = Depends(get_db_session),
) -> SuccessResponse:
    """Soft-delete a commission (admin-only)."""
    service = CommissionService(session)

    try:
        await service.delete_commission(actor_id=caller.id, commission_id=commission_id)
    except ServiceError as exc:
        raise http_error(exc) from exc

    return SuccessResponse()
