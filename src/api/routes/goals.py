from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import authorize, get_db_session, http_error, require_access
from src.api.schemas.goals import GoalCreate, GoalResponse
from src.core.access import Requirement
from src.core.errors import ServiceError
from src.domain import CallerContext
from src.domain.services.goals import GoalService

router = APIRouter(prefix="/goals", tags=["Goals"])


@router.get("", response_model=list[GoalResponse])
async def list_goals(
    recruiter_id: str | None = Query(None, alias="recruiterId"),
    caller: CallerContext = Depends(require_access(Requirement.AUTHENTICATED)),
    session: AsyncSession = Depends(get_db_session),
) -> list[GoalResponse]:
    """Goals of a recruiter (defaults to the caller), newest first."""
    target_id = recruiter_id or caller.id
    authorize(caller, Requirement.SELF_OR_STAFF, owner_id=target_id)

    goals = await GoalService(session).list_goals(target_id)
    return [GoalResponse.model_validate(goal) for goal in goals]


@router.post("", response_model=GoalResponse, status_code=status.HTTP_201_CREATED)
async def create_goal(
    payload: GoalCreate,
    caller: CallerContext = Depends(require_access(Requirement.AUTHENTICATED)),
    session: AsyncSession = Depends(get_db_session),
) -> GoalResponse:
    """Create a goal for the caller; 409 while another goal is still running."""
    service = GoalService(session)

    try:
        goal = await service.create_goal(
            recruiter_id=caller.id,
            amount=payload.amount,
            period_start=payload.period_start,
            period_end=payload.period_end,
        )
    except ServiceError as exc:
        raise http_error(exc) from exc

    return GoalResponse.model_validate(goal)
