from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import get_db_session, http_error, require_access
from src.api.schemas.commissions import CommissionListItem
from src.api.schemas.dashboard import (
    GoalStatsResponse,
    LeaderboardEntryResponse,
    LeaderboardGoal,
    RecruiterDashboardResponse,
)
from src.api.schemas.goals import GoalResponse
from src.core.access import Requirement
from src.core.errors import ServiceError
from src.core.timeutils import parse_timestamp
from src.domain import CallerContext
from src.domain.services.dashboard import DashboardService
from src.domain.services.progress import LeaderboardSort

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/leaderboard", response_model=list[LeaderboardEntryResponse])
async def leaderboard(
    filter_: str = Query("all", alias="filter"),
    sort_by: str | None = Query(None, alias="sortBy"),
    period_start: str | None = Query(None, alias="periodStart"),
    period_end: str | None = Query(None, alias="periodEnd"),
    caller: CallerContext = Depends(require_access(Requirement.STAFF)),
    session: AsyncSession = Depends(get_db_session),
) -> list[LeaderboardEntryResponse]:
    """Recruiter ranking for admins; `filter=active` hides inactive recruiters."""
    start = parse_timestamp(period_start) if period_start else None
    end = parse_timestamp(period_end) if period_end else None
    if (period_start and start is None) or (period_end and end is None):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid period")

    entries = await DashboardService(session).leaderboard(
        active_only=filter_ == "active",
        sort_by=LeaderboardSort.parse(sort_by),
        period_start=start,
        period_end=end,
    )

    return [
        LeaderboardEntryResponse(
            id=entry.id,
            name=entry.name,
            email=entry.email,
            status=entry.status,
            commission_rate=(
                float(entry.commission_rate) if entry.commission_rate is not None else None
            ),
            goal=LeaderboardGoal.model_validate(entry.goal) if entry.goal else None,
            total_earned=float(entry.total_earned),
            remaining=float(entry.remaining) if entry.remaining is not None else None,
            progress_pct=float(entry.progress_pct),
        )
        for entry in entries
    ]


@router.get("/recruiter", response_model=RecruiterDashboardResponse)
async def recruiter_dashboard(
    goal_id: str | None = Query(None, alias="goalId"),
    caller: CallerContext = Depends(require_access(Requirement.AUTHENTICATED)),
    session: AsyncSession = Depends(get_db_session),
) -> RecruiterDashboardResponse:
    """The caller's own goals, progress on the selected goal and its commissions."""
    try:
        dashboard = await DashboardService(session).recruiter_dashboard(
            recruiter_id=caller.id, goal_id=goal_id
        )
    except ServiceError as exc:
        raise http_error(exc) from exc

    stats = dashboard.stats
    return RecruiterDashboardResponse(
        has_goal=dashboard.has_goal,
        goals=[GoalResponse.model_validate(goal) for goal in dashboard.goals],
        active_goal=(
            GoalResponse.model_validate(dashboard.active_goal) if dashboard.active_goal else None
        ),
        stats=(
            GoalStatsResponse(
                goal_amount=float(stats.goal_amount),
                total_earned=float(stats.total_earned),
                remaining=float(stats.remaining),
                progress_pct=float(stats.progress_pct),
                days_left=stats.days_left,
            )
            if stats
            else None
        ),
        commissions=[CommissionListItem.model_validate(c) for c in dashboard.commissions],
        commission_rate=float(dashboard.commission_rate),
    )
