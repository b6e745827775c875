"""Leaderboard and per-recruiter dashboard figures."""

from __future__ import annotations

import math
from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from src.core.errors import NotFoundError
from src.core.timeutils import ensure_utc, utcnow
from src.domain.services.progress import LeaderboardSort, compute_progress, sort_leaderboard
from src.infrastructure.db.models import (
    CommissionModel,
    GoalModel,
    UserModel,
    UserRole,
    UserStatus,
)

logger = structlog.get_logger()

_SECONDS_PER_DAY = 86400


@dataclass(slots=True)
class LeaderboardEntry:
    id: str
    name: str
    email: str
    status: str
    commission_rate: Decimal | None
    goal: GoalModel | None
    total_earned: Decimal
    remaining: Decimal | None
    progress_pct: Decimal


@dataclass(slots=True)
class GoalStats:
    goal_amount: Decimal
    total_earned: Decimal
    remaining: Decimal
    progress_pct: Decimal
    days_left: int


@dataclass(slots=True)
class RecruiterDashboard:
    goals: Sequence[GoalModel]
    active_goal: GoalModel | None
    stats: GoalStats | None
    commissions: Sequence[CommissionModel]
    commission_rate: Decimal

    @property
    def has_goal(self) -> bool:
        return self.active_goal is not None


def days_left(period_end: datetime, now: datetime | None = None) -> int:
    remaining_seconds = (ensure_utc(period_end) - (now or utcnow())).total_seconds()
    return max(0, math.ceil(remaining_seconds / _SECONDS_PER_DAY))


class DashboardService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def leaderboard(
        self,
        *,
        active_only: bool = False,
        sort_by: LeaderboardSort = LeaderboardSort.EARNED,
        period_start: datetime | None = None,
        period_end: datetime | None = None,
    ) -> list[LeaderboardEntry]:
        """Rank recruiters by goal progress.

        The period narrows goals and commissions only when both bounds are
        given; otherwise every live goal and commission counts.
        """
        user_stmt = (
            select(UserModel)
            .where(UserModel.role == UserRole.RECRUITER, UserModel.is_live)
            .order_by(UserModel.created_at)
        )
        if active_only:
            user_stmt = user_stmt.where(UserModel.status == UserStatus.ACTIVE)
        recruiters = (await self.session.execute(user_stmt)).scalars().all()
        if not recruiters:
            return []

        recruiter_ids = [recruiter.id for recruiter in recruiters]
        scoped = period_start is not None and period_end is not None

        goal_stmt = (
            select(GoalModel)
            .where(GoalModel.recruiter_id.in_(recruiter_ids), GoalModel.is_live)
            .order_by(GoalModel.created_at.desc())
        )
        commission_stmt = select(CommissionModel.recruiter_id, CommissionModel.amount).where(
            CommissionModel.recruiter_id.in_(recruiter_ids), CommissionModel.is_live
        )
        if scoped:
            goal_stmt = goal_stmt.where(
                GoalModel.period_start >= period_start, GoalModel.period_end <= period_end
            )
            commission_stmt = commission_stmt.where(
                CommissionModel.logged_date >= period_start,
                CommissionModel.logged_date <= period_end,
            )

        latest_goal: dict[str, GoalModel] = {}
        for goal in (await self.session.execute(goal_stmt)).scalars():
            latest_goal.setdefault(goal.recruiter_id, goal)

        amounts: dict[str, list[Decimal]] = defaultdict(list)
        for recruiter_id, amount in (await self.session.execute(commission_stmt)).all():
            amounts[recruiter_id].append(amount)

        entries: list[LeaderboardEntry] = []
        for recruiter in recruiters:
            goal = latest_goal.get(recruiter.id)
            stats = compute_progress(
                goal.amount if goal else None,
                amounts.get(recruiter.id, []),
                recruiter.commission_rate,
            )
            entries.append(
                LeaderboardEntry(
                    id=recruiter.id,
                    name=recruiter.full_name,
                    email=recruiter.email,
                    status=recruiter.status.value,
                    commission_rate=recruiter.commission_rate,
                    goal=goal,
                    total_earned=stats.total_earned,
                    remaining=stats.remaining,
                    progress_pct=stats.progress_pct,
                )
            )

        await logger.ainfo(
            "leaderboard_computed",
            recruiters=len(entries),
            sort_by=sort_by.value,
            scoped=scoped,
        )
        return sort_leaderboard(entries, sort_by)

    async def recruiter_dashboard(
        self, *, recruiter_id: str, goal_id: str | None = None
    ) -> RecruiterDashboard:
        recruiter = await self.session.scalar(
            select(UserModel).where(UserModel.id == recruiter_id, UserModel.is_live)
        )
        if recruiter is None:
            raise NotFoundError("User not found")
        commission_rate = recruiter.commission_rate or Decimal(0)

        goals = (
            (
                await self.session.execute(
                    select(GoalModel)
                    .where(GoalModel.recruiter_id == recruiter_id, GoalModel.is_live)
                    .order_by(GoalModel.created_at.desc())
                )
            )
            .scalars()
            .all()
        )
        if not goals:
            return RecruiterDashboard(
                goals=[],
                active_goal=None,
                stats=None,
                commissions=[],
                commission_rate=commission_rate,
            )

        active_goal = next((goal for goal in goals if goal.id == goal_id), goals[0])

        commissions = (
            (
                await self.session.execute(
                    select(CommissionModel)
                    .options(selectinload(CommissionModel.logged_by))
                    .where(
                        CommissionModel.recruiter_id == recruiter_id,
                        CommissionModel.is_live,
                        CommissionModel.logged_date >= active_goal.period_start,
                        CommissionModel.logged_date <= active_goal.period_end,
                    )
                    .order_by(CommissionModel.logged_date.desc())
                )
            )
            .scalars()
            .all()
        )

        progress = compute_progress(
            active_goal.amount,
            (commission.amount for commission in commissions),
            commission_rate,
        )
        stats = GoalStats(
            goal_amount=active_goal.amount,
            total_earned=progress.total_earned,
            remaining=progress.remaining if progress.remaining is not None else Decimal(0),
            progress_pct=progress.progress_pct,
            days_left=days_left(active_goal.period_end),
        )
        return RecruiterDashboard(
            goals=goals,
            active_goal=active_goal,
            stats=stats,
            commissions=commissions,
            commission_rate=commission_rate,
        )
