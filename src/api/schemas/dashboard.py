from __future__ import annotations

from datetime import datetime

from src.api.schemas.commissions import CommissionListItem
from src.api.schemas.common import CamelModel
from src.api.schemas.goals import GoalResponse


class LeaderboardGoal(CamelModel):
    id: str
    amount: float
    period_start: datetime
    period_end: datetime


class LeaderboardEntryResponse(CamelModel):
    id: str
    name: str
    email: str
    status: str
    commission_rate: float | None = None
    goal: LeaderboardGoal | None = None
    total_earned: float
    remaining: float | None = None
    progress_pct: float


class GoalStatsResponse(CamelModel):
    goal_amount: float
    total_earned: float
    remaining: float
    progress_pct: float
    days_left: int


class RecruiterDashboardResponse(CamelModel):
    has_goal: bool
    goals: list[GoalResponse]
    active_goal: GoalResponse | None = None
    stats: GoalStatsResponse | None = None
    commissions: list[CommissionListItem]
    commission_rate: float
