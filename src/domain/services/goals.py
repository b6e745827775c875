"""Goal lifecycle: creation under the one-active-goal rule, and listing."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from src.core.errors import ConflictError, NotFoundError, ValidationError
from src.core.timeutils import parse_timestamp, utcnow
from src.domain.models import is_valid_money
from src.domain.services.audit import AuditRecorder
from src.infrastructure.db.models import AuditAction, GoalModel, UserModel

logger = structlog.get_logger()


class GoalService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.audit = AuditRecorder(session)

    async def create_goal(
        self,
        *,
        recruiter_id: str,
        amount: Decimal,
        period_start: str | datetime,
        period_end: str | datetime,
    ) -> GoalModel:
        """Create a goal for the recruiter unless one is still running.

        A goal whose period end has not passed blocks a new one. The
        recruiter's row is locked for the duration of the check so concurrent
        requests for the same recruiter serialize.
        """
        if not is_valid_money(amount):
            raise ValidationError("Amount must be a positive value in whole cents")

        start = parse_timestamp(period_start)
        end = parse_timestamp(period_end)
        if start is None or end is None:
            raise ValidationError("Invalid dates")
        if end <= start:
            raise ValidationError("Period end must be after period start")

        recruiter = await self.session.scalar(
            select(UserModel)
            .where(UserModel.id == recruiter_id, UserModel.is_live)
            .with_for_update()
        )
        if recruiter is None:
            raise NotFoundError("User not found")

        active_goal_id = await self.session.scalar(
            select(GoalModel.id)
            .where(
                GoalModel.recruiter_id == recruiter_id,
                GoalModel.is_live,
                GoalModel.period_end >= utcnow(),
            )
            .limit(1)
        )
        if active_goal_id is not None:
            await self.session.rollback()
            await logger.awarning(
                "goal_create_conflict",
                recruiter_id=recruiter_id,
                active_goal_id=active_goal_id,
            )
            raise ConflictError("An active goal already exists for this period")

        goal = GoalModel(
            recruiter_id=recruiter_id,
            amount=amount,
            period_start=start,
            period_end=end,
        )
        self.session.add(goal)
        await self.session.commit()
        await self.session.refresh(goal)

        await logger.ainfo("goal_created", goal_id=goal.id, recruiter_id=recruiter_id)

        await self.audit.record(
            actor_id=recruiter_id,
            action=AuditAction.GOAL_CREATED,
            entity_type="Goal",
            entity_id=goal.id,
            metadata={
                "amount": float(amount),
                "periodStart": start.isoformat(),
                "periodEnd": end.isoformat(),
            },
        )
        return goal

    async def list_goals(self, recruiter_id: str) -> Sequence[GoalModel]:
        """Live goals for a recruiter, newest first."""
        stmt = (
            select(GoalModel)
            .where(GoalModel.recruiter_id == recruiter_id, GoalModel.is_live)
            .order_by(GoalModel.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()
