"""Commission ledger: soft-deletable earnings events logged by admins."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from src.core.errors import NotFoundError, ValidationError
from src.core.timeutils import parse_timestamp, utcnow
from src.domain.models import is_valid_money
from src.domain.services.audit import AuditRecorder
from src.infrastructure.db.models import AuditAction, CommissionModel, UserModel, UserRole

logger = structlog.get_logger()


def _rate_or_none(rate: Decimal | None) -> float | None:
    return float(rate) if rate is not None else None


class CommissionService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.audit = AuditRecorder(session)

    async def create_commission(
        self,
        *,
        actor_id: str,
        recruiter_id: str,
        amount: Decimal,
        logged_date: str | datetime,
        notes: str | None = None,
    ) -> CommissionModel:
        if not is_valid_money(amount):
            raise ValidationError("Amount must be a positive value in whole cents")

        logged_at = parse_timestamp(logged_date)
        if logged_at is None:
            raise ValidationError("Invalid logged date")

        recruiter = await self.session.scalar(
            select(UserModel).where(
                UserModel.id == recruiter_id,
                UserModel.role == UserRole.RECRUITER,
                UserModel.is_live,
            )
        )
        if recruiter is None:
            raise NotFoundError("Recruiter not found")

        commission = CommissionModel(
            recruiter_id=recruiter_id,
            logged_by_id=actor_id,
            amount=amount,
            logged_date=logged_at,
            notes=notes,
        )
        self.session.add(commission)
        await self.session.commit()
        await self.session.refresh(commission)

        await logger.ainfo(
            "commission_created",
            commission_id=commission.id,
            recruiter_id=recruiter_id,
            actor_id=actor_id,
        )

        await self.audit.record(
            actor_id=actor_id,
            action=AuditAction.COMMISSION_CREATED,
            entity_type="Commission",
            entity_id=commission.id,
            metadata={
                "recruiterName": recruiter.full_name,
                "amount": float(amount),
                "loggedDate": logged_at.isoformat(),
                "commissionRate": _rate_or_none(recruiter.commission_rate),
            },
        )
        return commission

    async def delete_commission(self, *, actor_id: str, commission_id: str) -> None:
        """Soft-delete a commission; the row stays for history."""
        commission = await self.session.scalar(
            select(CommissionModel)
            .options(selectinload(CommissionModel.recruiter))
            .where(CommissionModel.id == commission_id, CommissionModel.is_live)
        )
        if commission is None:
            raise NotFoundError("Commission not found")

        recruiter = commission.recruiter
        metadata = {
            "recruiterName": recruiter.full_name if recruiter else commission.recruiter_id,
            "amount": float(commission.amount),
            "commissionRate": _rate_or_none(recruiter.commission_rate if recruiter else None),
        }

        commission.mark_deleted(utcnow())
        await self.session.commit()

        await logger.ainfo("commission_deleted", commission_id=commission_id, actor_id=actor_id)

        await self.audit.record(
            actor_id=actor_id,
            action=AuditAction.COMMISSION_DELETED,
            entity_type="Commission",
            entity_id=commission_id,
            metadata=metadata,
        )

    async def list_commissions(
        self,
        *,
        recruiter_id: str,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> Sequence[CommissionModel]:
        """Live commissions for a recruiter, newest logged date first.

        Both bounds of the optional date range are inclusive.
        """
        stmt = (
            select(CommissionModel)
            .options(selectinload(CommissionModel.logged_by))
            .where(CommissionModel.recruiter_id == recruiter_id, CommissionModel.is_live)
            .order_by(CommissionModel.logged_date.desc())
        )
        if date_from is not None:
            stmt = stmt.where(CommissionModel.logged_date >= date_from)
        if date_to is not None:
            stmt = stmt.where(CommissionModel.logged_date <= date_to)

        result = await self.session.execute(stmt)
        return result.scalars().all()
