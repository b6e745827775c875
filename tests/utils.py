from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import issue_smoke_token
from src.core.auth import Role
from src.core.timeutils import utcnow
from src.domain.services.account_email import PasswordResetEmail, WelcomeEmail
from src.domain.services.auth_service import hash_password
from src.infrastructure.db.models import (
    CommissionModel,
    GoalModel,
    UserModel,
    UserRole,
    UserStatus,
)

DEFAULT_PASSWORD = "Password123!"


def auth_headers(user_id: str, role: Role = Role.RECRUITER) -> dict[str, str]:
    token = issue_smoke_token(user_id, role=role, email=f"{user_id}@example.com")
    return {"Authorization": f"Bearer {token}"}


def headers_for(user: UserModel) -> dict[str, str]:
    return auth_headers(user.id, Role(user.role.value))


def iso(value: datetime) -> str:
    return value.isoformat()


def days_from_now(days: float) -> datetime:
    return utcnow() + timedelta(days=days)


async def create_user(
    session: AsyncSession,
    *,
    email: str,
    first_name: str = "Test",
    last_name: str = "User",
    role: UserRole = UserRole.RECRUITER,
    status: UserStatus = UserStatus.ACTIVE,
    commission_rate: Decimal | str | None = None,
    password: str = DEFAULT_PASSWORD,
) -> UserModel:
    user = UserModel(
        email=email,
        password_hash=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        role=role,
        status=status,
        commission_rate=Decimal(commission_rate) if commission_rate is not None else None,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


async def create_goal(
    session: AsyncSession,
    *,
    recruiter_id: str,
    amount: Decimal | str,
    period_start: datetime,
    period_end: datetime,
    created_at: datetime | None = None,
) -> GoalModel:
    goal = GoalModel(
        recruiter_id=recruiter_id,
        amount=Decimal(amount),
        period_start=period_start,
        period_end=period_end,
    )
    if created_at is not None:
        goal.created_at = created_at
    session.add(goal)
    await session.commit()
    await session.refresh(goal)
    return goal


async def create_commission(
    session: AsyncSession,
    *,
    recruiter_id: str,
    logged_by_id: str,
    amount: Decimal | str,
    logged_date: datetime,
    notes: str | None = None,
) -> CommissionModel:
    commission = CommissionModel(
        recruiter_id=recruiter_id,
        logged_by_id=logged_by_id,
        amount=Decimal(amount),
        logged_date=logged_date,
        notes=notes,
    )
    session.add(commission)
    await session.commit()
    await session.refresh(commission)
    return commission


class FakeAccountEmails:
    """Stands in for the Resend-backed email service and records what was sent."""

    def __init__(self) -> None:
        self.password_resets: list[PasswordResetEmail] = []
        self.welcomes: list[WelcomeEmail] = []

    async def send_password_reset(self, message: PasswordResetEmail) -> str:
        self.password_resets.append(message)
        return f"reset-{len(self.password_resets)}"

    async def send_welcome(self, message: WelcomeEmail) -> str:
        self.welcomes.append(message)
        return f"welcome-{len(self.welcomes)}"
