"""User account management for admins."""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from src.core.errors import ConflictError, NotFoundError, ValidationError
from src.core.timeutils import utcnow
from src.domain.services.audit import AuditRecorder
from src.domain.services.auth_service import hash_password
from src.infrastructure.db.models import AuditAction, UserModel, UserRole, UserStatus

logger = structlog.get_logger()

_UNSET: Any = object()


class UserService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.audit = AuditRecorder(session)

    async def list_users(self) -> Sequence[UserModel]:
        stmt = select(UserModel).where(UserModel.is_live).order_by(UserModel.created_at.desc())
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def get_user(self, user_id: str) -> UserModel:
        user = await self.session.scalar(
            select(UserModel).where(UserModel.id == user_id, UserModel.is_live)
        )
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def create_user(
        self,
        *,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        role: UserRole = UserRole.RECRUITER,
        commission_rate: Decimal | None = None,
    ) -> UserModel:
        """Create an ACTIVE account.

        Email addresses stay reserved by soft-deleted accounts. The unique
        constraint on `users.email` backs up the pre-check.
        """
        email = email.lower()
        await self._ensure_email_free(email)

        user = UserModel(
            email=email,
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
            role=role,
            commission_rate=commission_rate,
            status=UserStatus.ACTIVE,
        )

        try:
            self.session.add(user)
            await self.session.commit()
            await self.session.refresh(user)
        except IntegrityError as exc:
            await self.session.rollback()
            await logger.awarning("user_create_duplicate_email", email=email)
            raise ConflictError("Email already in use") from exc

        await logger.ainfo("user_created", user_id=user.id, role=role.value)
        return user

    async def update_user(
        self,
        *,
        actor_id: str,
        user_id: str,
        first_name: str | None = None,
        last_name: str | None = None,
        email: str | None = None,
        role: UserRole | None = None,
        status: UserStatus | None = None,
        commission_rate: Decimal | None = _UNSET,
    ) -> UserModel:
        """Apply a partial update; `commission_rate=None` clears the rate."""
        user = await self.get_user(user_id)

        if email is not None:
            email = email.lower()
            if email != user.email:
                await self._ensure_email_free(email)
                user.email = email

        old_status = user.status
        if first_name is not None:
            user.first_name = first_name
        if last_name is not None:
            user.last_name = last_name
        if role is not None:
            user.role = role
        if status is not None:
            user.status = status
        if commission_rate is not _UNSET:
            user.commission_rate = commission_rate

        try:
            await self.session.commit()
            await self.session.refresh(user)
        except IntegrityError as exc:
            await self.session.rollback()
            raise ConflictError("Email already in use") from exc

        await logger.ainfo("user_updated", user_id=user_id, actor_id=actor_id)

        if status is not None and status != old_status:
            await self.audit.record(
                actor_id=actor_id,
                action=AuditAction.USER_STATUS_CHANGED,
                entity_type="User",
                entity_id=user_id,
                metadata={"oldStatus": old_status.value, "newStatus": status.value},
            )
        return user

    async def delete_user(self, *, actor_id: str, user_id: str) -> None:
        """Soft-delete an account and force it INACTIVE. Self-deletion is refused."""
        if user_id == actor_id:
            raise ValidationError("Cannot delete your own account")

        user = await self.get_user(user_id)
        old_status = user.status

        user.mark_deleted(utcnow())
        user.status = UserStatus.INACTIVE
        user.reset_token = None
        user.reset_token_expiry = None
        await self.session.commit()

        await logger.ainfo("user_deleted", user_id=user_id, actor_id=actor_id)

        if old_status != UserStatus.INACTIVE:
            await self.audit.record(
                actor_id=actor_id,
                action=AuditAction.USER_STATUS_CHANGED,
                entity_type="User",
                entity_id=user_id,
                metadata={
                    "oldStatus": old_status.value,
                    "newStatus": UserStatus.INACTIVE.value,
                    "reason": "deleted",
                },
            )

    async def _ensure_email_free(self, email: str) -> None:
        taken = await self.session.scalar(select(UserModel.id).where(UserModel.email == email))
        if taken is not None:
            raise ConflictError("Email already in use")
