"""Single-use, time-limited password reset tokens."""

from __future__ import annotations

import secrets
from datetime import timedelta
from urllib.parse import urlencode

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from src.core.config import get_settings
from src.core.errors import ValidationError
from src.core.timeutils import utcnow
from src.domain.services.account_email import PasswordResetEmail
from src.domain.services.auth_service import hash_password
from src.infrastructure.db.models import UserModel, UserStatus

logger = structlog.get_logger()

# 32 random bytes, hex encoded
TOKEN_BYTES = 32


class PasswordResetService:
    """Issue and redeem password reset tokens.

    A user moves from no pending token to an issued token, which is either
    redeemed (and cleared) or left to expire. Issuing a new token replaces any
    earlier one.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.settings = get_settings()

    async def request_reset(self, email: str) -> PasswordResetEmail | None:
        """Issue a token for an active account.

        Returns the email to dispatch, or None when the address does not belong
        to an active account. Callers respond identically in both cases.
        """
        stmt = select(UserModel).where(UserModel.email == email.lower(), UserModel.is_live)
        user = await self.session.scalar(stmt)

        if user is None or user.status != UserStatus.ACTIVE:
            await logger.ainfo("password_reset_ignored")
            return None

        token = secrets.token_hex(TOKEN_BYTES)
        user.reset_token = token
        user.reset_token_expiry = utcnow() + timedelta(
            seconds=self.settings.password_reset_ttl_seconds
        )
        await self.session.commit()

        await logger.ainfo("password_reset_requested", user_id=user.id)

        return PasswordResetEmail(
            to_email=user.email,
            first_name=user.first_name,
            reset_url=self.build_reset_url(token),
        )

    async def redeem_reset(self, *, token: str, new_password: str) -> None:
        stmt = select(UserModel).where(
            UserModel.reset_token == token,
            UserModel.reset_token_expiry >= utcnow(),
            UserModel.is_live,
        )
        user = await self.session.scalar(stmt)

        if user is None:
            await logger.awarning("password_reset_rejected")
            raise ValidationError("This reset link is invalid or has expired.")

        user.password_hash = hash_password(new_password)
        user.reset_token = None
        user.reset_token_expiry = None
        await self.session.commit()

        await logger.ainfo("password_reset_completed", user_id=user.id)

    def build_reset_url(self, token: str) -> str:
        base_url = self.settings.app_base_url.rstrip("/")
        return f"{base_url}/reset-password?{urlencode({'token': token})}"
