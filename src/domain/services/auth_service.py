"""Authentication service with password hashing, login and password changes."""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache

import structlog
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from src.core.auth import create_access_token
from src.core.config import get_settings
from src.core.errors import NotFoundError, UnauthorizedError, ValidationError
from src.infrastructure.db.models import UserModel, UserStatus

logger = structlog.get_logger()


@lru_cache
def _pwd_context() -> CryptContext:
    # Cost factor 12 unless overridden through BCRYPT_ROUNDS
    return CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
        bcrypt__rounds=get_settings().bcrypt_rounds,
    )


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return _pwd_context().hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return _pwd_context().verify(plain_password, hashed_password)


class AuthService:
    """Service for authentication operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def login(self, *, email: str, password: str) -> dict:
        """
        Authenticate user with email and password.

        Soft-deleted and inactive accounts are rejected with the same message
        as a wrong password.

        Returns:
            dict with the user record and an access token
        """
        await logger.ainfo("login_attempt", email=email)

        stmt = select(UserModel).where(UserModel.email == email.lower(), UserModel.is_live)
        user = await self.session.scalar(stmt)

        if user is None:
            await logger.awarning("login_user_not_found", email=email)
            raise UnauthorizedError("Invalid email or password")

        if user.status != UserStatus.ACTIVE:
            await logger.awarning("login_inactive_user", email=email, status=user.status.value)
            raise UnauthorizedError("Invalid email or password")

        if not verify_password(password, user.password_hash):
            await logger.awarning("login_invalid_password", email=email)
            raise UnauthorizedError("Invalid email or password")

        await logger.ainfo("login_success", user_id=user.id, email=email)

        return {
            "user": user,
            "token": self._generate_token(user),
        }

    async def get_user_by_id(self, user_id: str) -> UserModel:
        """Get a live user by ID."""
        stmt = select(UserModel).where(UserModel.id == user_id, UserModel.is_live)
        user = await self.session.scalar(stmt)

        if user is None:
            raise NotFoundError("User not found")

        return user

    async def change_password(
        self, *, user_id: str, current_password: str, new_password: str
    ) -> None:
        """Change the caller's own password after re-checking the current one."""
        user = await self.get_user_by_id(user_id)

        if not verify_password(current_password, user.password_hash):
            await logger.awarning("password_change_rejected", user_id=user_id)
            raise ValidationError("Current password is incorrect")

        user.password_hash = hash_password(new_password)
        await self.session.commit()

        await logger.ainfo("password_changed", user_id=user_id)

    def _generate_token(self, user: UserModel) -> dict:
        settings = get_settings()

        access_token = create_access_token(
            subject=user.id,
            role=user.role.value,
            email=user.email,
            expires_delta=timedelta(seconds=settings.access_token_ttl_seconds),
        )

        return {
            "access_token": access_token,
            "token_type": "bearer",
            "expires_in": settings.access_token_ttl_seconds,
        }
