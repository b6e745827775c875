"""Pydantic schemas for authentication and password endpoints."""

from __future__ import annotations

from pydantic import EmailStr, Field
from src.api.schemas.common import CamelModel
from src.api.schemas.users import UserResponse

# --- Request Schemas ---


class LoginRequest(CamelModel):
    """Request schema for user login."""

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=1, description="User password")


class ChangePasswordRequest(CamelModel):
    """Request schema for password change."""

    current_password: str = Field(..., min_length=1, description="Current password")
    new_password: str = Field(
        ...,
        min_length=8,
        max_length=128,
        description="New password (min 8 characters)",
    )


class ForgotPasswordRequest(CamelModel):
    email: EmailStr


class ResetPasswordRequest(CamelModel):
    token: str = Field(..., min_length=1)
    password: str = Field(
        ...,
        min_length=8,
        max_length=128,
        description="New password (min 8 characters)",
    )


# --- Response Schemas ---


class LoginResponse(CamelModel):
    """Response schema for user login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Access token TTL in seconds")
    user: UserResponse


class MeResponse(CamelModel):
    """Response schema for current user info."""

    user: UserResponse
