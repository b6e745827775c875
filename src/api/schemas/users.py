from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import EmailStr, Field
from src.api.schemas.common import CamelModel
from src.infrastructure.db.models import UserModel


class AssignableRole(str, Enum):
    """Roles an admin may grant through the API."""

    RECRUITER = "RECRUITER"
    ADMIN = "ADMIN"


class AccountStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class UserResponse(CamelModel):
    id: str
    email: str
    first_name: str
    last_name: str
    role: str
    status: str
    commission_rate: float | None = None
    created_at: datetime | None = None

    @classmethod
    def from_model(cls, user: UserModel) -> UserResponse:
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role.value,
            status=user.status.value,
            commission_rate=(
                float(user.commission_rate) if user.commission_rate is not None else None
            ),
            created_at=user.created_at,
        )


class UserCreate(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=128)
    last_name: str = Field(..., min_length=1, max_length=128)
    role: AssignableRole = AssignableRole.RECRUITER
    commission_rate: float | None = Field(default=None, ge=0, le=100)


class UserUpdate(CamelModel):
    first_name: str | None = Field(None, min_length=1, max_length=128)
    last_name: str | None = Field(None, min_length=1, max_length=128)
    email: EmailStr | None = None
    role: AssignableRole | None = None
    status: AccountStatus | None = None
    commission_rate: float | None = Field(default=None, ge=0, le=100)
