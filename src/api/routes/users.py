from __future__ import annotations

from decimal import Decimal

import structlog
from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import (
    authorize,
    get_account_emails,
    get_db_session,
    http_error,
    require_access,
)
from src.api.schemas.common import SuccessResponse
from src.api.schemas.users import UserCreate, UserResponse, UserUpdate
from src.core.access import Requirement
from src.core.errors import ServiceError
from src.domain import CallerContext
from src.domain.services.account_email import (
    AccountEmailService,
    WelcomeEmail,
    deliver_in_background,
)
from src.domain.services.users import UserService
from src.infrastructure.db.models import UserRole, UserStatus

router = APIRouter(prefix="/users", tags=["Users"])
logger = structlog.get_logger()


def _decimal_or_none(value: float | None) -> Decimal | None:
    return Decimal(str(value)) if value is not None else None


@router.get("", response_model=list[UserResponse])
async def list_users(
    caller: CallerContext = Depends(require_access(Requirement.ADMIN)),
    session: AsyncSession = Depends(get_db_session),
) -> list[UserResponse]:
    users = await UserService(session).list_users()
    return [UserResponse.from_model(user) for user in users]


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate,
    background_tasks: BackgroundTasks,
    caller: CallerContext = Depends(require_access(Requirement.ADMIN)),
    session: AsyncSession = Depends(get_db_session),
    emails: AccountEmailService = Depends(get_account_emails),
) -> UserResponse:
    """Create an account (admin-only) and send the welcome email out-of-band."""
    service = UserService(session)

    try:
        user = await service.create_user(
            email=payload.email,
            password=payload.password,
            first_name=payload.first_name,
            last_name=payload.last_name,
            role=UserRole(payload.role.value),
            commission_rate=_decimal_or_none(payload.commission_rate),
        )
    except ServiceError as exc:
        raise http_error(exc) from exc

    background_tasks.add_task(
        deliver_in_background,
        emails,
        WelcomeEmail(
            to_email=user.email,
            first_name=user.first_name,
            temporary_password=payload.password,
        ),
    )
    logger.info("user_created_by_admin", user_id=user.id, admin_user=caller.id)
    return UserResponse.from_model(user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    caller: CallerContext = Depends(require_access(Requirement.AUTHENTICATED)),
    session: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    authorize(caller, Requirement.SELF_OR_STAFF, owner_id=user_id)

    try:
        user = await UserService(session).get_user(user_id)
    except ServiceError as exc:
        raise http_error(exc) from exc

    return UserResponse.from_model(user)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    payload: UserUpdate,
    caller: CallerContext = Depends(require_access(Requirement.STAFF)),
    session: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    service = UserService(session)
    changes = payload.model_dump(exclude_unset=True)

    update_kwargs: dict = {
        "first_name": payload.first_name,
        "last_name": payload.last_name,
        "email": payload.email,
        "role": UserRole(payload.role.value) if payload.role else None,
        "status": UserStatus(payload.status.value) if payload.status else None,
    }
    # An explicit null clears the commission rate; omitting it leaves it alone
    if "commission_rate" in changes:
        update_kwargs["commission_rate"] = _decimal_or_none(payload.commission_rate)

    try:
        user = await service.update_user(actor_id=caller.id, user_id=user_id, **update_kwargs)
    except ServiceError as exc:
        raise http_error(exc) from exc

    return UserResponse.from_model(user)


@router.delete("/{user_id}", response_model=SuccessResponse)
async def delete_user(
    user_id: str,
    caller: CallerContext = Depends(require_access(Requirement.SUPERADMIN)),
    session: AsyncSession = Depends(get_db_session),
) -> SuccessResponse:
    """Soft-delete an account (superadmin-only)."""
    try:
        await UserService(session).delete_user(actor_id=caller.id, user_id=user_id)
    except ServiceError as exc:
        raise http_error(exc) from exc

    return SuccessResponse()
