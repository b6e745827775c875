"""Authentication routes - login, profile, forgot/reset password."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import get_account_emails, get_db_session, http_error, require_access
from src.api.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MeResponse,
    ResetPasswordRequest,
)
from src.api.schemas.common import OkResponse
from src.api.schemas.users import UserResponse
from src.core.access import Requirement
from src.core.errors import ServiceError
from src.domain import CallerContext
from src.domain.services.account_email import AccountEmailService, deliver_in_background
from src.domain.services.auth_service import AuthService
from src.domain.services.password_reset import PasswordResetService

logger = structlog.get_logger()
router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="User login",
    description="Authenticate with email and password, returns a bearer token.",
)
async def login(
    payload: LoginRequest,
    session: AsyncSession = Depends(get_db_session),
) -> LoginResponse:
    service = AuthService(session)

    try:
        result = await service.login(email=payload.email, password=payload.password)
    except ServiceError as exc:
        raise http_error(exc) from exc

    return LoginResponse(
        **result["token"],
        user=UserResponse.from_model(result["user"]),
    )


@router.get(
    "/me",
    response_model=MeResponse,
    summary="Get current user",
)
async def get_me(
    caller: CallerContext = Depends(require_access(Requirement.AUTHENTICATED)),
    session: AsyncSession = Depends(get_db_session),
) -> MeResponse:
    service = AuthService(session)

    try:
        user = await service.get_user_by_id(caller.id)
    except ServiceError as exc:
        raise http_error(exc) from exc

    return MeResponse(user=UserResponse.from_model(user))


@router.post(
    "/forgot-password",
    response_model=OkResponse,
    summary="Request a password reset link",
    description="Always succeeds so the response never reveals whether an account exists.",
)
async def forgot_password(
    payload: ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_db_session),
    emails: AccountEmailService = Depends(get_account_emails),
) -> OkResponse:
    service = PasswordResetService(session)
    message = await service.request_reset(payload.email)

    if message is not None:
        background_tasks.add_task(deliver_in_background, emails, message)

    return OkResponse()


@router.post(
    "/reset-password",
    response_model=OkResponse,
    status_code=status.HTTP_200_OK,
    summary="Redeem a password reset token",
)
async def reset_password(
    payload: ResetPasswordRequest,
    session: AsyncSession = Depends(get_db_session),
) -> OkResponse:
    service = PasswordResetService(session)

    try:
        await service.redeem_reset(token=payload.token, new_password=payload.password)
    except ServiceError as exc:
        raise http_error(exc) from exc

    return OkResponse()
