from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import get_db_session, http_error, require_access
from src.api.schemas.auth import ChangePasswordRequest
from src.api.schemas.common import SuccessResponse
from src.core.access import Requirement
from src.core.errors import ServiceError
from src.domain import CallerContext
from src.domain.services.auth_service import AuthService

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.patch("/password", response_model=SuccessResponse, summary="Change own password")
async def change_password(
    payload: ChangePasswordRequest,
    caller: CallerContext = Depends(require_access(Requirement.AUTHENTICATED)),
    session: AsyncSession = Depends(get_db_session),
) -> SuccessResponse:
    service = AuthService(session)

    try:
        await service.change_password(
            user_id=caller.id,
            current_password=payload.current_password,
            new_password=payload.new_password,
        )
    except ServiceError as exc:
        raise http_error(exc) from exc

    return SuccessResponse()
