from __future__ import annotations

from collections.abc import AsyncIterator, Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from src.core.access import Requirement, enforce
from src.core.auth import Role, TokenError, create_access_token, decode_access_token
from src.core.errors import ServiceError
from src.domain import CallerContext
from src.domain.services.account_email import AccountEmailService
from src.infrastructure.db.session import get_session

bearer_scheme = HTTPBearer(auto_error=False)


async def get_optional_caller(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),  # noqa: B008
) -> CallerContext | None:
    """Resolve the caller from a bearer token; None when no token was sent."""
    if credentials is None:
        return None

    try:
        payload = decode_access_token(credentials.credentials)
    except TokenError as exc:
        raise _unauthorized(str(exc)) from exc

    user_id = payload.get("sub")
    if not user_id:
        raise _unauthorized("Token missing subject")

    return CallerContext(id=user_id, role=Role(payload["role"]), email=payload.get("email", ""))


def require_access(requirement: Requirement) -> Callable[[CallerContext | None], CallerContext]:
    """Dependency factory running the authorization gate for a route."""

    def dependency(
        caller: CallerContext | None = Depends(get_optional_caller),  # noqa: B008
    ) -> CallerContext:
        return authorize(caller, requirement)

    return dependency


def authorize(
    caller: CallerContext | None,
    requirement: Requirement,
    owner_id: str | None = None,
) -> CallerContext:
    """Run the gate inside a handler, e.g. once the record owner is known."""
    try:
        return enforce(caller, requirement, owner_id)
    except ServiceError as exc:
        raise http_error(exc) from exc


def issue_smoke_token(user_id: str, *, role: Role, email: str | None = None) -> str:
    """Generate a signed token for manual smoke testing."""
    return create_access_token(user_id, role=role.value, email=email)


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """Provide an async SQLAlchemy session for API handlers."""
    async for session in get_session():
        yield session


def get_account_emails() -> AccountEmailService:
    return AccountEmailService()


def http_error(exc: ServiceError) -> HTTPException:
    """Translate a domain error into the HTTP response it stands for."""
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return HTTPException(status_code=exc.status_code, detail=str(exc), headers=headers)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )
