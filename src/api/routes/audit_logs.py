from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import get_db_session, require_access
from src.api.schemas.audit_logs import AuditActor, AuditLogResponse
from src.core.access import Requirement
from src.domain import CallerContext
from src.domain.services.audit import AuditLogService
from src.infrastructure.db.models import AuditAction

router = APIRouter(prefix="/audit-logs", tags=["Audit"])


@router.get("", response_model=list[AuditLogResponse])
async def list_audit_logs(
    action: str | None = Query(None),
    limit: int | None = Query(None, ge=1),
    caller: CallerContext = Depends(require_access(Requirement.STAFF)),
    session: AsyncSession = Depends(get_db_session),
) -> list[AuditLogResponse]:
    """Newest audit entries first; `limit` is capped at 500."""
    try:
        action_filter = AuditAction(action) if action else None
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown audit action '{action}'",
        ) from exc

    logs = await AuditLogService(session).list_logs(action=action_filter, limit=limit)

    return [
        AuditLogResponse(
            id=log.id,
            actor_id=log.actor_id,
            action=log.action.value,
            entity_type=log.entity_type,
            entity_id=log.entity_id,
            metadata=log.metadata_,
            created_at=log.created_at,
            actor=AuditActor.model_validate(log.actor) if log.actor else None,
        )
        for log in logs
    ]
