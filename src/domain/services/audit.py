"""Audit trail recording and listing."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from src.core.config import get_settings
from src.infrastructure.db.models import AuditAction, AuditLogModel

logger = structlog.get_logger()


class AuditRecorder:
    """Append audit entries after the triggering mutation has committed.

    Entries are written through a separate session so a failed audit write can
    neither roll back nor expire the state of the business mutation. A failure
    is logged and swallowed: the caller's response is already decided by the
    primary write.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def record(
        self,
        *,
        actor_id: str,
        action: AuditAction,
        entity_type: str,
        entity_id: str,
        metadata: dict[str, Any] | None = None,
    ) -> AuditLogModel | None:
        entry = AuditLogModel(
            actor_id=actor_id,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            metadata_=metadata,
        )

        async with AsyncSession(self.session.bind, expire_on_commit=False) as audit_session:
            try:
                audit_session.add(entry)
                await audit_session.commit()
            except SQLAlchemyError as exc:
                await audit_session.rollback()
                await logger.aerror(
                    "audit_write_failed",
                    action=action.value,
                    entity_type=entity_type,
                    entity_id=entity_id,
                    actor_id=actor_id,
                    error=str(exc),
                )
                return None

        await logger.ainfo(
            "audit_recorded",
            action=action.value,
            entity_type=entity_type,
            entity_id=entity_id,
            actor_id=actor_id,
        )
        return entry


class AuditLogService:
    """Read access to the audit trail."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.settings = get_settings()

    async def list_logs(
        self,
        *,
        action: AuditAction | None = None,
        limit: int | None = None,
    ) -> Sequence[AuditLogModel]:
        """Return newest entries first, capped at the configured maximum."""
        effective_limit = min(
            limit if limit is not None else self.settings.audit_log_default_limit,
            self.settings.audit_log_max_limit,
        )

        stmt = (
            select(AuditLogModel)
            .options(selectinload(AuditLogModel.actor))
            .order_by(AuditLogModel.created_at.desc())
            .limit(effective_limit)
        )
        if action is not None:
            stmt = stmt.where(AuditLogModel.action == action)

        result = await self.session.execute(stmt)
        return result.scalars().all()
