from __future__ import annotations

from datetime import datetime
from typing import Any

from src.api.schemas.common import CamelModel


class AuditActor(CamelModel):
    first_name: str
    last_name: str
    email: str


class AuditLogResponse(CamelModel):
    id: str
    actor_id: str
    action: str
    entity_type: str
    entity_id: str
    metadata: dict[str, Any] | None = None
    created_at: datetime
    actor: AuditActor | None = None
