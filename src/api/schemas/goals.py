from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import Field
from src.api.schemas.common import CamelModel


class GoalCreate(CamelModel):
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    # ISO-8601 dates or datetimes; parsed and checked by the goal service
    period_start: str
    period_end: str


class GoalResponse(CamelModel):
    id: str
    recruiter_id: str
    amount: float
    period_start: datetime
    period_end: datetime
    created_at: datetime
