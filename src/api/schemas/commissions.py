from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import Field
from src.api.schemas.common import CamelModel, PersonName


class CommissionCreate(CamelModel):
    recruiter_id: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    logged_date: str
    notes: str | None = None


class CommissionResponse(CamelModel):
    id: str
    recruiter_id: str
    logged_by_id: str
    amount: float
    logged_date: datetime
    notes: str | None = None
    created_at: datetime


class CommissionListItem(CommissionResponse):
    logged_by: PersonName | None = None
