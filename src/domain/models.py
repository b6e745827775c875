from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from src.core.auth import Role


@dataclass(frozen=True, slots=True)
class CallerContext:
    """The authenticated actor a request is executed on behalf of."""

    id: str
    role: Role
    email: str = ""


@dataclass(frozen=True, slots=True)
class Active:
    """Record participates in reads, uniqueness and activity checks."""


@dataclass(frozen=True, slots=True)
class Deleted:
    """Record was soft-deleted and is retained for history only."""

    at: datetime


RecordState = Active | Deleted


@dataclass(frozen=True, slots=True)
class ProgressStats:
    """Earned-to-date figures for one goal."""

    total_earned: Decimal
    remaining: Decimal | None
    progress_pct: Decimal


MONEY_MAX = Decimal("9999999999.99")
CENT = Decimal("0.01")


def is_valid_money(amount: Decimal) -> bool:
    """Positive, in whole cents, and within the Numeric(12, 2) storage range."""
    if not amount.is_finite() or amount <= 0 or amount > MONEY_MAX:
        return False
    return amount == amount.quantize(CENT)
