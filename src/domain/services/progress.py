"""Goal progress arithmetic shared by the recruiter dashboard and the leaderboard."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Protocol, TypeVar

from src.domain.models import ProgressStats

_HUNDRED = Decimal(100)
_ZERO = Decimal(0)
_ONE_DECIMAL = Decimal("0.1")


class LeaderboardSort(str, Enum):
    EARNED = "earned"
    NAME = "name"
    PCT = "pct"
    REMAINING = "remaining"

    @classmethod
    def parse(cls, value: str | None) -> LeaderboardSort:
        """Unknown or missing keys fall back to sorting by total earned."""
        try:
            return cls(value)
        except ValueError:
            return cls.EARNED


class RankedEntry(Protocol):
    name: str
    total_earned: Decimal
    progress_pct: Decimal
    remaining: Decimal | None


EntryT = TypeVar("EntryT", bound=RankedEntry)


def _to_decimal(value: Decimal | float | int | str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_pct(value: Decimal) -> Decimal:
    return value.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP)


def compute_progress(
    goal_amount: Decimal | float | int | None,
    commission_amounts: Iterable[Decimal | float | int],
    commission_rate_pct: Decimal | float | int | None,
) -> ProgressStats:
    """Derive earned-to-date, remaining and progress percentage for one goal.

    Each commission earns `amount * rate / 100`. Without a goal there is nothing
    remaining to report and progress is 0. Progress is capped at 100 and rounded
    half-up to one decimal place.
    """
    rate = _to_decimal(commission_rate_pct) if commission_rate_pct is not None else _ZERO
    total_earned = sum(
        (_to_decimal(amount) * rate / _HUNDRED for amount in commission_amounts),
        _ZERO,
    )

    if goal_amount is None:
        return ProgressStats(total_earned=total_earned, remaining=None, progress_pct=_ZERO)

    goal = _to_decimal(goal_amount)
    remaining = max(_ZERO, goal - total_earned)
    if goal > 0:
        progress = min(_HUNDRED, total_earned / goal * _HUNDRED)
    else:
        progress = _ZERO
    return ProgressStats(
        total_earned=total_earned,
        remaining=remaining,
        progress_pct=round_pct(progress),
    )


def sort_leaderboard(entries: Sequence[EntryT], sort_by: LeaderboardSort) -> list[EntryT]:
    """Order leaderboard entries; equal keys keep their incoming order."""
    if sort_by is LeaderboardSort.NAME:
        return sorted(entries, key=lambda entry: (entry.name.casefold(), entry.name.swapcase()))
    if sort_by is LeaderboardSort.PCT:
        return sorted(entries, key=lambda entry: entry.progress_pct, reverse=True)
    if sort_by is LeaderboardSort.REMAINING:
        # Recruiters without a goal have nothing remaining to rank and go last
        return sorted(
            entries,
            key=lambda entry: (entry.remaining is None, entry.remaining or _ZERO),
        )
    return sorted(entries, key=lambda entry: entry.total_earned, reverse=True)
