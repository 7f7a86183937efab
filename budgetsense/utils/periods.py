"""Mini README: Calendar month helpers shared by the ledger and templates.

Months are addressed the way the persisted ledger stores them: a calendar
year plus a zero-based month index (0 = January, 11 = December). Keeping the
arithmetic here avoids sprinkling ``% 12`` corrections through the store,
the carry calculator and the materializer.
"""

from __future__ import annotations

from datetime import date
from typing import Tuple

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def validate_month(month: int) -> int:
    """Return ``month`` when it is a valid zero-based month index."""

    if isinstance(month, bool) or not isinstance(month, int) or not 0 <= month <= 11:
        raise ValueError(f"Month index must be an integer between 0 and 11, got {month!r}")
    return month


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """Move ``delta`` months forward (or backward) from ``(year, month)``."""

    absolute = year * 12 + validate_month(month) + delta
    return absolute // 12, absolute % 12


def previous_month(year: int, month: int) -> Tuple[int, int]:
    return shift_month(year, month, -1)


def months_between(start_year: int, start_month: int, year: int, month: int) -> int:
    """Number of months elapsed from the start period to ``(year, month)``."""

    return (year - start_year) * 12 + (month - start_month)


def period_of(day: date) -> Tuple[int, int]:
    """Convert a calendar date into the ledger's ``(year, month index)`` pair."""

    return day.year, day.month - 1


def month_label(year: int, month: int, *, short: bool = False) -> str:
    name = MONTH_NAMES[validate_month(month)]
    if short:
        return name[:3]
    return f"{name} {year}"
