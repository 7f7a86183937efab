"""Mini README: Opening-balance carry between consecutive months.

A month opens with whatever the previous month left over, never less than
zero. ``compute_carry`` is the pure rule; ``apply_carry`` writes its result
into the target month and ``carry_forward`` replays it across a run of
months so a chain can be rebuilt after an edit to an earlier month.
"""

from __future__ import annotations

from typing import List, Optional

from .calculations import total_expenses, total_income
from .month import MonthRecord
from .store import LedgerStore
from ..logging_utils import get_logger
from ..utils.numbers import coerce_amount, round_money
from ..utils.periods import previous_month, shift_month

LOGGER = get_logger(__name__)


def compute_carry(prior: Optional[MonthRecord]) -> float:
    """Return the prior month's closing balance clamped at zero."""

    if prior is None:
        return 0.0
    remaining = total_income(prior) - total_expenses(prior) + coerce_amount(prior.carried_balance)
    return round_money(max(remaining, 0.0))


def apply_carry(store: LedgerStore, year: int, month: int) -> float:
    """Write the carried balance into ``(year, month)``; the prior month is only read."""

    prior_year, prior_month = previous_month(year, month)
    carried = compute_carry(store.peek(prior_year, prior_month))
    store.month(year, month).set_carried_balance(carried)
    LOGGER.debug("Carried %.2f into %s/%s", carried, month + 1, year)
    return carried


def carry_forward(store: LedgerStore, year: int, month: int, months: int) -> List[float]:
    """Apply the carry to ``months`` consecutive months starting at ``(year, month)``."""

    carried: List[float] = []
    for offset in range(months):
        target_year, target_month = shift_month(year, month, offset)
        carried.append(apply_carry(store, target_year, target_month))
    return carried
