"""Mini README: Month-by-month budget ledger.

This package groups the data model (entries and month records), the store
that owns them, the balance carry between months and the pure calculations
behind the summary figures and charts.
"""

from .calculations import (
    MonthSummary,
    balance_overview,
    efficiency_series,
    expense_breakdown,
    item_balance,
    summarize,
)
from .carry import apply_carry, carry_forward, compute_carry
from .entries import (
    USER_ENTRY,
    AmountEntry,
    Category,
    Entry,
    PlannedEntry,
    Provenance,
    TemplateDerived,
    UserEntry,
)
from .month import MonthRecord
from .store import LedgerStore

__all__ = [
    "USER_ENTRY",
    "AmountEntry",
    "Category",
    "Entry",
    "LedgerStore",
    "MonthRecord",
    "MonthSummary",
    "PlannedEntry",
    "Provenance",
    "TemplateDerived",
    "UserEntry",
    "apply_carry",
    "balance_overview",
    "carry_forward",
    "compute_carry",
    "efficiency_series",
    "expense_breakdown",
    "item_balance",
    "summarize",
]
