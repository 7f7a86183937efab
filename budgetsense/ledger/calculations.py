"""Mini README: Derived figures for a month of the ledger.

Structure:
    * MonthSummary - totals, remaining balance and savings efficiency.
    * summarize - compute a MonthSummary from a MonthRecord.
    * expense_breakdown / balance_overview - chart-ready aggregates.
    * efficiency_series - trailing savings-efficiency history.

Every function here is pure: it reads records, never mutates them, and
treats malformed numbers as zero so a damaged save can still be displayed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from .entries import Category, Entry, PlannedEntry
from .month import MonthRecord
from .store import LedgerStore
from ..utils.numbers import coerce_amount, round_money
from ..utils.periods import month_label, shift_month


@dataclass(frozen=True, slots=True)
class MonthSummary:
    """Headline figures shown above the month's tables."""

    total_income: float
    total_expenses: float
    remaining: float
    efficiency_pct: float
    carried_balance: float

    def as_dict(self) -> Dict[str, float]:
        return {
            "total_income": self.total_income,
            "total_expenses": self.total_expenses,
            "remaining": self.remaining,
            "efficiency_pct": self.efficiency_pct,
            "carried_balance": self.carried_balance,
        }


def category_total(record: MonthRecord, category: Category) -> float:
    """Sum a category: ``actual`` for planned rows, ``amount`` otherwise."""

    return sum(entry.spent for entry in record.entries(category))


def total_income(record: MonthRecord) -> float:
    return category_total(record, Category.INCOME)


def total_expenses(record: MonthRecord) -> float:
    return sum(category_total(record, category) for category in Category if category.is_expense)


def summarize(record: MonthRecord) -> MonthSummary:
    """Compute totals, the remaining balance and savings efficiency."""

    income = total_income(record)
    expenses = total_expenses(record)
    carried = coerce_amount(record.carried_balance)
    if income > 0:
        efficiency = max(0.0, (income - expenses) / income * 100)
    else:
        efficiency = 0.0
    return MonthSummary(
        total_income=round_money(income),
        total_expenses=round_money(expenses),
        remaining=round_money(income - expenses + carried),
        efficiency_pct=round_money(efficiency),
        carried_balance=round_money(carried),
    )


def expense_breakdown(record: MonthRecord) -> Dict[str, float]:
    """Expense totals keyed by display name, omitting empty categories."""

    breakdown: Dict[str, float] = {}
    for category in Category:
        if not category.is_expense:
            continue
        amount = category_total(record, category)
        if amount > 0:
            breakdown[category.display_name] = round_money(amount)
    return breakdown


def balance_overview(record: MonthRecord) -> Dict[str, float]:
    """Available funds against spending; ``remaining`` is floored at zero for charts."""

    available = total_income(record) + coerce_amount(record.carried_balance)
    expenses = total_expenses(record)
    return {
        "available": round_money(available),
        "expenses": round_money(expenses),
        "remaining": round_money(max(0.0, available - expenses)),
        "overspent": available - expenses < 0,
    }


def item_balance(entry: Entry) -> Optional[float]:
    """Planned minus actual for budgeted rows, ``None`` for single-figure rows."""

    if isinstance(entry, PlannedEntry):
        return round_money(entry.balance)
    return None


def efficiency_series(
    store: LedgerStore, year: int, month: int, span: int = 6
) -> List[Dict[str, object]]:
    """Savings efficiency for the ``span`` months ending at ``(year, month)``.

    Months missing from the store count as 0 and are not created.
    """

    series: List[Dict[str, object]] = []
    for offset in range(span - 1, -1, -1):
        target_year, target_month = shift_month(year, month, -offset)
        record = store.peek(target_year, target_month)
        efficiency = summarize(record).efficiency_pct if record is not None else 0.0
        series.append(
            {
                "year": target_year,
                "month": target_month,
                "label": month_label(target_year, target_month, short=True),
                "efficiency_pct": efficiency,
            }
        )
    return series
