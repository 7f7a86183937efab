"""Mini README: Tests for the opening-balance carry between months.

Structure:
    * compute_carry edge cases - absent prior month, overspending, malformed numbers.
    * carry chaining - leftover income accumulates month after month.
    * apply_carry isolation - the prior month is never created or modified.
"""

from __future__ import annotations

import pytest

from budgetsense.ledger import (
    AmountEntry,
    LedgerStore,
    MonthRecord,
    PlannedEntry,
    apply_carry,
    carry_forward,
    compute_carry,
)


def test_compute_carry_without_prior_month_is_zero() -> None:
    assert compute_carry(None) == 0.0


def test_compute_carry_is_clamped_when_prior_month_overspent() -> None:
    """A deeply negative closing balance must not carry into the next month."""

    prior = MonthRecord(
        income=[AmountEntry("Salary", 100.0)],
        other_expenses=[AmountEntry("Repairs", 5000.0)],
        carried_balance=50.0,
    )

    assert compute_carry(prior) == 0.0


def test_compute_carry_counts_every_expense_category_and_prior_carry() -> None:
    prior = MonthRecord(
        income=[AmountEntry("Salary", 3000.0)],
        fixed_expenses=[PlannedEntry("Rent", planned=1200.0, actual=1000.0)],
        other_expenses=[AmountEntry("Groceries", 200.0)],
        travel_entertainment=[PlannedEntry("Weekend trip", planned=300.0, actual=250.0)],
        debt=[AmountEntry("Car loan", 150.0)],
        investment=[AmountEntry("Index fund", 100.0)],
        carried_balance=400.0,
    )

    # 3000 - (1000 + 200 + 250 + 150 + 100) + 400
    assert compute_carry(prior) == pytest.approx(1700.0)


def test_compute_carry_treats_malformed_numbers_as_zero() -> None:
    prior = MonthRecord.from_dict(
        {
            "income": [{"name": "Salary", "amount": "abc"}, {"name": "Bonus", "amount": 250}],
            "debt": [{"name": "Loan", "amount": None}],
        }
    )

    assert compute_carry(prior) == pytest.approx(250.0)


def test_carry_chain_accumulates_leftover_income() -> None:
    """Three months of 1000 income and no spending open with 0, 1000, 2000."""

    store = LedgerStore()
    for month in range(3):
        store.month(2024, month).income.append(AmountEntry("Salary", 1000.0))

    carried = carry_forward(store, 2024, 0, 3)

    assert carried == [0.0, 1000.0, 2000.0]
    assert [store.month(2024, month).carried_balance for month in range(3)] == [0.0, 1000.0, 2000.0]


def test_apply_carry_reads_prior_month_without_creating_or_changing_it() -> None:
    store = LedgerStore()
    store.month(2024, 5).income.append(AmountEntry("Salary", 800.0))
    before = store.month(2024, 5).as_dict()

    assert apply_carry(store, 2024, 6) == pytest.approx(800.0)
    assert apply_carry(store, 2024, 6) == pytest.approx(800.0)
    assert store.month(2024, 5).as_dict() == before

    apply_carry(store, 2024, 0)
    assert (2023, 11) not in store
    assert store.years() == [2024]
