"""Mini README: Tests for the month summary and chart calculations.

These tests pin the headline figures shown above the tables, the savings
efficiency rule, and the aggregates used by the expense, balance and
efficiency charts.
"""

from __future__ import annotations

import pytest

from budgetsense.ledger import (
    AmountEntry,
    LedgerStore,
    MonthRecord,
    PlannedEntry,
    balance_overview,
    efficiency_series,
    expense_breakdown,
    item_balance,
    summarize,
)


def test_summarize_reference_month() -> None:
    record = MonthRecord(
        income=[AmountEntry("Salary", 5000.0)],
        fixed_expenses=[PlannedEntry("Rent", planned=2000.0, actual=1800.0)],
        debt=[AmountEntry("Car loan", 300.0)],
    )

    summary = summarize(record)

    assert summary.total_income == pytest.approx(5000.0)
    assert summary.total_expenses == pytest.approx(2100.0)
    assert summary.remaining == pytest.approx(2900.0)
    assert summary.efficiency_pct == pytest.approx(58.0)


def test_summarize_uses_actual_not_planned_and_adds_carried_balance() -> None:
    record = MonthRecord(
        income=[AmountEntry("Salary", 1000.0)],
        travel_entertainment=[PlannedEntry("Concert", planned=400.0, actual=0.0)],
        carried_balance=250.0,
    )

    summary = summarize(record)

    assert summary.total_expenses == 0.0
    assert summary.remaining == pytest.approx(1250.0)
    assert summary.efficiency_pct == pytest.approx(100.0)


def test_efficiency_is_zero_without_income_and_never_negative() -> None:
    no_income = MonthRecord(other_expenses=[AmountEntry("Gift", 50.0)])
    overspent = MonthRecord(
        income=[AmountEntry("Salary", 100.0)], other_expenses=[AmountEntry("Gift", 150.0)]
    )

    assert summarize(no_income).efficiency_pct == 0.0
    assert summarize(overspent).efficiency_pct == 0.0
    assert summarize(overspent).remaining == pytest.approx(-50.0)


def test_figures_are_rounded_to_cents() -> None:
    record = MonthRecord(income=[AmountEntry("A", 0.1), AmountEntry("B", 0.2)])

    assert summarize(record).total_income == 0.3


def test_expense_breakdown_omits_empty_categories() -> None:
    record = MonthRecord(
        fixed_expenses=[PlannedEntry("Rent", planned=900.0, actual=900.0)],
        investment=[AmountEntry("Index fund", 150.0)],
        debt=[AmountEntry("Card", 0.0)],
    )

    assert expense_breakdown(record) == {"Fixed Expenses": 900.0, "Investment": 150.0}


def test_balance_overview_floors_remaining_for_display() -> None:
    record = MonthRecord(
        income=[AmountEntry("Salary", 500.0)],
        other_expenses=[AmountEntry("Repairs", 800.0)],
        carried_balance=100.0,
    )

    overview = balance_overview(record)

    assert overview["available"] == pytest.approx(600.0)
    assert overview["expenses"] == pytest.approx(800.0)
    assert overview["remaining"] == 0.0
    assert overview["overspent"] is True


def test_item_balance_only_for_planned_rows() -> None:
    assert item_balance(PlannedEntry("Rent", planned=1000.0, actual=1100.0)) == pytest.approx(-100.0)
    assert item_balance(AmountEntry("Salary", 1000.0)) is None


def test_efficiency_series_walks_back_across_years_without_creating_months() -> None:
    store = LedgerStore()
    store.month(2024, 1).income.append(AmountEntry("Salary", 1000.0))
    store.month(2024, 1).other_expenses.append(AmountEntry("Food", 250.0))

    series = efficiency_series(store, 2024, 1)

    assert [point["label"] for point in series] == ["Sep", "Oct", "Nov", "Dec", "Jan", "Feb"]
    assert [point["efficiency_pct"] for point in series] == [0.0, 0.0, 0.0, 0.0, 0.0, 75.0]
    assert series[0]["year"] == 2023
    assert store.years() == [2024]
