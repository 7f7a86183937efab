"""Mini README: Tests for projecting templates into months.

The materializer is pinned to 15 January 2024 so "current month" is
deterministic: January 2024 and later are reconciled, December 2023 and
earlier are left exactly as recorded.
"""

from __future__ import annotations

from datetime import date

import pytest

from budgetsense.ledger import USER_ENTRY, AmountEntry, LedgerStore, PlannedEntry, TemplateDerived
from budgetsense.recurring import (
    DebtTemplate,
    FixedExpenseTemplate,
    TemplateKind,
    TemplateMaterializer,
    TemplateRegistry,
)


def _today() -> date:
    return date(2024, 1, 15)


@pytest.fixture
def store() -> LedgerStore:
    return LedgerStore()


@pytest.fixture
def registry(store: LedgerStore) -> TemplateRegistry:
    registry = TemplateRegistry(store)
    registry.fixed_expenses.add(FixedExpenseTemplate("Rent", 1200.0))
    registry.debts.add(DebtTemplate("Car loan", 300.0, months_remaining=3, start_month=0, start_year=2024))
    return registry


@pytest.fixture
def materializer(store: LedgerStore, registry: TemplateRegistry) -> TemplateMaterializer:
    return TemplateMaterializer(store, registry, today=_today)


def test_materialize_adds_template_rows_with_provenance(store, materializer) -> None:
    assert materializer.materialize(2024, 0) is True

    record = store.month(2024, 0)
    assert record.fixed_expenses == [
        PlannedEntry("Rent", planned=1200.0, actual=0.0, provenance=TemplateDerived("Rent", 0))
    ]
    assert record.debt == [AmountEntry("Car loan", 300.0, provenance=TemplateDerived("Car loan", 0))]


def test_materialize_twice_changes_nothing(store, materializer) -> None:
    materializer.materialize(2024, 1)
    first = store.month(2024, 1).as_dict()

    materializer.materialize(2024, 1)

    assert store.month(2024, 1).as_dict() == first


def test_past_months_are_never_reconciled(store, materializer) -> None:
    store.month(2023, 11).debt.append(AmountEntry("Car loan", 280.0, provenance=TemplateDerived("Car loan")))
    before = store.month(2023, 11).as_dict()

    assert materializer.materialize(2023, 11) is False
    assert store.month(2023, 11).as_dict() == before


def test_existing_row_with_same_name_blocks_fixed_expense(store, materializer) -> None:
    store.month(2024, 2).fixed_expenses.append(PlannedEntry("rent", planned=1150.0, actual=1150.0))

    materializer.materialize(2024, 2)

    assert [(entry.name, entry.planned) for entry in store.month(2024, 2).fixed_expenses] == [
        ("rent", 1150.0)
    ]


def test_recorded_actual_survives_rematerialization(store, materializer) -> None:
    materializer.materialize(2024, 0)
    store.month(2024, 0).fixed_expenses[0].actual = 1180.0

    materializer.materialize(2024, 0)

    assert [entry.actual for entry in store.month(2024, 0).fixed_expenses] == [1180.0]


def test_debt_rows_follow_the_template_window(store, materializer) -> None:
    for month in range(5):
        materializer.materialize(2024, month)

    assert [len(store.month(2024, month).debt) for month in range(5)] == [1, 1, 1, 0, 0]
    assert [len(store.month(2024, month).fixed_expenses) for month in range(5)] == [1] * 5


def test_debt_rows_are_rebuilt_but_user_debt_is_kept(store, registry, materializer) -> None:
    record = store.month(2024, 1)
    record.debt.append(AmountEntry("Student loan", 120.0))
    materializer.materialize(2024, 1)
    record.debt[-1].amount = 999.0

    registry.debts.update(
        0, DebtTemplate("Car loan", 320.0, months_remaining=3, start_month=0, start_year=2024)
    )
    materializer.materialize(2024, 1)

    assert [(entry.name, entry.amount) for entry in record.debt] == [
        ("Student loan", 120.0),
        ("Car loan", 320.0),
    ]


def test_add_template_to_month_inserts_a_user_row(store, materializer) -> None:
    entry = materializer.add_template_to_month(TemplateKind.DEBT, 0, 2023, 10)

    assert entry.provenance == USER_ENTRY
    assert store.month(2023, 10).debt == [AmountEntry("Car loan", 300.0)]


def test_hand_added_debt_survives_materialization(store, materializer) -> None:
    materializer.add_template_to_month(TemplateKind.DEBT, 0, 2024, 6)

    materializer.materialize(2024, 6)

    assert store.month(2024, 6).debt == [AmountEntry("Car loan", 300.0)]


def test_available_templates_filters_debts_by_window_and_presence(store, registry, materializer) -> None:
    registry.debts.add(DebtTemplate("Card", 50.0, start_month=0, start_year=2024))
    materializer.materialize(2024, 0)

    fixed = materializer.available_templates(TemplateKind.FIXED_EXPENSE, 2024, 0)
    debts_now = materializer.available_templates(TemplateKind.DEBT, 2023, 5)
    debts_later = materializer.available_templates(TemplateKind.DEBT, 2024, 0)

    assert [template.name for _, template in fixed] == ["Rent"]
    assert [(index, template.name) for index, template in debts_now] == [(1, "Card")]
    assert debts_later == []
