"""Mini README: Tests for template models, the registry and retraction.

Structure:
    * Debt window - should_apply boundaries for limited and unlimited debts.
    * Uniqueness - names are unique per kind with case ignored.
    * Retraction - editing or removing a template strips its old rows from
      every month before the change is committed.
    * Loading - persisted template lists are healed on the way in.
"""

from __future__ import annotations

import pytest

from budgetsense.ledger import AmountEntry, LedgerStore, PlannedEntry, TemplateDerived
from budgetsense.recurring import (
    DebtTemplate,
    DuplicateTemplateError,
    FixedExpenseTemplate,
    TemplateKind,
    TemplateRegistry,
    should_apply,
)


def test_limited_debt_applies_only_inside_its_window() -> None:
    template = DebtTemplate("Car loan", 250.0, months_remaining=3, start_month=0, start_year=2024)

    assert should_apply(template, 11, 2023) is False
    assert [should_apply(template, month, 2024) for month in range(5)] == [
        True,
        True,
        True,
        False,
        False,
    ]


def test_limited_debt_window_crosses_year_boundary() -> None:
    template = DebtTemplate("Phone", 40.0, months_remaining=2, start_month=11, start_year=2024)

    assert template.should_apply(2024, 11) is True
    assert template.should_apply(2025, 0) is True
    assert template.should_apply(2025, 1) is False


def test_unlimited_debt_applies_everywhere() -> None:
    template = DebtTemplate("Mortgage", 900.0, months_remaining=0, start_month=6, start_year=2024)

    assert template.is_unlimited
    assert template.should_apply(1999, 0)
    assert template.should_apply(2040, 11)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"name": "   ", "amount": 10.0},
        {"name": "Loan", "amount": -1.0},
        {"name": "Loan", "amount": 10.0, "months_remaining": -2},
        {"name": "Loan", "amount": 10.0, "start_month": 12},
    ],
)
def test_invalid_debt_templates_are_rejected(kwargs) -> None:
    with pytest.raises(ValueError):
        DebtTemplate(**kwargs)


def test_template_names_are_unique_ignoring_case() -> None:
    registry = TemplateRegistry(LedgerStore())
    registry.fixed_expenses.add(FixedExpenseTemplate("Rent", 1000.0))

    with pytest.raises(DuplicateTemplateError):
        registry.fixed_expenses.add(FixedExpenseTemplate("rent", 900.0))

    assert len(registry.fixed_expenses) == 1
    assert registry.fixed_expenses[0].planned == 1000.0


def test_same_name_is_allowed_across_kinds() -> None:
    registry = TemplateRegistry(LedgerStore())
    registry.fixed_expenses.add(FixedExpenseTemplate("Insurance", 80.0))

    assert registry.debts.add(DebtTemplate("insurance", 80.0)) == 0


def test_update_rejects_renaming_onto_another_template() -> None:
    registry = TemplateRegistry(LedgerStore())
    registry.fixed_expenses.add(FixedExpenseTemplate("Rent", 1000.0))
    registry.fixed_expenses.add(FixedExpenseTemplate("Gym", 45.0))

    with pytest.raises(DuplicateTemplateError):
        registry.fixed_expenses.update(1, FixedExpenseTemplate("RENT", 45.0))

    registry.fixed_expenses.update(0, FixedExpenseTemplate("rent", 1050.0))
    assert registry.fixed_expenses[0].name == "rent"


def test_unknown_template_index_raises_index_error() -> None:
    registry = TemplateRegistry(LedgerStore())

    with pytest.raises(IndexError):
        registry.debts.remove(0)


def test_editing_debt_amount_retracts_old_rows_from_every_month() -> None:
    store = LedgerStore()
    for month in range(3):
        store.month(2024, month).debt.append(
            AmountEntry("Car loan", 500.0, provenance=TemplateDerived("Car loan", 0))
        )
    store.month(2023, 11).debt.append(AmountEntry("car loan", 500.0))
    store.month(2024, 1).debt.append(AmountEntry("Car loan", 450.0))
    registry = TemplateRegistry(store)
    registry.debts.add(DebtTemplate("Car loan", 500.0, start_month=0, start_year=2024))

    registry.debts.update(0, DebtTemplate("Car loan", 700.0, start_month=0, start_year=2024))

    remaining = [
        (year, month, entry.amount)
        for year, month, record in store.iter_months()
        for entry in record.debt
    ]
    assert remaining == [(2024, 1, 450.0)]
    assert registry.debts[0].amount == 700.0


def test_removing_fixed_template_matches_on_planned_amount() -> None:
    store = LedgerStore()
    store.month(2024, 0).fixed_expenses.append(PlannedEntry("Rent", planned=1000.0, actual=990.0))
    store.month(2024, 1).fixed_expenses.append(PlannedEntry("Rent", planned=1100.0, actual=0.0))
    registry = TemplateRegistry(store)
    registry.fixed_expenses.add(FixedExpenseTemplate("Rent", 1000.0))

    removed = registry.fixed_expenses.remove(0)

    assert removed.name == "Rent"
    assert len(registry.fixed_expenses) == 0
    assert store.month(2024, 0).fixed_expenses == []
    assert [entry.planned for entry in store.month(2024, 1).fixed_expenses] == [1100.0]


def test_registry_from_json_skips_bad_and_repeated_templates() -> None:
    fixed_payload = [
        {"name": "Rent", "planned": 1200},
        {"name": "rent", "planned": 1300},
        {"name": "", "planned": 10},
        "garbage",
    ]
    debt_payload = [
        {"name": "Car loan", "amount": 300, "monthsRemaining": 12, "startMonth": 3, "startYear": 2023},
        {"name": "Card", "amount": "75"},
    ]

    registry = TemplateRegistry.from_json(
        LedgerStore(), fixed_payload, debt_payload, default_start=(2024, 0)
    )

    assert [template.name for template in registry.fixed_expenses] == ["Rent"]
    car_loan, card = list(registry.debts)
    assert (car_loan.start_year, car_loan.start_month, car_loan.months_remaining) == (2023, 3, 12)
    assert (card.start_year, card.start_month, card.months_remaining) == (2024, 0, 0)
    assert card.amount == 75.0


def test_registry_serialises_debt_templates_with_wire_keys() -> None:
    registry = TemplateRegistry(LedgerStore())
    registry.debts.add(DebtTemplate("Car loan", 300.0, 12, start_month=3, start_year=2023))

    fixed, debts = registry.to_json()

    assert fixed == []
    assert debts == [
        {
            "name": "Car loan",
            "amount": 300.0,
            "monthsRemaining": 12,
            "startMonth": 3,
            "startYear": 2023,
        }
    ]


def test_template_kind_accepts_category_style_names() -> None:
    assert TemplateKind.from_str("fixedExpenses") is TemplateKind.FIXED_EXPENSE
    assert TemplateKind.from_str("Debts") is TemplateKind.DEBT
    with pytest.raises(ValueError):
        TemplateKind.from_str("income")
