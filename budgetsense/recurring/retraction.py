"""Mini README: Remove a template's materialized entries from the whole ledger.

When a template is edited or deleted its old rows would otherwise linger
with stale amounts. Entries carry no durable template identity beyond the
name, so matching is best effort: same name (case ignored) and same amount
to the cent.
"""

from __future__ import annotations

from typing import List

from .models import DebtTemplate, FixedExpenseTemplate, Template
from ..ledger.entries import Category, Entry
from ..ledger.store import LedgerStore
from ..logging_utils import get_logger
from ..utils.numbers import round_money

LOGGER = get_logger(__name__)


def _matches(entry_name: str, entry_amount: float, template: Template) -> bool:
    return (
        entry_name.strip().casefold() == template.key
        and round_money(entry_amount) == round_money(template.match_amount)
    )


def _retract(store: LedgerStore, category: Category, template: Template) -> int:
    removed = 0
    for year, month, record in store.iter_months():
        entries: List[Entry] = record.entries(category)
        kept = [
            entry
            for entry in entries
            if not _matches(entry.name, _amount_of(entry, category), template)
        ]
        if len(kept) != len(entries):
            removed += len(entries) - len(kept)
            record.replace_entries(category, kept)
            LOGGER.debug(
                "Retracted %s '%s' rows from %s/%s",
                len(entries) - len(kept),
                template.name,
                month + 1,
                year,
            )
    return removed


def _amount_of(entry: Entry, category: Category) -> float:
    if category is Category.FIXED_EXPENSES:
        return entry.planned  # type: ignore[union-attr]
    return entry.amount  # type: ignore[union-attr]


def retract_fixed_expense(store: LedgerStore, template: FixedExpenseTemplate) -> int:
    removed = _retract(store, Category.FIXED_EXPENSES, template)
    LOGGER.info("Retracted %s fixed expense rows for template '%s'", removed, template.name)
    return removed


def retract_debt(store: LedgerStore, template: DebtTemplate) -> int:
    removed = _retract(store, Category.DEBT, template)
    LOGGER.info("Retracted %s debt rows for template '%s'", removed, template.name)
    return removed


def retract(store: LedgerStore, template: Template) -> int:
    """Dispatch to the retraction matching the template's kind."""

    if isinstance(template, FixedExpenseTemplate):
        return retract_fixed_expense(store, template)
    if isinstance(template, DebtTemplate):
        return retract_debt(store, template)
    raise TypeError(f"Unsupported template type: {type(template).__name__}")
