"""Mini README: Project registry templates into individual months.

Structure:
    * TemplateMaterializer - reconciles a month's template rows, inserts a
      template by hand, and lists which templates a month could still take.

Only the current month and later are ever reconciled automatically, so past
months keep exactly what was recorded at the time. Fixed-expense templates
are added when no row of the same name exists; debt rows produced by
templates are rebuilt from scratch on every pass. Running ``materialize``
twice in a row is therefore a no-op the second time.
"""

from __future__ import annotations

from datetime import date
from typing import Callable, List, Tuple

from .models import Template, TemplateKind
from .registry import TemplateRegistry
from ..ledger.entries import USER_ENTRY, Category, Entry
from ..ledger.month import MonthRecord
from ..ledger.store import LedgerStore
from ..logging_utils import get_logger
from ..utils.periods import period_of

LOGGER = get_logger(__name__)


class TemplateMaterializer:
    """Apply fixed-expense and debt templates to months of a ledger store."""

    def __init__(
        self,
        store: LedgerStore,
        registry: TemplateRegistry,
        *,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.store = store
        self.registry = registry
        self._today = today

    def is_materializable(self, year: int, month: int) -> bool:
        """True for the current calendar month and every month after it."""

        return (year, month) >= period_of(self._today())

    def materialize(self, year: int, month: int) -> bool:
        """Reconcile ``(year, month)`` against the registry.

        Returns ``False`` without touching the month when it lies in the past.
        """

        if not self.is_materializable(year, month):
            LOGGER.debug("Skipping template materialization for past month %s/%s", month + 1, year)
            return False
        record = self.store.month(year, month)
        added = self._materialize_fixed_expenses(record)
        applied = self._materialize_debts(record, year, month)
        LOGGER.debug(
            "Materialized %s/%s: %s fixed expense rows added, %s debt rows applied",
            month + 1,
            year,
            added,
            applied,
        )
        return True

    def _materialize_fixed_expenses(self, record: MonthRecord) -> int:
        existing = {entry.name.strip().casefold() for entry in record.fixed_expenses if entry.name}
        added = 0
        for index, template in enumerate(self.registry.fixed_expenses):
            if template.key in existing:
                continue
            record.fixed_expenses.append(template.to_entry(index))
            existing.add(template.key)
            added += 1
        return added

    def _materialize_debts(self, record: MonthRecord, year: int, month: int) -> int:
        record.debt[:] = [entry for entry in record.debt if not entry.is_template_derived]
        applied = 0
        for index, template in enumerate(self.registry.debts):
            if template.should_apply(year, month):
                record.debt.append(template.to_entry(index))
                applied += 1
        return applied

    def add_template_to_month(self, kind: TemplateKind, index: int, year: int, month: int) -> Entry:
        """Insert one template into a month by hand, as an ordinary user row."""

        template = self.registry.collection(kind)[index]
        entry = template.to_entry(index)
        entry.provenance = USER_ENTRY
        category = Category.FIXED_EXPENSES if kind is TemplateKind.FIXED_EXPENSE else Category.DEBT
        self.store.month(year, month).entries(category).append(entry)
        LOGGER.info("Added template '%s' to %s/%s by hand", template.name, month + 1, year)
        return entry

    def available_templates(
        self, kind: TemplateKind, year: int, month: int
    ) -> List[Tuple[int, Template]]:
        """Templates that can still be added to the month from the manage panel.

        Every fixed-expense template is offered; debt templates are offered
        when their window covers the month and no row of that name exists.
        """

        collection = self.registry.collection(kind)
        if kind is TemplateKind.FIXED_EXPENSE:
            return list(enumerate(collection))
        present = {entry.name.strip().casefold() for entry in self.store.month(year, month).debt}
        return [
            (index, template)
            for index, template in enumerate(collection)
            if template.should_apply(year, month) and template.key not in present
        ]
