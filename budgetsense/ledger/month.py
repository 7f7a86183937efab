"""Mini README: The per-month record held by the ledger store.

Structure:
    * MonthRecord - six entry sequences plus the carried opening balance.

A record always carries every category (possibly empty) and a non-negative
carried balance. ``from_dict`` heals whatever an older or damaged save
contains instead of rejecting it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from .entries import AmountEntry, Category, Entry, PlannedEntry, entry_type
from ..logging_utils import get_logger
from ..utils.numbers import coerce_amount

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class MonthRecord:
    """All entries and the opening balance for one calendar month."""

    income: List[AmountEntry] = field(default_factory=list)
    fixed_expenses: List[PlannedEntry] = field(default_factory=list)
    other_expenses: List[AmountEntry] = field(default_factory=list)
    travel_entertainment: List[PlannedEntry] = field(default_factory=list)
    debt: List[AmountEntry] = field(default_factory=list)
    investment: List[AmountEntry] = field(default_factory=list)
    carried_balance: float = 0.0

    def __post_init__(self) -> None:
        self.carried_balance = max(coerce_amount(self.carried_balance), 0.0)

    def entries(self, category: Category) -> List[Entry]:
        """Return the live list backing ``category``."""

        return getattr(self, _ATTRIBUTES[category])

    def replace_entries(self, category: Category, entries: List[Entry]) -> None:
        setattr(self, _ATTRIBUTES[category], list(entries))

    def set_carried_balance(self, value: float) -> None:
        self.carried_balance = max(coerce_amount(value), 0.0)

    def new_entry(self, category: Category) -> Entry:
        return entry_type(category)()

    def as_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {
            category.value: [entry.as_dict() for entry in self.entries(category)]
            for category in Category
        }
        payload["carriedBalance"] = self.carried_balance
        return payload

    @classmethod
    def from_dict(cls, payload: object) -> "MonthRecord":
        """Build a record from persisted JSON, defaulting anything missing."""

        record = cls()
        if not isinstance(payload, dict):
            LOGGER.warning("Replacing malformed month payload of type %s", type(payload).__name__)
            return record
        for category in Category:
            raw_entries = payload.get(category.value)
            if raw_entries is None:
                continue
            if not isinstance(raw_entries, list):
                LOGGER.warning("Category %s is not a list; starting it empty", category.value)
                continue
            factory = entry_type(category)
            healed = [factory.from_dict(item) for item in raw_entries if isinstance(item, dict)]
            if len(healed) != len(raw_entries):
                LOGGER.warning(
                    "Dropped %s malformed %s entries", len(raw_entries) - len(healed), category.value
                )
            record.replace_entries(category, healed)
        record.set_carried_balance(payload.get("carriedBalance"))
        return record


_ATTRIBUTES = {
    Category.INCOME: "income",
    Category.FIXED_EXPENSES: "fixed_expenses",
    Category.OTHER_EXPENSES: "other_expenses",
    Category.TRAVEL_ENTERTAINMENT: "travel_entertainment",
    Category.DEBT: "debt",
    Category.INVESTMENT: "investment",
}
