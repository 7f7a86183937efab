"""Mini README: Entry types stored inside each month of the ledger.

Structure:
    * Category - enum naming the six entry sequences of a month.
    * UserEntry / TemplateDerived - provenance variants for an entry.
    * AmountEntry - ``{name, amount}`` rows (income, other, debt, investment).
    * PlannedEntry - ``{name, planned, actual}`` rows (fixed, travel).

Provenance is explicit: an entry either belongs to the user or was produced
by a template. On the wire the template variant keeps the historical
``fromTemplate``/``templateId`` keys so existing saves load unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Union

from ..utils.numbers import coerce_amount, parse_user_amount


class Category(str, Enum):
    """Enumerate the entry sequences every month carries."""

    INCOME = "income"
    FIXED_EXPENSES = "fixedExpenses"
    OTHER_EXPENSES = "otherExpenses"
    TRAVEL_ENTERTAINMENT = "travelEntertainment"
    DEBT = "debt"
    INVESTMENT = "investment"

    @classmethod
    def from_str(cls, value: str) -> "Category":
        """Accept wire names (``fixedExpenses``) or snake case (``fixed_expenses``)."""

        try:
            normalised = value.strip().replace("_", "").replace("-", "").lower()
        except AttributeError as error:
            raise ValueError(f"Unsupported category: {value}") from error
        for category in cls:
            if category.value.lower() == normalised:
                return category
        raise ValueError(f"Unsupported category: {value}")

    @property
    def is_planned(self) -> bool:
        """Planned categories track a budgeted and an actual figure per row."""

        return self in (Category.FIXED_EXPENSES, Category.TRAVEL_ENTERTAINMENT)

    @property
    def is_expense(self) -> bool:
        return self is not Category.INCOME

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    Category.INCOME: "Income",
    Category.FIXED_EXPENSES: "Fixed Expenses",
    Category.OTHER_EXPENSES: "Other Expenses",
    Category.TRAVEL_ENTERTAINMENT: "Travel & Entertainment",
    Category.DEBT: "Debt",
    Category.INVESTMENT: "Investment",
}


@dataclass(frozen=True, slots=True)
class UserEntry:
    """Provenance of rows typed in by the user."""


@dataclass(frozen=True, slots=True)
class TemplateDerived:
    """Provenance of rows produced by a template.

    The reference is weak: it names the template and its position at the
    time of materialization, it never keeps the template alive.
    """

    template_name: str
    template_index: Optional[int] = None


Provenance = Union[UserEntry, TemplateDerived]
USER_ENTRY = UserEntry()


def _provenance_from_dict(payload: Dict[str, object]) -> Provenance:
    if not payload.get("fromTemplate"):
        return USER_ENTRY
    index = payload.get("templateId")
    if isinstance(index, bool) or not isinstance(index, int):
        index = None
    return TemplateDerived(template_name=str(payload.get("name") or ""), template_index=index)


def _provenance_as_dict(provenance: Provenance) -> Dict[str, object]:
    if isinstance(provenance, TemplateDerived):
        payload: Dict[str, object] = {"fromTemplate": True}
        if provenance.template_index is not None:
            payload["templateId"] = provenance.template_index
        return payload
    return {}


@dataclass(slots=True)
class AmountEntry:
    """Single-figure row used by income, other expenses, debt and investment."""

    name: str = ""
    amount: float = 0.0
    provenance: Provenance = USER_ENTRY

    editable_fields = ("name", "amount")

    @property
    def is_template_derived(self) -> bool:
        return isinstance(self.provenance, TemplateDerived)

    @property
    def spent(self) -> float:
        """Amount counted towards the month's totals."""

        return coerce_amount(self.amount)

    def is_blank(self) -> bool:
        return not self.name.strip() and not coerce_amount(self.amount)

    def set_field(self, field_name: str, value: object) -> None:
        """Apply an edit coming from the interface."""

        if field_name == "name":
            self.name = "" if value is None else str(value)
        elif field_name == "amount":
            self.amount = parse_user_amount(value)
        else:
            raise ValueError(f"Field '{field_name}' is not editable on this entry.")

    def as_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {"name": self.name, "amount": self.amount}
        payload.update(_provenance_as_dict(self.provenance))
        return payload

    @classmethod
    def from_dict(cls, payload: Dict[str, object]) -> "AmountEntry":
        return cls(
            name=str(payload.get("name") or ""),
            amount=max(coerce_amount(payload.get("amount")), 0.0),
            provenance=_provenance_from_dict(payload),
        )


@dataclass(slots=True)
class PlannedEntry:
    """Budgeted row tracking the planned figure next to what was spent."""

    name: str = ""
    planned: float = 0.0
    actual: float = 0.0
    provenance: Provenance = USER_ENTRY

    editable_fields = ("name", "planned", "actual")

    @property
    def is_template_derived(self) -> bool:
        return isinstance(self.provenance, TemplateDerived)

    @property
    def spent(self) -> float:
        return coerce_amount(self.actual)

    @property
    def balance(self) -> float:
        """Planned minus actual; negative when the row is overspent."""

        return coerce_amount(self.planned) - coerce_amount(self.actual)

    def is_blank(self) -> bool:
        return (
            not self.name.strip()
            and not coerce_amount(self.planned)
            and not coerce_amount(self.actual)
        )

    def set_field(self, field_name: str, value: object) -> None:
        if field_name == "name":
            self.name = "" if value is None else str(value)
        elif field_name in ("planned", "actual"):
            setattr(self, field_name, parse_user_amount(value))
        else:
            raise ValueError(f"Field '{field_name}' is not editable on this entry.")

    def as_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {
            "name": self.name,
            "planned": self.planned,
            "actual": self.actual,
        }
        payload.update(_provenance_as_dict(self.provenance))
        return payload

    @classmethod
    def from_dict(cls, payload: Dict[str, object]) -> "PlannedEntry":
        return cls(
            name=str(payload.get("name") or ""),
            planned=max(coerce_amount(payload.get("planned")), 0.0),
            actual=max(coerce_amount(payload.get("actual")), 0.0),
            provenance=_provenance_from_dict(payload),
        )


Entry = Union[AmountEntry, PlannedEntry]


def entry_type(category: Category):
    """Return the entry class stored under ``category``."""

    return PlannedEntry if category.is_planned else AmountEntry
