"""Mini README: Reusable templates that project entries into months.

Structure:
    * TemplateKind - enum separating fixed-expense and debt templates.
    * FixedExpenseTemplate - planned monthly expense applied to every month.
    * DebtTemplate - repayment applied for a window of months (or forever).
    * should_apply - the debt window rule.

Template names are keys: two templates of the same kind may not share a
name once case is ignored. The registry enforces that rule; this module
only validates individual templates.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, Union

from ..ledger.entries import AmountEntry, PlannedEntry, TemplateDerived
from ..utils.numbers import coerce_amount
from ..utils.periods import months_between, validate_month


class TemplateKind(str, Enum):
    """Enumerate the template collections kept by the registry."""

    FIXED_EXPENSE = "fixed"
    DEBT = "debt"

    @classmethod
    def from_str(cls, value: str) -> "TemplateKind":
        """Accept ``fixed``/``debt`` as well as the category names they feed."""

        try:
            normalised = value.strip().lower()
        except AttributeError as error:
            raise ValueError(f"Unsupported template kind: {value}") from error
        aliases = {
            "fixed": cls.FIXED_EXPENSE,
            "fixedexpenses": cls.FIXED_EXPENSE,
            "fixed_expenses": cls.FIXED_EXPENSE,
            "debt": cls.DEBT,
            "debts": cls.DEBT,
        }
        if normalised not in aliases:
            raise ValueError(f"Unsupported template kind: {value}")
        return aliases[normalised]


def _clean_name(name: object) -> str:
    cleaned = str(name or "").strip()
    if not cleaned:
        raise ValueError("Template name must not be empty.")
    return cleaned


def _non_negative(value: object, label: str) -> float:
    if isinstance(value, bool):
        raise ValueError(f"{label} must be a number.")
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as error:
        raise ValueError(f"{label} must be a number.") from error
    if number < 0:
        raise ValueError(f"{label} must not be negative.")
    return number


@dataclass(slots=True)
class FixedExpenseTemplate:
    """Expense expected every month with a planned figure."""

    name: str
    planned: float

    kind = TemplateKind.FIXED_EXPENSE

    def __post_init__(self) -> None:
        self.name = _clean_name(self.name)
        self.planned = _non_negative(self.planned, "Planned amount")

    @property
    def key(self) -> str:
        return self.name.casefold()

    @property
    def match_amount(self) -> float:
        """Figure used to recognise entries this template produced."""

        return self.planned

    def to_entry(self, index: Optional[int] = None) -> PlannedEntry:
        return PlannedEntry(
            name=self.name,
            planned=self.planned,
            actual=0.0,
            provenance=TemplateDerived(template_name=self.name, template_index=index),
        )

    def as_dict(self) -> Dict[str, object]:
        return {"name": self.name, "planned": self.planned}

    @classmethod
    def from_dict(cls, payload: Dict[str, object]) -> "FixedExpenseTemplate":
        return cls(name=payload.get("name"), planned=max(coerce_amount(payload.get("planned")), 0.0))


@dataclass(slots=True)
class DebtTemplate:
    """Debt repayment applied from its start month for ``months_remaining`` months.

    ``months_remaining == 0`` means the repayment never ends.
    """

    name: str
    amount: float
    months_remaining: int = 0
    start_month: int = 0
    start_year: int = 1970

    kind = TemplateKind.DEBT

    def __post_init__(self) -> None:
        self.name = _clean_name(self.name)
        self.amount = _non_negative(self.amount, "Debt amount")
        if isinstance(self.months_remaining, bool) or not isinstance(self.months_remaining, int):
            raise ValueError("months_remaining must be a whole number of months.")
        if self.months_remaining < 0:
            raise ValueError("months_remaining must not be negative.")
        validate_month(self.start_month)

    @property
    def key(self) -> str:
        return self.name.casefold()

    @property
    def match_amount(self) -> float:
        return self.amount

    @property
    def is_unlimited(self) -> bool:
        return self.months_remaining == 0

    def should_apply(self, year: int, month: int) -> bool:
        return should_apply(self, month, year)

    def to_entry(self, index: Optional[int] = None) -> AmountEntry:
        return AmountEntry(
            name=self.name,
            amount=self.amount,
            provenance=TemplateDerived(template_name=self.name, template_index=index),
        )

    def as_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "amount": self.amount,
            "monthsRemaining": self.months_remaining,
            "startMonth": self.start_month,
            "startYear": self.start_year,
        }

    @classmethod
    def from_dict(
        cls, payload: Dict[str, object], default_start: Tuple[int, int]
    ) -> "DebtTemplate":
        """Load a persisted template; a missing start period defaults to ``default_start``."""

        default_year, default_month = default_start
        months = payload.get("monthsRemaining")
        start_month = payload.get("startMonth")
        start_year = payload.get("startYear")
        if not isinstance(start_month, int) or isinstance(start_month, bool) or not 0 <= start_month <= 11:
            start_month, start_year = default_month, default_year
        if not isinstance(start_year, int) or isinstance(start_year, bool):
            start_month, start_year = default_month, default_year
        return cls(
            name=payload.get("name"),
            amount=max(coerce_amount(payload.get("amount")), 0.0),
            months_remaining=max(int(coerce_amount(months)), 0),
            start_month=start_month,
            start_year=start_year,
        )


Template = Union[FixedExpenseTemplate, DebtTemplate]


def should_apply(template: DebtTemplate, month: int, year: int) -> bool:
    """Return whether the debt template produces an entry in ``(year, month)``."""

    if template.months_remaining == 0:
        return True
    elapsed = months_between(template.start_year, template.start_month, year, month)
    return 0 <= elapsed < template.months_remaining
