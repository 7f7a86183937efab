"""Mini README: Registry of fixed-expense and debt templates.

Structure:
    * DuplicateTemplateError - raised when a name is already taken.
    * TemplateCollection - ordered templates of one kind keyed by name.
    * TemplateRegistry - both collections bound to a ledger store.

Editing or removing a template first retracts its previous rows from every
month of the store and only then commits the change, so the next
materialization never sees entries built from the old definition.
"""

from __future__ import annotations

from typing import Callable, Dict, Generic, Iterable, Iterator, List, Optional, Tuple, TypeVar

from .models import DebtTemplate, FixedExpenseTemplate, TemplateKind
from .retraction import retract_debt, retract_fixed_expense
from ..ledger.store import LedgerStore
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

T = TypeVar("T", FixedExpenseTemplate, DebtTemplate)


class DuplicateTemplateError(ValueError):
    """A template with the same name (ignoring case) already exists."""


class TemplateCollection(Generic[T]):
    """Ordered templates of a single kind with case-insensitive unique names."""

    def __init__(
        self,
        kind: TemplateKind,
        templates: Optional[Iterable[T]] = None,
        *,
        on_retract: Optional[Callable[[T], int]] = None,
    ) -> None:
        self.kind = kind
        self._templates: List[T] = []
        self._on_retract = on_retract
        for template in templates or []:
            self.add(template)

    def __len__(self) -> int:
        return len(self._templates)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._templates))

    def __getitem__(self, index: int) -> T:
        return self._templates[self._check_index(index)]

    def _check_index(self, index: int) -> int:
        if not 0 <= index < len(self._templates):
            raise IndexError(f"No {self.kind.value} template at position {index}")
        return index

    def find(self, name: str) -> Optional[int]:
        """Return the position of the template called ``name`` (case ignored)."""

        key = name.strip().casefold()
        for index, template in enumerate(self._templates):
            if template.key == key:
                return index
        return None

    def _ensure_unique(self, template: T, *, ignore_index: Optional[int] = None) -> None:
        existing = self.find(template.name)
        if existing is not None and existing != ignore_index:
            raise DuplicateTemplateError(
                f"A {self.kind.value} template named '{self._templates[existing].name}' already exists."
            )

    def add(self, template: T) -> int:
        """Append ``template`` and return its position."""

        self._ensure_unique(template)
        self._templates.append(template)
        LOGGER.info("Added %s template '%s'", self.kind.value, template.name)
        return len(self._templates) - 1

    def update(self, index: int, template: T) -> T:
        """Replace the template at ``index`` after retracting its old rows."""

        self._check_index(index)
        self._ensure_unique(template, ignore_index=index)
        previous = self._templates[index]
        if self._on_retract is not None:
            self._on_retract(previous)
        self._templates[index] = template
        LOGGER.info("Updated %s template '%s' -> '%s'", self.kind.value, previous.name, template.name)
        return previous

    def remove(self, index: int) -> T:
        """Delete the template at ``index`` after retracting its rows."""

        self._check_index(index)
        if self._on_retract is not None:
            self._on_retract(self._templates[index])
        removed = self._templates.pop(index)
        LOGGER.info("Removed %s template '%s'", self.kind.value, removed.name)
        return removed

    def to_json(self) -> List[Dict[str, object]]:
        return [template.as_dict() for template in self._templates]


class TemplateRegistry:
    """Both template collections, retracting against a shared ledger store."""

    def __init__(
        self,
        store: LedgerStore,
        fixed_expenses: Optional[Iterable[FixedExpenseTemplate]] = None,
        debts: Optional[Iterable[DebtTemplate]] = None,
    ) -> None:
        self.store = store
        self.fixed_expenses: TemplateCollection[FixedExpenseTemplate] = TemplateCollection(
            TemplateKind.FIXED_EXPENSE,
            fixed_expenses,
            on_retract=lambda template: retract_fixed_expense(self.store, template),
        )
        self.debts: TemplateCollection[DebtTemplate] = TemplateCollection(
            TemplateKind.DEBT,
            debts,
            on_retract=lambda template: retract_debt(self.store, template),
        )

    def collection(self, kind: TemplateKind) -> TemplateCollection:
        if kind is TemplateKind.FIXED_EXPENSE:
            return self.fixed_expenses
        return self.debts

    @classmethod
    def from_json(
        cls,
        store: LedgerStore,
        fixed_payload: object,
        debt_payload: object,
        *,
        default_start: Tuple[int, int],
    ) -> "TemplateRegistry":
        """Load persisted templates, skipping malformed entries and repeated names."""

        registry = cls(store)
        for payload, loader, collection in (
            (fixed_payload, FixedExpenseTemplate.from_dict, registry.fixed_expenses),
            (debt_payload, lambda item: DebtTemplate.from_dict(item, default_start), registry.debts),
        ):
            if payload is None:
                continue
            if not isinstance(payload, list):
                LOGGER.warning("Ignoring %s templates stored as %s", collection.kind.value, type(payload).__name__)
                continue
            for item in payload:
                if not isinstance(item, dict):
                    LOGGER.warning("Skipping malformed %s template %r", collection.kind.value, item)
                    continue
                try:
                    collection.add(loader(item))
                except ValueError as error:
                    LOGGER.warning("Skipping %s template %r: %s", collection.kind.value, item, error)
        return registry

    def to_json(self) -> Tuple[List[Dict[str, object]], List[Dict[str, object]]]:
        return self.fixed_expenses.to_json(), self.debts.to_json()
