"""Mini README: Budget service orchestrating the ledger for one user.

Structure:
    * BudgetService - owns the ledger store, the template registry, the
      materializer, the persistence coordinator and the month cursor.

Every user-level action goes through this class. Edits mutate the store,
schedule a debounced save and return fresh figures; template changes
retract, commit, persist and re-materialize the visible month; navigation
flushes every pending write, carries the opening balance forward and
materializes templates for the target month. Only one navigation runs at a
time: a second request while one is in flight is ignored.

Edit and template operations schedule timers and therefore have to be
called from inside the running event loop (the web handlers and the CLI
both do).
"""

from __future__ import annotations

from datetime import date
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .configuration import BudgetSenseSettings
from .ledger import (
    Category,
    Entry,
    LedgerStore,
    MonthRecord,
    MonthSummary,
    apply_carry,
    balance_overview,
    efficiency_series,
    expense_breakdown,
    item_balance,
    summarize,
)
from .logging_utils import get_logger
from .notifications import NotificationChannel
from .persistence import REGISTRY, Dataset, JSONValue, PersistenceCoordinator, StorageBackend
from .recurring import (
    DebtTemplate,
    FixedExpenseTemplate,
    Template,
    TemplateKind,
    TemplateMaterializer,
    TemplateRegistry,
)
from .utils.periods import month_label, period_of, shift_month, validate_month

LOGGER = get_logger(__name__)

THEMES = ("light", "dark")


class BudgetService:
    """Single-user budget session backed by a storage backend."""

    def __init__(
        self,
        backend: StorageBackend,
        *,
        debounce_seconds: float = 0.5,
        today: Callable[[], date] = date.today,
        seed_years_back: int = 2,
        seed_years_forward: int = 5,
        default_theme: str = "light",
        notifications: Optional[NotificationChannel] = None,
    ) -> None:
        if notifications is None:
            notifications = NotificationChannel()
        self.notifications = notifications
        self.coordinator = PersistenceCoordinator(
            backend, delay=debounce_seconds, notifications=self.notifications
        )
        self._today = today
        self._seed_years = (seed_years_back, seed_years_forward)
        self.store = LedgerStore()
        self.registry = TemplateRegistry(self.store)
        self.materializer = TemplateMaterializer(self.store, self.registry, today=today)
        self.year, self.month = period_of(today())
        self.theme = default_theme
        self._navigating = False

        self.coordinator.register(Dataset.LEDGER, lambda: self.store.to_json())
        self.coordinator.register(
            Dataset.FIXED_EXPENSE_TEMPLATES, lambda: self.registry.fixed_expenses.to_json()
        )
        self.coordinator.register(Dataset.DEBT_TEMPLATES, lambda: self.registry.debts.to_json())
        self.coordinator.register(Dataset.THEME, lambda: self.theme)

    @classmethod
    def from_settings(
        cls,
        settings: BudgetSenseSettings,
        *,
        backend: Optional[StorageBackend] = None,
        today: Callable[[], date] = date.today,
    ) -> "BudgetService":
        """Build a service using the configured backend and tuning values."""

        if backend is None:
            backend = REGISTRY.create(settings.storage_backend, location=str(settings.data_directory))
        return cls(
            backend,
            debounce_seconds=settings.save_debounce_seconds,
            today=today,
            seed_years_back=settings.seed_years_back,
            seed_years_forward=settings.seed_years_forward,
            default_theme=settings.default_theme,
        )

    @property
    def navigating(self) -> bool:
        return self._navigating

    async def load(self) -> MonthSummary:
        """Read every dataset from the backend and open the current month."""

        ledger_payload = await self.coordinator.load(Dataset.LEDGER)
        if ledger_payload is None:
            current_year = self._today().year
            back, forward = self._seed_years
            store = LedgerStore.seeded(current_year - back, current_year + forward)
        else:
            store = LedgerStore.from_json(ledger_payload)
        fixed_payload = await self.coordinator.load(Dataset.FIXED_EXPENSE_TEMPLATES)
        debt_payload = await self.coordinator.load(Dataset.DEBT_TEMPLATES)
        theme_payload = await self.coordinator.load(Dataset.THEME)

        self.year, self.month = period_of(self._today())
        self.store = store
        self.registry = TemplateRegistry.from_json(
            store, fixed_payload, debt_payload, default_start=(self.year, self.month)
        )
        self.materializer = TemplateMaterializer(store, self.registry, today=self._today)
        if theme_payload in THEMES:
            self.theme = theme_payload
        LOGGER.info(
            "Loaded ledger with %s years, %s fixed and %s debt templates",
            len(store.years()),
            len(self.registry.fixed_expenses),
            len(self.registry.debts),
        )
        return self.open_month(self.year, self.month)

    def open_month(self, year: int, month: int) -> MonthSummary:
        """Prepare ``(year, month)`` for display and make it the current month."""

        validate_month(month)
        self.store.month(year, month)
        apply_carry(self.store, year, month)
        self.materializer.materialize(year, month)
        self.year, self.month = year, month
        return self.summary()

    async def navigate(self, direction: int) -> bool:
        """Move the cursor ``direction`` months; ``False`` if a navigation is running."""

        target = shift_month(self.year, self.month, direction)
        return await self.go_to(*target)

    async def go_to(self, year: int, month: int) -> bool:
        """Jump to ``(year, month)`` after flushing every pending save."""

        validate_month(month)
        if self._navigating:
            LOGGER.debug("Ignoring navigation to %s/%s while another is running", month + 1, year)
            return False
        self._navigating = True
        try:
            await self.coordinator.flush()
            self.open_month(year, month)
            self.coordinator.schedule_save(Dataset.LEDGER)
            LOGGER.info("Navigated to %s", month_label(year, month))
        finally:
            self._navigating = False
        return True

    # Ledger edits -------------------------------------------------------

    def current_record(self) -> MonthRecord:
        return self.store.month(self.year, self.month)

    def _ledger_changed(self) -> MonthSummary:
        self.coordinator.schedule_save(Dataset.LEDGER)
        return self.summary()

    def update_item(self, category: Category, index: int, field_name: str, value: object) -> Entry:
        entry = self.store.update_item(self.year, self.month, category, index, field_name, value)
        self._ledger_changed()
        return entry

    def add_row(self, category: Category) -> bool:
        added = self.store.add_row(self.year, self.month, category)
        if added:
            self._ledger_changed()
        return added

    def delete_rows(self, category: Category, indices: Iterable[int]) -> int:
        removed = self.store.delete_rows(self.year, self.month, category, indices)
        if removed:
            self._ledger_changed()
        return removed

    def remove_item_from_month(self, category: Category, index: int) -> bool:
        return self.delete_rows(category, [index]) == 1

    def clear_category(self, category: Category) -> int:
        removed = self.store.clear_category(self.year, self.month, category)
        self._ledger_changed()
        return removed

    # Templates ----------------------------------------------------------

    def _templates_changed(self, kind: TemplateKind) -> None:
        self.materializer.materialize(self.year, self.month)
        dataset = (
            Dataset.FIXED_EXPENSE_TEMPLATES
            if kind is TemplateKind.FIXED_EXPENSE
            else Dataset.DEBT_TEMPLATES
        )
        self.coordinator.schedule_save(dataset)
        self.coordinator.schedule_save(Dataset.LEDGER)

    def _reject(self, error: ValueError) -> None:
        self.notifications.error(str(error))

    @staticmethod
    def _require_positive(value: float, message: str) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise ValueError(message)
        return float(value)

    def add_fixed_template(self, name: str, planned: float) -> int:
        try:
            template = FixedExpenseTemplate(
                name=name,
                planned=self._require_positive(planned, "Please enter valid template details"),
            )
            index = self.registry.fixed_expenses.add(template)
        except ValueError as error:
            self._reject(error)
            raise
        self._templates_changed(TemplateKind.FIXED_EXPENSE)
        return index

    def update_fixed_template(self, index: int, name: str, planned: float) -> FixedExpenseTemplate:
        try:
            template = FixedExpenseTemplate(
                name=name,
                planned=self._require_positive(planned, "Please enter valid template details"),
            )
            self.registry.fixed_expenses.update(index, template)
        except ValueError as error:
            self._reject(error)
            raise
        self._templates_changed(TemplateKind.FIXED_EXPENSE)
        return template

    def remove_fixed_template(self, index: int) -> FixedExpenseTemplate:
        removed = self.registry.fixed_expenses.remove(index)
        self._templates_changed(TemplateKind.FIXED_EXPENSE)
        return removed

    def add_debt_template(self, name: str, amount: float, months_remaining: int = 0) -> int:
        """Add a debt template starting in the month currently on screen."""

        try:
            template = DebtTemplate(
                name=name,
                amount=self._require_positive(amount, "Please enter valid debt template details"),
                months_remaining=months_remaining,
                start_month=self.month,
                start_year=self.year,
            )
            index = self.registry.debts.add(template)
        except ValueError as error:
            self._reject(error)
            raise
        self._templates_changed(TemplateKind.DEBT)
        return index

    def update_debt_template(
        self, index: int, name: str, amount: float, months_remaining: int = 0
    ) -> DebtTemplate:
        """Edit a debt template; its original start month is kept."""

        previous = self.registry.debts[index]
        try:
            template = DebtTemplate(
                name=name,
                amount=self._require_positive(amount, "Please enter valid debt template details"),
                months_remaining=months_remaining,
                start_month=previous.start_month,
                start_year=previous.start_year,
            )
            self.registry.debts.update(index, template)
        except ValueError as error:
            self._reject(error)
            raise
        self._templates_changed(TemplateKind.DEBT)
        return template

    def remove_debt_template(self, index: int) -> DebtTemplate:
        removed = self.registry.debts.remove(index)
        self._templates_changed(TemplateKind.DEBT)
        return removed

    def add_template_to_month(self, kind: TemplateKind, index: int) -> Entry:
        entry = self.materializer.add_template_to_month(kind, index, self.year, self.month)
        self._ledger_changed()
        return entry

    def available_templates(self, kind: TemplateKind) -> List[Tuple[int, Template]]:
        return self.materializer.available_templates(kind, self.year, self.month)

    # Read models --------------------------------------------------------

    def summary(self) -> MonthSummary:
        return summarize(self.current_record())

    def efficiency_trend(self, span: int = 6) -> List[Dict[str, object]]:
        return efficiency_series(self.store, self.year, self.month, span)

    def expense_breakdown(self) -> Dict[str, float]:
        return expense_breakdown(self.current_record())

    def balance_overview(self) -> Dict[str, float]:
        return balance_overview(self.current_record())

    def month_view(self) -> Dict[str, object]:
        """Everything the month screen renders, as plain JSON values."""

        record = self.current_record()
        categories: Dict[str, List[Dict[str, object]]] = {}
        for category in Category:
            rows = []
            for entry in record.entries(category):
                row = entry.as_dict()
                balance = item_balance(entry)
                if balance is not None:
                    row["balance"] = balance
                rows.append(row)
            categories[category.value] = rows
        return {
            "year": self.year,
            "month": self.month,
            "label": month_label(self.year, self.month),
            "categories": categories,
            "summary": self.summary().as_dict(),
        }

    def templates_view(self) -> Dict[str, List[Dict[str, object]]]:
        fixed, debts = self.registry.to_json()
        return {"fixed": fixed, "debt": debts}

    # Preferences and export ---------------------------------------------

    def set_theme(self, theme: str) -> str:
        normalised = theme.strip().lower()
        if normalised not in THEMES:
            raise ValueError(f"Unsupported theme: {theme}")
        self.theme = normalised
        self.coordinator.schedule_save(Dataset.THEME)
        return self.theme

    def toggle_theme(self) -> str:
        return self.set_theme("light" if self.theme == "dark" else "dark")

    def export_snapshot(self) -> Dict[str, JSONValue]:
        """Every dataset as it would be written to the backend."""

        fixed, debts = self.registry.to_json()
        return {
            Dataset.LEDGER.key: self.store.to_json(),
            Dataset.FIXED_EXPENSE_TEMPLATES.key: fixed,
            Dataset.DEBT_TEMPLATES.key: debts,
            Dataset.THEME.key: self.theme,
        }

    async def flush(self) -> bool:
        return await self.coordinator.flush()

    async def close(self) -> bool:
        """Flush everything before the process or page goes away."""

        return await self.coordinator.close()
