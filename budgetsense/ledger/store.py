"""Mini README: Ledger store owning every month of the budget.

Structure:
    * LedgerStore - ``year -> month index -> MonthRecord`` with lazy creation
      and the row-level editing operations used by the interface.

The store is the single owner of month records. Callers either read a
record (``month`` creates it on demand, ``peek`` never does) or mutate it
through the operations below, which validate categories, fields and indices
and log what changed. Serialisation follows the persisted shape
``{year: {month: record}}`` with string keys.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .entries import Category, Entry
from .month import MonthRecord
from ..logging_utils import get_logger
from ..utils.periods import validate_month

LOGGER = get_logger(__name__)


class LedgerStore:
    """Own all month records, creating whole years the first time they are touched."""

    def __init__(self, years: Optional[Dict[int, Dict[int, MonthRecord]]] = None) -> None:
        self._years: Dict[int, Dict[int, MonthRecord]] = {}
        for year, months in (years or {}).items():
            self.ensure_year(year)
            for month, record in months.items():
                self._years[year][validate_month(month)] = record
        LOGGER.debug("Ledger store initialised with %s years", len(self._years))

    @classmethod
    def seeded(cls, first_year: int, last_year: int) -> "LedgerStore":
        """Return a store with empty months for every year in the inclusive range."""

        store = cls()
        for year in range(first_year, last_year + 1):
            store.ensure_year(year)
        LOGGER.info("Seeded empty ledger for %s-%s", first_year, last_year)
        return store

    @classmethod
    def from_json(cls, payload: object) -> "LedgerStore":
        """Rebuild a store from persisted JSON, healing malformed parts."""

        store = cls()
        if payload is None:
            return store
        if not isinstance(payload, dict):
            LOGGER.warning("Ignoring ledger payload of type %s", type(payload).__name__)
            return store
        for raw_year, raw_months in payload.items():
            try:
                year = int(raw_year)
            except (TypeError, ValueError):
                LOGGER.warning("Skipping ledger year with invalid key %r", raw_year)
                continue
            store.ensure_year(year)
            if not isinstance(raw_months, dict):
                LOGGER.warning("Year %s is malformed; keeping empty months", year)
                continue
            for raw_month, raw_record in raw_months.items():
                try:
                    month = validate_month(int(raw_month))
                except (TypeError, ValueError):
                    LOGGER.warning("Skipping month with invalid key %r in %s", raw_month, year)
                    continue
                store._years[year][month] = MonthRecord.from_dict(raw_record)
        return store

    def to_json(self) -> Dict[str, Dict[str, Dict[str, object]]]:
        return {
            str(year): {str(month): record.as_dict() for month, record in sorted(months.items())}
            for year, months in sorted(self._years.items())
        }

    def ensure_year(self, year: int) -> Dict[int, MonthRecord]:
        """Create all twelve months of ``year`` if it has never been touched."""

        months = self._years.get(year)
        if months is None:
            months = {month: MonthRecord() for month in range(12)}
            self._years[year] = months
            LOGGER.debug("Initialised ledger year %s", year)
        else:
            for month in range(12):
                months.setdefault(month, MonthRecord())
        return months

    def month(self, year: int, month: int) -> MonthRecord:
        """Return the record for ``(year, month)``, creating the year if needed."""

        validate_month(month)
        return self.ensure_year(year)[month]

    def peek(self, year: int, month: int) -> Optional[MonthRecord]:
        """Return the record if it exists without creating anything."""

        return self._years.get(year, {}).get(month)

    def __contains__(self, period: object) -> bool:
        if not isinstance(period, tuple) or len(period) != 2:
            return False
        year, month = period
        return self.peek(year, month) is not None

    def years(self) -> List[int]:
        return sorted(self._years)

    def iter_months(self) -> Iterator[Tuple[int, int, MonthRecord]]:
        """Yield ``(year, month, record)`` in calendar order."""

        for year in sorted(self._years):
            for month, record in sorted(self._years[year].items()):
                yield year, month, record

    def update_item(
        self,
        year: int,
        month: int,
        category: Category,
        index: int,
        field_name: str,
        value: object,
    ) -> Entry:
        """Edit one cell; editing just past the last row appends a new row."""

        entries = self.month(year, month).entries(category)
        if index < 0 or index > len(entries):
            raise IndexError(f"Row {index} does not exist in {category.value}")
        if index == len(entries):
            entries.append(self.month(year, month).new_entry(category))
        entry = entries[index]
        if field_name not in entry.editable_fields:
            raise ValueError(f"Field '{field_name}' is not editable on {category.value} rows.")
        entry.set_field(field_name, value)
        LOGGER.debug(
            "Updated %s[%s].%s for %s/%s", category.value, index, field_name, month + 1, year
        )
        return entry

    def add_row(self, year: int, month: int, category: Category) -> bool:
        """Append a blank row unless the category already has one."""

        record = self.month(year, month)
        entries = record.entries(category)
        if any(entry.is_blank() for entry in entries):
            return False
        entries.append(record.new_entry(category))
        return True

    def delete_rows(
        self, year: int, month: int, category: Category, indices: Iterable[int]
    ) -> int:
        """Remove the selected rows, ignoring indices that do not exist."""

        entries = self.month(year, month).entries(category)
        removed = 0
        for index in sorted(set(indices), reverse=True):
            if 0 <= index < len(entries):
                del entries[index]
                removed += 1
        if removed:
            LOGGER.info("Deleted %s %s rows from %s/%s", removed, category.value, month + 1, year)
        return removed

    def clear_category(self, year: int, month: int, category: Category) -> int:
        record = self.month(year, month)
        removed = len(record.entries(category))
        record.replace_entries(category, [])
        LOGGER.info("Cleared %s %s rows from %s/%s", removed, category.value, month + 1, year)
        return removed
