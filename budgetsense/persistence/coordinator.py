"""Mini README: Debounced saving of ledger datasets.

Structure:
    * Dataset - the independently persisted datasets and their storage keys.
    * DebouncedSave - one cancellable quiet-period timer for one dataset.
    * PersistenceCoordinator - owns a DebouncedSave per dataset and reports
      failures to the notification channel.

Every edit calls ``schedule_save``; only the last edit in a burst reaches
the backend, serialised at the moment its write starts. Writes for one
dataset are queued so only one is in flight at a time. ``flush`` skips the
quiet period and is awaited before month navigation and at shutdown so no
edit is lost. A failed save never rolls back memory: the user is told, and the
next edit schedules a fresh attempt with the current state.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Callable, Dict, Optional, Set

from .base import JSONValue, PersistenceError, StorageBackend
from ..logging_utils import get_logger
from ..notifications import NotificationChannel

LOGGER = get_logger(__name__)


class Dataset(str, Enum):
    """Datasets with their own save lifecycle, valued by storage key."""

    LEDGER = "budget-data"
    FIXED_EXPENSE_TEMPLATES = "budget-fixed-expense-templates"
    DEBT_TEMPLATES = "budget-debt-templates"
    THEME = "budget-theme"

    @property
    def key(self) -> str:
        return self.value


_FAILURE_MESSAGES = {
    Dataset.LEDGER: "Failed to save data",
    Dataset.FIXED_EXPENSE_TEMPLATES: "Failed to save expense templates",
    Dataset.DEBT_TEMPLATES: "Failed to save debt templates",
    Dataset.THEME: "Failed to save theme preference",
}

Serialiser = Callable[[], JSONValue]
FailureHandler = Callable[[Dataset, PersistenceError], None]


class DebouncedSave:
    """Collapse bursts of save requests for one dataset into a single write.

    Must be driven from inside a running event loop.
    """

    def __init__(
        self,
        dataset: Dataset,
        serialise: Serialiser,
        backend: StorageBackend,
        *,
        delay: float,
        on_failure: Optional[FailureHandler] = None,
    ) -> None:
        self.dataset = dataset
        self.delay = delay
        self._serialise = serialise
        self._backend = backend
        self._on_failure = on_failure
        self._timer: Optional[asyncio.TimerHandle] = None
        self._in_flight: Set[asyncio.Task] = set()
        self._last_save: Optional[asyncio.Task] = None
        self.completed_saves = 0
        self.failed_saves = 0

    @property
    def pending(self) -> bool:
        """True while a quiet-period timer is waiting to fire."""

        return self._timer is not None

    @property
    def in_flight(self) -> bool:
        return bool(self._in_flight)

    def schedule(self) -> None:
        """Restart the quiet-period timer; the previous one is discarded."""

        loop = asyncio.get_running_loop()
        self.cancel()
        self._timer = loop.call_later(self.delay, self._fire)

    def cancel(self) -> bool:
        """Drop the pending timer; returns whether one was pending."""

        if self._timer is None:
            return False
        self._timer.cancel()
        self._timer = None
        return True

    def _fire(self) -> None:
        self._timer = None
        self._start_save()

    def _start_save(self) -> asyncio.Task:
        """Queue a write behind the previous one for this dataset."""

        previous = self._last_save
        task = asyncio.get_running_loop().create_task(self._save_after(previous))
        self._last_save = task
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        return task

    async def _save_after(self, previous: Optional[asyncio.Task]) -> bool:
        if previous is not None and not previous.done():
            await asyncio.wait({previous})
        return await self._write()

    async def _write(self) -> bool:
        payload = self._serialise()
        try:
            await self._backend.save(self.dataset.key, payload)
        except PersistenceError as error:
            self.failed_saves += 1
            LOGGER.warning("Saving %s failed: %s", self.dataset.key, error.reason)
            if self._on_failure is not None:
                self._on_failure(self.dataset, error)
            return False
        self.completed_saves += 1
        LOGGER.info("Saved %s", self.dataset.key)
        return True

    async def save_now(self) -> bool:
        """Write the current state once earlier writes have finished.

        At most one write per dataset reaches the backend at a time, and the
        payload is serialised when the write starts, so a slow older save can
        never land after a newer one.
        """

        return await asyncio.shield(self._start_save())

    async def flush(self, *, force: bool = False) -> bool:
        """Write now if a save is pending (or ``force``); no-op otherwise."""

        had_pending = self.cancel()
        if had_pending or force:
            return await self.save_now()
        return True

    async def wait_idle(self) -> None:
        """Wait until every queued write has finished."""

        while True:
            pending = {task for task in self._in_flight if not task.done()}
            if not pending:
                return
            await asyncio.wait(pending)


class PersistenceCoordinator:
    """Route save requests for every dataset through debounced timers."""

    def __init__(
        self,
        backend: StorageBackend,
        *,
        delay: float = 0.5,
        notifications: Optional[NotificationChannel] = None,
    ) -> None:
        self.backend = backend
        self.delay = delay
        if notifications is None:
            notifications = NotificationChannel()
        self.notifications = notifications
        self._savers: Dict[Dataset, DebouncedSave] = {}

    def register(self, dataset: Dataset, serialise: Serialiser) -> DebouncedSave:
        """Attach the serialiser producing ``dataset``'s JSON document."""

        saver = DebouncedSave(
            dataset,
            serialise,
            self.backend,
            delay=self.delay,
            on_failure=self._report_failure,
        )
        self._savers[dataset] = saver
        return saver

    def saver(self, dataset: Dataset) -> DebouncedSave:
        if dataset not in self._savers:
            raise KeyError(f"Dataset {dataset.key} has no registered serialiser")
        return self._savers[dataset]

    def schedule_save(self, dataset: Dataset) -> None:
        self.saver(dataset).schedule()

    def pending(self, dataset: Dataset) -> bool:
        return self.saver(dataset).pending

    async def flush(self, dataset: Optional[Dataset] = None, *, force: bool = False) -> bool:
        """Flush one dataset, or all of them; returns whether every save succeeded."""

        targets = [self.saver(dataset)] if dataset is not None else list(self._savers.values())
        results = [await saver.flush(force=force) for saver in targets]
        return all(results)

    async def load(self, dataset: Dataset) -> Optional[JSONValue]:
        """Read a dataset, reporting backend failures and returning ``None``."""

        try:
            return await self.backend.load(dataset.key)
        except PersistenceError as error:
            LOGGER.warning("Loading %s failed: %s", dataset.key, error.reason)
            self.notifications.error(f"Failed to load {dataset.key}; starting from defaults")
            return None

    async def close(self) -> bool:
        """Flush pending saves and wait for in-flight ones; used at teardown."""

        succeeded = await self.flush()
        for saver in self._savers.values():
            await saver.wait_idle()
        return succeeded

    def _report_failure(self, dataset: Dataset, error: PersistenceError) -> None:
        self.notifications.error(f"{_FAILURE_MESSAGES[dataset]}: {error.reason}")
