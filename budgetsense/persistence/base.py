"""Mini README: Abstract base class describing storage backends.

Structure:
    * PersistenceError - raised when a backend cannot complete a save/load.
    * StorageBackend - abstract key-value store implemented by backends.

The ledger only needs ``load(key)`` and ``save(key, value)`` over JSON
documents. Both are coroutines because real stores (browser storage, a
cloud drive, a spreadsheet mirror) are slow and may fail; the rest of the
application never blocks on them outside the persistence coordinator.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

JSONValue = Any


class PersistenceError(RuntimeError):
    """A backend could not read or write a dataset."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"{key}: {reason}")
        self.key = key
        self.reason = reason


class StorageBackend(ABC):
    """Base interface for key-value persistence backends."""

    backend_name: str = "generic"
    aliases: Tuple[str, ...] = ()

    def __init__(self, location: Optional[str] = None) -> None:
        self.location = location
        LOGGER.debug("Initialising %s backend with location '%s'", self.backend_name, location)

    @abstractmethod
    async def load(self, key: str) -> Optional[JSONValue]:
        """Return the JSON document stored under ``key`` or ``None`` if absent."""

    @abstractmethod
    async def save(self, key: str, value: JSONValue) -> None:
        """Persist ``value`` under ``key``, raising ``PersistenceError`` on failure."""

    def metadata(self) -> Dict[str, str]:
        """Return diagnostic metadata for UI displays."""

        return {
            "backend": self.backend_name,
            "location": self.location or "not configured",
        }
