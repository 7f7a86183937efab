"""Mini README: In-process storage backend.

Structure:
    * MemoryBackend - dictionary of serialised JSON documents.

Documents are stored as JSON text rather than live objects so a save
captures the state at that instant, exactly like a real store would. Used
by the test-suite and by throwaway demo sessions.
"""

from __future__ import annotations

import json
from typing import Dict, List, Optional, Tuple

from ..base import JSONValue, PersistenceError, StorageBackend
from ..registry import REGISTRY
from ...logging_utils import get_logger

LOGGER = get_logger(__name__)


class MemoryBackend(StorageBackend):
    """Keep datasets in memory for the lifetime of the process."""

    backend_name = "memory"
    aliases = ("in-memory",)

    def __init__(self, location: Optional[str] = None) -> None:
        super().__init__(location=location or "process memory")
        self._documents: Dict[str, str] = {}
        self.history: List[Tuple[str, JSONValue]] = []

    async def load(self, key: str) -> Optional[JSONValue]:
        document = self._documents.get(key)
        if document is None:
            return None
        return json.loads(document)

    async def save(self, key: str, value: JSONValue) -> None:
        try:
            document = json.dumps(value, allow_nan=False)
        except (TypeError, ValueError) as error:
            raise PersistenceError(key, f"value is not JSON serialisable: {error}") from error
        self._documents[key] = document
        self.history.append((key, json.loads(document)))
        LOGGER.debug("Stored %s bytes under '%s'", len(document), key)

    def saved_payloads(self, key: str) -> List[JSONValue]:
        """Every payload written under ``key``, oldest first."""

        return [value for saved_key, value in self.history if saved_key == key]


REGISTRY.register(MemoryBackend)
