"""Mini README: Local JSON file storage backend.

Structure:
    * JsonFileBackend - one ``<key>.json`` document per dataset.

Each write goes to its own temporary file that then replaces the target,
so a crash mid-write never leaves a truncated document behind. File I/O
runs in a worker thread to keep the event loop responsive. Unreadable
documents are treated as absent so the ledger can heal instead of failing
to start.
"""

from __future__ import annotations

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Optional

from ..base import JSONValue, PersistenceError, StorageBackend
from ..registry import REGISTRY
from ...logging_utils import get_logger

LOGGER = get_logger(__name__)


class JsonFileBackend(StorageBackend):
    """Persist each dataset as a JSON document inside a directory."""

    backend_name = "json-file"
    aliases = ("json", "file")

    def __init__(self, location: Optional[str] = None) -> None:
        super().__init__(location=location or "data")
        self.directory = Path(self.location).expanduser()

    def _path_for(self, key: str) -> Path:
        safe_key = "".join(char if char.isalnum() or char in "-_" else "_" for char in key)
        return self.directory / f"{safe_key}.json"

    def _read(self, key: str) -> Optional[JSONValue]:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            raw_text = path.read_text(encoding="utf-8").strip()
            if not raw_text:
                return None
            return json.loads(raw_text)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as error:
            LOGGER.warning("Could not read %s, treating it as absent: %s", path, error)
            return None

    def _write(self, key: str, value: JSONValue) -> None:
        path = self._path_for(key)
        tmp_path: Optional[Path] = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            handle_fd, tmp_name = tempfile.mkstemp(
                dir=self.directory, prefix=f"{path.stem}.", suffix=".json.tmp"
            )
            tmp_path = Path(tmp_name)
            with os.fdopen(handle_fd, "w", encoding="utf-8") as handle:
                json.dump(value, handle, allow_nan=False, indent=2)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as error:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise PersistenceError(key, str(error)) from error
        LOGGER.debug("Wrote %s", path)

    async def load(self, key: str) -> Optional[JSONValue]:
        return await asyncio.to_thread(self._read, key)

    async def save(self, key: str, value: JSONValue) -> None:
        await asyncio.to_thread(self._write, key, value)


REGISTRY.register(JsonFileBackend)
