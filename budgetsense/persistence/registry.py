"""Mini README: Backend registry enabling pluggable storage.

Structure:
    * normalise_identifier - canonical spelling used for lookups.
    * StorageBackendRegistry - maps backend names and aliases to
      ``StorageBackend`` classes and instantiates them.

Built-in backends register themselves on import. Third-party packages can
contribute more through the ``budgetsense.storage_backends`` entry-point
group, loaded on demand by ``discover_plugins``. Identifiers are matched
case-insensitively with ``_`` and ``-`` treated alike, so the
``BUDGETSENSE_STORAGE_BACKEND`` setting accepts ``JSON_FILE`` as well as
``json-file``.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Type

from .base import StorageBackend
from ..logging_utils import get_logger
from ..utils.plugin_loader import load_entry_point_plugins

LOGGER = get_logger(__name__)

PLUGIN_GROUP = "budgetsense.storage_backends"


def normalise_identifier(identifier: str) -> str:
    return identifier.strip().lower().replace("_", "-")


class StorageBackendRegistry:
    """Lookup table from backend names (and their aliases) to classes."""

    def __init__(self) -> None:
        self._backends: Dict[str, Type[StorageBackend]] = {}
        self._aliases: Dict[str, str] = {}

    def __contains__(self, identifier: object) -> bool:
        if not isinstance(identifier, str):
            return False
        key = normalise_identifier(identifier)
        return key in self._backends or key in self._aliases

    def register(self, backend: Type[StorageBackend]) -> Type[StorageBackend]:
        """Register ``backend`` under its ``backend_name`` and ``aliases``.

        Returns the class so the method also works as a class decorator.
        """

        name = normalise_identifier(backend.backend_name)
        existing = self._backends.get(name)
        if existing is not None and existing is not backend:
            LOGGER.warning(
                "Storage backend '%s' from %s replaces %s",
                name,
                backend.__module__,
                existing.__module__,
            )
        self._backends[name] = backend
        for alias in backend.aliases:
            self._aliases[normalise_identifier(alias)] = name
        LOGGER.debug(
            "Registered storage backend '%s' (aliases: %s)",
            name,
            ", ".join(backend.aliases) or "none",
        )
        return backend

    def available_backends(self) -> List[str]:
        """Canonical backend names, sorted for display."""

        return sorted(self._backends)

    def resolve(self, identifier: str) -> Type[StorageBackend]:
        """Return the class registered under ``identifier`` or one of its aliases."""

        key = normalise_identifier(identifier)
        name = self._aliases.get(key, key)
        try:
            return self._backends[name]
        except KeyError:
            choices = ", ".join(self.available_backends()) or "none registered"
            raise KeyError(
                f"Unknown storage backend '{identifier}' (available: {choices})"
            ) from None

    def discover_plugins(self, group: str = PLUGIN_GROUP) -> int:
        """Register backend classes advertised through entry points."""

        registered = 0
        for plugin in load_entry_point_plugins(group):
            if isinstance(plugin, type) and issubclass(plugin, StorageBackend):
                self.register(plugin)
                registered += 1
            else:
                LOGGER.warning("Entry point object %r is not a StorageBackend subclass", plugin)
        return registered

    def create(self, identifier: str, *, location: Optional[str] = None) -> StorageBackend:
        """Instantiate the backend matching ``identifier`` at ``location``."""

        backend_cls = self.resolve(identifier)
        LOGGER.info(
            "Creating storage backend '%s' at %s",
            backend_cls.backend_name,
            location or "its default location",
        )
        return backend_cls(location=location)


REGISTRY = StorageBackendRegistry()
