"""Mini README: Persistence subsystem package initialiser.

Re-exports key abstractions to simplify imports for the service and web
handlers. The package is divided into ``base`` for abstract classes,
``registry`` for backend management, ``backends`` for concrete stores, and
``coordinator`` for debounced saving.
"""

from .base import JSONValue, PersistenceError, StorageBackend
from .coordinator import Dataset, DebouncedSave, PersistenceCoordinator
from .registry import REGISTRY, StorageBackendRegistry
from . import backends  # noqa: F401  # ensure built-in backends register on import

__all__ = [
    "Dataset",
    "DebouncedSave",
    "JSONValue",
    "PersistenceCoordinator",
    "PersistenceError",
    "REGISTRY",
    "StorageBackend",
    "StorageBackendRegistry",
]
