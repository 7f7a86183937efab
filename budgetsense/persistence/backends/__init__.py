"""Mini README: Concrete storage backend implementations.

The package demonstrates how stores plug into the registry. New backends
should export a subclass of ``StorageBackend`` and call
``REGISTRY.register`` during module import to keep the system discoverable.
"""

from .json_file import JsonFileBackend
from .memory import MemoryBackend

__all__ = ["JsonFileBackend", "MemoryBackend"]
