"""Mini README: Tests for the storage backend registry.

Ensures that built-in backends register under their names and aliases,
that identifiers are matched loosely, and that unknown or replaced
backends are reported, providing a quick regression suite for the plugin
system.
"""

import logging

import pytest

from budgetsense.persistence import REGISTRY, StorageBackend, StorageBackendRegistry
from budgetsense.persistence.backends import JsonFileBackend, MemoryBackend


def test_registry_contains_builtin_backends():
    assert {"json-file", "memory"} <= set(REGISTRY.available_backends())


def test_registry_instantiates_backend():
    backend = REGISTRY.create("memory")
    assert isinstance(backend, StorageBackend)
    assert backend.backend_name == "memory"


@pytest.mark.parametrize("identifier", ["json-file", "JSON_FILE", " Json-File ", "json", "file"])
def test_registry_matches_names_loosely_and_by_alias(identifier):
    assert identifier in REGISTRY
    assert REGISTRY.resolve(identifier) is JsonFileBackend


def test_registry_passes_location_to_backend(tmp_path):
    backend = REGISTRY.create("JSON_FILE", location=str(tmp_path))
    assert isinstance(backend, JsonFileBackend)
    assert backend.metadata() == {"backend": "json-file", "location": str(tmp_path)}


def test_registry_rejects_unknown_backend_and_lists_choices():
    registry = StorageBackendRegistry()
    registry.register(MemoryBackend)

    with pytest.raises(KeyError, match="available: memory"):
        registry.create("spreadsheet")
    assert "spreadsheet" not in registry
    assert 42 not in registry


def test_registry_warns_when_a_backend_name_is_replaced(caplog):
    class ScratchBackend(MemoryBackend):
        aliases = ()

    registry = StorageBackendRegistry()
    registry.register(MemoryBackend)

    with caplog.at_level(logging.WARNING, logger="budgetsense.persistence.registry"):
        registry.register(ScratchBackend)

    assert registry.resolve("memory") is ScratchBackend
    assert registry.resolve("in-memory") is ScratchBackend
    assert "replaces" in caplog.text


def test_registry_discovers_nothing_for_unused_group():
    registry = StorageBackendRegistry()
    registry.register(MemoryBackend)
    assert registry.discover_plugins("budgetsense.tests.no_such_group") == 0
    assert registry.available_backends() == ["memory"]
