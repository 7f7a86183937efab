"""Mini README: Dynamic plugin loading helpers.

Structure:
    * load_entry_point_plugins - load entry point-based extensions.

The helper simplifies discovery of third-party packages that expose
``budgetsense.storage_backends`` entry points, enabling drop-in storage
backends such as cloud drives or spreadsheet mirrors.
"""

from __future__ import annotations

from importlib.metadata import entry_points
from typing import List

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


def load_entry_point_plugins(group: str) -> List[object]:
    """Load and return the objects registered under an entry point group."""

    loaded_plugins = []
    for entry_point in entry_points(group=group):
        try:
            plugin = entry_point.load()
        except Exception as exc:  # pragma: no cover - broken third-party packages
            LOGGER.exception("Failed to load plugin '%s': %s", entry_point.name, exc)
            continue
        loaded_plugins.append(plugin)
        LOGGER.info("Loaded plugin '%s'", entry_point.name)
    return loaded_plugins
