"""Mini README: Application-wide logging helpers for BudgetSense.

Structure:
    * LOG_FORMAT / DATE_FORMAT - the single line layout every module shares.
    * resolve_level - accept ``"debug"``, ``"WARNING"`` or numeric levels.
    * configure_root_logger - install the BudgetSense handler or retune it.
    * get_logger - module logger factory used as ``get_logger(__name__)``.

Usage:
    Modules call ``get_logger(__name__)`` at import time, which installs a
    stream handler on the root logger the first time it is needed. The CLI
    calls ``configure_root_logger(settings.log_level)`` afterwards to apply
    the configured level. The handler is found again by name, so uvicorn's
    reloader re-importing this module never stacks a second one.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
HANDLER_NAME = "budgetsense"


def resolve_level(level: Union[int, str]) -> int:
    """Translate a level name or number into a ``logging`` level, INFO if unknown."""

    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _installed_handler(root_logger: logging.Logger) -> Optional[logging.Handler]:
    for handler in root_logger.handlers:
        if handler.get_name() == HANDLER_NAME:
            return handler
    return None


def configure_root_logger(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """Install the BudgetSense handler once, then only adjust the level."""

    root_logger = logging.getLogger()
    root_logger.setLevel(resolve_level(level))
    if _installed_handler(root_logger) is None:
        handler = logging.StreamHandler()
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(handler)
    return root_logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-specific logger ensuring baseline configuration."""

    if _installed_handler(logging.getLogger()) is None:
        configure_root_logger()
    return logging.getLogger(name)
