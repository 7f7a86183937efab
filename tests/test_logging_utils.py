"""Mini README: Tests for the shared logging helpers."""

from __future__ import annotations

import logging

from budgetsense.logging_utils import (
    HANDLER_NAME,
    configure_root_logger,
    get_logger,
    resolve_level,
)


def _budgetsense_handlers():
    return [handler for handler in logging.getLogger().handlers if handler.get_name() == HANDLER_NAME]


def test_resolve_level_accepts_names_and_numbers() -> None:
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level(" Warning ") == logging.WARNING
    assert resolve_level(logging.ERROR) == logging.ERROR
    assert resolve_level("chatty") == logging.INFO


def test_configuring_twice_keeps_one_handler_and_applies_latest_level() -> None:
    root = logging.getLogger()
    previous_level = root.level
    try:
        get_logger("budgetsense.tests")
        configure_root_logger("DEBUG")
        configure_root_logger("warning")

        assert len(_budgetsense_handlers()) == 1
        assert root.level == logging.WARNING
    finally:
        root.setLevel(previous_level)


def test_get_logger_returns_named_logger() -> None:
    assert get_logger("budgetsense.ledger.store").name == "budgetsense.ledger.store"
