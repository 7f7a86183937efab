"""Mini README: Tests for the command line entry point.

The CLI reads settings from the environment, so each test points it at a
temporary data directory and clears the settings cache around the run.
"""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from budget_centre import cli
from budgetsense.configuration import get_settings

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    monkeypatch.setenv("BUDGETSENSE_DATA_DIRECTORY", str(tmp_path / "data"))
    monkeypatch.setenv("BUDGETSENSE_STORAGE_BACKEND", "json-file")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_summary_prints_month_figures() -> None:
    result = runner.invoke(cli, ["summary", "--year", "2024", "--month", "3"])

    assert result.exit_code == 0, result.output
    assert "March 2024" in result.output
    assert "Total income" in result.output


def test_summary_rejects_month_out_of_range() -> None:
    result = runner.invoke(cli, ["summary", "--month", "13"])

    assert result.exit_code != 0


def test_export_writes_every_dataset(tmp_path) -> None:
    output = tmp_path / "snapshot.json"

    result = runner.invoke(cli, ["export", str(output)])

    assert result.exit_code == 0, result.output
    snapshot = json.loads(output.read_text(encoding="utf-8"))
    assert set(snapshot) == {
        "budget-data",
        "budget-fixed-expense-templates",
        "budget-debt-templates",
        "budget-theme",
    }
