"""Mini README: Entry point CLI for the BudgetSense ledger.

This script exposes a Typer CLI that starts the FastAPI application with
configurable host, port, and production flags, prints a month's summary
straight from the configured storage backend, and exports every dataset
to a JSON file. It ensures consistent logging and draws settings from
environment variables when available.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
import uvicorn

from budgetsense.configuration import get_settings
from budgetsense.logging_utils import configure_root_logger
from budgetsense.service import BudgetService
from budgetsense.utils.periods import month_label

cli = typer.Typer(help="Run and inspect the BudgetSense monthly budget ledger.")


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(settings.log_level)

    # Browsers cannot open the 0.0.0.0 sentinel, so point them at localhost.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        "Starting BudgetSense on "
        f"{effective_host}:{effective_port}.\n"
        "API available at "
        f"http://{browser_host}:{effective_port}/docs"
    )
    uvicorn.run(
        "budgetsense.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


async def _open_service(year: Optional[int], month: Optional[int]) -> BudgetService:
    service = BudgetService.from_settings(get_settings())
    await service.load()
    if year is not None or month is not None:
        target_month = service.month if month is None else month - 1
        await service.go_to(service.year if year is None else year, target_month)
    return service


@cli.command()
def summary(
    year: Optional[int] = typer.Option(None, help="Calendar year; defaults to the current one."),
    month: Optional[int] = typer.Option(
        None, min=1, max=12, help="Calendar month 1-12; defaults to the current one."
    ),
) -> None:
    """Print the headline figures of a month."""

    settings = get_settings()
    configure_root_logger(settings.log_level)

    async def collect() -> BudgetService:
        service = await _open_service(year, month)
        await service.close()
        return service

    service = asyncio.run(collect())
    figures = service.summary()
    typer.echo(month_label(service.year, service.month))
    typer.echo(f"  Carried balance : {figures.carried_balance:>12.2f}")
    typer.echo(f"  Total income    : {figures.total_income:>12.2f}")
    typer.echo(f"  Total expenses  : {figures.total_expenses:>12.2f}")
    typer.echo(f"  Remaining       : {figures.remaining:>12.2f}")
    typer.echo(f"  Efficiency      : {figures.efficiency_pct:>11.2f}%")


@cli.command()
def export(
    output: Path = typer.Argument(Path("budget-data.json"), help="File to write the snapshot to."),
) -> None:
    """Write every dataset to a single JSON file."""

    settings = get_settings()
    configure_root_logger(settings.log_level)

    async def collect() -> dict:
        service = await _open_service(None, None)
        snapshot = service.export_snapshot()
        await service.close()
        return snapshot

    snapshot = asyncio.run(collect())
    output.write_text(json.dumps(snapshot, indent=2), encoding="utf-8")
    typer.echo(f"Exported budget data to {output}")


if __name__ == "__main__":
    cli()
