"""Mini README: FastAPI-powered JSON API for BudgetSense.

Structure:
    * create_application - application factory wiring routes and the service.
    * Request models - pydantic payloads accepted by the editing routes.

The API backs the month screen: it serves the month's tables and summary,
accepts cell edits, manages templates, returns chart series and surfaces
transient notifications. The service is loaded when the application starts
and flushed when it shuts down so no pending edit is lost.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import date
from typing import Any, AsyncIterator, Callable, Dict, List, Optional, Union

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..configuration import BudgetSenseSettings, get_settings
from ..ledger import Category
from ..logging_utils import get_logger
from ..persistence import StorageBackend
from ..recurring import DuplicateTemplateError, TemplateKind
from ..service import BudgetService

LOGGER = get_logger(__name__)


class NavigationPayload(BaseModel):
    direction: int = Field(..., description="Months to move; negative goes back.")


class MonthPayload(BaseModel):
    year: int
    month: int = Field(..., ge=0, le=11, description="Zero-based month index.")


class CellEditPayload(BaseModel):
    field: str
    value: Union[float, str, None] = None


class RowSelectionPayload(BaseModel):
    indices: List[int] = Field(default_factory=list)


class FixedTemplatePayload(BaseModel):
    name: str
    planned: float


class DebtTemplatePayload(BaseModel):
    name: str
    amount: float
    months_remaining: int = Field(0, ge=0, description="0 means the debt never ends.")


class ThemePayload(BaseModel):
    theme: str


def _parse_category(value: str) -> Category:
    try:
        return Category.from_str(value)
    except ValueError as error:
        raise HTTPException(status_code=400, detail=str(error)) from error


def _parse_kind(value: str) -> TemplateKind:
    try:
        return TemplateKind.from_str(value)
    except ValueError as error:
        raise HTTPException(status_code=400, detail=str(error)) from error


def _guarded(action: Callable[[], Any]) -> Any:
    """Run a service call translating domain errors into HTTP errors."""

    try:
        return action()
    except DuplicateTemplateError as error:
        raise HTTPException(status_code=409, detail=str(error)) from error
    except IndexError as error:
        raise HTTPException(status_code=404, detail=str(error)) from error
    except ValueError as error:
        raise HTTPException(status_code=400, detail=str(error)) from error


def create_application(
    settings: Optional[BudgetSenseSettings] = None,
    backend: Optional[StorageBackend] = None,
    today: Callable[[], date] = date.today,
) -> FastAPI:
    """Create the FastAPI application with routes and dependencies."""

    settings = settings or get_settings()
    service = BudgetService.from_settings(settings, backend=backend, today=today)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        await service.load()
        LOGGER.info("BudgetSense API ready on backend %s", service.coordinator.backend.metadata())
        try:
            yield
        finally:
            if not await service.close():
                LOGGER.warning("Some datasets could not be saved during shutdown")

    app = FastAPI(title="BudgetSense", version="0.1.0", lifespan=lifespan)
    app.state.service = service

    def month_response() -> JSONResponse:
        return JSONResponse(service.month_view())

    @app.get("/api/status")
    async def status() -> JSONResponse:
        """Report the storage backend and whether saves are waiting."""

        return JSONResponse(
            {
                "environment": settings.environment,
                "backend": service.coordinator.backend.metadata(),
                "navigating": service.navigating,
                "theme": service.theme,
            }
        )

    @app.get("/api/month")
    async def current_month() -> JSONResponse:
        """Return the month on screen with its rows and summary."""

        return month_response()

    @app.put("/api/month")
    async def open_month(payload: MonthPayload) -> JSONResponse:
        """Jump straight to a month."""

        if not await service.go_to(payload.year, payload.month):
            raise HTTPException(status_code=409, detail="Navigation already in progress")
        return month_response()

    @app.post("/api/month/navigate")
    async def navigate(payload: NavigationPayload) -> JSONResponse:
        """Move backward or forward relative to the month on screen."""

        if not await service.navigate(payload.direction):
            raise HTTPException(status_code=409, detail="Navigation already in progress")
        return month_response()

    @app.patch("/api/entries/{category}/{index}")
    async def edit_cell(category: str, index: int, payload: CellEditPayload) -> JSONResponse:
        """Edit one cell; an index one past the end appends a row."""

        parsed = _parse_category(category)
        _guarded(lambda: service.update_item(parsed, index, payload.field, payload.value))
        return month_response()

    @app.post("/api/entries/{category}")
    async def add_row(category: str) -> JSONResponse:
        parsed = _parse_category(category)
        added = service.add_row(parsed)
        LOGGER.debug("Add row to %s -> %s", parsed.value, added)
        return month_response()

    @app.post("/api/entries/{category}/delete")
    async def delete_rows(category: str, payload: RowSelectionPayload) -> JSONResponse:
        """Delete the selected rows of a category."""

        parsed = _parse_category(category)
        if not payload.indices:
            raise HTTPException(status_code=400, detail="Please select items to delete")
        service.delete_rows(parsed, payload.indices)
        return month_response()

    @app.delete("/api/entries/{category}")
    async def clear_category(category: str) -> JSONResponse:
        service.clear_category(_parse_category(category))
        return month_response()

    @app.get("/api/templates")
    async def list_templates() -> JSONResponse:
        return JSONResponse(service.templates_view())

    @app.post("/api/templates/fixed", status_code=201)
    async def add_fixed_template(payload: FixedTemplatePayload) -> JSONResponse:
        index = _guarded(lambda: service.add_fixed_template(payload.name, payload.planned))
        return JSONResponse({"index": index, **service.templates_view()}, status_code=201)

    @app.put("/api/templates/fixed/{index}")
    async def update_fixed_template(index: int, payload: FixedTemplatePayload) -> JSONResponse:
        _guarded(lambda: service.update_fixed_template(index, payload.name, payload.planned))
        return JSONResponse(service.templates_view())

    @app.delete("/api/templates/fixed/{index}")
    async def remove_fixed_template(index: int) -> JSONResponse:
        _guarded(lambda: service.remove_fixed_template(index))
        return JSONResponse(service.templates_view())

    @app.post("/api/templates/debt", status_code=201)
    async def add_debt_template(payload: DebtTemplatePayload) -> JSONResponse:
        index = _guarded(
            lambda: service.add_debt_template(payload.name, payload.amount, payload.months_remaining)
        )
        return JSONResponse({"index": index, **service.templates_view()}, status_code=201)

    @app.put("/api/templates/debt/{index}")
    async def update_debt_template(index: int, payload: DebtTemplatePayload) -> JSONResponse:
        _guarded(
            lambda: service.update_debt_template(
                index, payload.name, payload.amount, payload.months_remaining
            )
        )
        return JSONResponse(service.templates_view())

    @app.delete("/api/templates/debt/{index}")
    async def remove_debt_template(index: int) -> JSONResponse:
        _guarded(lambda: service.remove_debt_template(index))
        return JSONResponse(service.templates_view())

    @app.get("/api/templates/{kind}/available")
    async def available_templates(kind: str) -> JSONResponse:
        """Templates the manage panel can still add to the month on screen."""

        parsed = _parse_kind(kind)
        payload: List[Dict[str, Any]] = [
            {"index": index, **template.as_dict()}
            for index, template in service.available_templates(parsed)
        ]
        return JSONResponse({"kind": parsed.value, "templates": payload})

    @app.post("/api/month/templates/{kind}/{index}")
    async def add_template_to_month(kind: str, index: int) -> JSONResponse:
        parsed = _parse_kind(kind)
        _guarded(lambda: service.add_template_to_month(parsed, index))
        return month_response()

    @app.get("/api/charts/efficiency")
    async def efficiency_chart(span: int = Query(6, ge=1, le=36)) -> JSONResponse:
        return JSONResponse({"series": service.efficiency_trend(span)})

    @app.get("/api/charts/expenses")
    async def expense_chart() -> JSONResponse:
        return JSONResponse({"breakdown": service.expense_breakdown()})

    @app.get("/api/charts/balance")
    async def balance_chart() -> JSONResponse:
        return JSONResponse(service.balance_overview())

    @app.get("/api/theme")
    async def get_theme() -> JSONResponse:
        return JSONResponse({"theme": service.theme})

    @app.put("/api/theme")
    async def set_theme(payload: ThemePayload) -> JSONResponse:
        theme = _guarded(lambda: service.set_theme(payload.theme))
        return JSONResponse({"theme": theme})

    @app.post("/api/theme/toggle")
    async def toggle_theme() -> JSONResponse:
        return JSONResponse({"theme": service.toggle_theme()})

    @app.get("/api/notifications")
    async def notifications() -> JSONResponse:
        """Drain pending notifications for the toast area."""

        drained = [notification.as_dict() for notification in service.notifications.drain()]
        return JSONResponse({"notifications": drained})

    @app.get("/api/export")
    async def export() -> JSONResponse:
        """Download every dataset as one JSON document."""

        return JSONResponse(
            service.export_snapshot(),
            headers={"Content-Disposition": 'attachment; filename="budget-data.json"'},
        )

    return app
