"""Mini README: Interactive interfaces (web/CLI) for BudgetSense.

Exports the FastAPI application factory that powers the browser-based
budget screen. Future interface modules should live alongside this module.
"""

from .web_app import create_application

__all__ = ["create_application"]
