"""Mini README: Core package initializer for the BudgetSense ledger.

This module exposes convenience imports that allow other parts of the
application to access high-level services without needing to know the
exact module structure. The file is intentionally lightweight so that
package metadata can be centralised here without pulling in the web
interface or storage backends.
"""

from .logging_utils import get_logger

__all__ = ["get_logger"]
