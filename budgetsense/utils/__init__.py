"""Mini README: Utility helper functions for BudgetSense.

Exports calendar month arithmetic, lenient numeric coercion and the entry
point plugin loader used to discover third-party storage backends.
"""

from .numbers import coerce_amount, parse_user_amount, round_money, sanitise_numeric_text
from .periods import month_label, previous_month, shift_month, validate_month
from .plugin_loader import load_entry_point_plugins

__all__ = [
    "coerce_amount",
    "load_entry_point_plugins",
    "month_label",
    "parse_user_amount",
    "previous_month",
    "round_money",
    "sanitise_numeric_text",
    "shift_month",
    "validate_month",
]
