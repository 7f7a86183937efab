"""Mini README: Lenient numeric coercion for ledger amounts.

Structure:
    * coerce_amount - turn stored or typed values into floats, 0 when unusable.
    * sanitise_numeric_text - clean free-text input the way the editor does.

Persisted ledgers may contain strings, nulls or NaN where numbers belong.
Rather than failing, every calculation treats such values as zero.
"""

from __future__ import annotations

import math
import re

_NON_NUMERIC = re.compile(r"[^0-9.]")


def coerce_amount(value: object) -> float:
    """Return ``value`` as a finite float, falling back to ``0.0``."""

    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def sanitise_numeric_text(text: str) -> str:
    """Strip everything but digits and the first decimal point.

    >>> sanitise_numeric_text("1,250.50 INR")
    '1250.50'
    >>> sanitise_numeric_text("1.2.3")
    '1.23'
    """

    cleaned = _NON_NUMERIC.sub("", text)
    head, dot, tail = cleaned.partition(".")
    if not dot:
        return head
    return f"{head}.{tail.replace('.', '')}"


def parse_user_amount(value: object) -> float:
    """Interpret a value typed into a numeric cell; never negative."""

    if isinstance(value, str):
        value = sanitise_numeric_text(value)
    return max(coerce_amount(value), 0.0)


def round_money(value: float) -> float:
    return round(value, 2) + 0.0
