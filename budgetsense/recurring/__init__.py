"""Mini README: Recurring templates for the budget ledger.

The package is divided into ``models`` for the template types, ``registry``
for the named collections, ``retraction`` for cleaning up after edits, and
``materializer`` for projecting templates into months.
"""

from .materializer import TemplateMaterializer
from .models import DebtTemplate, FixedExpenseTemplate, Template, TemplateKind, should_apply
from .registry import DuplicateTemplateError, TemplateCollection, TemplateRegistry
from .retraction import retract, retract_debt, retract_fixed_expense

__all__ = [
    "DebtTemplate",
    "DuplicateTemplateError",
    "FixedExpenseTemplate",
    "Template",
    "TemplateCollection",
    "TemplateKind",
    "TemplateMaterializer",
    "TemplateRegistry",
    "retract",
    "retract_debt",
    "retract_fixed_expense",
    "should_apply",
]
