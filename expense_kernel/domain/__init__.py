"""
Pure domain layer.

Immutable value objects and conversions with NO dependencies on
persistence, clocks or I/O. All amounts are integer minor units.
"""

from expense_kernel.domain.conversion import (
    cents_to_decimal,
    decimal_to_cents,
    format_cents,
)
from expense_kernel.domain.currency import CurrencyInfo, CurrencyRegistry
from expense_kernel.domain.expense import (
    BASIS_POINTS_TOTAL,
    ExpenseRecord,
    ExpenseSplit,
    MemberId,
    Participant,
    SplitMethod,
)

__all__ = [
    "BASIS_POINTS_TOTAL",
    "CurrencyInfo",
    "CurrencyRegistry",
    "ExpenseRecord",
    "ExpenseSplit",
    "MemberId",
    "Participant",
    "SplitMethod",
    "cents_to_decimal",
    "decimal_to_cents",
    "format_cents",
]
