"""
Module: expense_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines. This is the canonical import surface for API
    handlers and the expense write path.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import expense_kernel (and sibling engine modules).
    MUST NOT import expense_config; callers pass configured values in.

Invariants enforced:
    - Integer-only arithmetic on minor currency units; floats are forbidden.
    - Determinism: identical inputs always produce identical outputs,
      including ordering.
    - No state between calls; every engine is safe to call concurrently.

Audit relevance:
    Engine entry points are traced via ``@traced_engine`` (see
    ``expense_engines.tracer``), emitting EXPENSE_ENGINE_TRACE log records
    with engine name, version, input fingerprint and duration.

Usage:
    from expense_engines import AllocationEngine, DebtSummaryBuilder, validate_splits
"""

from expense_engines.allocation import AllocationEngine
from expense_engines.balances import (
    CurrencyBalances,
    aggregate_balances,
    check_zero_sum,
    member_balances,
)
from expense_engines.debt_simplifier import SettlementTransaction, simplify_debts
from expense_engines.debt_summary import CurrencyDebts, DebtSummary, DebtSummaryBuilder
from expense_engines.distribution import (
    derive_percentages_from_amounts,
    even_percentage_basis_points,
    percentage_to_amount_cents,
)
from expense_engines.split_validation import (
    SplitValidationCode,
    SplitValidationResult,
    validate_participants,
    validate_splits,
)

__all__ = [
    # Allocation
    "AllocationEngine",
    # Validation
    "SplitValidationCode",
    "SplitValidationResult",
    "validate_participants",
    "validate_splits",
    # Balances
    "CurrencyBalances",
    "aggregate_balances",
    "check_zero_sum",
    "member_balances",
    # Simplification
    "SettlementTransaction",
    "simplify_debts",
    # Summary
    "CurrencyDebts",
    "DebtSummary",
    "DebtSummaryBuilder",
    # Distribution helpers
    "derive_percentages_from_amounts",
    "even_percentage_basis_points",
    "percentage_to_amount_cents",
]
