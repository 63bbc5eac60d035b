"""
Pytest fixtures for the expense engine test suite.

Provides:
- Structured logging configured once per session
- LogContext isolation between tests
- A ``captured_logs`` fixture returning parsed JSON log records
- Small builders for expense records
"""

import json
import logging
from io import StringIO

import pytest

from expense_kernel.domain.expense import ExpenseRecord, ExpenseSplit, SplitMethod
from expense_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG, handler=logging.NullHandler())
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture expense_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            aggregate_balances([...])
            logs = captured_logs()
            assert any(r["message"] == "balances_aggregated" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("expense_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Expense builders
# =============================================================================


@pytest.fixture
def make_expense():
    """
    Build an ExpenseRecord from ``{member: cents}`` splits.

    Usage::

        expense = make_expense("A", 90, {"A": 30, "B": 30, "C": 30})
    """

    def _make(
        payer,
        amount_cents,
        splits,
        currency="EUR",
        split_method=SplitMethod.EXACT,
    ) -> ExpenseRecord:
        return ExpenseRecord(
            payer_member_id=payer,
            amount_cents=amount_cents,
            currency=currency,
            splits=tuple(
                ExpenseSplit(member_id=m, amount_cents=c) for m, c in splits.items()
            ),
            split_method=split_method,
        )

    return _make
