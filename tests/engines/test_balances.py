"""
Tests for balance aggregation.

Covers:
- Payer credit and split debit
- Payer who is also a participant
- Settlements cancelling debts
- Currency independence
- Zero-sum integrity checks
- Member pivot
"""

import pytest

from expense_engines.balances import aggregate_balances, check_zero_sum, member_balances
from expense_kernel.domain.expense import ExpenseRecord, SplitMethod
from expense_kernel.exceptions import BalanceIntegrityError


class TestAggregateBalances:
    """Net balances per currency and member."""

    def test_single_expense_shared_by_three(self, make_expense):
        expense = make_expense("A", 90, {"A": 30, "B": 30, "C": 30})

        balances = aggregate_balances([expense])

        assert balances == {"EUR": {"A": 60, "B": -30, "C": -30}}

    def test_payer_not_participating(self, make_expense):
        expense = make_expense("A", 100, {"B": 50, "C": 50})

        assert aggregate_balances([expense]) == {"EUR": {"A": 100, "B": -50, "C": -50}}

    def test_expenses_accumulate(self, make_expense):
        expenses = [
            make_expense(1, 100, {1: 50, 2: 50}),
            make_expense(2, 40, {1: 20, 2: 20}),
        ]

        assert aggregate_balances(expenses) == {"EUR": {1: 30, 2: -30}}

    def test_settlement_cancels_debt(self, make_expense):
        expenses = [
            make_expense("A", 90, {"A": 30, "B": 30, "C": 30}),
            make_expense("B", 30, {"A": 30}, split_method=SplitMethod.SETTLEMENT),
        ]

        balances = aggregate_balances(expenses)

        assert balances == {"EUR": {"A": 30, "B": 0, "C": -30}}

    def test_settled_member_keeps_zero_entry(self, make_expense):
        expenses = [
            make_expense("A", 50, {"B": 50}),
            make_expense("B", 50, {"A": 50}, split_method=SplitMethod.SETTLEMENT),
        ]

        assert aggregate_balances(expenses) == {"EUR": {"A": 0, "B": 0}}

    def test_currencies_are_independent(self, make_expense):
        expenses = [
            make_expense("A", 100, {"A": 50, "B": 50}, currency="EUR"),
            make_expense("B", 300, {"A": 150, "B": 150}, currency="USD"),
        ]

        balances = aggregate_balances(expenses)

        assert balances == {
            "EUR": {"A": 50, "B": -50},
            "USD": {"A": -150, "B": 150},
        }

    def test_no_expenses(self):
        assert aggregate_balances([]) == {}

    def test_from_persistence_payload(self):
        expense = ExpenseRecord.from_mapping({
            "paidByGroupMemberId": 7,
            "amountInCents": 1000,
            "currency": "usd",
            "splitMethod": "equal",
            "expenseSplits": [
                {"groupMemberId": 7, "amountInCents": 500},
                {"groupMemberId": 8, "amountInCents": 500},
            ],
        })

        assert aggregate_balances([expense]) == {"USD": {7: 500, 8: -500}}

    def test_logs_summary(self, make_expense, captured_logs):
        aggregate_balances([make_expense("A", 10, {"B": 10})])

        records = [r for r in captured_logs() if r["message"] == "balances_aggregated"]
        assert records[0]["expense_count"] == 1
        assert records[0]["currencies"] == ["EUR"]
        assert records[0]["member_count"] == 2


class TestZeroSum:
    """Balances of a currency must sum to exactly zero."""

    def test_consistent_history_sums_to_zero(self, make_expense):
        expenses = [
            make_expense("A", 100, {"A": 34, "B": 33, "C": 33}),
            make_expense("C", 77, {"A": 40, "B": 37}),
        ]
        balances = aggregate_balances(expenses)

        check_zero_sum(balances)
        assert sum(balances["EUR"].values()) == 0

    def test_inconsistent_splits_raise(self, make_expense):
        expense = make_expense("A", 100, {"A": 50, "B": 49})
        balances = aggregate_balances([expense])

        with pytest.raises(BalanceIntegrityError) as exc_info:
            check_zero_sum(balances)

        assert exc_info.value.currency == "EUR"
        assert exc_info.value.residual_cents == 1
        assert exc_info.value.code == "BALANCE_INTEGRITY_VIOLATION"

    def test_first_currency_in_code_order_reported(self):
        balances = {"USD": {"A": 5}, "EUR": {"A": -2}}

        with pytest.raises(BalanceIntegrityError) as exc_info:
            check_zero_sum(balances)

        assert exc_info.value.currency == "EUR"

    def test_violation_is_logged(self, captured_logs):
        with pytest.raises(BalanceIntegrityError):
            check_zero_sum({"GBP": {"A": 3, "B": -1}})

        records = [r for r in captured_logs() if r["message"] == "balance_integrity_violation"]
        assert records[0]["level"] == "ERROR"
        assert records[0]["residual_cents"] == 2


class TestMemberBalances:
    """Pivot to member -> currency."""

    def test_pivot(self):
        pivoted = member_balances({
            "USD": {"A": -150, "B": 150},
            "EUR": {"A": 50, "B": -50},
        })

        assert pivoted == {
            "A": {"EUR": 50, "USD": -150},
            "B": {"EUR": -50, "USD": 150},
        }

    def test_member_only_in_one_currency(self):
        pivoted = member_balances({"EUR": {"A": 10, "B": -10}, "USD": {"C": 0}})

        assert pivoted["C"] == {"USD": 0}
        assert "USD" not in pivoted["A"]
