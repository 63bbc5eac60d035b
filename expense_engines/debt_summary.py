"""
Module: expense_engines.debt_summary
Responsibility:
    Compose balance aggregation and debt simplification into the debt
    summary consumed by API handlers and the "who owes whom" / "your
    balance" views.

Architecture position:
    Engines -- pure composition layer, zero I/O. Fetching the expense
    history is the caller's job; the builder only reads the snapshot.

Invariants enforced:
    - Raw balances and simplified transfers share one sign convention:
      positive = owed to the member, negative = member owes.
    - Balances are checked for zero-sum before any simplification.
    - Currencies are processed in code order so output is reproducible.

Failure modes:
    - BalanceIntegrityError when a currency's balances do not sum to zero.
    - UnsupportedCurrencyError when a builder restricted to a currency set
      receives an expense in another currency.

Usage:
    from expense_engines.debt_summary import DebtSummaryBuilder

    summary = DebtSummaryBuilder().build(expenses)
    payload = summary.to_dict()
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from expense_engines.balances import aggregate_balances, check_zero_sum, member_balances
from expense_engines.debt_simplifier import SettlementTransaction, simplify_debts
from expense_kernel.domain.currency import CurrencyRegistry
from expense_kernel.domain.expense import ExpenseRecord, MemberId
from expense_kernel.exceptions import UnsupportedCurrencyError
from expense_kernel.logging_config import get_logger

logger = get_logger("engines.debt_summary")


@dataclass(frozen=True)
class CurrencyDebts:
    """Simplified transfers for one currency."""

    currency: str
    debts: tuple[SettlementTransaction, ...]

    @property
    def total_cents(self) -> int:
        return sum(d.amount_cents for d in self.debts)


@dataclass(frozen=True)
class DebtSummary:
    """
    The engine's externally visible result.

    ``currencies`` holds the simplified transfers per currency and
    ``member_balances`` the raw net balance per member and currency.
    """

    currencies: dict[str, CurrencyDebts]
    member_balances: dict[MemberId, dict[str, int]]

    @property
    def is_settled(self) -> bool:
        return all(not c.debts for c in self.currencies.values())

    def balance_for(self, member_id: MemberId, currency: str) -> int:
        """Net balance of ``member_id`` in ``currency``; 0 when unknown."""
        code = CurrencyRegistry.validate(currency)
        return self.member_balances.get(member_id, {}).get(code, 0)

    def debts_involving(self, member_id: MemberId) -> list[SettlementTransaction]:
        """Transfers the member pays or receives, across all currencies."""
        return [
            debt
            for currency in sorted(self.currencies)
            for debt in self.currencies[currency].debts
            if member_id in (debt.from_member_id, debt.to_member_id)
        ]

    def to_dict(self) -> dict[str, Any]:
        """API payload: ``{"currencies": {...}, "memberBalances": {...}}``."""
        return {
            "currencies": {
                code: {
                    "currency": code,
                    "debts": [d.to_dict() for d in entry.debts],
                }
                for code, entry in self.currencies.items()
            },
            "memberBalances": {
                member_id: dict(by_currency)
                for member_id, by_currency in self.member_balances.items()
            },
        }


class DebtSummaryBuilder:
    """
    Build a ``DebtSummary`` from a group's expense history.

    Contract:
        Stateless apart from the optional currency restriction; safe to share
        between concurrent requests.
    """

    def __init__(self, supported_currencies: Iterable[str] | None = None):
        self._supported = (
            frozenset(CurrencyRegistry.validate(c) for c in supported_currencies)
            if supported_currencies is not None
            else None
        )

    @property
    def supported_currencies(self) -> frozenset[str] | None:
        return self._supported

    def build(self, expenses: Iterable[ExpenseRecord]) -> DebtSummary:
        """
        Aggregate, verify and simplify.

        Postconditions:
            - Every currency present in ``expenses`` has an entry in
              ``currencies`` (with an empty tuple when already settled).
        """
        expenses = list(expenses)
        if self._supported is not None:
            for expense in expenses:
                if expense.currency not in self._supported:
                    raise UnsupportedCurrencyError(expense.currency, self._supported)

        balances = aggregate_balances(expenses)
        check_zero_sum(balances)

        currencies = {
            currency: CurrencyDebts(
                currency=currency,
                debts=tuple(simplify_debts(balances[currency], currency)),
            )
            for currency in sorted(balances)
        }
        summary = DebtSummary(
            currencies=currencies,
            member_balances=member_balances(balances),
        )

        logger.info("debt_summary_built", extra={
            "expense_count": len(expenses),
            "currency_count": len(currencies),
            "transaction_count": sum(len(c.debts) for c in currencies.values()),
            "settled": summary.is_settled,
        })
        return summary
