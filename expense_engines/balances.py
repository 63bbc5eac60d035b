"""
Module: expense_engines.balances
Responsibility:
    Fold a group's full expense history into a signed net balance per
    (member, currency). Positive means the member is owed money, negative
    means the member owes.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Recomputes from the whole history on every call: O(expenses + splits).
    That is fine for small groups; a large-history deployment would need a
    materialized balance cache.

Invariants enforced:
    - Currencies are never mixed or converted; each is an independent
      scalar balance per member.
    - Zero-sum: when every expense's splits sum to its amount, each
      currency's balances sum to exactly 0. ``check_zero_sum`` turns a
      violation into ``BalanceIntegrityError`` instead of correcting it.

Failure modes:
    - BalanceIntegrityError from ``check_zero_sum``.
    - InvalidCurrencyError is raised earlier, when an ``ExpenseRecord`` with
      an unknown code is constructed.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from expense_engines.tracer import traced_engine
from expense_kernel.domain.expense import ExpenseRecord, MemberId
from expense_kernel.exceptions import BalanceIntegrityError
from expense_kernel.logging_config import get_logger

logger = get_logger("engines.balances")

CurrencyBalances = dict[str, dict[MemberId, int]]
"""currency -> member id -> signed balance in minor units."""


@traced_engine("balances", "1.0", fingerprint_fields=("expenses",))
def aggregate_balances(expenses: Iterable[ExpenseRecord]) -> CurrencyBalances:
    """
    Net balance per currency and member.

    The payer is credited the expense amount and every split member is
    debited their split amount. A payer who is also a participant gets both
    adjustments. Settlements follow the same rule: the paying debtor is
    credited and the repaid creditor debited, which cancels the debt.

    Every member that appears in an expense has an entry for that expense's
    currency, even when it nets to 0.
    """
    balances: CurrencyBalances = {}
    expense_count = 0

    for expense in expenses:
        expense_count += 1
        ledger = balances.setdefault(expense.currency, {})
        ledger[expense.payer_member_id] = (
            ledger.get(expense.payer_member_id, 0) + expense.amount_cents
        )
        for split in expense.splits:
            ledger[split.member_id] = ledger.get(split.member_id, 0) - split.amount_cents

    logger.info("balances_aggregated", extra={
        "expense_count": expense_count,
        "currencies": sorted(balances),
        "member_count": len({m for ledger in balances.values() for m in ledger}),
    })
    return balances


def check_zero_sum(balances: Mapping[str, Mapping[MemberId, int]]) -> None:
    """
    Raise ``BalanceIntegrityError`` for the first currency (in code order)
    whose balances do not sum to zero.
    """
    for currency in sorted(balances):
        residual = sum(balances[currency].values())
        if residual != 0:
            logger.error("balance_integrity_violation", extra={
                "currency": currency,
                "residual_cents": residual,
            })
            raise BalanceIntegrityError(currency, residual)


def member_balances(balances: Mapping[str, Mapping[MemberId, int]]) -> dict[MemberId, dict[str, int]]:
    """Pivot ``currency -> member`` balances into ``member -> currency``."""
    pivoted: dict[MemberId, dict[str, int]] = {}
    for currency in sorted(balances):
        for member_id, amount in balances[currency].items():
            pivoted.setdefault(member_id, {})[currency] = amount
    return pivoted
