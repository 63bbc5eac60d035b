"""
Module: expense_engines.debt_simplifier
Responsibility:
    Turn the net balances of one currency into a short list of pairwise
    transfers ("who pays whom") that settles every balance.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Algorithm:
    Greedy max-creditor / max-debtor matching. Each round pairs the member
    owed the most with the member owing the most (ties by ascending member
    id), transfers ``min(credit, debt)`` and drops whoever reaches zero.
    Both heaps are re-ordered after every round, so a partially paid party
    competes again with its remaining balance.

Invariants enforced:
    - Replaying the transfers zeroes every balance; no leftover cents and
      no non-positive transfer amounts.
    - At most ``creditors + debtors - 1`` transfers (each round zeroes at
      least one party, the last round zeroes two).
    - Deterministic: identical input produces identical output and order.
      The tie-break is user visible and part of the contract.

Failure modes:
    - BalanceIntegrityError when the balances do not sum to zero; the
      function never emits a partial answer for inconsistent input.
    - InvalidCurrencyError on an unknown currency code.
"""

from __future__ import annotations

import heapq
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from expense_engines.tracer import traced_engine
from expense_kernel.domain.currency import CurrencyRegistry
from expense_kernel.domain.expense import MemberId
from expense_kernel.exceptions import BalanceIntegrityError
from expense_kernel.logging_config import get_logger

logger = get_logger("engines.debt_simplifier")


@dataclass(frozen=True)
class SettlementTransaction:
    """
    One transfer that settles (part of) a debt.

    Guarantees:
        - ``from_member_id != to_member_id``.
        - ``amount_cents >= 1``.
    """

    from_member_id: MemberId
    to_member_id: MemberId
    amount_cents: int
    currency: str

    def __post_init__(self) -> None:
        if self.from_member_id == self.to_member_id:
            raise ValueError("A member cannot settle with themselves")
        if self.amount_cents < 1:
            raise ValueError(
                f"Settlement amount must be at least 1, got {self.amount_cents}"
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "fromMemberId": self.from_member_id,
            "toMemberId": self.to_member_id,
            "amountInCents": self.amount_cents,
            "currency": self.currency,
        }


@traced_engine("debt_simplifier", "1.0", fingerprint_fields=("balances", "currency"))
def simplify_debts(
    balances: Mapping[MemberId, int],
    currency: str,
) -> list[SettlementTransaction]:
    """
    Settlement transfers for the net ``balances`` of one currency.

    Args:
        balances: member id -> signed balance (positive = is owed).
        currency: ISO 4217 code the balances are denominated in.

    Returns:
        Transfers in the order the greedy matching produced them.
    """
    currency = CurrencyRegistry.validate(currency)

    residual = sum(balances.values())
    if residual != 0:
        logger.error("debt_simplification_unbalanced_input", extra={
            "currency": currency,
            "residual_cents": residual,
        })
        raise BalanceIntegrityError(currency, residual)

    # Heap keys: (-credit, id) and (debit, id). Both pop the largest
    # magnitude first and fall back to the smallest member id.
    creditors = [(-amount, member) for member, amount in balances.items() if amount > 0]
    debtors = [(amount, member) for member, amount in balances.items() if amount < 0]
    party_count = len(creditors) + len(debtors)
    heapq.heapify(creditors)
    heapq.heapify(debtors)

    transactions: list[SettlementTransaction] = []
    while creditors and debtors:
        neg_credit, creditor = heapq.heappop(creditors)
        debit, debtor = heapq.heappop(debtors)
        amount = min(-neg_credit, -debit)

        transactions.append(
            SettlementTransaction(
                from_member_id=debtor,
                to_member_id=creditor,
                amount_cents=amount,
                currency=currency,
            )
        )

        if neg_credit + amount != 0:
            heapq.heappush(creditors, (neg_credit + amount, creditor))
        if debit + amount != 0:
            heapq.heappush(debtors, (debit + amount, debtor))

    # Zero-sum input empties both sides together
    assert not creditors and not debtors, "unsettled balances after simplification"
    assert len(transactions) <= max(party_count - 1, 0), (
        f"{len(transactions)} transactions for {party_count} parties"
    )

    logger.info("debt_simplification_completed", extra={
        "currency": currency,
        "party_count": party_count,
        "transaction_count": len(transactions),
        "settled_cents": sum(t.amount_cents for t in transactions),
    })
    return transactions
