"""
Module: expense_engines.allocation
Responsibility:
    Split an integer amount of minor currency units among the participants
    of an expense using a split method (equal, exact, percentage, shares,
    settlement) with zero rounding drift.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import expense_kernel.

Invariants enforced:
    - Conservation: for equal, percentage (bps totalling 10000), shares and
      settlement, ``sum(amount_cents) == total_cents`` exactly, for any
      ``total_cents >= 0``.
    - Equal: shares differ by at most one cent; the extra cents go to the
      first participants *in input order*.
    - Percentage / shares: largest-remainder method. Ideal shares are exact
      rationals (integer numerator over a common denominator, never float);
      leftover cents go to the largest fractional remainders, ties broken by
      input order.
    - Output order always equals input order.

Failure modes:
    - Empty participant list: returns ``[]`` and logs
      ``allocation_no_participants``; never divides by zero.
    - ValueError on negative ``total_cents``.
    - SettlementRecipientError when a settlement has != 1 participant.
    - UnsupportedSplitMethodError on an unknown method discriminator.

Usage:
    from expense_engines.allocation import AllocationEngine
    from expense_kernel.domain.expense import Participant, SplitMethod

    engine = AllocationEngine()
    splits = engine.allocate(
        total_cents=100,
        method=SplitMethod.EQUAL,
        participants=[Participant(1), Participant(2), Participant(3)],
    )
    # -> amounts [34, 33, 33]
"""

from __future__ import annotations

from collections.abc import Sequence

from expense_engines.tracer import traced_engine
from expense_kernel.domain.expense import (
    BASIS_POINTS_TOTAL,
    ExpenseSplit,
    MemberId,
    Participant,
    SplitMethod,
)
from expense_kernel.exceptions import (
    SettlementRecipientError,
    UnsupportedSplitMethodError,
)
from expense_kernel.logging_config import get_logger

logger = get_logger("engines.allocation")


class AllocationEngine:
    """
    Allocate an expense amount across participants.

    Contract:
        Pure functions over integers. No I/O, no state between calls.
    Guarantees:
        - See module invariants; the result is deterministic for a given
          input, including its order.
    Non-goals:
        - Does not check that exact amounts sum to the total; that is
          ``validate_splits``' responsibility.
    """

    @traced_engine(
        "allocation", "1.0", fingerprint_fields=("total_cents", "method", "participants")
    )
    def allocate(
        self,
        total_cents: int,
        method: SplitMethod | str,
        participants: Sequence[Participant],
    ) -> list[ExpenseSplit]:
        """
        Allocate ``total_cents`` to ``participants`` using ``method``.

        Args:
            total_cents: Amount in minor units, >= 0.
            method: Split method or its string discriminator.
            participants: Ordered participant descriptors.

        Returns:
            One ExpenseSplit per participant, in input order.
        """
        method = SplitMethod.parse(method)
        if total_cents < 0:
            raise ValueError(f"Total amount cannot be negative: {total_cents}")

        logger.info("allocation_started", extra={
            "total_cents": total_cents,
            "method": method.value,
            "participant_count": len(participants),
        })

        if not participants:
            logger.warning("allocation_no_participants", extra={
                "total_cents": total_cents,
                "method": method.value,
            })
            return []

        match method:
            case SplitMethod.EQUAL:
                splits = self._allocate_equal(total_cents, participants)
            case SplitMethod.EXACT:
                splits = self._allocate_exact(participants)
            case SplitMethod.PERCENTAGE:
                splits = self._allocate_percentage(total_cents, participants)
            case SplitMethod.SHARES:
                splits = self._allocate_shares(total_cents, participants)
            case SplitMethod.SETTLEMENT:
                splits = self._allocate_settlement(total_cents, participants)
            case _:
                raise UnsupportedSplitMethodError(method)

        logger.info("allocation_completed", extra={
            "method": method.value,
            "total_cents": total_cents,
            "allocated_cents": sum(s.amount_cents for s in splits),
            "line_count": len(splits),
        })
        return splits

    def allocate_equal(
        self,
        total_cents: int,
        member_ids: Sequence[MemberId],
    ) -> list[ExpenseSplit]:
        """Convenience method for an equal split between member ids."""
        return self.allocate(
            total_cents, SplitMethod.EQUAL, [Participant(m) for m in member_ids]
        )

    def _allocate_equal(
        self,
        total_cents: int,
        participants: Sequence[Participant],
    ) -> list[ExpenseSplit]:
        base, remainder = divmod(total_cents, len(participants))
        return [
            ExpenseSplit(
                member_id=p.member_id,
                amount_cents=base + (1 if i < remainder else 0),
            )
            for i, p in enumerate(participants)
        ]

    def _allocate_exact(
        self,
        participants: Sequence[Participant],
    ) -> list[ExpenseSplit]:
        return [
            ExpenseSplit(
                member_id=p.member_id,
                amount_cents=p.value or 0,
                raw_value=p.value,
            )
            for p in participants
        ]

    def _allocate_percentage(
        self,
        total_cents: int,
        participants: Sequence[Participant],
    ) -> list[ExpenseSplit]:
        bps = [p.value or 0 for p in participants]
        if sum(bps) != BASIS_POINTS_TOTAL:
            logger.warning("allocation_percentages_incomplete", extra={
                "total_bps": sum(bps),
                "expected_bps": BASIS_POINTS_TOTAL,
            })
        return self._allocate_largest_remainder(
            total_cents, participants, bps, BASIS_POINTS_TOTAL
        )

    def _allocate_shares(
        self,
        total_cents: int,
        participants: Sequence[Participant],
    ) -> list[ExpenseSplit]:
        weights = [p.value or 0 for p in participants]
        total_weight = sum(weights)
        if total_weight == 0:
            # Zero-weight group splits nothing
            return [
                ExpenseSplit(member_id=p.member_id, amount_cents=0, raw_value=p.value)
                for p in participants
            ]
        return self._allocate_largest_remainder(
            total_cents, participants, weights, total_weight
        )

    def _allocate_settlement(
        self,
        total_cents: int,
        participants: Sequence[Participant],
    ) -> list[ExpenseSplit]:
        if len(participants) != 1:
            raise SettlementRecipientError(len(participants))
        return [ExpenseSplit(member_id=participants[0].member_id, amount_cents=total_cents)]

    def _allocate_largest_remainder(
        self,
        total_cents: int,
        participants: Sequence[Participant],
        weights: Sequence[int],
        denominator: int,
    ) -> list[ExpenseSplit]:
        """Largest-remainder apportionment of ``total_cents * w / denominator``.

        Preconditions:
            - ``denominator > 0``; every weight is >= 0.
        Postconditions:
            - When ``sum(weights) == denominator`` the result sums to
              ``total_cents``. Otherwise each participant receives at most
              one leftover cent and the shortfall is left for the validator
              to report.
        """
        amounts: list[int] = []
        fractions: list[int] = []
        for weight in weights:
            # Fractional parts share the denominator, so the integer
            # remainders order exactly like the rational fractions.
            whole, fraction = divmod(total_cents * weight, denominator)
            amounts.append(whole)
            fractions.append(fraction)

        leftover = total_cents - sum(amounts)
        # sorted() is stable: equal fractions keep their input order
        by_fraction = sorted(range(len(weights)), key=lambda i: -fractions[i])
        for i in by_fraction[: max(leftover, 0)]:
            amounts[i] += 1

        return [
            ExpenseSplit(member_id=p.member_id, amount_cents=amount, raw_value=p.value)
            for p, amount in zip(participants, amounts)
        ]
