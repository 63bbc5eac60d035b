"""
Module: expense_engines.split_validation
Responsibility:
    Check a proposed set of splits (or the participant input of the
    expense creation form) against the expense total and split method
    before anything is persisted.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Amounts must sum to the total exactly; there is no tolerance.
    - Percentage splits must carry basis points summing to exactly 10000.
    - A settlement names exactly one recipient.

Failure modes:
    - None raised. Every failure is reported as a ``SplitValidationResult``
      with ``is_valid=False``, a machine-readable ``code`` and a message that
      names the discrepancy, shown to the user as-is.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from expense_kernel.domain.expense import (
    BASIS_POINTS_TOTAL,
    ExpenseSplit,
    MemberId,
    Participant,
    SplitMethod,
)
from expense_kernel.exceptions import UnsupportedSplitMethodError
from expense_kernel.logging_config import get_logger

logger = get_logger("engines.split_validation")


class SplitValidationCode(str, Enum):
    """Why a split set was rejected."""

    NO_PARTICIPANTS = "NO_PARTICIPANTS"
    DUPLICATE_MEMBER = "DUPLICATE_MEMBER"
    NEGATIVE_AMOUNT = "NEGATIVE_AMOUNT"
    SETTLEMENT_RECIPIENT_COUNT = "SETTLEMENT_RECIPIENT_COUNT"
    SPLIT_SUM_MISMATCH = "SPLIT_SUM_MISMATCH"
    PERCENTAGE_SUM_MISMATCH = "PERCENTAGE_SUM_MISMATCH"
    MISSING_VALUE = "MISSING_VALUE"
    UNEXPECTED_VALUE = "UNEXPECTED_VALUE"
    INVALID_SHARES = "INVALID_SHARES"


@dataclass(frozen=True)
class SplitValidationResult:
    """Outcome of a split validation."""

    is_valid: bool
    error: str | None = None
    code: SplitValidationCode | None = None

    @classmethod
    def ok(cls) -> SplitValidationResult:
        return cls(is_valid=True)

    @classmethod
    def fail(cls, code: SplitValidationCode, error: str) -> SplitValidationResult:
        logger.info("split_validation_failed", extra={
            "code": code.value,
            "error": error,
        })
        return cls(is_valid=False, error=error, code=code)

    def to_dict(self) -> dict[str, Any]:
        """Form-facing payload: ``{"isValid": ..., "error": ...}``."""
        if self.is_valid:
            return {"isValid": True}
        return {"isValid": False, "error": self.error, "code": self.code.value}


def _sum_mismatch(actual: int, expected: int) -> SplitValidationResult:
    return SplitValidationResult.fail(
        SplitValidationCode.SPLIT_SUM_MISMATCH,
        f"splits sum to {actual}, expected {expected}",
    )


def _percentage_mismatch(actual_bps: int) -> SplitValidationResult:
    return SplitValidationResult.fail(
        SplitValidationCode.PERCENTAGE_SUM_MISMATCH,
        f"percentages sum to {actual_bps} basis points, expected {BASIS_POINTS_TOTAL}",
    )


def _recipient_count_mismatch(count: int) -> SplitValidationResult:
    return SplitValidationResult.fail(
        SplitValidationCode.SETTLEMENT_RECIPIENT_COUNT,
        f"settlement must have exactly one recipient, got {count}",
    )


def _first_duplicate(member_ids: Sequence[MemberId]) -> MemberId | None:
    seen: set[MemberId] = set()
    for member_id in member_ids:
        if member_id in seen:
            return member_id
        seen.add(member_id)
    return None


def _check_members(member_ids: Sequence[MemberId]) -> SplitValidationResult | None:
    if not member_ids:
        return SplitValidationResult.fail(
            SplitValidationCode.NO_PARTICIPANTS,
            "at least one person must be included",
        )
    duplicate = _first_duplicate(member_ids)
    if duplicate is not None:
        return SplitValidationResult.fail(
            SplitValidationCode.DUPLICATE_MEMBER,
            f"member {duplicate} appears more than once",
        )
    return None


def validate_splits(
    splits: Sequence[ExpenseSplit],
    total_amount_cents: int,
    method: SplitMethod | str,
) -> SplitValidationResult:
    """
    Validate splits produced by ``AllocationEngine.allocate`` (or edited by
    the user) against the expense total.

    Preconditions:
        - ``method`` is a known split method.
    Postconditions:
        - ``is_valid`` is True iff every check passes; otherwise ``error``
          identifies the first failed check.
    """
    method = SplitMethod.parse(method)
    if method is SplitMethod.SETTLEMENT and len(splits) != 1:
        return _recipient_count_mismatch(len(splits))

    member_problem = _check_members([s.member_id for s in splits])
    if member_problem is not None:
        return member_problem

    negative = next((s for s in splits if s.amount_cents < 0), None)
    if negative is not None:
        return SplitValidationResult.fail(
            SplitValidationCode.NEGATIVE_AMOUNT,
            f"member {negative.member_id} has a negative amount ({negative.amount_cents})",
        )

    match method:
        case SplitMethod.EQUAL | SplitMethod.EXACT | SplitMethod.SETTLEMENT:
            pass
        case SplitMethod.PERCENTAGE:
            total_bps = sum(s.raw_value or 0 for s in splits)
            if total_bps != BASIS_POINTS_TOTAL:
                return _percentage_mismatch(total_bps)
        case SplitMethod.SHARES:
            if any((s.raw_value or 0) < 0 for s in splits):
                return SplitValidationResult.fail(
                    SplitValidationCode.INVALID_SHARES,
                    "share weights cannot be negative",
                )
        case _:
            raise UnsupportedSplitMethodError(method)

    split_total = sum(s.amount_cents for s in splits)
    if split_total != total_amount_cents:
        return _sum_mismatch(split_total, total_amount_cents)

    return SplitValidationResult.ok()


def validate_participants(
    participants: Sequence[Participant],
    total_amount_cents: int,
    method: SplitMethod | str,
) -> SplitValidationResult:
    """
    Validate expense-creation input before it reaches ``allocate``.

    Equal splits must not carry values; every other method needs one value
    per participant. Exact values must sum to the total, percentages to
    10000 basis points, and share weights must be positive.
    """
    method = SplitMethod.parse(method)
    if method is SplitMethod.SETTLEMENT and len(participants) != 1:
        return _recipient_count_mismatch(len(participants))

    member_problem = _check_members([p.member_id for p in participants])
    if member_problem is not None:
        return member_problem

    values = [p.value for p in participants]

    match method:
        case SplitMethod.EQUAL:
            if any(v is not None for v in values):
                return SplitValidationResult.fail(
                    SplitValidationCode.UNEXPECTED_VALUE,
                    "equal splits must not include values",
                )
            return SplitValidationResult.ok()
        case SplitMethod.SETTLEMENT:
            return SplitValidationResult.ok()
        case SplitMethod.EXACT | SplitMethod.PERCENTAGE | SplitMethod.SHARES:
            pass
        case _:
            raise UnsupportedSplitMethodError(method)

    missing = next((p for p in participants if p.value is None), None)
    if missing is not None:
        return SplitValidationResult.fail(
            SplitValidationCode.MISSING_VALUE,
            f"{method.value} split requires a value for member {missing.member_id}",
        )

    total = sum(values)
    if method is SplitMethod.EXACT and total != total_amount_cents:
        return _sum_mismatch(total, total_amount_cents)
    if method is SplitMethod.PERCENTAGE and total != BASIS_POINTS_TOTAL:
        return _percentage_mismatch(total)
    if method is SplitMethod.SHARES and any(v <= 0 for v in values):
        return SplitValidationResult.fail(
            SplitValidationCode.INVALID_SHARES,
            "shares must be positive integers",
        )
    return SplitValidationResult.ok()
