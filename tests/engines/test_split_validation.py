"""
Tests for split validation.

Covers:
- Sum checks per method (no tolerance)
- Basis-point total for percentage splits
- Membership checks (empty, duplicates, negatives)
- Settlement recipient count
- Expense-creation participant checks
- Form payload rendering
"""

import pytest

from expense_engines.allocation import AllocationEngine
from expense_engines.split_validation import (
    SplitValidationCode,
    SplitValidationResult,
    validate_participants,
    validate_splits,
)
from expense_kernel.domain.expense import ExpenseSplit, Participant, SplitMethod
from expense_kernel.exceptions import UnsupportedSplitMethodError


def _splits(*amounts, raw=None):
    raw = raw or [None] * len(amounts)
    return [
        ExpenseSplit(member_id=i + 1, amount_cents=a, raw_value=r)
        for i, (a, r) in enumerate(zip(amounts, raw))
    ]


class TestSumValidation:
    """Amounts must match the total exactly."""

    @pytest.mark.parametrize(
        "method", [SplitMethod.EQUAL, SplitMethod.EXACT, SplitMethod.SHARES]
    )
    def test_matching_sum_is_valid(self, method):
        result = validate_splits(_splits(34, 33, 33), 100, method)

        assert result == SplitValidationResult(is_valid=True)

    def test_off_by_one_cent_is_invalid(self):
        result = validate_splits(_splits(5000, 4999), 10000, SplitMethod.EXACT)

        assert not result.is_valid
        assert result.code is SplitValidationCode.SPLIT_SUM_MISMATCH
        assert result.error == "splits sum to 9999, expected 10000"

    def test_over_allocation_is_invalid(self):
        result = validate_splits(_splits(60, 60), 100, "custom")

        assert result.error == "splits sum to 120, expected 100"

    def test_zero_amount_splits_are_allowed(self):
        result = validate_splits(_splits(100, 0), 100, SplitMethod.EXACT)

        assert result.is_valid


class TestPercentageValidation:
    """Basis points must total exactly 10000."""

    def test_valid_percentages(self):
        result = validate_splits(
            _splits(334, 333, 334, raw=[3333, 3333, 3334]), 1001, SplitMethod.PERCENTAGE
        )

        assert result.is_valid

    def test_one_basis_point_short_is_invalid(self):
        result = validate_splits(
            _splits(500, 500, raw=[5000, 4999]), 1000, SplitMethod.PERCENTAGE
        )

        assert result.code is SplitValidationCode.PERCENTAGE_SUM_MISMATCH
        assert result.error == "percentages sum to 9999 basis points, expected 10000"

    def test_amount_mismatch_with_valid_percentages(self):
        result = validate_splits(
            _splits(500, 499, raw=[5000, 5000]), 1000, SplitMethod.PERCENTAGE
        )

        assert result.code is SplitValidationCode.SPLIT_SUM_MISMATCH
        assert result.error == "splits sum to 999, expected 1000"

    def test_missing_raw_values_count_as_zero(self):
        result = validate_splits(_splits(500, 500), 1000, SplitMethod.PERCENTAGE)

        assert result.code is SplitValidationCode.PERCENTAGE_SUM_MISMATCH


class TestMembershipValidation:
    """Structural checks that run before the sum checks."""

    def test_empty_splits(self):
        result = validate_splits([], 100, SplitMethod.EQUAL)

        assert result.code is SplitValidationCode.NO_PARTICIPANTS

    def test_duplicate_member(self):
        splits = [
            ExpenseSplit(member_id="a", amount_cents=50),
            ExpenseSplit(member_id="a", amount_cents=50),
        ]

        result = validate_splits(splits, 100, SplitMethod.EXACT)

        assert result.code is SplitValidationCode.DUPLICATE_MEMBER
        assert "a" in result.error

    def test_negative_amount(self):
        result = validate_splits(_splits(150, -50), 100, SplitMethod.EXACT)

        assert result.code is SplitValidationCode.NEGATIVE_AMOUNT
        assert "-50" in result.error

    def test_negative_share_weight(self):
        result = validate_splits(_splits(50, 50, raw=[1, -1]), 100, SplitMethod.SHARES)

        assert result.code is SplitValidationCode.INVALID_SHARES


class TestSettlementValidation:
    """A settlement repays exactly one creditor in full."""

    def test_single_full_split_is_valid(self):
        result = validate_splits(_splits(2500), 2500, SplitMethod.SETTLEMENT)

        assert result.is_valid

    def test_two_recipients_invalid(self):
        result = validate_splits(_splits(1000, 1500), 2500, SplitMethod.SETTLEMENT)

        assert result.code is SplitValidationCode.SETTLEMENT_RECIPIENT_COUNT

    def test_partial_amount_invalid(self):
        result = validate_splits(_splits(2000), 2500, SplitMethod.SETTLEMENT)

        assert result.code is SplitValidationCode.SPLIT_SUM_MISMATCH

    def test_recipient_count_checked_before_membership(self):
        result = validate_splits([], 2500, SplitMethod.SETTLEMENT)

        assert result.code is SplitValidationCode.SETTLEMENT_RECIPIENT_COUNT
        assert result.error == "settlement must have exactly one recipient, got 0"

    def test_duplicate_recipients_report_count(self):
        splits = [
            ExpenseSplit(member_id="a", amount_cents=1000),
            ExpenseSplit(member_id="a", amount_cents=1500),
        ]

        result = validate_splits(splits, 2500, SplitMethod.SETTLEMENT)

        assert result.code is SplitValidationCode.SETTLEMENT_RECIPIENT_COUNT


class TestAllocationRoundTrip:
    """Whatever the allocator produces validates against the same total."""

    def setup_method(self):
        self.engine = AllocationEngine()

    @pytest.mark.parametrize(
        "method, values",
        [
            (SplitMethod.EQUAL, [None, None, None]),
            (SplitMethod.PERCENTAGE, [3333, 3333, 3334]),
            (SplitMethod.SHARES, [1, 2, 4]),
            (SplitMethod.EXACT, [400, 300, 301]),
        ],
    )
    def test_allocated_splits_validate(self, method, values):
        participants = [Participant(member_id=i, value=v) for i, v in enumerate(values)]

        splits = self.engine.allocate(1001, method, participants)

        assert validate_splits(splits, 1001, method).is_valid


class TestParticipantValidation:
    """Form-level checks before allocation."""

    def test_equal_without_values(self):
        result = validate_participants([Participant(1), Participant(2)], 100, "equal")

        assert result.is_valid

    def test_equal_with_values_rejected(self):
        result = validate_participants([Participant(1, 50)], 100, SplitMethod.EQUAL)

        assert result.code is SplitValidationCode.UNEXPECTED_VALUE

    @pytest.mark.parametrize(
        "method", [SplitMethod.EXACT, SplitMethod.PERCENTAGE, SplitMethod.SHARES]
    )
    def test_value_required(self, method):
        result = validate_participants([Participant(1, 1), Participant(2)], 100, method)

        assert result.code is SplitValidationCode.MISSING_VALUE
        assert "member 2" in result.error

    def test_exact_sum_mismatch(self):
        result = validate_participants(
            [Participant(1, 60), Participant(2, 30)], 100, SplitMethod.EXACT
        )

        assert result.error == "splits sum to 90, expected 100"

    def test_percentage_total(self):
        result = validate_participants(
            [Participant(1, 6000), Participant(2, 3000)], 100, "percent"
        )

        assert result.code is SplitValidationCode.PERCENTAGE_SUM_MISMATCH

    def test_zero_share_rejected(self):
        result = validate_participants(
            [Participant(1, 0), Participant(2, 3)], 100, SplitMethod.SHARES
        )

        assert result.code is SplitValidationCode.INVALID_SHARES

    def test_duplicate_participants(self):
        result = validate_participants([Participant(1), Participant(1)], 100, "equal")

        assert result.code is SplitValidationCode.DUPLICATE_MEMBER

    def test_settlement_requires_one_recipient(self):
        result = validate_participants(
            [Participant(1), Participant(2)], 100, SplitMethod.SETTLEMENT
        )

        assert result.code is SplitValidationCode.SETTLEMENT_RECIPIENT_COUNT

    def test_settlement_without_recipient(self):
        result = validate_participants([], 100, SplitMethod.SETTLEMENT)

        assert result.code is SplitValidationCode.SETTLEMENT_RECIPIENT_COUNT

    def test_unknown_method_raises(self):
        with pytest.raises(UnsupportedSplitMethodError):
            validate_participants([Participant(1)], 100, "itemized")


class TestResultPayload:
    """Rendering for the expense form."""

    def test_valid_payload(self):
        assert SplitValidationResult.ok().to_dict() == {"isValid": True}

    def test_invalid_payload(self):
        result = validate_splits(_splits(99), 100, SplitMethod.EXACT)

        assert result.to_dict() == {
            "isValid": False,
            "error": "splits sum to 99, expected 100",
            "code": "SPLIT_SUM_MISMATCH",
        }

    def test_failure_is_logged(self, captured_logs):
        validate_splits(_splits(99), 100, SplitMethod.EXACT)

        records = [r for r in captured_logs() if r["message"] == "split_validation_failed"]
        assert records[0]["code"] == "SPLIT_SUM_MISMATCH"
