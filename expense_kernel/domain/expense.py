"""
Expense -- immutable value objects for expenses, splits and participants.

Responsibility:
    The typed input vocabulary of the engines. Records are produced by the
    persistence layer (``ExpenseRecord.from_mapping``) or by the expense
    creation form (``Participant``) and are never mutated by the engines.

Invariants enforced:
    - ``ExpenseRecord.amount_cents >= 1`` and is an ``int``.
    - ``ExpenseRecord.currency`` is a normalized ISO 4217 code; an unknown
      code raises ``InvalidCurrencyError`` (no silent default).
    - ``SplitMethod`` is a closed enum; unknown discriminators raise
      ``UnsupportedSplitMethodError``.

Non-goals:
    - Split sums are *not* checked here. That is ``validate_splits``' job,
      and it must be able to receive a bad split set in order to report it.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, TypeAlias

from expense_kernel.domain.currency import CurrencyRegistry
from expense_kernel.exceptions import UnsupportedSplitMethodError

MemberId: TypeAlias = int | str
"""Group member identifier. Ids within one call must be mutually orderable."""

BASIS_POINTS_TOTAL = 10_000


class SplitMethod(str, Enum):
    """How an expense amount is divided among participants."""

    EQUAL = "equal"
    EXACT = "exact"  # Caller supplies each amount
    PERCENTAGE = "percentage"  # Basis points, 10000 = 100%
    SHARES = "shares"  # Integer weights
    SETTLEMENT = "settlement"  # Repayment to a single creditor

    @classmethod
    def parse(cls, value: SplitMethod | str) -> SplitMethod:
        """Parse a discriminator, accepting the legacy client spellings."""
        if isinstance(value, SplitMethod):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            key = _LEGACY_METHOD_NAMES.get(key, key)
            for member in cls:
                if member.value == key:
                    return member
        raise UnsupportedSplitMethodError(value)


_LEGACY_METHOD_NAMES = {
    "custom": "exact",
    "percent": "percentage",
}


def _require_int(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")


@dataclass(frozen=True)
class Participant:
    """
    One participant descriptor from the expense creation form.

    ``value`` meaning depends on the split method: omitted for equal,
    amount in cents for exact, basis points for percentage, weight for
    shares.
    """

    member_id: MemberId
    value: int | None = None

    def __post_init__(self) -> None:
        if self.value is not None:
            _require_int("value", self.value)
            if self.value < 0:
                raise ValueError("Participant value cannot be negative")


@dataclass(frozen=True)
class ExpenseSplit:
    """One member's share of an expense."""

    member_id: MemberId
    amount_cents: int
    raw_value: int | None = None

    def __post_init__(self) -> None:
        _require_int("amount_cents", self.amount_cents)
        if self.raw_value is not None:
            _require_int("raw_value", self.raw_value)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ExpenseSplit:
        return cls(
            member_id=_pick(data, "memberId", "groupMemberId", "member_id"),
            amount_cents=_pick(data, "amountInCents", "amount_cents"),
            raw_value=_pick(
                data, "rawValue", "percentage", "raw_value", default=None
            ),
        )


@dataclass(frozen=True)
class ExpenseRecord:
    """
    A persisted expense together with its splits.

    Settlement expenses use the same shape: the payer is the debtor paying
    down and the single split names the creditor being repaid.
    """

    payer_member_id: MemberId
    amount_cents: int
    currency: str
    splits: tuple[ExpenseSplit, ...]
    split_method: SplitMethod = SplitMethod.EQUAL
    expense_id: int | str | None = None
    group_id: int | str | None = None
    description: str | None = None
    category: str | None = None
    occurred_at: date | None = None

    def __post_init__(self) -> None:
        _require_int("amount_cents", self.amount_cents)
        if self.amount_cents < 1:
            raise ValueError(
                f"Expense amount must be at least 1, got {self.amount_cents}"
            )
        object.__setattr__(self, "currency", CurrencyRegistry.validate(self.currency))
        object.__setattr__(self, "split_method", SplitMethod.parse(self.split_method))
        if not isinstance(self.splits, tuple):
            object.__setattr__(self, "splits", tuple(self.splits))

    @property
    def is_settlement(self) -> bool:
        return self.split_method is SplitMethod.SETTLEMENT

    @property
    def split_total_cents(self) -> int:
        return sum(s.amount_cents for s in self.splits)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ExpenseRecord:
        """
        Build a record from the persistence layer's payload.

        Accepts ``payerMemberId``/``paidByGroupMemberId``, ``amountInCents``,
        ``currency``, ``splits``/``expenseSplits`` and optional ``splitMethod``,
        ``id``, ``groupId``, ``description``, ``category``. Snake_case keys
        are accepted as well.

        Raises:
            KeyError: a required field is missing.
            InvalidCurrencyError: the currency is not ISO 4217.
        """
        raw_splits: Iterable[Mapping[str, Any]] = _pick(
            data, "splits", "expenseSplits"
        )
        return cls(
            payer_member_id=_pick(
                data, "payerMemberId", "paidByGroupMemberId", "payer_member_id"
            ),
            amount_cents=_pick(data, "amountInCents", "amount_cents"),
            currency=_pick(data, "currency"),
            splits=tuple(ExpenseSplit.from_mapping(s) for s in raw_splits),
            split_method=_pick(
                data, "splitMethod", "split_method", default=SplitMethod.EQUAL
            ),
            expense_id=_pick(data, "id", "expense_id", default=None),
            group_id=_pick(data, "groupId", "group_id", default=None),
            description=_pick(data, "description", default=None),
            category=_pick(data, "category", default=None),
        )


_MISSING = object()


def _pick(data: Mapping[str, Any], *keys: str, default: Any = _MISSING) -> Any:
    """Return the first present key's value."""
    for key in keys:
        if key in data:
            return data[key]
    if default is _MISSING:
        raise KeyError(f"Missing required field: one of {', '.join(keys)}")
    return default
