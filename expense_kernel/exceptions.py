"""
Typed exception hierarchy for the expense kernel.

Every error has its own class, a class-level machine-readable ``code`` and
its context stored as attributes, so callers catch by type and API handlers
serialize by code instead of parsing message strings.

    ExpenseKernelError (base)
    |
    +-- CurrencyError
    |   +-- InvalidCurrencyError
    |   +-- UnsupportedCurrencyError
    |
    +-- SplitError
    |   +-- UnsupportedSplitMethodError
    |   +-- SettlementRecipientError
    |
    +-- BalanceError
        +-- BalanceIntegrityError

Category   | Code                        | When raised
-----------|-----------------------------|----------------------------------------
Currency   | INVALID_CURRENCY            | Not a valid ISO 4217 code
           | UNSUPPORTED_CURRENCY        | Valid code outside the configured set
Split      | UNSUPPORTED_SPLIT_METHOD    | Unknown split method discriminator
           | SETTLEMENT_RECIPIENT_COUNT  | Settlement allocated to != 1 member
Balance    | BALANCE_INTEGRITY_VIOLATION | Balances of a currency do not sum to 0

Split *validation* failures (sum mismatches and friends) are not exceptions:
``validate_splits`` reports them in a ``SplitValidationResult`` so forms can
show the message directly.
"""


class ExpenseKernelError(Exception):
    """
    Base exception for all expense kernel errors.

    All subclasses must have a ``code`` class attribute for machine-readable
    error identification.
    """

    code: str = "EXPENSE_KERNEL_ERROR"


# Currency-related exceptions


class CurrencyError(ExpenseKernelError):
    """Base exception for currency-related errors."""

    code: str = "CURRENCY_ERROR"


class InvalidCurrencyError(CurrencyError):
    """Invalid ISO 4217 currency code provided."""

    code: str = "INVALID_CURRENCY"

    def __init__(self, currency: object):
        self.currency = currency
        super().__init__(f"Invalid ISO 4217 currency code: {currency!r}")


class UnsupportedCurrencyError(CurrencyError):
    """Currency is valid ISO 4217 but not enabled for this deployment."""

    code: str = "UNSUPPORTED_CURRENCY"

    def __init__(self, currency: str, supported: frozenset[str]):
        self.currency = currency
        self.supported = sorted(supported)
        super().__init__(
            f"Currency {currency} is not supported "
            f"(supported: {', '.join(self.supported)})"
        )


# Split-related exceptions


class SplitError(ExpenseKernelError):
    """Base exception for split-method errors."""

    code: str = "SPLIT_ERROR"


class UnsupportedSplitMethodError(SplitError):
    """Split method discriminator is not one of the known methods."""

    code: str = "UNSUPPORTED_SPLIT_METHOD"

    def __init__(self, method: object):
        self.method = method
        super().__init__(f"Unsupported split method: {method!r}")


class SettlementRecipientError(SplitError):
    """A settlement must be paid to exactly one creditor."""

    code: str = "SETTLEMENT_RECIPIENT_COUNT"

    def __init__(self, recipient_count: int):
        self.recipient_count = recipient_count
        super().__init__(
            f"Settlement must have exactly one recipient, got {recipient_count}"
        )


# Balance-related exceptions


class BalanceError(ExpenseKernelError):
    """Base exception for balance errors."""

    code: str = "BALANCE_ERROR"


class BalanceIntegrityError(BalanceError):
    """
    Net balances of one currency do not sum to zero.

    Indicates an upstream split bug (splits not summing to their expense).
    Never corrected silently.
    """

    code: str = "BALANCE_INTEGRITY_VIOLATION"

    def __init__(self, currency: str, residual_cents: int):
        self.currency = currency
        self.residual_cents = residual_cents
        super().__init__(
            f"Balances in {currency} sum to {residual_cents}, expected 0"
        )
