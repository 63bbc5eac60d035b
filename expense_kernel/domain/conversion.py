"""
Conversion -- minor units (cents) <-> Decimal major units, and display text.

All amounts inside the engine are integers of minor units. Decimal is used
only at the edges (form input, display); floats are never involved.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from expense_kernel.domain.currency import CurrencyRegistry


def cents_to_decimal(cents: int, currency: str) -> Decimal:
    """
    Convert minor units to a Decimal amount in major units.

    Example: ``cents_to_decimal(1050, "EUR") == Decimal("10.50")``,
    ``cents_to_decimal(1050, "JPY") == Decimal("1050")``.
    """
    places = CurrencyRegistry.get_decimal_places(currency)
    return Decimal(cents).scaleb(-places)


def decimal_to_cents(amount: Decimal | str | int, currency: str) -> int:
    """
    Convert a major-unit amount to integer minor units, rounding half-up.

    Raises:
        ValueError: ``amount`` is not a finite number.
    """
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except InvalidOperation as e:
        raise ValueError(f"Invalid amount: {amount!r}") from e
    if not value.is_finite():
        raise ValueError(f"Invalid amount: {amount!r}")

    places = CurrencyRegistry.get_decimal_places(currency)
    return int(value.scaleb(places).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_cents(cents: int, currency: str) -> str:
    """Render minor units for display, e.g. ``"EUR 10.50"`` or ``"-USD 3.00"``."""
    code = CurrencyRegistry.validate(currency)
    places = CurrencyRegistry.get_decimal_places(code)
    magnitude = cents_to_decimal(abs(cents), code)
    sign = "-" if cents < 0 else ""
    return f"{sign}{code} {magnitude:,.{places}f}"
