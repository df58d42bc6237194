"""Decimal utilities for money handling.

All monetary values are Decimal; floats from JSON are converted through
their string form so 0.1 stays 0.1.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

ZERO = Decimal("0")


def to_decimal(value: object) -> Decimal:
    """Convert a JSON scalar to a finite Decimal.

    Args:
        value: int, float, str or Decimal.

    Returns:
        Decimal value.

    Raises:
        ValueError: If the value is missing, not numeric, or not finite.
    """
    if value is None or isinstance(value, bool):
        raise ValueError(f"Not a numeric amount: {value!r}")

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float, str)):
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"Cannot parse amount '{value}'") from None
    else:
        raise ValueError(f"Not a numeric amount: {value!r}")

    if not amount.is_finite():
        raise ValueError(f"Amount must be finite, got '{value}'")
    return amount


def quantize_money(amount: Decimal, decimal_places: int = 2) -> Decimal:
    """Round an amount half-up to a fixed number of places."""
    return amount.quantize(Decimal(1).scaleb(-decimal_places), rounding=ROUND_HALF_UP)


def format_currency(
    amount: Decimal,
    symbol: str = "$",
    decimal_places: int = 2,
) -> str:
    """Format an amount for display, e.g. ``-$1,234.50``.

    Args:
        amount: The amount to format.
        symbol: Currency symbol prefix.
        decimal_places: Number of decimal places.

    Returns:
        Formatted string.
    """
    rounded = quantize_money(amount, decimal_places)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{symbol}{abs(rounded):,.{decimal_places}f}"
