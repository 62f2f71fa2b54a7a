"""Decimal utilities for monetary amounts and statistics.

Amounts are carried as Decimal end to end so that fingerprints compare
numerically and sums do not drift.
"""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

# Currency symbols stripped from statement amounts
CURRENCY_SYMBOLS = {"$", "€", "£", "¥", "₹", "₽", "₩", "₿"}

# Parentheses-enclosed negatives: ($1,234.56) or (1234.56)
PARENS_NEGATIVE_PATTERN = re.compile(r"^\s*\(\s*([^)]+)\s*\)\s*$")

ZERO = Decimal("0")


def to_decimal(value: object) -> Decimal:
    """Convert a numeric value to Decimal without silent fallbacks.

    Floats go through ``str`` so that ``12.1`` becomes ``Decimal("12.1")``.

    Args:
        value: int, float, Decimal or numeric string.

    Returns:
        The value as a finite Decimal.

    Raises:
        ValueError: If the value is missing, boolean, non-numeric or not finite.
    """
    if value is None:
        raise ValueError("Amount is missing")
    # bool is an int subclass; True is never a valid amount
    if isinstance(value, bool):
        raise ValueError(f"Amount must be numeric, got {value!r}")

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    elif isinstance(value, str):
        if not value.strip():
            raise ValueError("Amount is empty")
        try:
            result = Decimal(value.strip())
        except InvalidOperation as e:
            raise ValueError(f"Amount is not numeric: {value!r}") from e
    else:
        raise ValueError(f"Amount must be numeric, got {type(value).__name__}")

    if not result.is_finite():
        raise ValueError(f"Amount must be finite, got {value!r}")
    return result


def parse_amount(raw_amount: str) -> Decimal:
    """Parse a statement amount string into a signed Decimal.

    Handles:
    - Standard: 1234.56, -1234.56
    - Currency and thousands separators: $1,234.56, -$1,234.56
    - Parentheses for negatives: ($1,234.56)

    Args:
        raw_amount: The raw amount string.

    Returns:
        Signed Decimal amount.

    Raises:
        ValueError: If the amount cannot be parsed.
    """
    if raw_amount is None or not str(raw_amount).strip():
        raise ValueError("Empty amount string")

    amount_str = str(raw_amount).strip()
    is_negative = False

    parens_match = PARENS_NEGATIVE_PATTERN.match(amount_str)
    if parens_match:
        amount_str = parens_match.group(1).strip()
        is_negative = True

    if amount_str.startswith("-"):
        is_negative = not is_negative
        amount_str = amount_str[1:].strip()
    elif amount_str.startswith("+"):
        amount_str = amount_str[1:].strip()

    for symbol in CURRENCY_SYMBOLS:
        amount_str = amount_str.replace(symbol, "")
    amount_str = amount_str.replace(",", "").replace(" ", "")

    try:
        amount = to_decimal(amount_str)
    except ValueError as e:
        raise ValueError(f"Cannot parse amount '{raw_amount}': {e}") from e

    return -amount if is_negative else amount


def round_half_up(value: Decimal, decimal_places: int = 2) -> Decimal:
    """Round half away from zero to a fixed number of places.

    Args:
        value: Value to round.
        decimal_places: Number of decimal places.

    Returns:
        Rounded Decimal.
    """
    exponent = Decimal(1).scaleb(-decimal_places)
    return value.quantize(exponent, rounding=ROUND_HALF_UP)


def format_currency(
    amount: Decimal,
    decimal_places: int = 2,
    currency_symbol: str = "",
) -> str:
    """Format an amount for display, e.g. ``-$1,234.50``.

    Args:
        amount: The amount to format.
        decimal_places: Number of decimal places.
        currency_symbol: Symbol placed after the sign.

    Returns:
        Formatted string.
    """
    rounded = round_half_up(amount, decimal_places)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{currency_symbol}{abs(rounded):,.{decimal_places}f}"
