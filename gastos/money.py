"""
Money helpers.

DESIGN DECISION: Amounts are persisted as integer cents and exposed as
float major units. Conversion happens only here.

Rounding rule: the float is read through its shortest decimal repr
(what the user typed), multiplied by 100 and rounded ROUND_HALF_UP.
Stored amounts are always positive, so this is also half-away-from-zero.
"""

from decimal import ROUND_HALF_UP, Decimal

CENTS_PER_UNIT = 100

# SQLite INTEGER is a signed 64-bit value
MAX_CENTS = 2**63 - 1

CURRENCY_SYMBOLS = {
    "ARS": "$",
    "USD": "US$",
}


def _as_decimal_cents(amount: float) -> Decimal:
    return Decimal(repr(float(amount))) * CENTS_PER_UNIT


def to_cents(amount: float) -> int:
    """Convert major units to integer cents, e.g. 19.99 -> 1999."""
    return int(_as_decimal_cents(amount).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> float:
    """Convert integer cents back to major units, e.g. 1999 -> 19.99."""
    return cents / CENTS_PER_UNIT


def fits_in_cents(amount: float) -> bool:
    """True if a finite amount converts to cents SQLite can store."""
    return _as_decimal_cents(amount) <= MAX_CENTS


def format_amount(amount: float, currency: str = "ARS") -> str:
    """Format a float as a currency string, e.g. 'US$1,234.56'."""
    symbol = CURRENCY_SYMBOLS.get(currency, "$")
    return f"{symbol}{amount:,.2f}"
