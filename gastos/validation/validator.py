"""
Input Validation

Pure, side-effect-free checks run before any storage access.

Rules are evaluated in a fixed order and validation stops at the FIRST
violated rule, raising ValidationError with that rule's message. The order
is part of the public contract: callers (and tests) rely on which message
wins when several fields are wrong.

Category input order:
    name -> icon -> color -> kind

Transaction input order:
    description -> amount -> amount_in_ars -> currency -> exchange_rate
    -> kind -> date -> category_id

Validation checks shape only. Whether category_id points at a live row is
checked by the transaction repository against storage.
"""

import math
import string
from typing import Optional

from gastos.errors import ValidationError
from gastos.models.finance import CategoryInput, Currency, TransactionInput, TransactionKind
from gastos.money import fits_in_cents

MAX_NAME_LEN = 100
MAX_ICON_LEN = 50
MAX_DESCRIPTION_LEN = 255
HEX_COLOR_LEN = 7  # "#rrggbb"

VALID_KINDS = tuple(kind.value for kind in TransactionKind)
VALID_CURRENCIES = tuple(currency.value for currency in Currency)


# =============================================================================
# FIELD RULES
# =============================================================================

def validate_name(name: str) -> None:
    name = name.strip()
    if not name:
        raise ValidationError("Name cannot be empty", field="name")
    if len(name) > MAX_NAME_LEN:
        raise ValidationError(
            f"Name cannot exceed {MAX_NAME_LEN} characters", field="name"
        )


def validate_icon(icon: str) -> None:
    icon = icon.strip()
    if not icon:
        raise ValidationError("Icon cannot be empty", field="icon")
    if len(icon) > MAX_ICON_LEN:
        raise ValidationError(
            f"Icon name cannot exceed {MAX_ICON_LEN} characters", field="icon"
        )
    # Icon names are identifier tokens such as "ShoppingBag" or "Gamepad2"
    if not all(c.isascii() and c.isalnum() for c in icon):
        raise ValidationError(
            "Icon name can only contain letters and digits", field="icon"
        )


def validate_color(color: str) -> None:
    color = color.strip()
    if len(color) != HEX_COLOR_LEN or not color.startswith("#"):
        raise ValidationError(
            f"Invalid color: '{color}'. Must use the #rrggbb format",
            field="color",
        )
    if not all(c in string.hexdigits for c in color[1:]):
        raise ValidationError(
            f"Invalid color: '{color}'. Must contain only hexadecimal digits",
            field="color",
        )


def validate_kind(kind: str) -> None:
    if kind not in VALID_KINDS:
        raise ValidationError(
            f"Invalid type: '{kind}'. Must be 'income' or 'expense'",
            field="kind",
        )


def validate_description(description: str) -> None:
    description = description.strip()
    if not description:
        raise ValidationError("Description cannot be empty", field="description")
    if len(description) > MAX_DESCRIPTION_LEN:
        raise ValidationError(
            f"Description cannot exceed {MAX_DESCRIPTION_LEN} characters",
            field="description",
        )


def validate_amount(amount: float, field: str = "amount", label: str = "Amount") -> None:
    """
    Positive, then finite, then small enough to store as 64-bit cents.

    NaN passes the first check and fails the second.
    """
    if amount <= 0:
        raise ValidationError(f"{label} must be greater than 0", field=field)
    if not math.isfinite(amount):
        raise ValidationError(f"{label} is not a valid number", field=field)
    if not fits_in_cents(amount):
        raise ValidationError(f"{label} is too large", field=field)


def validate_currency(currency: str) -> None:
    if currency not in VALID_CURRENCIES:
        raise ValidationError(
            f"Invalid currency: '{currency}'. Must be ARS or USD",
            field="currency",
        )


def validate_exchange_rate(currency: str, exchange_rate: Optional[float]) -> None:
    """Required and checked for USD only; any value is accepted for ARS."""
    if currency != Currency.USD.value:
        return
    if exchange_rate is None:
        raise ValidationError(
            "Exchange rate is required for USD transactions",
            field="exchange_rate",
        )
    if exchange_rate <= 0:
        raise ValidationError(
            "Exchange rate must be greater than 0", field="exchange_rate"
        )
    if not math.isfinite(exchange_rate):
        raise ValidationError(
            "Exchange rate is not a valid number", field="exchange_rate"
        )


def validate_date(date: str) -> None:
    if not date.strip():
        raise ValidationError("Date cannot be empty", field="date")


def validate_category_id(category_id: int) -> None:
    if isinstance(category_id, bool) or not isinstance(category_id, int) or category_id <= 0:
        raise ValidationError(
            "A valid category must be selected", field="category_id"
        )


# =============================================================================
# INPUT VALIDATORS
# =============================================================================

def validate_category_input(data: CategoryInput) -> None:
    """Validate a CategoryInput / CategoryUpdate. Raises ValidationError."""
    validate_name(data.name)
    validate_icon(data.icon)
    validate_color(data.color)
    validate_kind(data.kind)


def validate_transaction_input(data: TransactionInput) -> None:
    """Validate a TransactionInput / TransactionUpdate. Raises ValidationError."""
    validate_description(data.description)
    validate_amount(data.amount)
    validate_amount(data.amount_in_ars, field="amount_in_ars", label="Amount in ARS")
    validate_currency(data.currency)
    validate_exchange_rate(data.currency, data.exchange_rate)
    validate_kind(data.kind)
    validate_date(data.date)
    validate_category_id(data.category_id)
