"""Input validation package."""

from gastos.validation.validator import (
    validate_category_input,
    validate_transaction_input,
)

__all__ = ["validate_category_input", "validate_transaction_input"]
