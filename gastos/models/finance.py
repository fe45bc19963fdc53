"""
Core Data Models for Gastos

These models define the schemas for all data flowing between the
presentation layer and storage:
1. Input models carry raw caller values (kind and currency as plain
   strings) so the ordered validation rules can report their own messages
2. Record models are what storage returns, with closed enums for kind
   and currency and monetary values in major units

Pydantic v2 is used for parsing structured caller input (dicts from the
UI) and for serialising records back to it.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from gastos.errors import ErrorCode, GastosError


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionKind(str, Enum):
    """Whether money comes in or goes out. Shared by categories and transactions."""
    INCOME = "income"
    EXPENSE = "expense"


class Currency(str, Enum):
    """Supported currencies. ARS is the home currency."""
    ARS = "ARS"
    USD = "USD"


# =============================================================================
# CATEGORY MODELS
# =============================================================================

class CategoryInput(BaseModel):
    """Input for creating a new category (no id, no is_default)."""

    name: str
    kind: str
    icon: str
    color: str


class CategoryUpdate(CategoryInput):
    """
    Input for updating an existing category.

    Same fields as CategoryInput; is_default and id cannot be changed.
    """


class Category(BaseModel):
    """A stored category."""
    model_config = ConfigDict(frozen=True)

    id: int
    name: str = Field(..., description="Display name")
    kind: TransactionKind
    icon: str = Field(..., description="Icon identifier token, e.g. 'ShoppingBag'")
    color: str = Field(..., description="Hex RGB color, e.g. '#f87171'")
    is_default: bool = Field(
        default=False,
        description="True for the seeded categories (informational only)"
    )


# =============================================================================
# TRANSACTION MODELS
# =============================================================================

class TransactionInput(BaseModel):
    """
    Input for creating a new transaction (no id, no timestamps).

    amount is in the transaction currency; amount_in_ars is the same
    value converted by the caller with exchange_rate.
    """

    description: str
    amount: float
    amount_in_ars: float
    currency: str
    exchange_rate: Optional[float] = None
    category_id: int
    date: str
    kind: str


# Update uses the same fields and validation as input
TransactionUpdate = TransactionInput


class Transaction(BaseModel):
    """
    A stored transaction.

    Monetary fields are major units; storage keeps them as cents.
    """
    model_config = ConfigDict(frozen=True)

    id: int
    description: str
    amount: float
    amount_in_ars: float
    currency: Currency
    exchange_rate: Optional[float] = None
    category_id: int
    date: str = Field(..., description="Caller-supplied ISO-8601 date, not parsed")
    kind: TransactionKind
    created_at: datetime = Field(..., description="Set once on creation (UTC)")
    updated_at: datetime = Field(..., description="Refreshed on every update (UTC)")

    @property
    def year(self) -> Optional[int]:
        """Year taken from the leading YYYY of the date, if present."""
        head = self.date[:4]
        return int(head) if head.isdigit() else None

    @property
    def month(self) -> Optional[int]:
        """Month taken from the YYYY-MM prefix of the date, if present."""
        head = self.date[5:7]
        return int(head) if head.isdigit() else None


# =============================================================================
# COMMAND RESULTS (what the presentation layer receives)
# =============================================================================

class CommandResult(BaseModel):
    """
    Structured outcome of one exposed operation.

    Failures never surface as exceptions; the presentation layer shows
    error_message directly.
    """

    success: bool
    data: Any = None
    error_code: Optional[ErrorCode] = None
    error_message: Optional[str] = None
    correlation_id: Optional[UUID] = None

    @classmethod
    def ok(cls, data: Any = None, correlation_id: Optional[UUID] = None) -> "CommandResult":
        return cls(success=True, data=data, correlation_id=correlation_id)

    @classmethod
    def fail(cls, error: GastosError, correlation_id: Optional[UUID] = None) -> "CommandResult":
        return cls(
            success=False,
            error_code=error.code,
            error_message=error.message,
            correlation_id=correlation_id,
        )
