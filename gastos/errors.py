"""
Error taxonomy for Gastos.

Repositories and validators raise these exceptions. The command layer
(gastos.orchestrator) catches them at the process boundary and turns them
into structured CommandResult failures, so none of them ever escapes to the
presentation layer as an unhandled exception.
"""

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Machine-readable failure category shown alongside the message."""
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    STORAGE = "storage"


class GastosError(Exception):
    """Base exception for every expected failure of a Gastos operation."""

    code: ErrorCode = ErrorCode.STORAGE

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(GastosError):
    """Malformed or out-of-range input, detected before any storage access."""

    code = ErrorCode.VALIDATION

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class NotFoundError(GastosError):
    """The targeted id has no matching row."""

    code = ErrorCode.NOT_FOUND

    def __init__(self, entity: str, entity_id: int):
        super().__init__(f"{entity.capitalize()} with id {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(GastosError):
    """The operation would break a business rule on live data."""

    code = ErrorCode.CONFLICT


class CategoryInUseError(ConflictError):
    """A category cannot be deleted while transactions reference it."""

    def __init__(self, category_id: int, transaction_count: int):
        super().__init__(
            f"Cannot delete category {category_id}: it has "
            f"{transaction_count} associated transaction(s)"
        )
        self.category_id = category_id
        self.transaction_count = transaction_count


class UnknownCategoryError(ConflictError):
    """A transaction references a category that does not exist."""

    def __init__(self, category_id: int):
        super().__init__(f"Category with id {category_id} does not exist")
        self.category_id = category_id


class StorageError(GastosError):
    """Underlying SQLite failure (I/O, corruption, unclassified constraint)."""

    code = ErrorCode.STORAGE
