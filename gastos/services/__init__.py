"""Services package."""

from gastos.services.storage import (
    CategoryRepositoryInterface,
    Database,
    SQLiteCategoryRepository,
    SQLiteTransactionRepository,
    TransactionRepositoryInterface,
)

__all__ = [
    "CategoryRepositoryInterface",
    "Database",
    "SQLiteCategoryRepository",
    "SQLiteTransactionRepository",
    "TransactionRepositoryInterface",
]
