"""
Storage Services Package

Provides abstract repository interfaces and the SQLite implementation.
"""

from gastos.services.storage.interface import (
    CategoryRepositoryInterface,
    TransactionRepositoryInterface,
)
from gastos.services.storage.database import DEFAULT_CATEGORIES, Database
from gastos.services.storage.categories import SQLiteCategoryRepository
from gastos.services.storage.transactions import SQLiteTransactionRepository

__all__ = [
    # Interfaces
    "CategoryRepositoryInterface",
    "TransactionRepositoryInterface",
    # SQLite implementation
    "DEFAULT_CATEGORIES",
    "Database",
    "SQLiteCategoryRepository",
    "SQLiteTransactionRepository",
]
