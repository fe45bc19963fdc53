"""
Abstract Storage Interface

Repositories for categories and transactions. Business logic (the command
layer and reports) talks to these interfaces only, so the SQLite
implementation can be replaced by another engine or an in-memory fake.

The interface is intentionally small - just the operations the
presentation layer needs.
"""

from abc import ABC, abstractmethod
from typing import Optional

from gastos.models.finance import (
    Category,
    CategoryInput,
    CategoryUpdate,
    Transaction,
    TransactionInput,
    TransactionUpdate,
)


class CategoryRepositoryInterface(ABC):
    """
    Abstract interface for category storage operations.
    """

    @abstractmethod
    def list(self) -> list[Category]:
        """
        List all categories, ordered by id ascending.
        """
        pass

    @abstractmethod
    def get(self, category_id: int) -> Optional[Category]:
        """
        Retrieve a category by id.

        Returns:
            The category if found, None otherwise
        """
        pass

    @abstractmethod
    def add(self, data: CategoryInput) -> Category:
        """
        Create a user category (is_default is always False).

        Returns:
            The created category including its generated id

        Raises:
            ValidationError: If the input is malformed
            StorageError: If the insert fails
        """
        pass

    @abstractmethod
    def update(self, category_id: int, data: CategoryUpdate) -> Category:
        """
        Update name, kind, icon and color of a category.

        Returns:
            The stored category after the update

        Raises:
            ValidationError: If the input is malformed
            NotFoundError: If no category has this id
        """
        pass

    @abstractmethod
    def delete(self, category_id: int) -> None:
        """
        Delete a category that no transaction references.

        Raises:
            CategoryInUseError: If transactions still reference it
            NotFoundError: If no category has this id
        """
        pass


class TransactionRepositoryInterface(ABC):
    """
    Abstract interface for transaction storage operations.
    """

    @abstractmethod
    def list(self) -> list[Transaction]:
        """
        List all transactions, newest date first, id descending within a date.
        """
        pass

    @abstractmethod
    def get(self, transaction_id: int) -> Optional[Transaction]:
        """
        Retrieve a transaction by id.

        Returns:
            The transaction if found, None otherwise
        """
        pass

    @abstractmethod
    def count_for_category(self, category_id: int) -> int:
        """
        Count transactions that reference a category.
        """
        pass

    @abstractmethod
    def add(self, data: TransactionInput) -> Transaction:
        """
        Create a transaction.

        Returns:
            The created transaction with the caller's amounts, new id and timestamps

        Raises:
            ValidationError: If the input is malformed
            UnknownCategoryError: If category_id does not exist
        """
        pass

    @abstractmethod
    def update(self, transaction_id: int, data: TransactionUpdate) -> Transaction:
        """
        Replace every mutable field of a transaction.

        created_at is preserved from storage; updated_at is refreshed.

        Raises:
            ValidationError: If the input is malformed
            UnknownCategoryError: If category_id does not exist
            NotFoundError: If no transaction has this id
        """
        pass

    @abstractmethod
    def delete(self, transaction_id: int) -> None:
        """
        Delete a transaction.

        Raises:
            NotFoundError: If no transaction has this id
        """
        pass
