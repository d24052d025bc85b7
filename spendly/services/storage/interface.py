"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for ledger storage.
This allows us to:
1. Use in-memory storage for testing
2. Back the ledger with a JSON file on device
3. Keep the analytics decoupled from persistence

The interface is intentionally simple - we're not building an ORM.
Just the operations the ledger screens need.

STORE INVARIANTS:
- Deleting a category clears it from every expense, never deletes them
- At most one Budget exists; writes upsert it
- list_expenses() returns newest first
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional
from uuid import UUID

from spendly.models.ledger import (
    Budget,
    Category,
    Expense,
    LedgerSnapshot,
)


class LedgerStorageInterface(ABC):
    """
    Abstract interface for ledger storage operations.

    Any storage implementation must implement these methods.
    """

    # -- Expenses ------------------------------------------------------------

    @abstractmethod
    def add_expense(self, expense: Expense) -> Expense:
        """
        Insert a new expense.

        Returns:
            The stored expense, with its category resolved from the store

        Raises:
            DuplicateError: An expense with this id exists
            NotFoundError: The expense references an unknown category
        """
        pass

    @abstractmethod
    def get_expense(self, expense_id: UUID) -> Optional[Expense]:
        """Retrieve an expense by ID, or None."""
        pass

    @abstractmethod
    def update_expense(self, expense: Expense) -> Expense:
        """
        Replace an existing expense (matched by id).

        Raises:
            NotFoundError: The expense or its category doesn't exist
        """
        pass

    @abstractmethod
    def delete_expense(self, expense_id: UUID) -> None:
        """
        Permanently delete one expense.

        Raises:
            NotFoundError: The expense doesn't exist
        """
        pass

    @abstractmethod
    def delete_expenses(self, expense_ids: Iterable[UUID]) -> int:
        """
        Permanently delete several expenses at once.

        Unknown ids are ignored.

        Returns:
            Number of expenses deleted
        """
        pass

    @abstractmethod
    def list_expenses(self) -> list[Expense]:
        """All expenses, newest first."""
        pass

    # -- Categories ----------------------------------------------------------

    @abstractmethod
    def add_category(self, category: Category) -> Category:
        """
        Insert a new category.

        Raises:
            DuplicateError: A category with this id exists
        """
        pass

    @abstractmethod
    def get_category(self, category_id: UUID) -> Optional[Category]:
        """Retrieve a category by ID, or None."""
        pass

    @abstractmethod
    def delete_category(self, category_id: UUID) -> int:
        """
        Delete a category and uncategorize its expenses.

        Returns:
            Number of expenses that became uncategorized

        Raises:
            NotFoundError: The category doesn't exist
        """
        pass

    @abstractmethod
    def list_categories(self) -> list[Category]:
        """All categories in creation order."""
        pass

    # -- Budget --------------------------------------------------------------

    @abstractmethod
    def get_budget(self) -> Optional[Budget]:
        """The single budget record, or None if never set."""
        pass

    @abstractmethod
    def upsert_budget(self, budget: Budget) -> Budget:
        """
        Store the budget, replacing any existing record.

        The stored record keeps the id of the existing one, if any.
        """
        pass

    # -- Reads ---------------------------------------------------------------

    def snapshot(self) -> LedgerSnapshot:
        """Read-only view of the whole ledger for the analytics layer."""
        return LedgerSnapshot(
            expenses=self.list_expenses(),
            categories=self.list_categories(),
            budget=self.get_budget(),
        )


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass
