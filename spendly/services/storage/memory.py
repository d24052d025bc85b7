"""
In-Memory Ledger Storage

The reference store: plain dicts plus an explicit index from category id
to the ids of the expenses that point at it. The index is what makes the
delete-category cascade a direct lookup instead of a scan.

Models are copied on the way in and out, so callers can never mutate
stored state behind the store's back.
"""

from typing import Iterable, Optional
from uuid import UUID

from spendly.analytics.aggregator import newest_first
from spendly.models.ledger import Budget, Category, Expense
from spendly.services.storage.interface import (
    DuplicateError,
    LedgerStorageInterface,
    NotFoundError,
)


class InMemoryLedgerStorage(LedgerStorageInterface):
    """Dict-backed ledger for a single writer."""

    def __init__(self):
        self._expenses: dict[UUID, Expense] = {}
        self._categories: dict[UUID, Category] = {}
        self._expenses_by_category: dict[UUID, set[UUID]] = {}
        self._budget: Optional[Budget] = None

    # -- Index helpers -------------------------------------------------------

    def _resolve(self, expense: Expense) -> Expense:
        """Swap the expense's category for the stored one."""
        if expense.category is None:
            return expense.model_copy(deep=True)
        stored = self._categories.get(expense.category.id)
        if stored is None:
            raise NotFoundError(f"Category not found: {expense.category.id}")
        return expense.model_copy(update={"category": stored.model_copy()}, deep=True)

    def _index(self, expense: Expense) -> None:
        if expense.category_id is not None:
            self._expenses_by_category.setdefault(expense.category_id, set()).add(expense.id)

    def _unindex(self, expense: Expense) -> None:
        if expense.category_id is not None:
            self._expenses_by_category.get(expense.category_id, set()).discard(expense.id)

    # -- Expenses ------------------------------------------------------------

    def add_expense(self, expense: Expense) -> Expense:
        if expense.id in self._expenses:
            raise DuplicateError(f"Expense already exists: {expense.id}")
        stored = self._resolve(expense)
        self._expenses[stored.id] = stored
        self._index(stored)
        return stored.model_copy(deep=True)

    def get_expense(self, expense_id: UUID) -> Optional[Expense]:
        expense = self._expenses.get(expense_id)
        return expense.model_copy(deep=True) if expense else None

    def update_expense(self, expense: Expense) -> Expense:
        current = self._expenses.get(expense.id)
        if current is None:
            raise NotFoundError(f"Expense not found: {expense.id}")
        stored = self._resolve(expense)
        self._unindex(current)
        self._expenses[stored.id] = stored
        self._index(stored)
        return stored.model_copy(deep=True)

    def delete_expense(self, expense_id: UUID) -> None:
        expense = self._expenses.pop(expense_id, None)
        if expense is None:
            raise NotFoundError(f"Expense not found: {expense_id}")
        self._unindex(expense)

    def delete_expenses(self, expense_ids: Iterable[UUID]) -> int:
        deleted = 0
        for expense_id in set(expense_ids):
            expense = self._expenses.pop(expense_id, None)
            if expense is not None:
                self._unindex(expense)
                deleted += 1
        return deleted

    def list_expenses(self) -> list[Expense]:
        return [e.model_copy(deep=True) for e in newest_first(self._expenses.values())]

    # -- Categories ----------------------------------------------------------

    def add_category(self, category: Category) -> Category:
        if category.id in self._categories:
            raise DuplicateError(f"Category already exists: {category.id}")
        self._categories[category.id] = category.model_copy()
        return category.model_copy()

    def get_category(self, category_id: UUID) -> Optional[Category]:
        category = self._categories.get(category_id)
        return category.model_copy() if category else None

    def delete_category(self, category_id: UUID) -> int:
        if category_id not in self._categories:
            raise NotFoundError(f"Category not found: {category_id}")

        expense_ids = self._expenses_by_category.pop(category_id, set())
        for expense_id in expense_ids:
            expense = self._expenses[expense_id]
            self._expenses[expense_id] = expense.model_copy(update={"category": None})

        del self._categories[category_id]
        return len(expense_ids)

    def list_categories(self) -> list[Category]:
        return [c.model_copy() for c in self._categories.values()]

    # -- Budget --------------------------------------------------------------

    def get_budget(self) -> Optional[Budget]:
        return self._budget.model_copy() if self._budget else None

    def upsert_budget(self, budget: Budget) -> Budget:
        if self._budget is not None:
            budget = budget.model_copy(update={"id": self._budget.id})
        self._budget = budget.model_copy()
        return budget.model_copy()
