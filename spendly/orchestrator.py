"""
Main Orchestrator for Spendly

This module ties together all the components and defines the
entry points the screens call:
1. Ledger edits (validate → write → log)
2. Reports (snapshot → filter → aggregate → evaluate)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing reaches the store without passing validation
- Reports are recomputed from a fresh snapshot on every call
- Every mutation and every rejection is logged
"""

from datetime import datetime
from typing import Any, Iterable, Optional, Union
from uuid import UUID

from spendly.activity import ActivityLogger, configure_logging
from spendly.analytics import (
    category_breakdown,
    evaluate_budget,
    filter_by_category,
    filter_by_period,
    filter_expenses,
    newest_first,
    period_start,
    recent_expenses,
    search_predicate,
    summarize,
    time_buckets,
)
from spendly.config import LedgerSettings, Settings, get_settings
from spendly.formatting import budget_status_message
from spendly.models.ledger import (
    Budget,
    BudgetReport,
    Category,
    CategoryColor,
    Currency,
    DashboardReport,
    Expense,
    Period,
    WalletReport,
    local_naive,
)
from spendly.services.storage import (
    InMemoryLedgerStorage,
    JsonFileLedgerStorage,
    LedgerStorageInterface,
    NotFoundError,
    StorageError,
)
from spendly.validation import LedgerInputValidator, ValidationError


DEFAULT_CATEGORIES: list[tuple[str, CategoryColor]] = [
    ("Food", CategoryColor.ORANGE),
    ("Transport", CategoryColor.BLUE),
    ("Shopping", CategoryColor.GREEN),
    ("Home", CategoryColor.PURPLE),
    ("Health", CategoryColor.RED),
    ("Entertainment", CategoryColor.PINK),
    ("Other", CategoryColor.GRAY),
]


class LedgerService:
    """
    Entry points for editing the ledger and reading its reports.

    Flow for every edit:
    1. Validate raw input → ValidationError, nothing written
    2. Resolve references → NotFoundError, nothing written
    3. Write to storage → StorageError, store unchanged
    4. Log the activity
    """

    def __init__(
        self,
        storage: Optional[LedgerStorageInterface] = None,
        settings: Optional[LedgerSettings] = None,
        validator: Optional[LedgerInputValidator] = None,
        activity_logger: Optional[ActivityLogger] = None,
        currency: Optional[Union[Currency, str]] = None,
    ):
        self._storage = storage or InMemoryLedgerStorage()
        self._settings = settings or get_settings().ledger
        self._currency = (
            Currency.from_code(currency)
            or get_settings().display.preferred_currency
        )
        self._validator = validator or LedgerInputValidator()
        self._activity = activity_logger or ActivityLogger()

    @property
    def storage(self) -> LedgerStorageInterface:
        return self._storage

    @property
    def currency(self) -> Currency:
        """Display currency; set from settings and replaced by onboarding."""
        return self._currency

    # -- Internal helpers ----------------------------------------------------

    def _validated(self, operation: str, check):
        """Run a validation check, logging the rejection before re-raising."""
        try:
            return check()
        except ValidationError as e:
            self._activity.log_validation_failed(operation, e.to_dicts())
            raise

    def _write(self, operation: str, action):
        """Run a storage write, logging a failure before re-raising."""
        try:
            return action()
        except StorageError as e:
            self._activity.log_storage_error(operation, str(e))
            raise

    def _resolve_category(self, category_id: Optional[UUID]) -> Optional[Category]:
        if category_id is None:
            return None
        category = self._storage.get_category(category_id)
        if category is None:
            raise NotFoundError(f"Category not found: {category_id}")
        return category

    # -- Expenses ------------------------------------------------------------

    def add_expense(
        self,
        amount: Any,
        description: Optional[str],
        category_id: Optional[UUID] = None,
        date: Optional[datetime] = None,
    ) -> Expense:
        """
        Record a new expense.

        Args:
            amount: Positive amount as Decimal, number or text ("45,50" allowed)
            description: Required label
            category_id: Category to file it under, or None
            date: When it happened; defaults to now

        Raises:
            ValidationError: Bad amount or empty description
            NotFoundError: Unknown category
        """
        value, text = self._validated(
            "add_expense",
            lambda: self._validator.validate_expense(amount, description),
        )
        category = self._resolve_category(category_id)

        expense = Expense(
            amount=value,
            description=text,
            category=category,
            date=date or datetime.now(),
        )
        stored = self._write("add_expense", lambda: self._storage.add_expense(expense))

        self._activity.log_expense_added(
            expense_id=stored.id,
            amount=stored.amount,
            description=stored.description,
            category_name=category.name if category else None,
        )
        return stored

    def edit_expense(
        self,
        expense_id: UUID,
        amount: Any,
        description: Optional[str],
        category_id: Optional[UUID] = None,
        date: Optional[datetime] = None,
    ) -> Expense:
        """
        Replace an expense's amount, description, category and date.

        A None date keeps the current one; a None category makes the
        expense uncategorized.

        Raises:
            ValidationError: Bad amount or empty description
            NotFoundError: Unknown expense or category
        """
        value, text = self._validated(
            "edit_expense",
            lambda: self._validator.validate_expense(amount, description),
        )
        current = self._storage.get_expense(expense_id)
        if current is None:
            raise NotFoundError(f"Expense not found: {expense_id}")
        category = self._resolve_category(category_id)

        updated = current.model_copy(update={
            "amount": value,
            "description": text,
            "category": category,
            "date": local_naive(date) if date else current.date,
        })
        stored = self._write("edit_expense", lambda: self._storage.update_expense(updated))

        self._activity.log_expense_updated(
            expense_id=stored.id,
            amount=stored.amount,
            category_name=category.name if category else None,
        )
        return stored

    def delete_expense(self, expense_id: UUID) -> None:
        """Permanently delete one expense."""
        self._write("delete_expense", lambda: self._storage.delete_expense(expense_id))
        self._activity.log_expenses_deleted([expense_id])

    def delete_expenses(self, expense_ids: Iterable[UUID]) -> int:
        """Permanently delete a batch of expenses; returns how many existed."""
        ids = list(expense_ids)
        deleted = self._write("delete_expenses", lambda: self._storage.delete_expenses(ids))
        if deleted:
            self._activity.log_expenses_deleted(ids)
        return deleted

    # -- Categories ----------------------------------------------------------

    def add_category(
        self,
        name: Optional[str],
        color: Union[CategoryColor, str] = CategoryColor.BLUE,
    ) -> Category:
        """
        Create a category.

        Raises:
            ValidationError: Empty name
        """
        text = self._validated(
            "add_category",
            lambda: self._validator.validate_category_name(name),
        )
        category = Category(name=text, color=color)
        stored = self._write("add_category", lambda: self._storage.add_category(category))

        self._activity.log_category_added(
            category_id=stored.id,
            name=stored.name,
            color=stored.color.value,
        )
        return stored

    def delete_category(self, category_id: UUID) -> int:
        """
        Delete a category; its expenses become uncategorized.

        Returns:
            Number of expenses that lost their category
        """
        category = self._resolve_category(category_id)
        cleared = self._write(
            "delete_category",
            lambda: self._storage.delete_category(category_id),
        )
        self._activity.log_category_deleted(
            category_id=category_id,
            name=category.name,
            uncategorized_count=cleared,
        )
        return cleared

    # -- Budget --------------------------------------------------------------

    def set_balance(self, amount: Any) -> Budget:
        """
        Set the total balance, creating the budget on first use.

        Raises:
            ValidationError: Amount not a positive number; budget unchanged
        """
        value = self._validated(
            "set_balance",
            lambda: self._validator.validate_balance(amount),
        )
        existing = self._storage.get_budget()

        if existing is not None:
            budget = existing.model_copy(update={
                "total_amount": value,
                "last_updated": datetime.now(),
            })
        else:
            budget = Budget(total_amount=value)
        stored = self._write("set_balance", lambda: self._storage.upsert_budget(budget))

        self._activity.log_balance_set(
            budget_id=stored.id,
            total_amount=stored.total_amount,
            previous_amount=existing.total_amount if existing else None,
        )
        return stored

    # -- Onboarding ----------------------------------------------------------

    def needs_onboarding(self) -> bool:
        """First launch is detected by an empty category list."""
        return not self._storage.list_categories()

    def complete_onboarding(
        self,
        currency: Optional[Union[Currency, str]] = Currency.MXN,
    ) -> Currency:
        """
        Seed the default categories and resolve the chosen currency.

        Seeding only happens while the store has no categories, so
        running onboarding twice never duplicates them.

        Returns:
            The chosen currency (USD when the code is unknown), which also
            becomes the service's display currency
        """
        resolved = Currency.from_code(currency) or Currency.USD
        created = 0

        if self.needs_onboarding():
            for name, color in DEFAULT_CATEGORIES:
                category = Category(name=name, color=color)
                self._write(
                    "complete_onboarding",
                    lambda: self._storage.add_category(category),
                )
                created += 1

        self._activity.log_onboarding_completed(
            currency=resolved.value,
            categories_created=created,
        )
        self._currency = resolved
        return resolved

    # -- Reports -------------------------------------------------------------

    def budget_report(self) -> BudgetReport:
        """Balance status over the whole ledger."""
        snapshot = self._storage.snapshot()
        return evaluate_budget(
            snapshot.budget,
            snapshot.expenses,
            near_limit_threshold=self._settings.near_limit_threshold,
            unset_policy=self._settings.unset_budget_policy,
        )

    def status_message(self) -> str:
        """The balance status line in the display currency."""
        return budget_status_message(self.budget_report(), self._currency)

    def dashboard(
        self,
        period: Union[Period, str] = Period.MONTH,
        now: Optional[datetime] = None,
    ) -> DashboardReport:
        """
        Everything the dashboard shows for one rolling period.

        Args:
            period: Week, month or year
            now: The instant the period ends at; defaults to now
        """
        period = Period(period)
        now = local_naive(now) if now else datetime.now()
        snapshot = self._storage.snapshot()
        expenses = filter_by_period(snapshot.expenses, period, now)

        return DashboardReport(
            period=period,
            period_start=period_start(period, now),
            generated_at=now,
            summary=summarize(expenses),
            category_breakdown=category_breakdown(expenses),
            time_buckets=time_buckets(expenses, period),
            recent=recent_expenses(expenses, self._settings.recent_transactions_limit),
        )

    def wallet(self, category_id: Optional[UUID] = None) -> WalletReport:
        """
        Balance status plus the expenses of one category (or all).

        The balance is always evaluated over the whole ledger, whatever
        category is selected.

        Raises:
            NotFoundError: Unknown category
        """
        selected = self._resolve_category(category_id)
        snapshot = self._storage.snapshot()
        expenses = newest_first(filter_by_category(snapshot.expenses, selected))

        return WalletReport(
            budget=evaluate_budget(
                snapshot.budget,
                snapshot.expenses,
                near_limit_threshold=self._settings.near_limit_threshold,
                unset_policy=self._settings.unset_budget_policy,
            ),
            categories=snapshot.categories,
            selected_category=selected,
            summary=summarize(expenses),
            expenses=expenses,
        )

    def search(
        self,
        query: Optional[str] = None,
        category_id: Optional[UUID] = None,
        period: Optional[Union[Period, str]] = None,
        now: Optional[datetime] = None,
    ) -> list[Expense]:
        """
        The ledger list: text search and category selection, newest first.

        A period narrows the list further when given.

        Raises:
            NotFoundError: Unknown category
        """
        selected = self._resolve_category(category_id)
        expenses = self._storage.list_expenses()
        if period is not None:
            expenses = filter_by_period(
                expenses,
                Period(period),
                local_naive(now) if now else datetime.now(),
            )
        return newest_first(filter_expenses(expenses, search_predicate(query, selected)))


def create_app_components(
    settings: Optional[Settings] = None,
) -> LedgerService:
    """
    Factory function to create the ledger service from settings.

    Uses the JSON file store when a data file is configured, otherwise
    an in-memory ledger.
    """
    settings = settings or get_settings()
    ledger_settings = settings.ledger
    configure_logging(settings.app.log_level)

    if ledger_settings.data_file is not None:
        storage: LedgerStorageInterface = JsonFileLedgerStorage(ledger_settings.data_file)
    else:
        storage = InMemoryLedgerStorage()

    return LedgerService(
        storage=storage,
        settings=ledger_settings,
        activity_logger=ActivityLogger(),
        currency=settings.display.preferred_currency,
    )
