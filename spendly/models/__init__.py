"""
Data Models Package

This package contains all Pydantic models used by the Spendly ledger engine.
Everything the store holds and everything the analytics return is one of these.
"""

from spendly.models.ledger import (
    DEFAULT_CURRENCY_SYMBOL,
    Budget,
    BudgetReport,
    BudgetStatus,
    Category,
    CategoryColor,
    CategoryIcon,
    CategoryTotal,
    Currency,
    DashboardReport,
    Expense,
    ExpenseSummary,
    LedgerSnapshot,
    Period,
    TimeBucket,
    UnsetBudgetPolicy,
    ValidationIssue,
    WalletReport,
    local_naive,
)
from spendly.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
)

__all__ = [
    # Ledger models
    "DEFAULT_CURRENCY_SYMBOL",
    "Budget",
    "BudgetReport",
    "BudgetStatus",
    "Category",
    "CategoryColor",
    "CategoryIcon",
    "CategoryTotal",
    "Currency",
    "DashboardReport",
    "Expense",
    "ExpenseSummary",
    "LedgerSnapshot",
    "Period",
    "TimeBucket",
    "UnsetBudgetPolicy",
    "ValidationIssue",
    "WalletReport",
    "local_naive",
    # Activity models
    "ActivityEvent",
    "ActivityEventBuilder",
    "ActivityEventType",
    "ActivitySeverity",
]
