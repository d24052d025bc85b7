"""Ledger analytics package: filters, aggregation and budget status."""

from spendly.analytics.aggregator import (
    UNCATEGORIZED_NAME,
    bucket_label,
    category_breakdown,
    largest_expense,
    newest_first,
    recent_expenses,
    summarize,
    time_buckets,
    total_amount,
)
from spendly.analytics.budget import (
    DEFAULT_NEAR_LIMIT_THRESHOLD,
    classify,
    evaluate_budget,
    spent_percentage,
)
from spendly.analytics.filters import (
    ExpensePredicate,
    filter_by_category,
    filter_by_period,
    filter_expenses,
    period_start,
    search_predicate,
)

__all__ = [
    # Aggregation
    "UNCATEGORIZED_NAME",
    "bucket_label",
    "category_breakdown",
    "largest_expense",
    "newest_first",
    "recent_expenses",
    "summarize",
    "time_buckets",
    "total_amount",
    # Budget status
    "DEFAULT_NEAR_LIMIT_THRESHOLD",
    "classify",
    "evaluate_budget",
    "spent_percentage",
    # Filters
    "ExpensePredicate",
    "filter_by_category",
    "filter_by_period",
    "filter_expenses",
    "period_start",
    "search_predicate",
]
