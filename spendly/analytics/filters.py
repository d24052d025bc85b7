"""
Expense Filters

Two independent, composable stages:
- Period filter: keeps expenses inside a rolling window ending "now"
- Search predicate: free-text match combined with a category selection

Both take and return plain lists, so either can run first.
"""

import calendar
from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional

from spendly.models.ledger import Category, Expense, Period


ExpensePredicate = Callable[[Expense], bool]


def _shift_months(moment: datetime, months: int) -> datetime:
    """Move a datetime by whole calendar months, clamping the day."""
    month_index = moment.year * 12 + (moment.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def period_start(period: Period, now: datetime) -> datetime:
    """
    Lower bound of the rolling window for a period.

    Week is 7 days; Month and Year are calendar steps, so 31 March minus
    one month lands on the last day of February.
    """
    if period == Period.WEEK:
        return now - timedelta(days=7)
    if period == Period.MONTH:
        return _shift_months(now, -1)
    if period == Period.YEAR:
        return _shift_months(now, -12)
    raise ValueError(f"Unsupported period: {period}")


def filter_by_period(
    expenses: Iterable[Expense],
    period: Period,
    now: datetime,
) -> list[Expense]:
    """
    Keep expenses dated on or after the period start.

    There is no upper bound: future-dated expenses are included.
    """
    start = period_start(period, now)
    return [expense for expense in expenses if expense.date >= start]


def search_predicate(
    query: Optional[str] = None,
    selected_category: Optional[Category] = None,
) -> ExpensePredicate:
    """
    Build the ledger-list inclusion test.

    An expense passes when the query is empty or found (case-insensitively)
    in its description or category name, and when no category is selected
    or the expense belongs to the selected one.
    """
    needle = (query or "").casefold()
    selected_id = selected_category.id if selected_category else None

    def matches(expense: Expense) -> bool:
        if needle:
            in_description = needle in expense.description.casefold()
            in_category = (
                expense.category is not None
                and needle in expense.category.name.casefold()
            )
            if not (in_description or in_category):
                return False
        if selected_id is not None and expense.category_id != selected_id:
            return False
        return True

    return matches


def filter_expenses(
    expenses: Iterable[Expense],
    predicate: ExpensePredicate,
) -> list[Expense]:
    """Apply a predicate, preserving input order."""
    return [expense for expense in expenses if predicate(expense)]


def filter_by_category(
    expenses: Iterable[Expense],
    category: Optional[Category],
) -> list[Expense]:
    """Direct category-equality filter; None keeps everything."""
    if category is None:
        return list(expenses)
    return [expense for expense in expenses if expense.category_id == category.id]
