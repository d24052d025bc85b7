"""
Expense Aggregator

DESIGN DECISION: Aggregation is DETERMINISTIC and order-independent.
Every function sorts its input newest-first (ties broken by id) before
looking at it, so the store's iteration order never leaks into totals,
tie-breaks or chart labels.

Empty input is not an error: it yields zero totals, no largest expense
and empty breakdowns.
"""

from decimal import Decimal
from typing import Iterable, Optional
from uuid import UUID

from spendly.models.ledger import (
    CategoryColor,
    CategoryTotal,
    Expense,
    ExpenseSummary,
    Period,
    TimeBucket,
)


UNCATEGORIZED_NAME = "Other"
UNCATEGORIZED_COLOR = CategoryColor.GRAY


def newest_first(expenses: Iterable[Expense]) -> list[Expense]:
    """Sort by date descending; same-instant expenses order by id."""
    return sorted(expenses, key=lambda e: (e.date, e.id), reverse=True)


def total_amount(expenses: Iterable[Expense]) -> Decimal:
    return sum((expense.amount for expense in expenses), Decimal("0"))


def largest_expense(expenses: Iterable[Expense]) -> Optional[Expense]:
    """
    The expense with the highest amount.

    Ties resolve to the most recent of the tied expenses.
    """
    ordered = newest_first(expenses)
    if not ordered:
        return None
    return max(ordered, key=lambda e: e.amount)


def summarize(expenses: Iterable[Expense]) -> ExpenseSummary:
    """Total, count, average and largest over an expense set."""
    ordered = newest_first(expenses)
    count = len(ordered)
    total = total_amount(ordered)
    return ExpenseSummary(
        total=total,
        count=count,
        average=total / count if count else Decimal("0"),
        largest=largest_expense(ordered),
    )


def category_breakdown(expenses: Iterable[Expense]) -> list[CategoryTotal]:
    """
    Sum amounts per category, largest total first.

    Each row also carries its share of the set's total.

    Uncategorized expenses share one synthetic "Other" row. Rows with
    equal totals keep the order in which their category was first seen
    newest-first.
    """
    groups: dict[Optional[UUID], CategoryTotal] = {}

    for expense in newest_first(expenses):
        key = expense.category_id
        row = groups.get(key)
        if row is None:
            if expense.category is None:
                row = CategoryTotal(
                    category_id=None,
                    name=UNCATEGORIZED_NAME,
                    color=UNCATEGORIZED_COLOR,
                    total=Decimal("0"),
                )
            else:
                row = CategoryTotal(
                    category_id=expense.category.id,
                    name=expense.category.name,
                    color=expense.category.color,
                    total=Decimal("0"),
                )
            groups[key] = row
        row.total += expense.amount

    grand_total = sum((row.total for row in groups.values()), Decimal("0"))
    for row in groups.values():
        row.share = row.total / grand_total if grand_total > 0 else Decimal("0")

    return sorted(groups.values(), key=lambda row: row.total, reverse=True)


def bucket_label(expense: Expense, period: Period) -> str:
    """
    Chart label for an expense at the period's granularity.

    Week → weekday ("Mon"), Month → day and month ("5 Feb"),
    Year → month ("Feb").
    """
    moment = expense.date
    if period == Period.WEEK:
        return moment.strftime("%a")
    if period == Period.MONTH:
        return f"{moment.day} {moment.strftime('%b')}"
    if period == Period.YEAR:
        return moment.strftime("%b")
    raise ValueError(f"Unsupported period: {period}")


def time_buckets(
    expenses: Iterable[Expense],
    period: Period,
) -> list[TimeBucket]:
    """
    Sum amounts per chart label.

    Labels appear in first-seen order over the newest-first sequence.
    They are never alphabetized: "Mon" after "Tue" is correct when Tuesday
    was the more recent day.
    """
    totals: dict[str, Decimal] = {}
    for expense in newest_first(expenses):
        label = bucket_label(expense, period)
        totals[label] = totals.get(label, Decimal("0")) + expense.amount
    return [TimeBucket(label=label, total=total) for label, total in totals.items()]


def recent_expenses(expenses: Iterable[Expense], limit: int) -> list[Expense]:
    """The newest `limit` expenses."""
    if limit <= 0:
        return []
    return newest_first(expenses)[:limit]
