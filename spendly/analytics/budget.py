"""
Budget Status Evaluator

Compares cumulative spend over the whole ledger against the balance.
The evaluator is a pure read: it never creates or edits the Budget.
"""

from decimal import Decimal
from typing import Iterable, Optional, Union

from spendly.analytics.aggregator import total_amount
from spendly.models.ledger import (
    Budget,
    BudgetReport,
    BudgetStatus,
    Expense,
    UnsetBudgetPolicy,
)


DEFAULT_NEAR_LIMIT_THRESHOLD = Decimal("0.80")


def spent_percentage(total_balance: Decimal, total_spent: Decimal) -> Decimal:
    """Spend as a fraction of the balance, 0 without a balance, capped at 1."""
    if total_balance <= 0:
        return Decimal("0")
    return min(total_spent / total_balance, Decimal("1"))


def classify(
    total_balance: Decimal,
    total_spent: Decimal,
    near_limit_threshold: Decimal = DEFAULT_NEAR_LIMIT_THRESHOLD,
    unset_policy: UnsetBudgetPolicy = UnsetBudgetPolicy.TREAT_AS_ZERO,
) -> BudgetStatus:
    """
    Classify spend against the balance.

    OVER_LIMIT wins over NEAR_LIMIT. With TREAT_AS_ZERO a missing balance
    is a balance of 0, so any positive spend is OVER_LIMIT.
    """
    if total_balance <= 0 and unset_policy == UnsetBudgetPolicy.REPORT_UNSET:
        return BudgetStatus.UNSET
    if total_balance - total_spent < 0:
        return BudgetStatus.OVER_LIMIT
    if spent_percentage(total_balance, total_spent) >= near_limit_threshold:
        return BudgetStatus.NEAR_LIMIT
    return BudgetStatus.NORMAL


def evaluate_budget(
    budget: Optional[Budget],
    expenses: Iterable[Expense],
    near_limit_threshold: Union[Decimal, float] = DEFAULT_NEAR_LIMIT_THRESHOLD,
    unset_policy: UnsetBudgetPolicy = UnsetBudgetPolicy.TREAT_AS_ZERO,
) -> BudgetReport:
    """
    Build the balance report.

    Args:
        budget: The balance record, or None when never set
        expenses: The ENTIRE ledger; never a period-filtered subset
        near_limit_threshold: Spent fraction that counts as near the limit
        unset_policy: How to classify a ledger with no positive balance

    Returns:
        BudgetReport with remaining funds, clamped percentage and status
    """
    threshold = Decimal(str(near_limit_threshold))
    total_balance = budget.total_amount if budget else Decimal("0")
    total_spent = total_amount(expenses)

    return BudgetReport(
        total_balance=total_balance,
        total_spent=total_spent,
        remaining=total_balance - total_spent,
        spent_percentage=spent_percentage(total_balance, total_spent),
        status=classify(total_balance, total_spent, threshold, unset_policy),
    )
