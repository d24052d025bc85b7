"""
Display Formatting

The numeric outputs of the ledger engine are currency-agnostic. This
module is where a currency, passed in explicitly, turns them into text.
"""

from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal
from typing import Optional, Union

from spendly.models.ledger import (
    DEFAULT_CURRENCY_SYMBOL,
    BudgetReport,
    BudgetStatus,
    Currency,
)


def currency_symbol(currency: Optional[Union[Currency, str]]) -> str:
    """Symbol for a currency or code; unknown codes fall back to "$"."""
    resolved = Currency.from_code(currency)
    return resolved.symbol if resolved else DEFAULT_CURRENCY_SYMBOL


def format_amount(
    amount: Decimal,
    currency: Optional[Union[Currency, str]] = Currency.USD,
) -> str:
    """
    Render an amount with its symbol and two decimals.

    Negative amounts keep the sign ahead of the symbol: "-$200.00".
    """
    quantized = Decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if quantized < 0 else ""
    return f"{sign}{currency_symbol(currency)}{abs(quantized):,.2f}"


def format_percentage(fraction: Decimal) -> str:
    """Whole percentage, truncated: 0.857 reads "85%"."""
    whole = (Decimal(fraction) * 100).quantize(Decimal("1"), rounding=ROUND_DOWN)
    return f"{whole}%"


def budget_status_message(
    report: BudgetReport,
    currency: Optional[Union[Currency, str]] = Currency.USD,
) -> str:
    """Short line describing the balance status for the wallet card."""
    if report.status == BudgetStatus.UNSET:
        return "Set a balance to track your spending"
    if report.status == BudgetStatus.OVER_LIMIT:
        return f"Over budget by {format_amount(-report.remaining, currency)}"
    if report.status == BudgetStatus.NEAR_LIMIT:
        return (
            f"{format_percentage(report.spent_percentage)} of your balance used, "
            f"{format_amount(report.remaining, currency)} left"
        )
    return f"{format_amount(report.remaining, currency)} remaining"
