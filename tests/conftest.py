"""Shared fixtures for the Spendly test suite."""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from spendly.config import LedgerSettings
from spendly.models.ledger import (
    Category,
    CategoryColor,
    Expense,
    UnsetBudgetPolicy,
)
from spendly.orchestrator import LedgerService
from spendly.services.storage import InMemoryLedgerStorage


# A Tuesday; one month earlier clamps to 28 February.
NOW = datetime(2026, 3, 31, 12, 0, 0)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def food() -> Category:
    return Category(name="Food", color=CategoryColor.ORANGE)


@pytest.fixture
def transport() -> Category:
    return Category(name="Transport", color=CategoryColor.TEAL)


@pytest.fixture
def scenario_expenses(food, transport) -> list[Expense]:
    """Lunch, Coffee and Uber from the reference scenario."""
    return [
        Expense(
            amount=Decimal("45.50"),
            description="Lunch",
            category=food,
            date=NOW - timedelta(hours=3),
        ),
        Expense(
            amount=Decimal("32.00"),
            description="Coffee",
            category=food,
            date=NOW - timedelta(hours=2),
        ),
        Expense(
            amount=Decimal("120.00"),
            description="Uber",
            category=transport,
            date=NOW - timedelta(hours=1),
        ),
    ]


@pytest.fixture
def ledger_settings() -> LedgerSettings:
    return LedgerSettings(
        near_limit_threshold=0.80,
        unset_budget_policy=UnsetBudgetPolicy.TREAT_AS_ZERO,
        recent_transactions_limit=5,
        data_file=None,
    )


@pytest.fixture
def storage() -> InMemoryLedgerStorage:
    return InMemoryLedgerStorage()


@pytest.fixture
def service(storage, ledger_settings) -> LedgerService:
    return LedgerService(storage=storage, settings=ledger_settings)
