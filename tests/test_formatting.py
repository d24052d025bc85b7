"""Tests for display formatting, settings and the activity logger."""

import pytest
from decimal import Decimal
from unittest.mock import MagicMock
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError

from spendly.activity import ActivityLogger
from spendly.config import AppSettings, DisplaySettings, LedgerSettings
from spendly.formatting import (
    budget_status_message,
    currency_symbol,
    format_amount,
    format_percentage,
)
from spendly.models.ledger import BudgetReport, BudgetStatus, Currency, UnsetBudgetPolicy


def _report(balance, spent, status, percentage) -> BudgetReport:
    balance, spent = Decimal(balance), Decimal(spent)
    return BudgetReport(
        total_balance=balance,
        total_spent=spent,
        remaining=balance - spent,
        spent_percentage=Decimal(percentage),
        status=status,
    )


class TestAmountFormatting:
    """Tests for currency rendering."""

    @pytest.mark.parametrize(
        "amount, currency, expected",
        [
            (Decimal("45.5"), Currency.USD, "$45.50"),
            (Decimal("1234.567"), "MXN", "$1,234.57"),
            (Decimal("0.005"), Currency.EUR, "€0.01"),
            (Decimal("-200"), Currency.GBP, "-£200.00"),
            (Decimal("9"), "jpy", "¥9.00"),
            (Decimal("3"), "CHF", "$3.00"),
        ],
    )
    def test_format_amount(self, amount, currency, expected):
        """Test symbols, grouping, rounding and sign placement."""
        assert format_amount(amount, currency) == expected

    def test_unknown_symbol_falls_back(self):
        """Test that unknown or missing codes use the dollar sign."""
        assert currency_symbol(None) == "$"
        assert currency_symbol("XYZ") == "$"

    def test_format_percentage(self):
        """Test that fractions render as whole percentages."""
        assert format_percentage(Decimal("0.85")) == "85%"
        assert format_percentage(Decimal("1")) == "100%"

    def test_format_percentage_truncates(self):
        """Test that partial percentages round down."""
        assert format_percentage(Decimal("0.857")) == "85%"
        assert format_percentage(Decimal("0.999")) == "99%"
        assert format_percentage(Decimal("0")) == "0%"


class TestStatusMessage:
    """Tests for the wallet card message."""

    def test_near_limit(self):
        """Test the near-limit message."""
        report = _report("1000", "850", BudgetStatus.NEAR_LIMIT, "0.85")
        assert budget_status_message(report) == "85% of your balance used, $150.00 left"

    def test_over_limit(self):
        """Test that the overspend is shown as a positive amount."""
        report = _report("1000", "1200", BudgetStatus.OVER_LIMIT, "1")
        assert budget_status_message(report, Currency.EUR) == "Over budget by €200.00"

    def test_normal(self):
        """Test the plain remaining message."""
        report = _report("1000", "100", BudgetStatus.NORMAL, "0.1")
        assert budget_status_message(report, "MXN") == "$900.00 remaining"

    def test_unset(self):
        """Test the prompt shown when no balance exists."""
        report = _report("0", "10", BudgetStatus.UNSET, "0")
        assert budget_status_message(report) == "Set a balance to track your spending"


class TestSettings:
    """Tests for environment-driven configuration."""

    def test_ledger_defaults(self, monkeypatch):
        """Test the default engine behavior."""
        for name in (
            "SPENDLY_LEDGER_NEAR_LIMIT_THRESHOLD",
            "SPENDLY_LEDGER_UNSET_BUDGET_POLICY",
            "SPENDLY_LEDGER_RECENT_TRANSACTIONS_LIMIT",
            "SPENDLY_LEDGER_DATA_FILE",
        ):
            monkeypatch.delenv(name, raising=False)
        settings = LedgerSettings()
        assert settings.near_limit_threshold == 0.80
        assert settings.unset_budget_policy == UnsetBudgetPolicy.TREAT_AS_ZERO
        assert settings.recent_transactions_limit == 5
        assert settings.data_file is None

    def test_ledger_from_environment(self, monkeypatch, tmp_path):
        """Test that prefixed variables override defaults."""
        monkeypatch.setenv("SPENDLY_LEDGER_NEAR_LIMIT_THRESHOLD", "0.9")
        monkeypatch.setenv("SPENDLY_LEDGER_UNSET_BUDGET_POLICY", "report_unset")
        monkeypatch.setenv("SPENDLY_LEDGER_DATA_FILE", str(tmp_path / "ledger.json"))
        settings = LedgerSettings()
        assert settings.near_limit_threshold == 0.9
        assert settings.unset_budget_policy == UnsetBudgetPolicy.REPORT_UNSET
        assert settings.data_file == tmp_path / "ledger.json"

    def test_threshold_bounds(self):
        """Test that the threshold must be a fraction."""
        with pytest.raises(PydanticValidationError):
            LedgerSettings(near_limit_threshold=1.5)

    def test_display_currency_fallback(self, monkeypatch):
        """Test that an unknown currency code displays as USD."""
        monkeypatch.setenv("SPENDLY_DISPLAY_PREFERRED_CURRENCY", "mxn")
        assert DisplaySettings().preferred_currency == Currency.MXN
        monkeypatch.setenv("SPENDLY_DISPLAY_PREFERRED_CURRENCY", "ZZZ")
        assert DisplaySettings().preferred_currency == Currency.USD

    def test_log_level(self):
        """Test log level normalization and rejection."""
        assert AppSettings(log_level="debug").log_level == "DEBUG"
        with pytest.raises(PydanticValidationError):
            AppSettings(log_level="LOUD")


class TestActivityLogger:
    """Tests for severity dispatch."""

    def test_info_event(self):
        """Test that routine events log at info."""
        logger = MagicMock()
        ActivityLogger(logger=logger).log_category_added(uuid4(), "Pets", "mint")
        logger.info.assert_called_once()
        event, = logger.info.call_args.args
        assert event == "activity_event"
        assert logger.info.call_args.kwargs["event_type"] == "category_added"

    def test_long_description_truncated_in_event(self):
        """Test that the event description stays bounded for long input."""
        logger = MagicMock()
        ActivityLogger(logger=logger).log_expense_added(uuid4(), Decimal("1"), "z" * 600, None)
        assert len(logger.info.call_args.kwargs["description"]) == 500

    def test_validation_failure_is_warning(self):
        """Test that rejected input logs at warning."""
        logger = MagicMock()
        ActivityLogger(logger=logger).log_validation_failed(
            "add_expense",
            [{"field": "amount", "type": "not_positive", "message": "x"}],
        )
        logger.warning.assert_called_once()
        logger.info.assert_not_called()

    def test_storage_error_is_error(self):
        """Test that write failures log at error with the message."""
        logger = MagicMock()
        ActivityLogger(logger=logger).log_storage_error("add_expense", "disk full")
        logger.error.assert_called_once()
        assert logger.error.call_args.kwargs["error_message"] == "disk full"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
