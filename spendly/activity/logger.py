"""
Activity Logger

DESIGN DECISION: Every ledger mutation and every rejected input is
logged as one structured event. This provides:
1. Debugging capability
2. A readable trace of what the user did in this session

The activity logger:
- Writes to the process log only; nothing is persisted
- Tags each event with the entity id so related lines can be grepped
"""

import logging
import sys
from decimal import Decimal
from typing import Optional
from uuid import UUID

import structlog

from spendly.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivitySeverity,
)


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route the stdlib root logger to stderr at the given level."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )


class ActivityLogger:
    """Central activity logging service for the ledger."""

    def __init__(self, logger: Optional[structlog.stdlib.BoundLogger] = None):
        self._logger = logger or structlog.get_logger("spendly.activity")

    def log(self, event: ActivityEvent) -> None:
        """Log an activity event at the level its severity maps to."""
        log_dict = event.to_log_dict()

        if event.severity == ActivitySeverity.ERROR:
            self._logger.error("activity_event", **log_dict)
        elif event.severity == ActivitySeverity.WARNING:
            self._logger.warning("activity_event", **log_dict)
        elif event.severity == ActivitySeverity.DEBUG:
            self._logger.debug("activity_event", **log_dict)
        else:
            self._logger.info("activity_event", **log_dict)

    def log_expense_added(
        self,
        expense_id: UUID,
        amount: Decimal,
        description: str,
        category_name: Optional[str],
    ) -> None:
        self.log(ActivityEventBuilder.expense_added(
            expense_id=expense_id,
            amount=amount,
            description=description,
            category_name=category_name,
        ))

    def log_expense_updated(
        self,
        expense_id: UUID,
        amount: Decimal,
        category_name: Optional[str],
    ) -> None:
        self.log(ActivityEventBuilder.expense_updated(
            expense_id=expense_id,
            amount=amount,
            category_name=category_name,
        ))

    def log_expenses_deleted(self, expense_ids: list[UUID]) -> None:
        self.log(ActivityEventBuilder.expenses_deleted(expense_ids))

    def log_category_added(self, category_id: UUID, name: str, color: str) -> None:
        self.log(ActivityEventBuilder.category_added(
            category_id=category_id,
            name=name,
            color=color,
        ))

    def log_category_deleted(
        self,
        category_id: UUID,
        name: str,
        uncategorized_count: int,
    ) -> None:
        self.log(ActivityEventBuilder.category_deleted(
            category_id=category_id,
            name=name,
            uncategorized_count=uncategorized_count,
        ))

    def log_balance_set(
        self,
        budget_id: UUID,
        total_amount: Decimal,
        previous_amount: Optional[Decimal],
    ) -> None:
        self.log(ActivityEventBuilder.balance_set(
            budget_id=budget_id,
            total_amount=total_amount,
            previous_amount=previous_amount,
        ))

    def log_onboarding_completed(self, currency: str, categories_created: int) -> None:
        self.log(ActivityEventBuilder.onboarding_completed(
            currency=currency,
            categories_created=categories_created,
        ))

    def log_validation_failed(self, operation: str, issues: list[dict]) -> None:
        self.log(ActivityEventBuilder.validation_failed(
            operation=operation,
            issues=issues,
        ))

    def log_storage_error(self, operation: str, error_message: str) -> None:
        self.log(ActivityEventBuilder.storage_error(
            operation=operation,
            error_message=error_message,
        ))
