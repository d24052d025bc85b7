"""
Activity Models for Spendly

Every ledger mutation produces an ActivityEvent that is written to the
structured process log.

DESIGN DECISION: Activity events are log lines, not records. They are
never persisted or replayed; the ledger keeps no history of its own.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class ActivityEventType(str, Enum):
    """Types of ledger activity we log."""
    # Expenses
    EXPENSE_ADDED = "expense_added"
    EXPENSE_UPDATED = "expense_updated"
    EXPENSE_DELETED = "expense_deleted"

    # Categories
    CATEGORY_ADDED = "category_added"
    CATEGORY_DELETED = "category_deleted"

    # Budget
    BALANCE_SET = "balance_set"

    # Setup
    ONBOARDING_COMPLETED = "onboarding_completed"

    # Failures
    VALIDATION_FAILED = "validation_failed"
    STORAGE_ERROR = "storage_error"


class ActivitySeverity(str, Enum):
    """Severity level for activity events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ActivityEvent(BaseModel):
    """A single ledger activity event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When the event occurred"
    )
    event_type: ActivityEventType
    severity: ActivitySeverity = ActivitySeverity.INFO

    # What entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'category', 'budget')"
    )
    entity_id: Optional[UUID] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to keyword arguments for a structured log call."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class ActivityEventBuilder:
    """
    Helper class to build activity events with common patterns.

    Usage:
        event = ActivityEventBuilder.expense_added(expense_id, amount, "Lunch")
    """

    @staticmethod
    def expense_added(
        expense_id: UUID,
        amount: Decimal,
        description: str,
        category_name: Optional[str],
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense added: {description}"[:500],
            details={
                "amount": str(amount),
                "category": category_name,
            },
        )

    @staticmethod
    def expense_updated(
        expense_id: UUID,
        amount: Decimal,
        category_name: Optional[str],
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.EXPENSE_UPDATED,
            entity_type="expense",
            entity_id=expense_id,
            description="Expense edited",
            details={
                "amount": str(amount),
                "category": category_name,
            },
        )

    @staticmethod
    def expenses_deleted(expense_ids: list[UUID]) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.EXPENSE_DELETED,
            entity_type="expense",
            entity_id=expense_ids[0] if len(expense_ids) == 1 else None,
            description=f"Deleted {len(expense_ids)} expense(s)",
            details={
                "expense_ids": [str(expense_id) for expense_id in expense_ids],
            },
        )

    @staticmethod
    def category_added(
        category_id: UUID,
        name: str,
        color: str,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.CATEGORY_ADDED,
            entity_type="category",
            entity_id=category_id,
            description=f"Category added: {name}"[:500],
            details={"color": color},
        )

    @staticmethod
    def category_deleted(
        category_id: UUID,
        name: str,
        uncategorized_count: int,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.CATEGORY_DELETED,
            entity_type="category",
            entity_id=category_id,
            description=f"Category deleted: {name}"[:500],
            details={"expenses_uncategorized": uncategorized_count},
        )

    @staticmethod
    def balance_set(
        budget_id: UUID,
        total_amount: Decimal,
        previous_amount: Optional[Decimal],
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.BALANCE_SET,
            entity_type="budget",
            entity_id=budget_id,
            description=f"Balance set to {total_amount}",
            details={
                "total_amount": str(total_amount),
                "previous_amount": (
                    str(previous_amount) if previous_amount is not None else None
                ),
            },
        )

    @staticmethod
    def onboarding_completed(
        currency: str,
        categories_created: int,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.ONBOARDING_COMPLETED,
            description="Onboarding completed",
            details={
                "currency": currency,
                "categories_created": categories_created,
            },
        )

    @staticmethod
    def validation_failed(
        operation: str,
        issues: list[dict],
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.VALIDATION_FAILED,
            severity=ActivitySeverity.WARNING,
            description=f"{operation} rejected with {len(issues)} issue(s)",
            details={
                "operation": operation,
                "issues": issues,
            },
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.STORAGE_ERROR,
            severity=ActivitySeverity.ERROR,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={"operation": operation},
        )
