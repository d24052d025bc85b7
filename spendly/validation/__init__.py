"""Input validation package."""

from spendly.validation.validator import LedgerInputValidator, ValidationError

__all__ = ["LedgerInputValidator", "ValidationError"]
