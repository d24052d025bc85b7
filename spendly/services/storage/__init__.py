"""
Storage Services Package

Provides the abstract ledger storage interface and its implementations:
an in-memory store and a JSON-file store built on top of it.
"""

from spendly.services.storage.interface import (
    DuplicateError,
    LedgerStorageInterface,
    NotFoundError,
    StorageError,
)
from spendly.services.storage.memory import InMemoryLedgerStorage
from spendly.services.storage.json_file import JsonFileLedgerStorage

__all__ = [
    # Interfaces
    "LedgerStorageInterface",
    # Exceptions
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "InMemoryLedgerStorage",
    "JsonFileLedgerStorage",
]
