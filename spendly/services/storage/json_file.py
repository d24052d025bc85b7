"""
JSON File Ledger Storage

DESIGN DECISION: The on-device store is a single JSON document holding
the whole ledger. Personal-finance volumes (a few thousand rows) make a
full rewrite per mutation cheap, and the file stays human-readable.

TRADEOFFS:
- Every mutation rewrites the file (fine at this scale)
- Writes go to a temp file that atomically replaces the ledger, so a
  crash mid-write never leaves a half-written document
- A write that still fails after retries rolls the in-memory state back,
  so the ledger seen by the analytics always matches the file
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Callable, Iterable, TypeVar
from uuid import UUID

import structlog
from pydantic import ValidationError as PydanticValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from spendly.models.ledger import Budget, Category, Expense, LedgerSnapshot
from spendly.services.storage.interface import StorageError
from spendly.services.storage.memory import InMemoryLedgerStorage


DOCUMENT_VERSION = 1

T = TypeVar("T")


class JsonFileLedgerStorage(InMemoryLedgerStorage):
    """
    In-memory ledger mirrored to a JSON file.

    The file is read once on construction and rewritten after every
    successful mutation.
    """

    def __init__(self, path: Path):
        super().__init__()
        self._path = Path(path)
        self._logger = structlog.get_logger(__name__)
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    # -- Serialization -------------------------------------------------------

    def _load(self) -> None:
        """Populate memory from the file, if it exists."""
        if not self._path.exists():
            return

        try:
            document = json.loads(self._path.read_text(encoding="utf-8"))
            snapshot = LedgerSnapshot.model_validate(document.get("ledger", {}))
        except (OSError, ValueError, PydanticValidationError) as e:
            raise StorageError(f"Failed to read ledger file {self._path}: {e}")

        for category in snapshot.categories:
            super().add_category(category)
        for expense in snapshot.expenses:
            super().add_expense(expense)
        if snapshot.budget is not None:
            super().upsert_budget(snapshot.budget)

        self._logger.info(
            "ledger_loaded",
            path=str(self._path),
            expenses=len(snapshot.expenses),
            categories=len(snapshot.categories),
        )

    def _render(self) -> str:
        document = {
            "version": DOCUMENT_VERSION,
            "ledger": self.snapshot().model_dump(mode="json"),
        }
        return json.dumps(document, ensure_ascii=False, indent=2)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        retry=retry_if_exception_type(OSError),
        reraise=True,
    )
    def _write(self, content: str) -> None:
        """Atomically replace the ledger file."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent,
            prefix=f".{self._path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(content)
            os.replace(tmp_name, self._path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def flush(self) -> None:
        """
        Write the current ledger to disk.

        Raises:
            StorageError: The write failed after retries
        """
        try:
            self._write(self._render())
        except OSError as e:
            self._logger.error("ledger_write_failed", path=str(self._path), error=str(e))
            raise StorageError(f"Failed to write ledger file {self._path}: {e}")

    # -- Transactional mutation ---------------------------------------------

    def _capture(self) -> tuple:
        return (
            dict(self._expenses),
            dict(self._categories),
            {k: set(v) for k, v in self._expenses_by_category.items()},
            self._budget,
        )

    def _restore(self, state: tuple) -> None:
        (
            self._expenses,
            self._categories,
            self._expenses_by_category,
            self._budget,
        ) = state

    def _mutate(self, operation: Callable[[], T]) -> T:
        """Run a mutation and persist it, rolling back if the write fails."""
        state = self._capture()
        result = operation()
        try:
            self.flush()
        except StorageError:
            self._restore(state)
            raise
        return result

    # -- Mutations -----------------------------------------------------------

    def add_expense(self, expense: Expense) -> Expense:
        return self._mutate(lambda: super(JsonFileLedgerStorage, self).add_expense(expense))

    def update_expense(self, expense: Expense) -> Expense:
        return self._mutate(lambda: super(JsonFileLedgerStorage, self).update_expense(expense))

    def delete_expense(self, expense_id: UUID) -> None:
        self._mutate(lambda: super(JsonFileLedgerStorage, self).delete_expense(expense_id))

    def delete_expenses(self, expense_ids: Iterable[UUID]) -> int:
        ids = list(expense_ids)
        return self._mutate(lambda: super(JsonFileLedgerStorage, self).delete_expenses(ids))

    def add_category(self, category: Category) -> Category:
        return self._mutate(lambda: super(JsonFileLedgerStorage, self).add_category(category))

    def delete_category(self, category_id: UUID) -> int:
        return self._mutate(lambda: super(JsonFileLedgerStorage, self).delete_category(category_id))

    def upsert_budget(self, budget: Budget) -> Budget:
        return self._mutate(lambda: super(JsonFileLedgerStorage, self).upsert_budget(budget))
