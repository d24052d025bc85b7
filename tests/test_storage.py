"""Tests for the ledger stores."""

import json
import os
import pytest
from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

from spendly.models.ledger import Budget, Category, CategoryColor, Expense
from spendly.services.storage import (
    DuplicateError,
    JsonFileLedgerStorage,
    NotFoundError,
    StorageError,
)


class TestInMemoryExpenses:
    """Tests for expense storage."""

    def test_add_and_get(self, storage, food):
        """Test that a stored expense can be read back."""
        storage.add_category(food)
        expense = storage.add_expense(
            Expense(amount=Decimal("45.50"), description="Lunch", category=food)
        )
        fetched = storage.get_expense(expense.id)
        assert fetched == expense
        assert fetched.category.name == "Food"

    def test_add_with_unknown_category(self, storage, food):
        """Test that expenses may only reference stored categories."""
        with pytest.raises(NotFoundError):
            storage.add_expense(Expense(amount=Decimal("1"), description="x", category=food))
        assert storage.list_expenses() == []

    def test_duplicate_id(self, storage):
        """Test that ids are unique."""
        expense = Expense(amount=Decimal("1"), description="x")
        storage.add_expense(expense)
        with pytest.raises(DuplicateError):
            storage.add_expense(expense)

    def test_list_is_newest_first(self, storage, now):
        """Test the listing order."""
        for days in (5, 1, 3):
            storage.add_expense(
                Expense(amount=Decimal("1"), description=f"{days}d", date=now - timedelta(days=days))
            )
        assert [e.description for e in storage.list_expenses()] == ["1d", "3d", "5d"]

    def test_returned_models_are_copies(self, storage):
        """Test that callers cannot mutate stored state."""
        stored = storage.add_expense(Expense(amount=Decimal("1"), description="x"))
        stored.description = "changed"
        assert storage.get_expense(stored.id).description == "x"

    def test_update(self, storage, food, transport):
        """Test replacing an expense, including its category."""
        storage.add_category(food)
        storage.add_category(transport)
        expense = storage.add_expense(
            Expense(amount=Decimal("10"), description="Taxi", category=food)
        )
        updated = storage.update_expense(
            expense.model_copy(update={"category": transport, "amount": Decimal("12")})
        )
        assert updated.amount == Decimal("12")
        # The index followed the move
        storage.delete_category(food.id)
        assert storage.get_expense(expense.id).category_id == transport.id

    def test_update_missing(self, storage):
        """Test that updating an unknown expense fails."""
        with pytest.raises(NotFoundError):
            storage.update_expense(Expense(amount=Decimal("1"), description="x"))

    def test_delete(self, storage):
        """Test single deletion, and deleting twice."""
        expense = storage.add_expense(Expense(amount=Decimal("1"), description="x"))
        storage.delete_expense(expense.id)
        assert storage.get_expense(expense.id) is None
        with pytest.raises(NotFoundError):
            storage.delete_expense(expense.id)

    def test_batch_delete_ignores_unknown_ids(self, storage):
        """Test batch deletion."""
        a = storage.add_expense(Expense(amount=Decimal("1"), description="a"))
        b = storage.add_expense(Expense(amount=Decimal("2"), description="b"))
        storage.add_expense(Expense(amount=Decimal("3"), description="c"))
        assert storage.delete_expenses([a.id, b.id, uuid4()]) == 2
        assert [e.description for e in storage.list_expenses()] == ["c"]


class TestInMemoryCategories:
    """Tests for category storage and the delete cascade."""

    def test_list_in_creation_order(self, storage, food, transport):
        """Test the listing order."""
        storage.add_category(transport)
        storage.add_category(food)
        assert [c.name for c in storage.list_categories()] == ["Transport", "Food"]

    def test_duplicate_id(self, storage, food):
        """Test that ids are unique."""
        storage.add_category(food)
        with pytest.raises(DuplicateError):
            storage.add_category(food)

    def test_delete_uncategorizes_expenses(self, storage, food, transport):
        """Test that deleting a category keeps its expenses, uncategorized."""
        storage.add_category(food)
        storage.add_category(transport)
        lunch = storage.add_expense(Expense(amount=Decimal("10"), description="Lunch", category=food))
        dinner = storage.add_expense(Expense(amount=Decimal("20"), description="Dinner", category=food))
        uber = storage.add_expense(Expense(amount=Decimal("30"), description="Uber", category=transport))

        assert storage.delete_category(food.id) == 2

        assert storage.get_category(food.id) is None
        assert storage.get_expense(lunch.id).category is None
        assert storage.get_expense(dinner.id).category is None
        assert storage.get_expense(uber.id).category_id == transport.id
        assert len(storage.list_expenses()) == 3

    def test_delete_missing(self, storage):
        """Test that deleting an unknown category fails."""
        with pytest.raises(NotFoundError):
            storage.delete_category(uuid4())


class TestInMemoryBudget:
    """Tests for the single budget record."""

    def test_no_budget(self, storage):
        """Test the empty store."""
        assert storage.get_budget() is None

    def test_upsert_keeps_single_record(self, storage):
        """Test that a second write replaces the first and keeps its id."""
        first = storage.upsert_budget(Budget(total_amount=Decimal("100")))
        second = storage.upsert_budget(Budget(total_amount=Decimal("250")))
        assert second.id == first.id
        assert storage.get_budget().total_amount == Decimal("250")

    def test_snapshot(self, storage, food):
        """Test that the snapshot carries every part of the ledger."""
        storage.add_category(food)
        storage.add_expense(Expense(amount=Decimal("5"), description="x", category=food))
        storage.upsert_budget(Budget(total_amount=Decimal("100")))
        snapshot = storage.snapshot()
        assert len(snapshot.expenses) == 1
        assert snapshot.categories == [food]
        assert snapshot.total_balance == Decimal("100")


class TestJsonFileStorage:
    """Tests for the JSON file store."""

    def test_round_trip_through_file(self, tmp_path, food, now):
        """Test that a reopened store sees the same ledger."""
        path = tmp_path / "ledger.json"
        store = JsonFileLedgerStorage(path)
        store.add_category(food)
        store.add_expense(
            Expense(amount=Decimal("45.50"), description="Lunch", category=food, date=now)
        )
        store.upsert_budget(Budget(total_amount=Decimal("1000")))

        reopened = JsonFileLedgerStorage(path)
        assert reopened.snapshot() == store.snapshot()
        assert reopened.list_expenses()[0].amount == Decimal("45.50")

    def test_file_is_json_document(self, tmp_path):
        """Test the on-disk layout."""
        path = tmp_path / "ledger.json"
        store = JsonFileLedgerStorage(path)
        store.add_category(Category(name="Pets", color=CategoryColor.MINT))
        document = json.loads(path.read_text(encoding="utf-8"))
        assert document["version"] == 1
        assert document["ledger"]["categories"][0]["color"] == "mint"

    def test_cascade_is_persisted(self, tmp_path, food):
        """Test that a category delete reaches the file."""
        path = tmp_path / "ledger.json"
        store = JsonFileLedgerStorage(path)
        store.add_category(food)
        expense = store.add_expense(Expense(amount=Decimal("1"), description="x", category=food))
        store.delete_category(food.id)

        reopened = JsonFileLedgerStorage(path)
        assert reopened.get_expense(expense.id).category is None
        assert reopened.list_categories() == []

    def test_missing_file_starts_empty(self, tmp_path):
        """Test that a new path yields an empty ledger without writing."""
        path = tmp_path / "nested" / "ledger.json"
        store = JsonFileLedgerStorage(path)
        assert store.list_expenses() == []
        assert not path.exists()

    def test_corrupt_file(self, tmp_path):
        """Test that an unreadable file is a storage error."""
        path = tmp_path / "ledger.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(StorageError):
            JsonFileLedgerStorage(path)

    def test_failed_write_rolls_back(self, tmp_path, monkeypatch):
        """Test that a write failing after retries leaves memory unchanged."""
        path = tmp_path / "ledger.json"
        store = JsonFileLedgerStorage(path)
        kept = store.add_expense(Expense(amount=Decimal("1"), description="kept"))

        def broken_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", broken_replace)

        with pytest.raises(StorageError, match="disk full"):
            store.add_expense(Expense(amount=Decimal("2"), description="lost"))
        with pytest.raises(StorageError):
            store.delete_expense(kept.id)

        assert [e.description for e in store.list_expenses()] == ["kept"]
        assert [p.name for p in tmp_path.iterdir()] == ["ledger.json"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
