from decimal import Decimal

import pytest

from app.db.dynamo import (
    BUDGETS,
    TRANSACTIONS,
    DocumentExistsError,
    DocumentStore,
    DocumentStoreError,
    _convert_for_dynamo,
    _from_dynamo,
)


def test_ensure_tables_is_idempotent(store):
    assert store.ensure_tables() == []


def test_ensure_tables_reports_created(dynamodb):
    fresh = DocumentStore(dynamodb, "fresh-transactions", "fresh-budgets")
    assert fresh.ensure_tables() == ["fresh-transactions", "fresh-budgets"]


def test_unknown_collection(store):
    with pytest.raises(ValueError):
        store.table("accounts")


def test_insert_stamps_and_round_trips_numbers(store):
    created = store.insert(TRANSACTIONS, {"id": "t1", "amount": 12.5, "category": "Food", "tags": [1.5, 2]})
    assert created["amount"] == 12.5
    assert created["createdAt"] == created["updatedAt"]

    stored = store.get(TRANSACTIONS, "t1")
    assert stored["amount"] == 12.5
    assert stored["tags"] == [1.5, 2]
    assert isinstance(stored["tags"][1], int)


def test_find_all_per_collection(store):
    store.insert(TRANSACTIONS, {"id": "t1", "amount": 1})
    store.insert(TRANSACTIONS, {"id": "t2", "amount": 2})
    store.insert(BUDGETS, {"id": "b1", "amount": 100})
    assert sorted(t["id"] for t in store.find_all(TRANSACTIONS)) == ["t1", "t2"]
    assert [b["id"] for b in store.find_all(BUDGETS)] == ["b1"]


def test_update_merges_fields(store):
    store.insert(TRANSACTIONS, {"id": "t1", "amount": 10, "description": "Lunch", "category": "Food"})
    updated = store.update(TRANSACTIONS, "t1", {"id": "other", "amount": 15.75})
    assert updated["id"] == "t1"
    assert updated["amount"] == 15.75
    assert updated["description"] == "Lunch"
    assert store.get(TRANSACTIONS, "other") is None


def test_update_missing_returns_none(store):
    assert store.update(TRANSACTIONS, "ghost", {"amount": 1}) is None
    assert store.find_all(TRANSACTIONS) == []


def test_delete(store):
    store.insert(BUDGETS, {"id": "b1", "amount": 100})
    store.insert(BUDGETS, {"id": "b2", "amount": 200})
    assert store.delete(BUDGETS, "b1") is True
    assert store.delete(BUDGETS, "b1") is False
    assert [b["id"] for b in store.find_all(BUDGETS)] == ["b2"]


def test_missing_table_raises_store_error(dynamodb):
    broken = DocumentStore(dynamodb, "missing-transactions", "missing-budgets")
    with pytest.raises(DocumentStoreError):
        broken.find_all(TRANSACTIONS)
    with pytest.raises(DocumentStoreError):
        broken.insert(BUDGETS, {"id": "b1"})


def test_convert_helpers():
    converted = _convert_for_dynamo({"a": 0.1, "b": True, "c": [2.5], "d": "x"})
    assert converted == {"a": Decimal("0.1"), "b": True, "c": [Decimal("2.5")], "d": "x"}
    assert _from_dynamo({"a": Decimal("3"), "b": Decimal("0.25")}) == {"a": 3, "b": 0.25}


def test_insert_never_overwrites(store):
    first = store.insert(TRANSACTIONS, {"id": "t1", "amount": 10, "description": "Lunch"})
    with pytest.raises(DocumentExistsError):
        store.insert(TRANSACTIONS, {"id": "t1", "amount": 1})
    assert store.get(TRANSACTIONS, "t1") == first
