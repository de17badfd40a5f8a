import pytest
from fastapi.testclient import TestClient

from app.db.dynamo import TRANSACTIONS, DocumentStore, get_store
from app.main import app

LUNCH = {
    "id": "abc123",
    "amount": 12.5,
    "description": "Lunch",
    "category": "Food & Dining",
    "type": "expense",
    "date": "2024-01-05",
}


@pytest.fixture
def broken_client(dynamodb):
    broken = DocumentStore(dynamodb, "missing-transactions", "missing-budgets")
    app.dependency_overrides[get_store] = lambda: broken
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_list_empty(client):
    response = client.get("/api/transactions")
    assert response.status_code == 200
    assert response.json() == {"transactions": []}


def test_create_and_list(client):
    response = client.post("/api/transactions", json=LUNCH)
    assert response.status_code == 201
    created = response.json()["transaction"]
    assert created["id"] == "abc123"
    assert created["amount"] == 12.5
    assert "createdAt" in created and "updatedAt" in created

    listed = client.get("/api/transactions").json()["transactions"]
    assert [t["id"] for t in listed] == ["abc123"]


def test_create_without_description_is_stored_without_it(client):
    body = {k: v for k, v in LUNCH.items() if k != "description"}
    created = client.post("/api/transactions", json=body).json()["transaction"]
    assert "description" not in created
    assert "description" not in client.get("/api/transactions").json()["transactions"][0]


def test_create_without_id_gets_one(client):
    body = {k: v for k, v in LUNCH.items() if k != "id"}
    created = client.post("/api/transactions", json=body).json()["transaction"]
    assert created["id"]


def test_create_keeps_unknown_fields(client):
    created = client.post("/api/transactions", json={**LUNCH, "note": "team"}).json()["transaction"]
    assert created["note"] == "team"


def test_create_rejects_uncoercible_amount(client):
    response = client.post("/api/transactions", json={**LUNCH, "amount": "lots"})
    assert response.status_code == 422


def test_update(client):
    client.post("/api/transactions", json=LUNCH)
    response = client.put("/api/transactions/abc123", json={"amount": 20, "description": "Dinner"})
    assert response.status_code == 200
    updated = response.json()["transaction"]
    assert updated["amount"] == 20
    assert updated["description"] == "Dinner"
    assert updated["category"] == "Food & Dining"


def test_update_unknown_is_404_and_changes_nothing(client, store):
    client.post("/api/transactions", json=LUNCH)
    response = client.put("/api/transactions/missing", json={"amount": 99})
    assert response.status_code == 404
    assert response.json()["detail"] == "Transaction not found"
    assert store.find_all(TRANSACTIONS)[0]["amount"] == 12.5


def test_delete(client):
    client.post("/api/transactions", json=LUNCH)
    client.post("/api/transactions", json={**LUNCH, "id": "keep"})
    response = client.delete("/api/transactions/abc123")
    assert response.status_code == 200
    assert response.json() == {"message": "Transaction deleted successfully"}
    assert [t["id"] for t in client.get("/api/transactions").json()["transactions"]] == ["keep"]


def test_delete_unknown_is_404(client):
    client.post("/api/transactions", json=LUNCH)
    response = client.delete("/api/transactions/missing")
    assert response.status_code == 404
    assert len(client.get("/api/transactions").json()["transactions"]) == 1


def test_store_failures_are_500(broken_client):
    assert broken_client.get("/api/transactions").json() == {"detail": "Failed to fetch transactions"}
    assert broken_client.get("/api/transactions").status_code == 500
    assert broken_client.post("/api/transactions", json=LUNCH).status_code == 500
    assert broken_client.delete("/api/transactions/abc123").status_code == 500


def test_create_with_existing_id_is_conflict(client, store):
    client.post("/api/transactions", json=LUNCH)
    response = client.post("/api/transactions", json={"id": "abc123", "amount": 1})
    assert response.status_code == 409
    assert response.json()["detail"] == "Transaction already exists"

    stored = store.find_all(TRANSACTIONS)
    assert len(stored) == 1
    assert stored[0]["description"] == "Lunch"
    assert stored[0]["amount"] == 12.5
