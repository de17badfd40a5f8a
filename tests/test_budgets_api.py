from app.db.dynamo import BUDGETS

FOOD = {"id": "b1", "category": "Food & Dining", "amount": 300, "period": "monthly"}


def test_budget_crud(client):
    response = client.post("/api/budgets", json=FOOD)
    assert response.status_code == 201
    assert response.json()["budget"]["amount"] == 300

    updated = client.put("/api/budgets/b1", json={"amount": 350.5}).json()["budget"]
    assert updated["amount"] == 350.5
    assert updated["period"] == "monthly"

    assert client.get("/api/budgets").json()["budgets"][0]["amount"] == 350.5

    response = client.delete("/api/budgets/b1")
    assert response.json() == {"message": "Budget deleted successfully"}
    assert client.get("/api/budgets").json() == {"budgets": []}


def test_budget_not_found(client, store):
    client.post("/api/budgets", json=FOOD)
    assert client.put("/api/budgets/nope", json={"amount": 1}).status_code == 404
    response = client.delete("/api/budgets/nope")
    assert response.status_code == 404
    assert response.json()["detail"] == "Budget not found"
    assert [b["id"] for b in store.find_all(BUDGETS)] == ["b1"]


def test_budget_with_unknown_period_is_stored(client):
    created = client.post("/api/budgets", json={**FOOD, "period": "weekly"}).json()["budget"]
    assert created["period"] == "weekly"


def test_budget_with_existing_id_is_conflict(client, store):
    client.post("/api/budgets", json=FOOD)
    assert client.post("/api/budgets", json={"id": "b1", "amount": 5}).status_code == 409
    assert store.find_all(BUDGETS)[0]["category"] == "Food & Dining"
