import json
from datetime import date

import httpx

from app.client.forms import (
    categories_for,
    empty_transaction_form,
    submit_budget_form,
    submit_transaction_form,
)
from app.client.store import FinanceStore


def recording_store():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(201, json={"transaction": {"id": "x"}, "budget": {"id": "y"}})

    client = httpx.Client(base_url="http://api.test/api", transport=httpx.MockTransport(handler))
    return FinanceStore(client), requests


def test_empty_form_defaults():
    form = empty_transaction_form(date(2024, 3, 9))
    assert form["type"] == "expense"
    assert form["date"] == "2024-03-09"


def test_categories_follow_type():
    assert "Salary" in categories_for("income")
    assert "Rent" in categories_for("expense")


def test_invalid_transaction_never_sent():
    store, requests = recording_store()
    result = submit_transaction_form(store, {**empty_transaction_form(), "amount": "0"})
    assert result.status == "failure"
    assert set(result.errors) == {"amount", "description", "category"}
    assert requests == []


def test_valid_transaction_is_added():
    store, requests = recording_store()
    form = {"amount": "12.50", "description": " Lunch ", "category": "Food & Dining", "type": "expense", "date": "2024-03-09"}
    result = submit_transaction_form(store, form)
    assert result.ok
    assert requests[0].method == "POST"
    sent = json.loads(requests[0].content)
    assert sent["amount"] == 12.5
    assert sent["description"] == "Lunch"


def test_editing_transaction_uses_put():
    store, requests = recording_store()
    form = {"amount": "5", "description": "Tea", "category": "Food & Dining", "type": "expense", "date": "2024-03-09"}
    submit_transaction_form(store, form, editing_id="abc")
    assert requests[0].method == "PUT"
    assert requests[0].url.path == "/api/transactions/abc"


def test_invalid_budget_never_sent():
    store, requests = recording_store()
    result = submit_budget_form(store, {"category": "Food", "amount": "", "period": "monthly"})
    assert result.message == "Please fill in all required fields"
    assert requests == []


def test_valid_budget_is_added():
    store, requests = recording_store()
    result = submit_budget_form(store, {"category": " Food ", "amount": "250", "period": "monthly"})
    assert result.ok
    assert requests[0].url.path == "/api/budgets"
