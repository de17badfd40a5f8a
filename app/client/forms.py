"""Form submission for transactions and budgets: parse, validate, then hand to the store."""
from datetime import date
from typing import Any, Dict, List, Optional

from app.client.store import ActionResult, FinanceStore
from app.models.transaction import EXPENSE_CATEGORIES, INCOME_CATEGORIES, TransactionType
from app.utils.validation import validate_budget_data, validate_transaction


def _to_number(value: Any) -> Any:
    try:
        return float(value)
    except (TypeError, ValueError):
        return value


def categories_for(transaction_type: str) -> List[str]:
    if transaction_type == TransactionType.INCOME.value:
        return INCOME_CATEGORIES
    return EXPENSE_CATEGORIES


def empty_transaction_form(today: Optional[date] = None) -> Dict[str, str]:
    return {
        "amount": "",
        "description": "",
        "category": "",
        "type": TransactionType.EXPENSE.value,
        "date": (today or date.today()).isoformat(),
    }


def transaction_from_form(form: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "amount": _to_number(form.get("amount")),
        "description": (form.get("description") or "").strip(),
        "category": form.get("category") or "",
        "type": form.get("type") or "",
        "date": form.get("date") or "",
    }


def submit_transaction_form(
    store: FinanceStore,
    form: Dict[str, Any],
    editing_id: Optional[str] = None,
) -> ActionResult:
    """
    Validate the raw form and, only if it passes, add the transaction (or update
    ``editing_id``). Invalid forms never reach the network.
    """
    transaction = transaction_from_form(form)
    validation = validate_transaction(transaction)
    if not validation.is_valid:
        return ActionResult.failure("Please correct the highlighted fields", errors=validation.errors)

    if editing_id:
        return store.update_transaction(editing_id, transaction)
    return store.add_transaction(transaction)


def submit_budget_form(
    store: FinanceStore,
    form: Dict[str, Any],
    editing_id: Optional[str] = None,
) -> ActionResult:
    if not validate_budget_data(form):
        return ActionResult.failure("Please fill in all required fields")

    budget = {
        "category": form["category"].strip(),
        "amount": float(form["amount"]),
        "period": form["period"],
    }
    if editing_id:
        return store.update_budget(editing_id, budget)
    return store.add_budget(budget)
