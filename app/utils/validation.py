from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class ValidationResult:
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _positive_amount(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    try:
        return float(value) > 0
    except (TypeError, ValueError):
        return False


def _filled(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def validate_transaction(transaction: Dict[str, Any]) -> ValidationResult:
    """Field-scoped checks run before a transaction leaves the client."""
    errors: Dict[str, str] = {}

    if not _positive_amount(transaction.get("amount")):
        errors["amount"] = "Amount must be greater than 0"
    if not _filled(transaction.get("description")):
        errors["description"] = "Description is required"
    if not transaction.get("category"):
        errors["category"] = "Category is required"
    if not transaction.get("type"):
        errors["type"] = "Transaction type is required"
    if not transaction.get("date"):
        errors["date"] = "Date is required"

    return ValidationResult(errors)


def validate_budget_data(budget: Dict[str, Any]) -> bool:
    if not _filled(budget.get("category")):
        return False
    if not _positive_amount(budget.get("amount")):
        return False
    if not budget.get("period"):
        return False
    return True
