from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class TransactionType(str, Enum):
    EXPENSE = "expense"
    INCOME = "income"


EXPENSE_CATEGORIES = [
    "Food & Dining",
    "Shopping",
    "Transportation",
    "Entertainment",
    "Bills & Utilities",
    "Healthcare",
    "Education",
    "Travel",
    "Personal Care",
    "Groceries",
    "Rent",
    "Insurance",
    "Other",
]

INCOME_CATEGORIES = [
    "Salary",
    "Freelance",
    "Business",
    "Investment",
    "Rental Income",
    "Gift",
    "Bonus",
    "Refund",
    "Side Hustle",
    "Other Income",
]


# Request bodies are coerced, never checked for presence: a document missing
# fields is stored without them. Unknown fields are kept as well.
class TransactionCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    amount: Optional[float] = None
    description: Optional[str] = None
    category: Optional[str] = None
    type: Optional[str] = None
    date: Optional[str] = None


class TransactionUpdate(BaseModel):
    model_config = ConfigDict(extra="allow")

    amount: Optional[float] = None
    description: Optional[str] = None
    category: Optional[str] = None
    type: Optional[str] = None
    date: Optional[str] = None
