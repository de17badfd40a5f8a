from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class BudgetPeriod(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class BudgetCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    category: Optional[str] = None
    amount: Optional[float] = None
    period: Optional[str] = None


class BudgetUpdate(BaseModel):
    model_config = ConfigDict(extra="allow")

    category: Optional[str] = None
    amount: Optional[float] = None
    period: Optional[str] = None
