"""
Aggregation engine.

Pure functions that turn the raw transaction/budget documents into
display-ready numbers. Every function accepts ``None`` (or anything that is
not a list) as an empty collection and never raises on malformed documents:
a missing amount counts as zero and an unparseable date falls outside every
month.
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from app.utils.formatting import color_for_category, get_month_name, parse_date

UNCATEGORIZED = "Uncategorized"


@dataclass
class CategorySummary:
    """Spending summary for a single category."""

    category: str
    total: float
    transaction_count: int
    percentage: float
    color: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        return {k: v for k, v in data.items() if v is not None}


def as_list(items: Any) -> List[Dict[str, Any]]:
    if isinstance(items, (list, tuple)):
        return [item for item in items if isinstance(item, dict)]
    return []


def amount_of(item: Dict[str, Any]) -> float:
    try:
        return float(item.get("amount") or 0)
    except (TypeError, ValueError):
        return 0.0


def category_of(item: Dict[str, Any]) -> str:
    return item.get("category") or UNCATEGORIZED


def total_amount(transactions: Any) -> float:
    return sum(amount_of(t) for t in as_list(transactions))


def filter_by_type(transactions: Any, transaction_type: str) -> List[Dict[str, Any]]:
    return [t for t in as_list(transactions) if t.get("type") == transaction_type]


def spending_only(transactions: Any) -> List[Dict[str, Any]]:
    """Everything except income. Untyped entries count as spending."""
    return [t for t in as_list(transactions) if t.get("type") != "income"]


def month_slice(transactions: Any, year: int, month: int) -> List[Dict[str, Any]]:
    """Entries whose date falls in the given calendar year and 1-based month."""
    sliced = []
    for transaction in as_list(transactions):
        day = parse_date(transaction.get("date"))
        if day is not None and day.year == year and day.month == month:
            sliced.append(transaction)
    return sliced


def group_by_category(transactions: Any) -> Dict[str, List[Dict[str, Any]]]:
    grouped: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
    for transaction in as_list(transactions):
        grouped[category_of(transaction)].append(transaction)
    return dict(grouped)


def category_totals(transactions: Any) -> Dict[str, float]:
    """Sum of amounts per category seen in the input. Absent categories are omitted."""
    totals: Dict[str, float] = defaultdict(float)
    for transaction in as_list(transactions):
        totals[category_of(transaction)] += amount_of(transaction)
    return dict(totals)


def daily_totals(transactions: Any) -> Dict[str, float]:
    """Sum of amounts per ISO calendar day; undated entries are skipped."""
    totals: Dict[str, float] = defaultdict(float)
    for transaction in as_list(transactions):
        day = parse_date(transaction.get("date"))
        if day is not None:
            totals[day.isoformat()] += amount_of(transaction)
    return dict(totals)


def budget_progress(spent: float, budget: float) -> float:
    """
    Percentage of the budget consumed, clamped to 100. A zero budget reports 0
    so the UI never has to render an infinite or NaN bar.
    """
    if not budget or budget <= 0:
        return 0
    return min(spent / budget * 100, 100)


def budget_status(spent: float, budget: float) -> str:
    percentage = budget_progress(spent, budget)
    if percentage >= 100:
        return "over"
    if percentage >= 80:
        return "warning"
    return "good"


def category_breakdown(transactions: Any) -> List[CategorySummary]:
    """Per-category totals with share of the overall amount, largest first."""
    grouped = group_by_category(transactions)
    totals = {category: total_amount(items) for category, items in grouped.items()}
    overall = sum(totals.values())

    summaries = [
        CategorySummary(
            category=category,
            total=round(totals[category], 2),
            transaction_count=len(items),
            percentage=round(totals[category] / overall * 100, 1) if overall > 0 else 0.0,
            color=color_for_category(index),
        )
        for index, (category, items) in enumerate(grouped.items())
    ]
    return sorted(summaries, key=lambda s: s.total, reverse=True)


def top_category(totals: Dict[str, float]) -> Optional[Dict[str, Any]]:
    if not totals:
        return None
    category, amount = max(totals.items(), key=lambda pair: pair[1])
    return {"category": category, "amount": amount}


def monthly_report(transactions: Any, year: int, month: int) -> Dict[str, Any]:
    monthly = month_slice(transactions, year, month)
    return {
        "totalSpent": total_amount(monthly),
        "transactionCount": len(monthly),
        "categoryTotals": category_totals(monthly),
        "transactions": monthly,
        "month": get_month_name(month),
        "year": year,
    }


def budget_rows(budgets: Any, spending: Dict[str, float]) -> List[Dict[str, Any]]:
    """Each budget joined to the spend of its category, with progress and status."""
    rows = []
    for budget in as_list(budgets):
        limit = amount_of(budget)
        spent = spending.get(category_of(budget), 0.0)
        rows.append(
            {
                **budget,
                "spent": spent,
                "remaining": max(0.0, limit - spent),
                "overBudget": max(0.0, spent - limit),
                "progress": budget_progress(spent, limit),
                "status": budget_status(spent, limit),
            }
        )
    return rows
