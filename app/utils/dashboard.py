"""
View models for the dashboard pages.

Each function takes the raw collections and a reference day and returns the
numbers a page renders. Nothing here touches the database.
"""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

from app.models.budget import BudgetPeriod
from app.models.transaction import TransactionType
from app.utils.analyzer import (
    amount_of,
    as_list,
    budget_rows,
    category_breakdown,
    category_totals,
    filter_by_type,
    month_slice,
    spending_only,
    top_category,
    total_amount,
)
from app.utils.formatting import get_month_name, parse_date, previous_month, shift_month


def _newest_first(transactions: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(
        transactions,
        key=lambda t: parse_date(t.get("date")) or date.min,
        reverse=True,
    )


def dashboard_summary(transactions: Any, today: Optional[date] = None) -> Dict[str, Any]:
    today = today or date.today()
    transactions = spending_only(transactions)

    current = month_slice(transactions, today.year, today.month)
    prev_year, prev_month = previous_month(today.year, today.month)
    previous = month_slice(transactions, prev_year, prev_month)

    current_total = total_amount(current)
    previous_total = total_amount(previous)
    change = (current_total - previous_total) / previous_total * 100 if previous_total > 0 else 0

    most_expensive = None
    for transaction in current:
        if most_expensive is None or amount_of(transaction) > amount_of(most_expensive):
            most_expensive = transaction

    return {
        "month": get_month_name(today.month),
        "year": today.year,
        "currentMonthTotal": current_total,
        "currentMonthCount": len(current),
        "previousMonthTotal": previous_total,
        "monthlyChange": change,
        "totalSpent": total_amount(transactions),
        "totalTransactions": len(transactions),
        "mostExpensive": most_expensive,
        "topCategory": top_category(category_totals(current)),
        "recentTransactions": _newest_first(transactions)[:3],
    }


def monthly_expenses(transactions: Any, today: Optional[date] = None, months: int = 6) -> Dict[str, Any]:
    """Totals for the last ``months`` calendar months, oldest first."""
    today = today or date.today()
    transactions = spending_only(transactions)
    series = []
    for offset in range(months - 1, -1, -1):
        year, month = shift_month(today.year, today.month, -offset)
        monthly = month_slice(transactions, year, month)
        series.append(
            {
                "month": get_month_name(month)[:3],
                "year": year,
                "expenses": total_amount(monthly),
                "transactionCount": len(monthly),
            }
        )
    return {
        "months": series,
        "maxExpense": max((m["expenses"] for m in series), default=0),
        "hasData": any(m["expenses"] > 0 for m in series),
    }


def category_chart(transactions: Any) -> Dict[str, Any]:
    transactions = spending_only(transactions)
    summaries = category_breakdown(transactions)
    return {
        "categories": [s.to_dict() for s in summaries],
        "total": total_amount(transactions),
        "hasData": bool(summaries),
    }


def budget_comparison(transactions: Any, budgets: Any, today: Optional[date] = None) -> Dict[str, Any]:
    """Monthly budgets next to the reference month's actual spend per category."""
    today = today or date.today()
    spending = category_totals(month_slice(spending_only(transactions), today.year, today.month))
    monthly_budgets = [b for b in as_list(budgets) if b.get("period") == BudgetPeriod.MONTHLY.value]

    rows = [
        {
            "category": row.get("category"),
            "budget": amount_of(row),
            "actual": row["spent"],
            "remaining": row["remaining"],
            "overBudget": row["overBudget"],
        }
        for row in budget_rows(monthly_budgets, spending)
    ]
    return {
        "month": get_month_name(today.month),
        "year": today.year,
        "rows": rows,
        "hasData": bool(rows),
    }


def budget_overview(transactions: Any, budgets: Any, today: Optional[date] = None) -> Dict[str, Any]:
    """Every budget with its current-month spend, progress and status."""
    today = today or date.today()
    spending = category_totals(month_slice(spending_only(transactions), today.year, today.month))
    rows = budget_rows(budgets, spending)
    return {
        "budgets": rows,
        "totalBudget": sum(amount_of(b) for b in rows),
        "totalSpent": sum(r["spent"] for r in rows),
    }


def analytics(transactions: Any) -> Dict[str, Any]:
    transactions = as_list(transactions)
    total_expenses = total_amount(filter_by_type(transactions, TransactionType.EXPENSE.value))
    total_income = total_amount(filter_by_type(transactions, TransactionType.INCOME.value))
    totals = category_totals(transactions)
    ranked = sorted(totals.items(), key=lambda pair: pair[1], reverse=True)

    return {
        "totalIncome": total_income,
        "totalExpenses": total_expenses,
        "netIncome": total_income - total_expenses,
        "averageTransaction": total_amount(transactions) / len(transactions) if transactions else 0,
        "totalTransactions": len(transactions),
        "topCategories": [{"category": c, "amount": a} for c, a in ranked[:5]],
        "topCategory": ranked[0][0] if ranked else None,
        "expenseRatio": total_expenses / total_income * 100 if total_income > 0 else None,
    }
