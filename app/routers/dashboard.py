"""
Dashboard Router
Read-only view models behind the dashboard, budgets and analytics pages
"""
import logging
from datetime import date
from typing import Dict, List, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.config import settings
from app.db.dynamo import BUDGETS, TRANSACTIONS, DocumentStore, DocumentStoreError, get_store
from app.utils import dashboard
from app.utils.insights import SpendingInsights

router = APIRouter()
logger = logging.getLogger(__name__)
spending_insights = SpendingInsights(currency=settings.CURRENCY)

TODAY_QUERY = Query(None, description="Reference day (YYYY-MM-DD); defaults to the server's current date")


def load_collections(store: DocumentStore) -> Tuple[List[Dict], List[Dict]]:
    try:
        return store.find_all(TRANSACTIONS), store.find_all(BUDGETS)
    except DocumentStoreError:
        raise HTTPException(status_code=500, detail="Failed to load finance data")


@router.get("/summary")
def get_summary(today: Optional[date] = TODAY_QUERY, store: DocumentStore = Depends(get_store)) -> Dict:
    transactions, _ = load_collections(store)
    return dashboard.dashboard_summary(transactions, today)


@router.get("/monthly-expenses")
def get_monthly_expenses(
    today: Optional[date] = TODAY_QUERY,
    months: int = Query(6, ge=1, le=24),
    store: DocumentStore = Depends(get_store),
) -> Dict:
    transactions, _ = load_collections(store)
    return dashboard.monthly_expenses(transactions, today, months)


@router.get("/categories")
def get_category_breakdown(store: DocumentStore = Depends(get_store)) -> Dict:
    transactions, _ = load_collections(store)
    return dashboard.category_chart(transactions)


@router.get("/budget-comparison")
def get_budget_comparison(today: Optional[date] = TODAY_QUERY, store: DocumentStore = Depends(get_store)) -> Dict:
    transactions, budgets = load_collections(store)
    return dashboard.budget_comparison(transactions, budgets, today)


@router.get("/budgets")
def get_budget_overview(today: Optional[date] = TODAY_QUERY, store: DocumentStore = Depends(get_store)) -> Dict:
    transactions, budgets = load_collections(store)
    return dashboard.budget_overview(transactions, budgets, today)


@router.get("/analytics")
def get_analytics(store: DocumentStore = Depends(get_store)) -> Dict:
    transactions, _ = load_collections(store)
    return dashboard.analytics(transactions)


@router.get("/insights")
def get_insights(today: Optional[date] = TODAY_QUERY, store: DocumentStore = Depends(get_store)) -> Dict:
    """
    Heuristic observations about the reference month, at most six, in rule order.
    """
    transactions, budgets = load_collections(store)
    insights = spending_insights.generate(transactions, budgets, today)

    severity_counts = {
        "danger": len([i for i in insights if i.type == "danger"]),
        "warning": len([i for i in insights if i.type == "warning"]),
        "info": len([i for i in insights if i.type == "info"]),
        "positive": len([i for i in insights if i.type == "positive"]),
    }
    return {
        "insights": [i.to_dict() for i in insights],
        "count": len(insights),
        "severity_counts": severity_counts,
    }
