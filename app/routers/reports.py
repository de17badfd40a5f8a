import logging
from typing import Dict

from fastapi import APIRouter, Depends, HTTPException, Response

from app.core.config import settings
from app.db.dynamo import TRANSACTIONS, DocumentStore, DocumentStoreError, get_store
from app.utils import report_export
from app.utils.analyzer import monthly_report, spending_only
from app.utils.formatting import parse_month

router = APIRouter()
logger = logging.getLogger(__name__)


def build_report(month: str, store: DocumentStore) -> Dict:
    try:
        year, month_number = parse_month(month)
    except ValueError:
        raise HTTPException(status_code=400, detail="Month must follow YYYY-MM format")

    try:
        transactions = store.find_all(TRANSACTIONS)
    except DocumentStoreError:
        raise HTTPException(status_code=500, detail="Failed to load transactions")

    report = monthly_report(spending_only(transactions), year, month_number)
    logger.info(f"Built report for {month}: {report['transactionCount']} transactions")
    return report


@router.get("/monthly/{month}")
def get_monthly_report(month: str, store: DocumentStore = Depends(get_store)) -> Dict:
    """
    Spending report for the given month (e.g., '2024-01').
    """
    return build_report(month, store)


@router.get("/monthly/{month}/csv")
def download_monthly_csv(month: str, store: DocumentStore = Depends(get_store)) -> Response:
    report = build_report(month, store)
    return Response(
        content=report_export.generate_csv(report),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="report-{month}.csv"'},
    )


@router.get("/monthly/{month}/pdf")
def download_monthly_pdf(month: str, store: DocumentStore = Depends(get_store)) -> Response:
    report = build_report(month, store)
    try:
        content = report_export.generate_pdf(report, settings.CURRENCY)
    except Exception as e:
        logger.error(f"Error rendering PDF for {month}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to render PDF report")
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="report-{month}.pdf"'},
    )
