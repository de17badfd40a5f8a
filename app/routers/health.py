"""
Health Check Router
Service liveness and document store connectivity
"""
import logging
from datetime import datetime, timezone

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import APIRouter, Depends

from app.core.config import settings
from app.db.dynamo import COLLECTIONS, DocumentStore, get_store

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
def health_check():
    """
    Health check endpoint.
    Returns API status.
    """
    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/status")
def store_status(store: DocumentStore = Depends(get_store)):
    """
    Check that both DynamoDB tables are reachable.
    """
    tables = {}
    for collection in COLLECTIONS:
        table = store.table(collection)
        try:
            table.scan(Limit=1)
            tables[collection] = {"name": table.name, "status": "accessible"}
        except (ClientError, BotoCoreError) as e:
            tables[collection] = {"name": table.name, "status": "error", "error": str(e)}
            logger.error(f"DynamoDB check failed for {table.name}: {str(e)}")

    connected = all(t["status"] == "accessible" for t in tables.values())
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "region": settings.DYNAMO_REGION,
        "tables": tables,
        "overall_status": "healthy" if connected else "degraded",
    }
