import logging
from typing import Dict

from fastapi import APIRouter, Depends, HTTPException, status

from app.db.dynamo import TRANSACTIONS, DocumentExistsError, DocumentStore, DocumentStoreError, get_store
from app.models.transaction import TransactionCreate, TransactionUpdate
from app.utils.formatting import generate_id

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("")
def list_transactions(store: DocumentStore = Depends(get_store)) -> Dict:
    try:
        return {"transactions": store.find_all(TRANSACTIONS)}
    except DocumentStoreError:
        raise HTTPException(status_code=500, detail="Failed to fetch transactions")


@router.post("", status_code=status.HTTP_201_CREATED)
def create_transaction(transaction: TransactionCreate, store: DocumentStore = Depends(get_store)) -> Dict:
    document = transaction.model_dump(exclude_unset=True)
    # ids are generated by the client; the table cannot hold a document without one
    if not document.get("id"):
        document["id"] = generate_id()

    try:
        created = store.insert(TRANSACTIONS, document)
    except DocumentExistsError:
        raise HTTPException(status_code=409, detail="Transaction already exists")
    except DocumentStoreError:
        raise HTTPException(status_code=500, detail="Failed to create transaction")
    logger.info(f"Created transaction {created['id']}")
    return {"transaction": created}


@router.put("/{transaction_id}")
def update_transaction(
    transaction_id: str,
    updates: TransactionUpdate,
    store: DocumentStore = Depends(get_store),
) -> Dict:
    try:
        updated = store.update(TRANSACTIONS, transaction_id, updates.model_dump(exclude_unset=True))
    except DocumentStoreError:
        raise HTTPException(status_code=500, detail="Failed to update transaction")
    if not updated:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return {"transaction": updated}


@router.delete("/{transaction_id}")
def delete_transaction(transaction_id: str, store: DocumentStore = Depends(get_store)) -> Dict:
    try:
        deleted = store.delete(TRANSACTIONS, transaction_id)
    except DocumentStoreError:
        raise HTTPException(status_code=500, detail="Failed to delete transaction")
    if not deleted:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return {"message": "Transaction deleted successfully"}
