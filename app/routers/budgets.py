import logging
from typing import Dict

from fastapi import APIRouter, Depends, HTTPException, status

from app.db.dynamo import BUDGETS, DocumentExistsError, DocumentStore, DocumentStoreError, get_store
from app.models.budget import BudgetCreate, BudgetUpdate
from app.utils.formatting import generate_id

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("")
def list_budgets(store: DocumentStore = Depends(get_store)) -> Dict:
    try:
        return {"budgets": store.find_all(BUDGETS)}
    except DocumentStoreError:
        raise HTTPException(status_code=500, detail="Failed to fetch budgets")


@router.post("", status_code=status.HTTP_201_CREATED)
def create_budget(budget: BudgetCreate, store: DocumentStore = Depends(get_store)) -> Dict:
    document = budget.model_dump(exclude_unset=True)
    if not document.get("id"):
        document["id"] = generate_id()

    try:
        created = store.insert(BUDGETS, document)
    except DocumentExistsError:
        raise HTTPException(status_code=409, detail="Budget already exists")
    except DocumentStoreError:
        raise HTTPException(status_code=500, detail="Failed to create budget")
    logger.info(f"Created budget {created['id']}")
    return {"budget": created}


@router.put("/{budget_id}")
def update_budget(
    budget_id: str,
    updates: BudgetUpdate,
    store: DocumentStore = Depends(get_store),
) -> Dict:
    try:
        updated = store.update(BUDGETS, budget_id, updates.model_dump(exclude_unset=True))
    except DocumentStoreError:
        raise HTTPException(status_code=500, detail="Failed to update budget")
    if not updated:
        raise HTTPException(status_code=404, detail="Budget not found")
    return {"budget": updated}


@router.delete("/{budget_id}")
def delete_budget(budget_id: str, store: DocumentStore = Depends(get_store)) -> Dict:
    try:
        deleted = store.delete(BUDGETS, budget_id)
    except DocumentStoreError:
        raise HTTPException(status_code=500, detail="Failed to delete budget")
    if not deleted:
        raise HTTPException(status_code=404, detail="Budget not found")
    return {"message": "Budget deleted successfully"}
