"""
Client-side finance store.

Holds the in-memory copy of the transactions and budgets collections, talks to
the REST API through an ``httpx`` client and mirrors both collections to a
local JSON snapshot so a later session can start from the last known state.
The snapshot is a cache only; the API stays the system of record.

Every action sends exactly one request (``initialize_data`` sends two in
parallel) and returns an :class:`ActionResult`. A failed action leaves the
collections untouched and records the message in ``store.error``. Loading
state is not tracked here: a caller is "loading" while its call is running.
"""
from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx

from app.core.config import settings
from app.utils.formatting import generate_id

logger = logging.getLogger(__name__)

SUCCESS = "success"
NOT_FOUND = "not_found"
FAILURE = "failure"

# collection name -> key of the single entity in API responses
ENTITY_KEYS = {"transactions": "transaction", "budgets": "budget"}


@dataclass
class ActionResult:
    status: str
    entity: Any = None
    message: Optional[str] = None
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == SUCCESS

    @classmethod
    def success(cls, entity: Any = None) -> "ActionResult":
        return cls(SUCCESS, entity=entity)

    @classmethod
    def not_found(cls, message: str) -> "ActionResult":
        return cls(NOT_FOUND, message=message)

    @classmethod
    def failure(cls, message: str, errors: Optional[Dict[str, str]] = None) -> "ActionResult":
        return cls(FAILURE, message=message, errors=errors or {})


class ApiRequestError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class FinanceStore:
    def __init__(self, client: httpx.Client, snapshot_path: Optional[str | Path] = None) -> None:
        self._client = client
        self._snapshot_path = Path(snapshot_path) if snapshot_path else None
        self.transactions: List[Dict[str, Any]] = []
        self.budgets: List[Dict[str, Any]] = []
        self.error: Optional[str] = None

    @classmethod
    def connect(
        cls,
        base_url: str = settings.API_BASE_URL,
        snapshot_path: Optional[str | Path] = settings.STORE_SNAPSHOT_PATH,
        timeout: float = 10.0,
    ) -> "FinanceStore":
        store = cls(httpx.Client(base_url=base_url, timeout=timeout), snapshot_path)
        store.load_snapshot()
        return store

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "FinanceStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # HTTP

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            response = self._client.request(method, path, json=payload)
        except httpx.RequestError as e:
            raise ApiRequestError(f"API request failed: {e}") from e

        if response.is_error:
            raise ApiRequestError(
                f"API request failed: {response.reason_phrase}",
                status_code=response.status_code,
            )
        try:
            data = response.json()
        except ValueError as e:
            raise ApiRequestError("API request failed: invalid response body") from e
        if not isinstance(data, dict):
            raise ApiRequestError("API request failed: invalid response body")
        return data

    def _entity(self, collection: str, data: Dict[str, Any]) -> Dict[str, Any]:
        entity = data.get(ENTITY_KEYS[collection])
        if not isinstance(entity, dict):
            raise ApiRequestError("API request failed: invalid response body")
        return entity

    def _failed(self, action: str, error: ApiRequestError) -> ActionResult:
        self.error = str(error)
        logger.warning(f"{action}: {error}")
        if error.status_code == 404:
            return ActionResult.not_found(str(error))
        return ActionResult.failure(str(error))

    # Generic collection actions

    def _fetch(self, collection: str) -> ActionResult:
        """Request a whole collection without touching local state."""
        try:
            data = self._request("GET", f"/{collection}")
        except ApiRequestError as e:
            return ActionResult.failure(str(e)) if e.status_code != 404 else ActionResult.not_found(str(e))

        items = data.get(collection) or []
        if not isinstance(items, list):
            return ActionResult.failure("API request failed: invalid response body")
        return ActionResult.success(items)

    def _load(self, collection: str) -> ActionResult:
        self.error = None
        result = self._fetch(collection)
        if not result.ok:
            self.error = result.message
            logger.warning(f"fetch {collection}: {result.message}")
            return result
        setattr(self, collection, result.entity)
        self.persist()
        return result

    def _add(self, collection: str, payload: Dict[str, Any]) -> ActionResult:
        self.error = None
        document = {**payload, "id": generate_id()}
        try:
            entity = self._entity(collection, self._request("POST", f"/{collection}", document))
        except ApiRequestError as e:
            return self._failed(f"add {collection}", e)

        setattr(self, collection, [*getattr(self, collection), entity])
        self.persist()
        return ActionResult.success(entity)

    def _update(self, collection: str, doc_id: str, updates: Dict[str, Any]) -> ActionResult:
        self.error = None
        try:
            entity = self._entity(collection, self._request("PUT", f"/{collection}/{doc_id}", updates))
        except ApiRequestError as e:
            return self._failed(f"update {collection}/{doc_id}", e)

        setattr(
            self,
            collection,
            [entity if item.get("id") == doc_id else item for item in getattr(self, collection)],
        )
        self.persist()
        return ActionResult.success(entity)

    def _delete(self, collection: str, doc_id: str) -> ActionResult:
        self.error = None
        try:
            self._request("DELETE", f"/{collection}/{doc_id}")
        except ApiRequestError as e:
            return self._failed(f"delete {collection}/{doc_id}", e)

        setattr(self, collection, [item for item in getattr(self, collection) if item.get("id") != doc_id])
        self.persist()
        return ActionResult.success()

    # Transactions

    def fetch_transactions(self) -> ActionResult:
        return self._load("transactions")

    def add_transaction(self, transaction: Dict[str, Any]) -> ActionResult:
        return self._add("transactions", transaction)

    def update_transaction(self, transaction_id: str, updates: Dict[str, Any]) -> ActionResult:
        return self._update("transactions", transaction_id, updates)

    def delete_transaction(self, transaction_id: str) -> ActionResult:
        return self._delete("transactions", transaction_id)

    # Budgets

    def fetch_budgets(self) -> ActionResult:
        return self._load("budgets")

    def add_budget(self, budget: Dict[str, Any]) -> ActionResult:
        return self._add("budgets", budget)

    def update_budget(self, budget_id: str, updates: Dict[str, Any]) -> ActionResult:
        return self._update("budgets", budget_id, updates)

    def delete_budget(self, budget_id: str) -> ActionResult:
        return self._delete("budgets", budget_id)

    # Whole store

    def initialize_data(self) -> ActionResult:
        """
        Fetch both collections concurrently. Safe to call repeatedly; each
        collection is replaced only if its own request succeeded.
        """
        self.error = None
        with ThreadPoolExecutor(max_workers=2) as pool:
            futures = {name: pool.submit(self._fetch, name) for name in ENTITY_KEYS}
            results = {name: future.result() for name, future in futures.items()}

        failed = None
        for name, result in results.items():
            if result.ok:
                setattr(self, name, result.entity)
            elif failed is None:
                failed = result
        self.persist()

        if failed is not None:
            self.error = failed.message
            logger.warning(f"initialize_data: {failed.message}")
            return failed
        return ActionResult.success()

    def clear_data(self) -> None:
        self.transactions = []
        self.budgets = []
        self.error = None
        self.persist()

    # Snapshot

    def snapshot(self) -> Dict[str, Any]:
        return {"transactions": self.transactions, "budgets": self.budgets}

    def persist(self) -> bool:
        """
        Rewrite the snapshot through a temporary file so a failed write never
        leaves a truncated snapshot behind. Returns False if the write failed.
        """
        if self._snapshot_path is None:
            return False
        tmp_path = self._snapshot_path.with_name(self._snapshot_path.name + ".tmp")
        try:
            self._snapshot_path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w") as fp:
                json.dump(self.snapshot(), fp, default=str)
            tmp_path.replace(self._snapshot_path)
        except OSError as e:
            logger.error(f"Could not write snapshot {self._snapshot_path}: {e}")
            return False
        return True

    def load_snapshot(self) -> bool:
        """Restore the collections from the snapshot file. Returns False if there is none."""
        if self._snapshot_path is None or not self._snapshot_path.exists():
            return False
        try:
            with self._snapshot_path.open() as fp:
                data = json.load(fp)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable snapshot {self._snapshot_path}: {e}")
            return False

        if not isinstance(data, dict):
            logger.warning(f"Ignoring snapshot {self._snapshot_path}: expected an object")
            return False
        transactions = data.get("transactions") or []
        budgets = data.get("budgets") or []
        if not isinstance(transactions, list) or not isinstance(budgets, list):
            logger.warning(f"Ignoring snapshot {self._snapshot_path}: collections must be lists")
            return False

        self.transactions = [t for t in transactions if isinstance(t, dict)]
        self.budgets = [b for b in budgets if isinstance(b, dict)]
        return True
