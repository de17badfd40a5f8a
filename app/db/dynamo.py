import logging
from datetime import datetime, timezone
from decimal import Decimal
from functools import lru_cache
from typing import Any, Dict, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import settings

logger = logging.getLogger(__name__)

TRANSACTIONS = "transactions"
BUDGETS = "budgets"
COLLECTIONS = (TRANSACTIONS, BUDGETS)


class DocumentStoreError(Exception):
    """A DynamoDB call failed for a reason other than a missing document."""


class DocumentExistsError(DocumentStoreError):
    """An insert targeted an id that is already stored."""


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class DocumentStore:
    """
    Pass-through access to the transactions and budgets tables.

    Both tables are keyed by the client-generated ``id`` string. The store adds
    no business rules on top of DynamoDB: whatever a route hands in is written
    as-is, apart from the server-side ``createdAt``/``updatedAt`` stamps.
    """

    def __init__(
        self,
        dynamodb: Any = None,
        transactions_table: str = settings.DYNAMO_TRANSACTIONS_TABLE,
        budgets_table: str = settings.DYNAMO_BUDGETS_TABLE,
    ) -> None:
        if dynamodb is None:
            dynamodb = boto3.resource(
                "dynamodb",
                region_name=settings.DYNAMO_REGION,
                endpoint_url=settings.DYNAMO_ENDPOINT_URL,
            )
        self._dynamodb = dynamodb
        self._table_names = {TRANSACTIONS: transactions_table, BUDGETS: budgets_table}
        self._tables = {name: dynamodb.Table(table) for name, table in self._table_names.items()}

    def table(self, collection: str):
        try:
            return self._tables[collection]
        except KeyError:
            raise ValueError(f"Unknown collection: {collection}") from None

    def ensure_tables(self) -> List[str]:
        """Create any missing table. Returns the names that were created."""
        created = []
        for collection, table_name in self._table_names.items():
            try:
                self._tables[collection].load()
                continue
            except ClientError as e:
                if e.response["Error"]["Code"] != "ResourceNotFoundException":
                    raise self._failure("ensure_tables", e)

            logger.info(f"Creating DynamoDB table {table_name}")
            try:
                table = self._dynamodb.create_table(
                    TableName=table_name,
                    KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
                    AttributeDefinitions=[{"AttributeName": "id", "AttributeType": "S"}],
                    BillingMode="PAY_PER_REQUEST",
                )
                table.wait_until_exists()
            except (ClientError, BotoCoreError) as e:
                raise self._failure("ensure_tables", e)
            self._tables[collection] = table
            created.append(table_name)
        return created

    def find_all(self, collection: str) -> List[Dict[str, Any]]:
        """Unfiltered scan of a whole table, following DynamoDB's page cursor."""
        table = self.table(collection)
        items: List[Dict[str, Any]] = []
        scan_kwargs: Dict[str, Any] = {}
        try:
            while True:
                response = table.scan(**scan_kwargs)
                items.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                scan_kwargs["ExclusiveStartKey"] = last_key
        except (ClientError, BotoCoreError) as e:
            raise self._failure(f"find_all({collection})", e)
        return [_from_dynamo(item) for item in items]

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        try:
            response = self.table(collection).get_item(Key={"id": doc_id})
        except (ClientError, BotoCoreError) as e:
            raise self._failure(f"get({collection})", e)
        item = response.get("Item")
        return _from_dynamo(item) if item else None

    def insert(self, collection: str, document: Dict[str, Any]) -> Dict[str, Any]:
        """
        Write a new document stamped with createdAt/updatedAt and return it.
        Raises DocumentExistsError instead of overwriting an existing id.
        """
        now = utc_now()
        item = _convert_for_dynamo({**document, "createdAt": now, "updatedAt": now})
        try:
            self.table(collection).put_item(
                Item=item,
                ConditionExpression="attribute_not_exists(#pk)",
                ExpressionAttributeNames={"#pk": "id"},
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                logger.warning(f"insert({collection}): id {document.get('id')} already exists")
                raise DocumentExistsError(f"insert({collection}): id already exists") from e
            raise self._failure(f"insert({collection})", e)
        except BotoCoreError as e:
            raise self._failure(f"insert({collection})", e)
        return _from_dynamo(item)

    def update(self, collection: str, doc_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        SET the given fields plus a fresh updatedAt on the document with this id.
        Returns the full updated document, or None when no document matched.
        """
        fields = {k: v for k, v in updates.items() if k != "id"}
        fields["updatedAt"] = utc_now()

        update_expression_parts = []
        expression_attribute_values = {}
        expression_attribute_names = {"#pk": "id"}

        for idx, (key, value) in enumerate(fields.items()):
            placeholder = f"#f{idx}"
            value_placeholder = f":v{idx}"
            update_expression_parts.append(f"{placeholder} = {value_placeholder}")
            expression_attribute_names[placeholder] = key
            expression_attribute_values[value_placeholder] = value

        try:
            response = self.table(collection).update_item(
                Key={"id": doc_id},
                UpdateExpression="SET " + ", ".join(update_expression_parts),
                ConditionExpression="attribute_exists(#pk)",
                ExpressionAttributeNames=expression_attribute_names,
                ExpressionAttributeValues=_convert_for_dynamo(expression_attribute_values),
                ReturnValues="ALL_NEW",
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                logger.warning(f"update({collection}): no document with id {doc_id}")
                return None
            raise self._failure(f"update({collection})", e)
        except BotoCoreError as e:
            raise self._failure(f"update({collection})", e)

        attributes = response.get("Attributes")
        return _from_dynamo(attributes) if attributes else None

    def delete(self, collection: str, doc_id: str) -> bool:
        """Delete by id. Returns False when no document matched."""
        try:
            response = self.table(collection).delete_item(
                Key={"id": doc_id},
                ReturnValues="ALL_OLD",
            )
        except (ClientError, BotoCoreError) as e:
            raise self._failure(f"delete({collection})", e)
        deleted = "Attributes" in response
        if not deleted:
            logger.warning(f"delete({collection}): no document with id {doc_id}")
        return deleted

    @staticmethod
    def _failure(operation: str, error: Exception) -> DocumentStoreError:
        if isinstance(error, ClientError):
            message = error.response.get("Error", {}).get("Message", str(error))
        else:
            message = str(error)
        logger.error(f"{operation} failed: {message}")
        return DocumentStoreError(f"{operation} failed: {message}")


@lru_cache
def get_store() -> DocumentStore:
    """FastAPI dependency returning the process-wide store."""
    return DocumentStore()


def _convert_for_dynamo(obj: Any):
    """
    Recursively convert floats to Decimal for DynamoDB compatibility.
    """
    if isinstance(obj, bool):
        return obj
    if isinstance(obj, float):
        return Decimal(str(obj))
    if isinstance(obj, dict):
        return {k: _convert_for_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_convert_for_dynamo(v) for v in obj]
    return obj


def _from_dynamo(obj: Any):
    """
    Recursively convert Decimal instances back to native Python numeric types.
    """
    if isinstance(obj, list):
        return [_from_dynamo(item) for item in obj]
    if isinstance(obj, dict):
        return {k: _from_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, Decimal):
        if obj % 1 == 0:
            return int(obj)
        return float(obj)
    return obj
