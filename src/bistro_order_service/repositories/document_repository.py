"""Generic DynamoDB repository with document-store style CRUD.

Every collection of the service is one DynamoDB table keyed by a single
partition key. The repository exposes the same small contract for all of
them: ``find_all``, ``find_one``, ``insert``, ``update_fields``,
``delete_one``, ``delete_many`` and ``count``.

Unlike a "not found" outcome, store failures are never turned into empty
results: a ``ClientError`` or ``BotoCoreError`` is logged and re-raised as
:class:`UpstreamFailure` so the request ends with a 5xx.
"""

import logging
from collections.abc import Iterator
from functools import reduce
from typing import Any, Generic, TypeVar

from boto3.dynamodb.conditions import Attr, ConditionBase, Key
from botocore.exceptions import BotoCoreError, ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from bistro_order_service.exceptions import UpstreamFailure
from bistro_order_service.models.base import StoredModel, to_dynamodb_value
from bistro_order_service.models.result_models import DeleteResult, InsertResult, UpdateResult

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=StoredModel)

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"


def is_conditional_check_failure(error: ClientError) -> bool:
    return error.response.get("Error", {}).get("Code") == CONDITIONAL_CHECK_FAILED


class DocumentRepository(Generic[T]):
    """CRUD operations over one DynamoDB table.

    Subclasses set ``model`` and, where the table has global secondary
    indexes, ``indexes`` mapping an attribute name to the index whose
    partition key it is. Equality filters on such an attribute are served by
    a query instead of a scan.
    """

    model: type[T]
    key_attribute: str = "id"
    indexes: dict[str, str] = {}

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def find_all(self, filter: dict[str, Any] | None = None) -> list[T]:
        """List records matching an equality filter.

        A list value matches records whose attribute is any of the listed
        values.

        Args:
            filter: Attribute name to expected value(s); None or empty lists everything

        Returns:
            list: Matching records (empty list if none found)
        """
        filter = dict(filter or {})
        if any(isinstance(v, (list, tuple, set)) and not v for v in filter.values()):
            return []

        index_attribute = next(
            (a for a, v in filter.items() if a in self.indexes and not isinstance(v, (list, tuple, set))),
            None,
        )

        try:
            if index_attribute is not None:
                value = filter.pop(index_attribute)
                items = self._query_all(
                    index_name=self.indexes[index_attribute],
                    key_condition=Key(index_attribute).eq(to_dynamodb_value(value)),
                    filter_expression=self._build_filter(filter),
                )
            else:
                items = self._scan_all(filter_expression=self._build_filter(filter))
            return [self.model.from_dynamodb_item(item) for item in items]

        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to list records from {self.table_name}: {e}")
            raise UpstreamFailure() from e

    def find_one(self, key: str) -> T | None:
        """Retrieve a record by its key.

        Returns:
            The record if found, None otherwise
        """
        try:
            response = self.table.get_item(Key={self.key_attribute: key})
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to get record {key} from {self.table_name}: {e}")
            raise UpstreamFailure() from e

        if "Item" not in response:
            return None

        return self.model.from_dynamodb_item(response["Item"])

    def insert(self, record: T) -> InsertResult:
        """Store a new record, replacing any record with the same key."""
        try:
            self.table.put_item(Item=record.to_dynamodb_item())
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to insert record into {self.table_name}: {e}")
            raise UpstreamFailure() from e

        return InsertResult(inserted_id=record.id)

    def insert_if_absent(self, record: T) -> InsertResult:
        """Store a new record unless one with the same key already exists.

        Returns:
            InsertResult whose ``inserted_id`` is None when the key was taken
        """
        try:
            self.table.put_item(
                Item=record.to_dynamodb_item(),
                ConditionExpression="attribute_not_exists(#pk)",
                ExpressionAttributeNames={"#pk": self.key_attribute},
            )
        except ClientError as e:
            if is_conditional_check_failure(e):
                return InsertResult(inserted_id=None)
            logger.error(f"Failed to insert record into {self.table_name}: {e}")
            raise UpstreamFailure() from e
        except BotoCoreError as e:
            logger.error(f"Failed to insert record into {self.table_name}: {e}")
            raise UpstreamFailure() from e

        return InsertResult(inserted_id=record.id)

    def update_fields(self, key: str, fields: dict[str, Any]) -> UpdateResult:
        """Set the given attributes on an existing record.

        Records are never created by an update. ``modified_count`` is 0 when
        every attribute already held the requested value.

        Args:
            key: Key of the record to update
            fields: Attribute name to new value

        Returns:
            UpdateResult with matched and modified counts
        """
        updates = {k: v for k, v in fields.items() if k != self.key_attribute}
        if not updates:
            matched = 1 if self.find_one(key) is not None else 0
            return UpdateResult(matched_count=matched, modified_count=0)

        names = {"#pk": self.key_attribute}
        values = {}
        assignments = []
        for i, (name, value) in enumerate(updates.items()):
            names[f"#f{i}"] = name
            values[f":u{i}"] = to_dynamodb_value(value)
            assignments.append(f"#f{i} = :u{i}")

        try:
            response = self.table.update_item(
                Key={self.key_attribute: key},
                UpdateExpression="SET " + ", ".join(assignments),
                ConditionExpression="attribute_exists(#pk)",
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
                ReturnValues="UPDATED_OLD",
            )
        except ClientError as e:
            if is_conditional_check_failure(e):
                return UpdateResult(matched_count=0, modified_count=0)
            logger.error(f"Failed to update record {key} in {self.table_name}: {e}")
            raise UpstreamFailure() from e
        except BotoCoreError as e:
            logger.error(f"Failed to update record {key} in {self.table_name}: {e}")
            raise UpstreamFailure() from e

        previous = response.get("Attributes", {})
        modified = any(
            name not in previous or previous[name] != to_dynamodb_value(value)
            for name, value in updates.items()
        )
        return UpdateResult(matched_count=1, modified_count=1 if modified else 0)

    def delete_one(self, key: str) -> DeleteResult:
        """Delete a record by key; deleting a missing record counts 0."""
        try:
            response = self.table.delete_item(
                Key={self.key_attribute: key},
                ReturnValues="ALL_OLD",
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to delete record {key} from {self.table_name}: {e}")
            raise UpstreamFailure() from e

        return DeleteResult(deleted_count=1 if "Attributes" in response else 0)

    def delete_many(self, filter: dict[str, Any]) -> DeleteResult:
        """Delete every record matching an equality filter.

        Each record is deleted with its own call; there is no transaction, so
        a failure part-way leaves the earlier deletions in place.
        """
        if set(filter) == {self.key_attribute}:
            value = filter[self.key_attribute]
            keys = list(value) if isinstance(value, (list, tuple, set)) else [value]
        else:
            keys = [getattr(record, self.key_attribute) for record in self.find_all(filter)]

        deleted = sum(self.delete_one(key).deleted_count for key in keys)
        return DeleteResult(deleted_count=deleted)

    def count(self) -> int:
        """Count all records in the table."""
        total = 0
        try:
            for page in self._paginate(self.table.scan, Select="COUNT"):
                total += page.get("Count", 0)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to count records in {self.table_name}: {e}")
            raise UpstreamFailure() from e
        return total

    def check_table(self) -> None:
        """Confirm the table exists and is reachable."""
        try:
            self.table.load()
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Table {self.table_name} is not reachable: {e}")
            raise UpstreamFailure(f"table {self.table_name} is not reachable") from e

    def _build_filter(self, filter: dict[str, Any]) -> ConditionBase | None:
        conditions = []
        for name, value in filter.items():
            if isinstance(value, (list, tuple, set)):
                conditions.append(Attr(name).is_in([to_dynamodb_value(v) for v in value]))
            else:
                conditions.append(Attr(name).eq(to_dynamodb_value(value)))

        if not conditions:
            return None
        return reduce(lambda left, right: left & right, conditions)

    def _query_all(
        self,
        index_name: str,
        key_condition: ConditionBase,
        filter_expression: ConditionBase | None = None,
    ) -> list[dict[str, Any]]:
        kwargs: dict[str, Any] = {"IndexName": index_name, "KeyConditionExpression": key_condition}
        if filter_expression is not None:
            kwargs["FilterExpression"] = filter_expression

        items: list[dict[str, Any]] = []
        for page in self._paginate(self.table.query, **kwargs):
            items.extend(page.get("Items", []))
        return items

    def _scan_all(self, filter_expression: ConditionBase | None = None) -> list[dict[str, Any]]:
        kwargs: dict[str, Any] = {}
        if filter_expression is not None:
            kwargs["FilterExpression"] = filter_expression

        items: list[dict[str, Any]] = []
        for page in self._paginate(self.table.scan, **kwargs):
            items.extend(page.get("Items", []))
        return items

    @staticmethod
    def _paginate(operation: Any, **kwargs: Any) -> Iterator[dict[str, Any]]:
        """Yield result pages until DynamoDB stops returning ``LastEvaluatedKey``."""
        while True:
            page = operation(**kwargs)
            yield page
            last_evaluated_key = page.get("LastEvaluatedKey")
            if not last_evaluated_key:
                return
            kwargs["ExclusiveStartKey"] = last_evaluated_key
