"""Shared pydantic base classes for wire and storage models.

Wire format is camelCase (``insertedId``, ``menuItemIds``); DynamoDB
attributes are the snake_case field names.
"""

from decimal import Decimal
from typing import Any, Self

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Model serialized with camelCase keys, accepting either case on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def to_dynamodb_value(value: Any) -> Any:
    """Convert a python value into something boto3 can store.

    DynamoDB rejects floats, so they become Decimals built from their string
    form to keep the literal value (12.5 stays 12.5, not 12.4999...).
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: to_dynamodb_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_dynamodb_value(v) for v in value]
    return value


def from_dynamodb_value(value: Any) -> Any:
    """Convert DynamoDB Decimals back into ints or floats."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: from_dynamodb_value(v) for k, v in value.items()}
    if isinstance(value, (list, set)):
        return [from_dynamodb_value(v) for v in value]
    return value


class StoredModel(CamelModel):
    """A record kept in one DynamoDB table, keyed by ``id`` unless overridden."""

    id: str

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format, leaving out unset optional fields.

        Returns:
            dict: DynamoDB-compatible representation
        """
        item = self.model_dump(mode="json", exclude_none=True)
        return to_dynamodb_value(item)

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> Self:
        """Create a model from a DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            Parsed model instance
        """
        return cls.model_validate(from_dynamodb_value(item))
