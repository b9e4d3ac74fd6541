"""Data models for the provisioner bot.

Defines Pydantic models for the config records kept in DynamoDB and for the
result of a provisioning run. The DynamoDB attribute names differ from the
model field names; ``ConfigRecord`` converts between the two.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel

# DynamoDB attribute names of the Config table
KEY_ATTRIBUTE = "subdomain"
VALUE_ATTRIBUTE = "config"
ENDPOINT_ATTRIBUTE = "endpoint"
FUNCTION_NAME_ATTRIBUTE = "function_name"
CREATED_AT_ATTRIBUTE = "created_at"


class ConfigRecord(BaseModel):
    """Per-function configuration record.

    Attributes:
        key: Lookup key derived from the Function URL.
        endpoint: Public Function URL, None if it was never recorded.
        value: Integer configuration value, 0 at creation.
        function_name: Name of the provisioned Lambda function.
        created_at: When the record was first written.
    """

    key: str
    endpoint: str | None = None
    value: int = 0
    function_name: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> "ConfigRecord":
        """Build a record from a DynamoDB item.

        Numbers come back from the boto3 resource layer as ``Decimal``.

        Args:
            item: Item as returned by ``Table.get_item``.

        Returns:
            Parsed ConfigRecord.
        """
        raw_value = item.get(VALUE_ATTRIBUTE)
        return cls(
            key=item[KEY_ATTRIBUTE],
            endpoint=item.get(ENDPOINT_ATTRIBUTE),
            value=int(raw_value) if raw_value is not None else 0,
            function_name=item.get(FUNCTION_NAME_ATTRIBUTE),
            created_at=item.get(CREATED_AT_ATTRIBUTE),
        )

    def to_item(self) -> dict[str, Any]:
        """Convert the record to a DynamoDB item, skipping unset attributes."""
        item: dict[str, Any] = {KEY_ATTRIBUTE: self.key, VALUE_ATTRIBUTE: self.value}
        if self.endpoint:
            item[ENDPOINT_ATTRIBUTE] = self.endpoint
        if self.function_name:
            item[FUNCTION_NAME_ATTRIBUTE] = self.function_name
        if self.created_at:
            item[CREATED_AT_ATTRIBUTE] = self.created_at.isoformat()
        return item


class ProvisionedFunction(BaseModel):
    """Outcome of a successful provisioning run.

    Attributes:
        function_name: Name of the created Lambda function.
        function_arn: ARN returned by CreateFunction.
        function_url: Public Function URL.
    """

    function_name: str
    function_arn: str | None = None
    function_url: str
