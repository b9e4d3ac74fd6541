"""DynamoDB-backed store of per-function config records.

Every record is keyed by the first hostname label of the function's public
URL, e.g. ``abc123`` for ``https://abc123.lambda-url.eu-west-1.on.aws/``.
The same key derivation is used when writing at provisioning time, when a
chat user updates a value, and when the deployed function looks itself up.
"""

import logging
from datetime import datetime, UTC
from typing import Any
from urllib.parse import urlsplit

from ..models import KEY_ATTRIBUTE, VALUE_ATTRIBUTE, ConfigRecord

logger = logging.getLogger(__name__)


def derive_config_key(identifier: str) -> str:
    """Map a Function URL or a bare key to its config key.

    Args:
        identifier: Full Function URL, scheme-less hostname, or key.

    Returns:
        Lower-cased first hostname label, or the identifier itself when it
        is not a hostname.

    Raises:
        ValueError: If the identifier is empty or yields no key.
    """
    identifier = (identifier or "").strip()
    if not identifier:
        raise ValueError("Config key must not be empty")

    if "://" in identifier:
        hostname = urlsplit(identifier).hostname
        if not hostname:
            raise ValueError(f"No hostname in '{identifier}'")
        key = hostname.split(".", 1)[0]
    else:
        hostname = urlsplit(f"//{identifier}").hostname if "." in identifier else None
        if hostname:
            key = hostname.split(".", 1)[0]
        else:
            key = identifier.strip("/").lower()

    if not key:
        raise ValueError(f"No config key in '{identifier}'")
    return key


class ConfigStore:
    """Reads and writes config records in the Config table.

    The store is synchronous; async callers run it through ``asyncio.to_thread``.
    """

    def __init__(self, table: Any):
        """Initialize the store.

        Args:
            table: boto3 ``dynamodb.Table`` resource for the config table.
        """
        self.table = table

    def write(self, endpoint: str, function_name: str | None = None) -> bool:
        """Record a freshly provisioned function with value 0.

        Overwrites an existing record with the same key.

        Args:
            endpoint: Public Function URL.
            function_name: Name of the provisioned function.

        Returns:
            True if the record was stored, False otherwise.
        """
        try:
            record = ConfigRecord(
                key=derive_config_key(endpoint),
                endpoint=endpoint,
                value=0,
                function_name=function_name,
                created_at=datetime.now(UTC),
            )
            self.table.put_item(Item=record.to_item())
            logger.info(f"Stored config record '{record.key}' for {endpoint}")
            return True

        except Exception as e:
            logger.error(f"Failed to store config record for {endpoint}: {e}")
            return False

    def get(self, key_or_endpoint: str) -> ConfigRecord | None:
        """Fetch the record for a key or Function URL.

        Args:
            key_or_endpoint: Config key or Function URL.

        Returns:
            ConfigRecord, or None if no record exists.
        """
        key = derive_config_key(key_or_endpoint)
        response = self.table.get_item(Key={KEY_ATTRIBUTE: key})
        item = response.get("Item")
        if not item:
            logger.debug(f"No config record for '{key}'")
            return None
        return ConfigRecord.from_item(item)

    def update(self, key_or_endpoint: str, value: int) -> ConfigRecord | None:
        """Set the value of an existing record.

        Args:
            key_or_endpoint: Config key or Function URL.
            value: New integer value.

        Returns:
            Updated record, or None if no record exists (nothing is written).
        """
        key = derive_config_key(key_or_endpoint)
        if self.get(key) is None:
            logger.info(f"Refusing to update unknown config key '{key}'")
            return None

        response = self.table.update_item(
            Key={KEY_ATTRIBUTE: key},
            UpdateExpression="SET #value = :value",
            ExpressionAttributeNames={"#value": VALUE_ATTRIBUTE},
            ExpressionAttributeValues={":value": value},
            ReturnValues="ALL_NEW",
        )
        logger.info(f"Config '{key}' set to {value}")
        return ConfigRecord.from_item(response["Attributes"])

    def create_default(self, key_or_endpoint: str, endpoint: str | None = None) -> ConfigRecord:
        """Persist a record with value 0 for a key that has none.

        Args:
            key_or_endpoint: Config key or Function URL.
            endpoint: Function URL to store alongside the key.

        Returns:
            The stored record.
        """
        record = ConfigRecord(
            key=derive_config_key(key_or_endpoint),
            endpoint=endpoint,
            value=0,
            created_at=datetime.now(UTC),
        )
        self.table.put_item(Item=record.to_item())
        logger.info(f"Created default config record '{record.key}'")
        return record
