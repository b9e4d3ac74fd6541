"""Config lookup handler of the provisioned functions.

Runs inside every function created by the bot. The function asks Lambda for
its own Function URL, derives the config key from it and answers with the
stored integer value. The handler never raises: any failure becomes a 500
response.
"""

import functools
import json
import logging
from typing import Any

import boto3

from .config import LookupSettings
from .services.config_store import ConfigStore, derive_config_key

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

DEFAULT_VALUE = 0


def build_response(status_code: int, body: str) -> dict[str, Any]:
    """Build the Function URL proxy response."""
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": body,
    }


class ConfigLookup:
    """Resolves the config value of the running function."""

    def __init__(
        self,
        lambda_client: Any,
        config_store: ConfigStore,
        function_name: str | None = None,
        auto_create_default: bool = False,
    ):
        """Initialize lookup.

        Args:
            lambda_client: boto3 Lambda client for the self-description call.
            config_store: Store holding config records.
            function_name: Own function name, usually from the runtime environment.
            auto_create_default: Persist a value-0 record when none exists.
        """
        self.lambda_client = lambda_client
        self.config_store = config_store
        self.function_name = function_name
        self.auto_create_default = auto_create_default

    def resolve(self, function_name: str | None = None) -> dict[str, Any]:
        """Look up the config value for this function.

        Args:
            function_name: Overrides the configured function name.

        Returns:
            200 with the value, 404 with the default when no record exists
            (200 if auto-create is enabled), 500 on any failure.
        """
        try:
            name = function_name or self.function_name
            if not name:
                raise RuntimeError("Own function name is unknown (AWS_LAMBDA_FUNCTION_NAME unset)")

            url_config = self.lambda_client.get_function_url_config(FunctionName=name)
            function_url = url_config["FunctionUrl"]
            logger.info(f"Function URL: {function_url}")

            key = derive_config_key(function_url)
            record = self.config_store.get(key)

            if record is None:
                logger.warning(f"No config found for '{key}'")
                if self.auto_create_default:
                    self.config_store.create_default(key, endpoint=function_url)
                    return build_response(200, json.dumps(DEFAULT_VALUE))
                return build_response(404, json.dumps(DEFAULT_VALUE))

            return build_response(200, json.dumps(record.value))

        except Exception as e:
            logger.error(f"Error retrieving configuration: {e}")
            return build_response(500, json.dumps({"error": "Could not retrieve configuration"}))


@functools.cache
def get_config_lookup() -> ConfigLookup:
    """Build the lookup once per Lambda execution environment."""
    settings = LookupSettings()
    lambda_client = boto3.client("lambda", region_name=settings.region)
    table = boto3.resource("dynamodb", region_name=settings.region).Table(settings.table_name)
    return ConfigLookup(
        lambda_client=lambda_client,
        config_store=ConfigStore(table),
        function_name=settings.function_name,
        auto_create_default=settings.auto_create_default,
    )


def handler(event: dict, context: object) -> dict:
    """Lambda entry point.

    The function's identity comes from the invocation context when present.
    """
    try:
        lookup = get_config_lookup()
    except Exception as e:
        logger.error(f"Error initializing config lookup: {e}")
        return build_response(500, json.dumps({"error": "Could not retrieve configuration"}))

    return lookup.resolve(getattr(context, "function_name", None))
