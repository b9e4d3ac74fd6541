"""Global test configuration and fixtures.

Provides shared fixtures for all test levels: an in-memory stand-in for the
DynamoDB config table, mocked boto3 clients, a deployment bundle on disk and
factories for Telegram updates and contexts.
"""

import hashlib
import os
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from lambdabot.services.config_store import ConfigStore
from lambdabot.services.provisioner import Provisioner

# Test constants
TEST_REGION = "ap-southeast-2"
TEST_ROLE_ARN = "arn:aws:iam::123456789012:role/lambda-exec"
TEST_CHAT_ID = 12345
OTHER_CHAT_ID = 67890


@pytest.fixture(autouse=True)
def test_environment():
    """Setup test environment variables for all tests."""
    test_env = {
        'TELEGRAM_BOT_TOKEN': '123456:TEST-TOKEN',
        'AWS_REGION': TEST_REGION,
        'AWS_DEFAULT_REGION': TEST_REGION,
        'LOG_LEVEL': 'DEBUG',
    }

    original_env = {}
    for key, value in test_env.items():
        original_env[key] = os.environ.get(key)
        os.environ[key] = value

    yield

    for key, original_value in original_env.items():
        if original_value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = original_value


class FakeConfigTable:
    """In-memory stand-in for a boto3 ``dynamodb.Table`` keyed on ``subdomain``."""

    def __init__(self) -> None:
        self.items: dict[str, dict[str, Any]] = {}
        self.update_calls = 0
        self.put_calls = 0

    def put_item(self, Item: dict[str, Any]) -> dict[str, Any]:
        self.put_calls += 1
        self.items[Item["subdomain"]] = dict(Item)
        return {}

    def get_item(self, Key: dict[str, Any]) -> dict[str, Any]:
        item = self.items.get(Key["subdomain"])
        return {"Item": dict(item)} if item else {}

    def update_item(
        self,
        Key: dict[str, Any],
        UpdateExpression: str,
        ExpressionAttributeNames: dict[str, str],
        ExpressionAttributeValues: dict[str, Any],
        ReturnValues: str = "NONE",
    ) -> dict[str, Any]:
        self.update_calls += 1
        item = self.items.setdefault(Key["subdomain"], dict(Key))
        for placeholder, attribute in ExpressionAttributeNames.items():
            item[attribute] = ExpressionAttributeValues[":" + placeholder[1:]]
        return {"Attributes": dict(item)} if ReturnValues == "ALL_NEW" else {}


def function_url_for(function_name: str) -> str:
    """Deterministic Function URL for a function name."""
    url_id = hashlib.sha1(function_name.encode()).hexdigest()[:32]
    return f"https://{url_id}.lambda-url.{TEST_REGION}.on.aws/"


@pytest.fixture
def config_table():
    """Empty in-memory config table."""
    return FakeConfigTable()


@pytest.fixture
def config_store(config_table):
    """ConfigStore over the in-memory table."""
    return ConfigStore(config_table)


@pytest.fixture
def lambda_client():
    """Mock boto3 Lambda client answering like the real API."""
    client = MagicMock()
    client.create_function.side_effect = lambda **kwargs: {
        "FunctionName": kwargs["FunctionName"],
        "FunctionArn": f"arn:aws:lambda:{TEST_REGION}:123456789012:function:{kwargs['FunctionName']}",
    }
    client.create_function_url_config.side_effect = lambda **kwargs: {
        "FunctionUrl": function_url_for(kwargs["FunctionName"]),
        "AuthType": "NONE",
    }
    client.get_function_url_config.side_effect = lambda **kwargs: {
        "FunctionUrl": function_url_for(kwargs["FunctionName"]),
        "AuthType": "NONE",
    }
    client.add_permission.return_value = {"Statement": "{}"}
    return client


@pytest.fixture
def iam_client():
    """Mock boto3 IAM client."""
    return MagicMock()


@pytest.fixture
def deploy_package(tmp_path):
    """Deployment bundle on disk."""
    package = tmp_path / "lookup_function.zip"
    package.write_bytes(b"PK\x03\x04lookup-bundle")
    return package


@pytest.fixture
def provisioner(lambda_client, iam_client, deploy_package):
    """Provisioner wired to the mock clients and the bundle on disk."""
    return Provisioner(
        lambda_client,
        iam_client,
        role_arn=TEST_ROLE_ARN,
        package_path=str(deploy_package),
        runtime="python3.12",
        handler="lambdabot.lookup.handler",
        timeout=10,
        memory_size=128,
        name_prefix="lambda",
        table_name="Config",
    )


@pytest.fixture
def make_update():
    """Factory for Telegram updates coming from a given chat."""
    def _make_update(chat_id: int = TEST_CHAT_ID, text: str = "/newlambda"):
        update = MagicMock()
        update.effective_chat.id = chat_id
        update.effective_message.text = text
        return update

    return _make_update


@pytest.fixture
def make_context():
    """Factory for handler contexts with command arguments and a mock bot."""
    def _make_context(*args: str):
        context = MagicMock()
        context.args = list(args)
        context.bot.send_message = AsyncMock()
        return context

    return _make_context


@pytest.fixture
def sent_texts():
    """Texts sent through ``context.bot.send_message``, in order."""
    def _sent_texts(context) -> list[str]:
        return [call.kwargs["text"] for call in context.bot.send_message.await_args_list]

    return _sent_texts
