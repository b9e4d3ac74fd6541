"""Dependency-injection container.

This module defines the dependency-injection (DI) container that wires the
AWS clients and the bot components together. The container is the single
process-wide context: boto3 clients are resources created on
``init_resources()`` and closed on ``shutdown_resources()``.
"""

from collections.abc import Iterator
from typing import Any

import boto3
from dependency_injector import containers, providers

from lambdabot.bot.handlers import CommandDispatcher
from lambdabot.services.config_store import ConfigStore
from lambdabot.services.provisioner import Provisioner


def init_boto3_client(service_name: str, region_name: str | None = None) -> Iterator[Any]:
    """Create a boto3 client and close it on shutdown."""
    client = boto3.client(service_name, region_name=region_name)
    yield client
    client.close()


def init_dynamodb_table(table_name: str, region_name: str | None = None) -> Iterator[Any]:
    """Create a DynamoDB table resource and close its client on shutdown."""
    dynamodb = boto3.resource("dynamodb", region_name=region_name)
    yield dynamodb.Table(table_name)
    dynamodb.meta.client.close()


class Container(containers.DeclarativeContainer):
    """DI container for the application.

    This container holds the wiring for all the application's components.
    """

    config = providers.Configuration()

    # AWS clients
    lambda_client = providers.Resource(init_boto3_client, "lambda", region_name=config.aws.region)
    iam_client = providers.Resource(init_boto3_client, "iam", region_name=config.aws.region)
    config_table = providers.Resource(
        init_dynamodb_table, table_name=config.store.table_name, region_name=config.aws.region
    )

    # Services
    config_store = providers.Singleton(ConfigStore, table=config_table)
    provisioner = providers.Singleton(
        Provisioner,
        lambda_client=lambda_client,
        iam_client=iam_client,
        role_arn=config.aws.role_arn,
        package_path=config.provisioning.package_path,
        runtime=config.provisioning.runtime,
        handler=config.provisioning.handler,
        timeout=config.provisioning.timeout,
        memory_size=config.provisioning.memory_size,
        name_prefix=config.provisioning.name_prefix,
        table_name=config.store.table_name,
        attach_lookup_policy=config.provisioning.attach_lookup_policy,
    )

    # Bot components
    dispatcher = providers.Singleton(
        CommandDispatcher,
        provisioner=provisioner,
        config_store=config_store,
        authorized_chat_id=config.bot.authorized_chat_id,
        store_enabled=config.store.enabled,
    )
